"""Schemas for the authenticated caller."""

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from jobguard.core.permissions.roles import Role


class Actor(BaseModel):
    """The authenticated caller of a request.

    Built once per request by the authentication collaborator from a
    verified credential. Never persisted by the authorization layer.

    Attributes:
        id: Opaque identity of the caller
        role: The caller's role
        email: The caller's email address
        name: Display name
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: Role
    email: EmailStr
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        # UUIDs and ObjectId-like values are compared by their string form
        return str(v)
