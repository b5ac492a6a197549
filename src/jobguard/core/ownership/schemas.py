"""Ownership projections and decision types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class Intent(str, Enum):
    """What the caller wants to do with a resource instance."""

    READ = "read"
    WRITE = "write"
    UPDATE_STATUS = "updateStatus"


class OwnershipMatch(str, Enum):
    """How the actor relates to the resource. Exactly one always applies."""

    ADMIN_OVERRIDE = "admin_override"
    OWNER_MATCH = "owner_match"
    NO_MATCH = "no_match"


def _coerce_id(v: object) -> str | None:
    return None if v is None else str(v)


class JobOwnership(BaseModel):
    """Minimal projection of a job needed for ownership checks."""

    model_config = ConfigDict(frozen=True)

    id: str
    owner_id: str
    status: str

    @field_validator("id", "owner_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: object) -> str | None:
        return _coerce_id(v)


class ApplicationOwnership(BaseModel):
    """Minimal projection of an application needed for ownership checks.

    Attributes:
        applicant_id: The candidate who submitted the application
        job_owner_id: Current owner of the targeted job; None if the job
            no longer exists
    """

    model_config = ConfigDict(frozen=True)

    id: str
    applicant_id: str
    job_owner_id: str | None = None
    status: str

    @field_validator("id", "applicant_id", "job_owner_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: object) -> str | None:
        return _coerce_id(v)


class OwnershipDecision(BaseModel):
    """Result of an ownership rule: admit or deny with a reason."""

    model_config = ConfigDict(frozen=True)

    admitted: bool
    match: OwnershipMatch
    reason: str | None = None

    @classmethod
    def admit(cls, match: OwnershipMatch) -> "OwnershipDecision":
        return cls(admitted=True, match=match)

    @classmethod
    def deny(cls, reason: str) -> "OwnershipDecision":
        return cls(admitted=False, match=OwnershipMatch.NO_MATCH, reason=reason)
