"""Audit record schema and action catalogue."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuditAction(str, Enum):
    """Catalogue of authorization-relevant state changes."""

    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"
    USER_ROLE_CHANGE = "user.roleChange"
    JOB_CREATE = "job.create"
    JOB_UPDATE = "job.update"
    JOB_DELETE = "job.delete"
    APPLICATION_CREATE = "application.create"
    APPLICATION_UPDATE = "application.update"
    APPLICATION_DELETE = "application.delete"
    APPLICATION_STATUS_CHANGE = "application.statusChange"
    AUTH_LOGIN = "auth.login"
    AUTH_LOGOUT = "auth.logout"
    AUTH_TOKEN_REFRESH = "auth.tokenRefresh"


class AuditResource(str, Enum):
    USER = "user"
    JOB = "job"
    APPLICATION = "application"
    AUTH = "auth"


# Permission key -> audit action for admitted mutations
PERMISSION_ACTIONS: dict[str, AuditAction] = {
    "users:create": AuditAction.USER_CREATE,
    "users:update": AuditAction.USER_UPDATE,
    "users:updateOwn": AuditAction.USER_UPDATE,
    "users:delete": AuditAction.USER_DELETE,
    "users:changeRole": AuditAction.USER_ROLE_CHANGE,
    "jobs:create": AuditAction.JOB_CREATE,
    "jobs:update": AuditAction.JOB_UPDATE,
    "jobs:updateAny": AuditAction.JOB_UPDATE,
    "jobs:delete": AuditAction.JOB_DELETE,
    "jobs:deleteAny": AuditAction.JOB_DELETE,
    "applications:create": AuditAction.APPLICATION_CREATE,
    "applications:update": AuditAction.APPLICATION_UPDATE,
    "applications:delete": AuditAction.APPLICATION_DELETE,
    "applications:updateStatus": AuditAction.APPLICATION_STATUS_CHANGE,
}


class AuditRecord(BaseModel):
    """Immutable fact about an authorization-relevant event.

    Attributes:
        id: Record identifier
        actor_id: Who acted; None for failures before authentication
        action: What happened (an AuditAction value or a permission key)
        resource_type: Kind of resource affected
        resource_id: The affected resource, if any
        details: Free-form context
        changes: Before/after snapshot ``{"before": ..., "after": ...}``
        ip_address: Client IP address
        user_agent: Client user agent
        correlation_id: Ties together every record of one logical action
        success: Whether the described action succeeded
        error_message: Why it failed, when it did
        created_at: When the record was created (UTC)
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    actor_id: str | None = None
    action: str
    resource_type: str
    resource_id: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    changes: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    correlation_id: str = Field(min_length=1)
    success: bool = True
    error_message: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("actor_id", "resource_id", mode="before")
    @classmethod
    def coerce_ids(cls, v: object) -> str | None:
        return None if v is None else str(v)

    @field_validator("action", "resource_type", mode="before")
    @classmethod
    def enum_value(cls, v: object) -> object:
        return v.value if isinstance(v, Enum) else v
