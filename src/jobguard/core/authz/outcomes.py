"""Authorization outcomes.

The pipeline returns one of these values instead of raising. Mapping
them to HTTP responses is the presentation layer's concern (see
``jobguard.core.authz.dependencies.raise_for_outcome``).
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from jobguard.core.ownership.schemas import OwnershipMatch


class OutcomeKind(str, Enum):
    ADMITTED = "admitted"
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission_denied"
    OWNERSHIP_DENIED = "ownership_denied"
    NOT_FOUND = "not_found"
    RESOLVER_ERROR = "resolver_error"


class Outcome(BaseModel):
    """Base class for every authorization outcome."""

    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind

    @property
    def admitted(self) -> bool:
        return self.kind is OutcomeKind.ADMITTED


class Admitted(Outcome):
    """The caller may proceed.

    Attributes:
        permission: The permission that was checked
        match: How ownership was satisfied; None for permission-only actions
        audit_record_id: ID of the audit record written for a mutation;
            None for reads or when the audit write failed
    """

    kind: Literal[OutcomeKind.ADMITTED] = OutcomeKind.ADMITTED
    permission: str
    match: OwnershipMatch | None = None
    audit_record_id: str | None = None


class Unauthenticated(Outcome):
    """No authenticated actor was attached to the request."""

    kind: Literal[OutcomeKind.UNAUTHENTICATED] = OutcomeKind.UNAUTHENTICATED


class PermissionDenied(Outcome):
    """The actor's role lacks the base permission."""

    kind: Literal[OutcomeKind.PERMISSION_DENIED] = OutcomeKind.PERMISSION_DENIED
    permission: str
    details: dict[str, Any] = Field(default_factory=dict)


class OwnershipDenied(Outcome):
    """The role has the permission but the actor lacks the relationship."""

    kind: Literal[OutcomeKind.OWNERSHIP_DENIED] = OutcomeKind.OWNERSHIP_DENIED
    permission: str
    reason: str


class ResourceNotFound(Outcome):
    kind: Literal[OutcomeKind.NOT_FOUND] = OutcomeKind.NOT_FOUND
    resource_type: str
    resource_id: str


class ResolverFailure(Outcome):
    """The ownership lookup failed; no decision could be made."""

    kind: Literal[OutcomeKind.RESOLVER_ERROR] = OutcomeKind.RESOLVER_ERROR
    message: str
    resource_type: str | None = None
    resource_id: str | None = None


AuthorizationOutcome = (
    Admitted
    | Unauthenticated
    | PermissionDenied
    | OwnershipDenied
    | ResourceNotFound
    | ResolverFailure
)
