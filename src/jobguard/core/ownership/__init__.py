"""Resource ownership: projections, rules, and where they are read from."""

from jobguard.core.ownership.resolver import (
    NO_RELATIONSHIP,
    NOT_OWNER,
    SELF_STATUS_CHANGE,
    OwnershipResolver,
    resolve_application_access,
    resolve_job_access,
)
from jobguard.core.ownership.schemas import (
    ApplicationOwnership,
    Intent,
    JobOwnership,
    OwnershipDecision,
    OwnershipMatch,
)
from jobguard.core.ownership.sources import (
    InMemoryOwnershipSource,
    OwnershipSource,
    SQLAlchemyOwnershipRepository,
)


__all__ = [
    "NOT_OWNER",
    "NO_RELATIONSHIP",
    "SELF_STATUS_CHANGE",
    "ApplicationOwnership",
    "InMemoryOwnershipSource",
    "Intent",
    "JobOwnership",
    "OwnershipDecision",
    "OwnershipMatch",
    "OwnershipResolver",
    "OwnershipSource",
    "SQLAlchemyOwnershipRepository",
    "resolve_application_access",
    "resolve_job_access",
]
