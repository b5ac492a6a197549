"""Request authorization: outcomes, the pipeline, and FastAPI glue."""

from jobguard.core.authz.outcomes import (
    Admitted,
    AuthorizationOutcome,
    Outcome,
    OutcomeKind,
    OwnershipDenied,
    PermissionDenied,
    ResolverFailure,
    ResourceNotFound,
    Unauthenticated,
)
from jobguard.core.authz.pipeline import (
    APPLICATION_INTENT_PERMISSIONS,
    JOB_INTENT_PERMISSIONS,
    AuthorizationPipeline,
)


__all__ = [
    "APPLICATION_INTENT_PERMISSIONS",
    "JOB_INTENT_PERMISSIONS",
    "Admitted",
    "AuthorizationOutcome",
    "AuthorizationPipeline",
    "Outcome",
    "OutcomeKind",
    "OwnershipDenied",
    "PermissionDenied",
    "ResolverFailure",
    "ResourceNotFound",
    "Unauthenticated",
]
