"""Error handling module with RFC 7807 Problem Details."""

from jobguard.core.errors.exceptions import (
    AppException,
    ForbiddenError,
    NotFoundError,
    OwnershipDeniedError,
    PermissionDeniedError,
    ResolverError,
    SinkError,
    UnauthorizedError,
)
from jobguard.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "ForbiddenError",
    "NotFoundError",
    "OwnershipDeniedError",
    "PermissionDeniedError",
    "ResolverError",
    "SinkError",
    "UnauthorizedError",
    # Handlers
    "FieldError",
    "ProblemDetail",
    "register_exception_handlers",
]
