"""Domain exceptions for the authorization layer.

These exceptions represent expected outcomes and collaborator failures.
They are converted to RFC 7807 Problem Details responses by the
exception handlers when they reach the presentation layer.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Job not found", resource="job", resource_id=job_id)
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when no authenticated actor is attached to the request."""

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when the actor may not perform the requested action."""

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403


class PermissionDeniedError(ForbiddenError):
    """Raised when the actor's role lacks the base permission.

    Example:
        raise PermissionDeniedError(permission="jobs:create")
    """

    message = "You do not have permission to perform this action"
    error_code = "permission_denied"

    def __init__(
        self,
        message: str | None = None,
        permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if permission:
            details["required_permission"] = permission
        super().__init__(message=message, details=details, **kwargs)


class OwnershipDeniedError(ForbiddenError):
    """Raised when the actor has the permission but not the relationship."""

    message = "You do not have access to this resource"
    error_code = "ownership_denied"

    def __init__(
        self,
        message: str | None = None,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if reason:
            details["reason"] = reason
        super().__init__(message=message, details=details, **kwargs)


class ResolverError(AppException):
    """Raised when an ownership lookup cannot be completed.

    This is a system fault, never an access decision.

    Example:
        raise ResolverError("Job lookup failed", details={"job_id": job_id})
    """

    message = "Ownership lookup failed"
    error_code = "resolver_error"
    status_code = 500


class SinkError(AppException):
    """Raised by an audit sink when a record cannot be written."""

    message = "Audit record could not be written"
    error_code = "audit_sink_error"
    status_code = 500
