"""RFC 7807 Problem Details rendering for authorization failures.

Problem types and the extension members each one carries:

    auth_required       401
    permission_denied   403  required_permission, required_roles
    ownership_denied    403  reason
    not_found           404  resource, resource_id
    validation_error    422  errors
    resolver_error      500
    internal_error      500

Client errors (4xx) carry their extension members so callers can tell
which check failed. Server errors carry only the trace id; whatever
details they hold are logged and never returned.

See: https://tools.ietf.org/html/rfc7807
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from jobguard.config import settings
from jobguard.core.errors.exceptions import AppException


if TYPE_CHECKING:
    from starlette.types import ExceptionHandler


logger = structlog.get_logger()


class FieldError(BaseModel):
    """A single request field that failed validation."""

    field: str
    message: str
    type: str | None = None


class ProblemDetail(BaseModel):
    """RFC 7807 Problem Details body.

    Attributes:
        type: URI identifying the problem type
        title: Short summary of the problem type
        status: HTTP status code
        detail: Explanation of this occurrence
        instance: Request path of this occurrence
        trace_id: Correlation ID of the request
        required_permission: Permission the caller's role lacks
        required_roles: Roles a role-gated route accepts
        reason: Why the ownership check failed
        resource: Kind of resource that was not found
        resource_id: ID of the resource that was not found
        errors: Field-level validation errors
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
    trace_id: str | None = None

    required_permission: str | None = None
    required_roles: list[str] | None = None
    reason: str | None = None
    resource: str | None = None
    resource_id: str | None = None
    errors: list[FieldError] | None = None


EXTENSION_FIELDS = frozenset(
    {
        "required_permission",
        "required_roles",
        "reason",
        "resource",
        "resource_id",
        "errors",
    }
)


def problem_response(
    request: Request,
    status_code: int,
    error_code: str,
    detail: str,
    title: str | None = None,
    extensions: Mapping[str, Any] | None = None,
) -> JSONResponse:
    """Build a Problem Details response for ``request``.

    Args:
        request: The failed request
        status_code: HTTP status code
        error_code: Machine-readable code; becomes the last segment of ``type``
        detail: Explanation of this occurrence
        title: Summary; derived from ``error_code`` when omitted
        extensions: Extension members. Unknown names are ignored, and
            all of them are dropped for server errors.

    Returns:
        The JSON response
    """
    if status_code >= 500 or extensions is None:
        extensions = {}

    problem = ProblemDetail(
        type=f"{settings.api_docs_base_url}/errors/{error_code}",
        title=title or error_code.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
        trace_id=getattr(request.state, "trace_id", None),
        **{key: value for key, value in extensions.items() if key in EXTENSION_FIELDS},
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.model_dump(mode="json", exclude_none=True),
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an authorization outcome or collaborator fault."""
    if exc.status_code >= 500:
        logger.error(
            "app_error",
            error_code=exc.error_code,
            message=exc.message,
            status_code=exc.status_code,
            path=str(request.url.path),
            details=exc.details,
        )
    else:
        logger.warning(
            "request_rejected",
            error_code=exc.error_code,
            status_code=exc.status_code,
            path=str(request.url.path),
            details=exc.details,
        )

    return problem_response(
        request,
        exc.status_code,
        exc.error_code,
        exc.message,
        extensions=exc.details,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures with one entry per field."""
    # "body" is implied for payload fields
    errors = [
        FieldError(
            field=".".join(str(part) for part in error.get("loc", ()) if part != "body")
            or "unknown",
            message=error.get("msg", "Invalid value"),
            type=error.get("type"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "request_rejected",
        error_code="validation_error",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        error_count=len(errors),
    )

    return problem_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        extensions={"errors": errors},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an unexpected exception without exposing it."""
    logger.exception(
        "unhandled_exception",
        path=str(request.url.path),
        error_type=type(exc).__name__,
    )

    return problem_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
        title="Internal Server Error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the Problem Details handlers on ``app``."""
    app.add_exception_handler(
        AppException, cast("ExceptionHandler", app_exception_handler)
    )
    app.add_exception_handler(
        RequestValidationError, cast("ExceptionHandler", validation_exception_handler)
    )
    app.add_exception_handler(Exception, generic_exception_handler)
