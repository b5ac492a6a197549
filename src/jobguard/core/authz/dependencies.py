"""FastAPI glue for the authorization pipeline.

This module provides dependency injection functions for:
- Reading the authenticated actor placed on the request
- Building a per-request AuthorizationPipeline
- Turning outcomes into HTTP errors
"""

from collections.abc import Awaitable, Callable
from typing import Annotated

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from jobguard.config import settings
from jobguard.core.audit.service import AuditContext, AuditService
from jobguard.core.audit.sinks import AuditSink, LogSink, SQLAlchemySink
from jobguard.core.auth.schemas import Actor
from jobguard.core.authz.outcomes import (
    AuthorizationOutcome,
    OwnershipDenied,
    PermissionDenied,
    ResolverFailure,
    ResourceNotFound,
    Unauthenticated,
)
from jobguard.core.authz.pipeline import AuthorizationPipeline
from jobguard.core.database import get_db
from jobguard.core.errors import (
    NotFoundError,
    OwnershipDeniedError,
    PermissionDeniedError,
    ResolverError,
    UnauthorizedError,
)
from jobguard.core.ownership.sources import SQLAlchemyOwnershipRepository


DBSession = Annotated[AsyncSession, Depends(get_db)]


async def get_actor(request: Request) -> Actor | None:
    """Get the authenticated actor, if the authentication layer set one.

    The authentication collaborator verifies credentials and stores the
    resulting Actor on ``request.state.actor``.
    """
    actor = getattr(request.state, "actor", None)
    if actor is not None:
        structlog.contextvars.bind_contextvars(actor_id=actor.id, role=actor.role.value)
    return actor


CurrentActor = Annotated[Actor | None, Depends(get_actor)]


async def get_audit_service(
    request: Request,
    actor: CurrentActor,
    db: DBSession,
) -> AuditService:
    """Build the audit service for this request."""
    sink: AuditSink = SQLAlchemySink(db) if settings.audit_enabled else LogSink()
    return AuditService(sink=sink, context=AuditContext.from_request(request, actor))


Audit = Annotated[AuditService, Depends(get_audit_service)]


async def get_pipeline(db: DBSession, audit: Audit) -> AuthorizationPipeline:
    """Build the authorization pipeline for this request."""
    return AuthorizationPipeline(
        source=SQLAlchemyOwnershipRepository(db),
        audit=audit,
    )


Pipeline = Annotated[AuthorizationPipeline, Depends(get_pipeline)]


def raise_for_outcome(outcome: AuthorizationOutcome) -> None:
    """Raise the HTTP error matching a non-admitted outcome.

    Raises:
        UnauthorizedError: No actor (401)
        PermissionDeniedError: Role lacks the permission (403)
        OwnershipDeniedError: Actor lacks the relationship (403)
        NotFoundError: Resource does not exist (404)
        ResolverError: Ownership lookup failed (500)
    """
    if outcome.admitted:
        return

    if isinstance(outcome, Unauthenticated):
        raise UnauthorizedError(error_code="auth_required")
    if isinstance(outcome, PermissionDenied):
        raise PermissionDeniedError(
            permission=outcome.permission,
            details=dict(outcome.details),
        )
    if isinstance(outcome, OwnershipDenied):
        raise OwnershipDeniedError(reason=outcome.reason)
    if isinstance(outcome, ResourceNotFound):
        raise NotFoundError(
            f"{outcome.resource_type.title()} not found",
            resource=outcome.resource_type,
            resource_id=outcome.resource_id,
        )
    if isinstance(outcome, ResolverFailure):
        raise ResolverError("Error checking permissions")

    raise ResolverError(f"Unhandled authorization outcome: {outcome.kind}")


def require_permission(permission: str) -> Callable[..., Awaitable[Actor]]:
    """Dependency factory for routes gated on a permission only.

    Usage:
        @router.post("/jobs")
        async def create_job(actor: Annotated[Actor, Depends(require_permission("jobs:create"))]):
            ...

    Returns:
        A dependency resolving to the admitted actor
    """

    async def dependency(actor: CurrentActor, pipeline: Pipeline) -> Actor:
        if actor is None:
            raise UnauthorizedError(error_code="auth_required")
        raise_for_outcome(await pipeline.authorize(actor, permission))
        return actor

    return dependency


def require_actor(actor: CurrentActor) -> Actor:
    """Dependency that only requires an authenticated actor."""
    if actor is None:
        raise UnauthorizedError(error_code="auth_required")
    return actor


AuthenticatedActor = Annotated[Actor, Depends(require_actor)]
