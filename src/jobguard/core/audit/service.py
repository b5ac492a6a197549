"""Audit service for recording authorization-relevant events.

Auditing is fire-and-forget relative to the operation it describes: a
record that cannot be written is logged and dropped, never raised.
"""

from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from jobguard.core.audit.schemas import AuditAction, AuditRecord, AuditResource
from jobguard.core.audit.serialization import serialize_value, snapshot
from jobguard.core.audit.sinks import AuditSink
from jobguard.core.logging.middleware import get_client_ip


if TYPE_CHECKING:
    from fastapi import Request

    from jobguard.core.auth.schemas import Actor


log = structlog.get_logger()


class AuditContext:
    """Request-level information stamped onto every audit record.

    Captures who is acting and where the request came from. A
    correlation ID is always present; one is generated when the request
    did not carry one.
    """

    def __init__(
        self,
        actor_id: str | None = None,
        correlation_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        """Initialize audit context.

        Args:
            actor_id: Current actor ID (if authenticated)
            correlation_id: Request correlation ID
            ip_address: Client IP address
            user_agent: Client user agent
        """
        self.actor_id = None if actor_id is None else str(actor_id)
        self.correlation_id = correlation_id or str(uuid4())
        self.ip_address = ip_address
        self.user_agent = user_agent

    @classmethod
    def from_request(
        cls,
        request: "Request",
        actor: "Actor | None" = None,
    ) -> "AuditContext":
        """Build the context for an incoming request."""
        return cls(
            actor_id=actor.id if actor else None,
            correlation_id=getattr(request.state, "request_id", None),
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("User-Agent"),
        )

    def with_actor(self, actor_id: str | None) -> "AuditContext":
        """Same request context for a different actor (e.g. after login)."""
        return AuditContext(
            actor_id=actor_id,
            correlation_id=self.correlation_id,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
        )


class AuditService:
    """Service for creating audit records.

    Every admitted mutating action and every authentication attempt
    should produce exactly one record through this service.
    """

    def __init__(self, sink: AuditSink, context: AuditContext) -> None:
        self.sink = sink
        self.context = context

    def build(
        self,
        action: AuditAction | str,
        resource_type: AuditResource | str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
        before: Any = None,
        after: Any = None,
        success: bool = True,
        error_message: str | None = None,
        actor_id: str | None = None,
    ) -> AuditRecord:
        """Build a record stamped with this service's request context."""
        return AuditRecord(
            actor_id=actor_id if actor_id is not None else self.context.actor_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=serialize_value(details or {}),
            changes=snapshot(before, after),
            ip_address=self.context.ip_address,
            user_agent=self.context.user_agent,
            correlation_id=self.context.correlation_id,
            success=success,
            error_message=error_message,
        )

    async def record(self, record: AuditRecord) -> AuditRecord | None:
        """Hand ``record`` to the sink.

        Returns:
            The record, or None if the sink failed. Sink failures are
            logged at warning level and never propagated.
        """
        try:
            await self.sink.append(record)
        except Exception as exc:
            log.warning(
                "audit_write_failed",
                record_id=record.id,
                action=record.action,
                resource_type=record.resource_type,
                resource_id=record.resource_id,
                correlation_id=record.correlation_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None

        log.info(
            "audit_record_created",
            action=record.action,
            resource_type=record.resource_type,
            resource_id=record.resource_id,
            actor_id=record.actor_id,
            correlation_id=record.correlation_id,
        )
        return record

    async def log(
        self,
        action: AuditAction | str,
        resource_type: AuditResource | str,
        resource_id: str | None = None,
        details: dict[str, Any] | None = None,
        before: Any = None,
        after: Any = None,
        success: bool = True,
        error_message: str | None = None,
        actor_id: str | None = None,
    ) -> AuditRecord | None:
        """Build and record an audit entry.

        Example:
            await audit.log(
                AuditAction.JOB_UPDATE,
                AuditResource.JOB,
                resource_id=str(job.id),
                before=old_job,
                after=new_job,
            )
        """
        record = self.build(
            action,
            resource_type,
            resource_id=resource_id,
            details=details,
            before=before,
            after=after,
            success=success,
            error_message=error_message,
            actor_id=actor_id,
        )
        return await self.record(record)

    async def log_login(
        self,
        email: str,
        success: bool,
        actor_id: str | None = None,
        reason: str | None = None,
    ) -> AuditRecord | None:
        """Log an authentication attempt.

        Args:
            email: The email the attempt was made for
            success: Whether authentication succeeded
            actor_id: The matched account, if any
            reason: Failure reason (unknown user, deactivated, bad password)
        """
        details: dict[str, Any] = {"email": email}
        if reason:
            details["reason"] = reason
        return await self.log(
            AuditAction.AUTH_LOGIN,
            AuditResource.AUTH,
            resource_id=actor_id,
            details=details,
            success=success,
            error_message=None if success else reason,
            actor_id=actor_id,
        )

    async def log_logout(self, actor_id: str) -> AuditRecord | None:
        return await self.log(
            AuditAction.AUTH_LOGOUT,
            AuditResource.AUTH,
            resource_id=actor_id,
            actor_id=actor_id,
        )

    async def log_token_refresh(self, actor_id: str) -> AuditRecord | None:
        return await self.log(
            AuditAction.AUTH_TOKEN_REFRESH,
            AuditResource.AUTH,
            resource_id=actor_id,
            actor_id=actor_id,
        )

    async def log_role_change(
        self,
        user_id: str,
        old_role: Any,
        new_role: Any,
    ) -> AuditRecord | None:
        """Log a change of a user's role."""
        return await self.log(
            AuditAction.USER_ROLE_CHANGE,
            AuditResource.USER,
            resource_id=user_id,
            details={"old_role": old_role, "new_role": new_role},
            before={"role": old_role},
            after={"role": new_role},
        )

    async def log_resource_change(
        self,
        resource_type: AuditResource | str,
        resource_id: str,
        action: AuditAction | str,
        before: Any = None,
        after: Any = None,
        details: dict[str, Any] | None = None,
    ) -> AuditRecord | None:
        """Log a mutation of a job, application or user with its snapshot."""
        return await self.log(
            action,
            resource_type,
            resource_id=resource_id,
            details=details,
            before=before,
            after=after,
        )
