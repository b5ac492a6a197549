"""Audit log repository: history queries over the ``audit_logs`` table."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from jobguard.core.audit.models import AuditLog
from jobguard.core.audit.schemas import AuditRecord


class AuditLogRepository:
    """Read access to stored audit records.

    Each query is served by one of the indexes declared on AuditLog:
    actor history by ``(actor_id, created_at)``, resource history by
    ``(resource_type, resource_id, created_at)`` and action trails by
    ``correlation_id``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def by_actor(
        self,
        actor_id: str,
        limit: int = 50,
        since: datetime | None = None,
    ) -> list[AuditRecord]:
        """Get an actor's most recent activity.

        Args:
            actor_id: The actor whose records to fetch
            limit: Maximum number of records
            since: Only records created at or after this time

        Returns:
            Records, newest first
        """
        stmt = select(AuditLog).where(AuditLog.actor_id == str(actor_id))
        if since is not None:
            stmt = stmt.where(AuditLog.created_at >= since)
        stmt = stmt.order_by(AuditLog.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return [entry.to_record() for entry in result.scalars()]

    async def by_resource(
        self,
        resource_type: str,
        resource_id: str,
        limit: int | None = None,
    ) -> list[AuditRecord]:
        """Get the history of one resource, newest first."""
        stmt = (
            select(AuditLog)
            .where(
                AuditLog.resource_type == resource_type,
                AuditLog.resource_id == str(resource_id),
            )
            .order_by(AuditLog.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return [entry.to_record() for entry in result.scalars()]

    async def by_correlation_id(self, correlation_id: str) -> list[AuditRecord]:
        """Get every record of one logical action, oldest first."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.correlation_id == correlation_id)
            .order_by(AuditLog.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return [entry.to_record() for entry in result.scalars()]
