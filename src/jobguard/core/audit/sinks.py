"""Audit sinks: append-only destinations for audit records.

A sink either stores the record or raises SinkError. Deciding what a
failure means for the caller is the AuditService's job, not the sink's.
"""

from datetime import datetime
from typing import Protocol

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobguard.core.audit.models import AuditLog
from jobguard.core.audit.schemas import AuditRecord
from jobguard.core.errors import SinkError


logger = structlog.get_logger()


class AuditSink(Protocol):
    """Append-only audit storage."""

    async def append(self, record: AuditRecord) -> None:
        """Store ``record``.

        Raises:
            SinkError: If the record could not be stored
        """
        ...


class SQLAlchemySink:
    """Writes audit records to the ``audit_logs`` table.

    The row is inserted inside a savepoint of the request's transaction.
    It commits together with the request's work, but a failed insert
    only rolls back the savepoint: the session stays usable for the
    operation the record describes.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def append(self, record: AuditRecord) -> None:
        entry = AuditLog.from_record(record)
        try:
            async with self.session.begin_nested():
                self.session.add(entry)
                await self.session.flush()
        except SQLAlchemyError as exc:
            raise SinkError(
                "Failed to write audit record",
                details={"record_id": record.id, "action": record.action},
            ) from exc


class LogSink:
    """Emits audit records as structured log events.

    Used when database auditing is disabled.
    """

    def __init__(self, event: str = "audit_record") -> None:
        self.event = event

    async def append(self, record: AuditRecord) -> None:
        logger.info(self.event, **record.model_dump(mode="json"))


class MemoryAuditSink:
    """Append-only in-process sink with history queries."""

    def __init__(self) -> None:
        self._records: list[AuditRecord] = []

    @property
    def records(self) -> tuple[AuditRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    async def append(self, record: AuditRecord) -> None:
        self._records.append(record)

    def by_correlation_id(self, correlation_id: str) -> list[AuditRecord]:
        """Every record of one logical action, oldest first."""
        return [r for r in self._records if r.correlation_id == correlation_id]

    def by_actor(
        self,
        actor_id: str,
        limit: int = 50,
        since: datetime | None = None,
    ) -> list[AuditRecord]:
        """An actor's most recent activity, newest first."""
        matches = [
            r
            for r in self._records
            if r.actor_id == str(actor_id) and (since is None or r.created_at >= since)
        ]
        return sorted(reversed(matches), key=lambda r: r.created_at, reverse=True)[:limit]

    def by_resource(self, resource_type: str, resource_id: str) -> list[AuditRecord]:
        """History of one resource, newest first."""
        matches = [
            r
            for r in self._records
            if r.resource_type == resource_type and r.resource_id == str(resource_id)
        ]
        return sorted(reversed(matches), key=lambda r: r.created_at, reverse=True)
