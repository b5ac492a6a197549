"""Audit logging for authorization-relevant events.

Provides:
- AuditRecord, the immutable fact that gets stored
- AuditService for recording events with request context
- Sinks for the database, structured logs, and in-process storage
- AuditLogRepository for actor, resource and correlation history
"""

from jobguard.core.audit.models import AuditLog
from jobguard.core.audit.repos import AuditLogRepository
from jobguard.core.audit.schemas import (
    PERMISSION_ACTIONS,
    AuditAction,
    AuditRecord,
    AuditResource,
)
from jobguard.core.audit.service import AuditContext, AuditService
from jobguard.core.audit.sinks import AuditSink, LogSink, MemoryAuditSink, SQLAlchemySink


__all__ = [
    "PERMISSION_ACTIONS",
    "AuditAction",
    "AuditContext",
    "AuditLog",
    "AuditLogRepository",
    "AuditRecord",
    "AuditResource",
    "AuditService",
    "AuditSink",
    "LogSink",
    "MemoryAuditSink",
    "SQLAlchemySink",
]
