"""Audit log database model.

Rows are written once and never updated or deleted by the application.
Expiry is a retention policy of the storage layer.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from jobguard.core.audit.schemas import AuditRecord
from jobguard.core.constants import (
    MAX_ACTION_LENGTH,
    MAX_CORRELATION_ID_LENGTH,
    MAX_IPV6_LENGTH,
    MAX_RESOURCE_ID_LENGTH,
    MAX_RESOURCE_TYPE_LENGTH,
)
from jobguard.core.database.base import Base


JSONType = JSON().with_variant(JSONB(), "postgresql")


class AuditLog(Base):
    """Audit log entry for tracking who did what to which resource, when.

    Attributes:
        id: Record id (copied from the AuditRecord)
        actor_id: The actor who performed the action (nullable before login)
        action: Type of action (job.update, auth.login, ...)
        resource_type: Type of resource affected (user, job, application, auth)
        resource_id: ID of the affected resource
        details: Additional context about the action
        changes: Before/after snapshot
        ip_address: Client IP address
        user_agent: Client user agent string
        correlation_id: Correlation ID of the originating request
        success: Whether the action succeeded
        error_message: Failure reason, if any
        created_at: When the action occurred
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_actor_created", "actor_id", "created_at"),
        Index("ix_audit_logs_resource", "resource_type", "resource_id", "created_at"),
        Index("ix_audit_logs_action_created", "action", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    actor_id: Mapped[str | None] = mapped_column(
        String(MAX_RESOURCE_ID_LENGTH),
        nullable=True,
    )

    # What happened
    action: Mapped[str] = mapped_column(String(MAX_ACTION_LENGTH), nullable=False)
    resource_type: Mapped[str] = mapped_column(
        String(MAX_RESOURCE_TYPE_LENGTH),
        nullable=False,
    )
    resource_id: Mapped[str | None] = mapped_column(
        String(MAX_RESOURCE_ID_LENGTH),
        nullable=True,
    )

    # Request context
    ip_address: Mapped[str | None] = mapped_column(
        String(MAX_IPV6_LENGTH),
        nullable=True,
    )
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    correlation_id: Mapped[str] = mapped_column(
        String(MAX_CORRELATION_ID_LENGTH),
        nullable=False,
        index=True,
    )

    # Data
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    changes: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    success: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    @classmethod
    def from_record(cls, record: AuditRecord) -> "AuditLog":
        """Build a row from an AuditRecord."""
        return cls(
            id=record.id,
            actor_id=record.actor_id,
            action=record.action,
            resource_type=record.resource_type,
            resource_id=record.resource_id,
            details=record.details or None,
            changes=record.changes,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
            correlation_id=record.correlation_id,
            success=record.success,
            error_message=record.error_message,
            created_at=record.created_at,
        )

    def to_record(self) -> AuditRecord:
        return AuditRecord(
            id=self.id,
            actor_id=self.actor_id,
            action=self.action,
            resource_type=self.resource_type,
            resource_id=self.resource_id,
            details=self.details or {},
            changes=self.changes,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
            correlation_id=self.correlation_id,
            success=self.success,
            error_message=self.error_message,
            created_at=self.created_at,
        )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action}, "
            f"resource_type={self.resource_type}, resource_id={self.resource_id})>"
        )
