"""Application table columns needed for ownership checks."""

from enum import Enum
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from jobguard.core.constants import MAX_STATUS_LENGTH
from jobguard.core.database.base import Base, TimestampMixin, UUIDMixin


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


class Application(Base, UUIDMixin, TimestampMixin):
    """A candidate's application to a job.

    The owning employer is not stored here; it is read from the
    targeted job at decision time.
    """

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),
    )

    job_id: Mapped[UUID] = mapped_column(
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    applicant_id: Mapped[UUID] = mapped_column(
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(MAX_STATUS_LENGTH),
        default=ApplicationStatus.PENDING.value,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, job_id={self.job_id}, "
            f"applicant_id={self.applicant_id}, status={self.status})>"
        )
