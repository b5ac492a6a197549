"""Job table columns needed for ownership checks.

The CRUD handlers own the rest of the job schema; only the columns
the authorization layer projects are mapped here.
"""

from enum import Enum
from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from jobguard.core.constants import MAX_STATUS_LENGTH
from jobguard.core.database.base import Base, TimestampMixin, UUIDMixin


class JobStatus(str, Enum):
    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"


class Job(Base, UUIDMixin, TimestampMixin):
    """A job posting.

    Attributes:
        posted_by: The employer (or admin) who owns the posting
        status: Publication status
    """

    __tablename__ = "jobs"

    # users are owned by the authentication collaborator
    posted_by: Mapped[UUID] = mapped_column(
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(MAX_STATUS_LENGTH),
        default=JobStatus.OPEN.value,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, posted_by={self.posted_by}, status={self.status})>"
