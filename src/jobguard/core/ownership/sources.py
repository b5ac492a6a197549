"""Ownership sources: where ownership projections come from.

A source answers two questions for one resource id: who owns it and
what state it is in. ``None`` means the resource does not exist; any
storage failure is raised as ResolverError, never returned as a
decision.
"""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jobguard.core.errors import ResolverError
from jobguard.core.ownership.schemas import ApplicationOwnership, JobOwnership
from jobguard.modules.applications.models import Application
from jobguard.modules.jobs.models import Job


logger = structlog.get_logger()


class OwnershipSource(Protocol):
    """Fetch interface consumed by the ownership resolver."""

    async def get_job_ownership(self, job_id: str) -> JobOwnership | None: ...

    async def get_application_ownership(
        self, application_id: str
    ) -> ApplicationOwnership | None: ...


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class SQLAlchemyOwnershipRepository:
    """Reads ownership projections from the jobs and applications tables.

    Only the columns needed for the decision are selected. The targeted
    job's owner is joined in at read time, so an application always
    reflects the job's current owner.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_job_ownership(self, job_id: str) -> JobOwnership | None:
        """Get the ownership projection of a job.

        Args:
            job_id: The job's id

        Returns:
            The projection, or None if no such job exists

        Raises:
            ResolverError: If the database query fails
        """
        uuid = _parse_uuid(job_id)
        if uuid is None:
            return None

        stmt = select(Job.id, Job.posted_by, Job.status).where(Job.id == uuid)
        try:
            result = await self.session.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as exc:
            logger.error("job_ownership_query_failed", job_id=str(job_id), error=str(exc))
            raise ResolverError(
                "Job ownership lookup failed",
                details={"job_id": str(job_id)},
            ) from exc

        if row is None:
            return None

        return JobOwnership(id=row.id, owner_id=row.posted_by, status=str(row.status))

    async def get_application_ownership(
        self, application_id: str
    ) -> ApplicationOwnership | None:
        """Get the ownership projection of an application.

        Args:
            application_id: The application's id

        Returns:
            The projection, or None if no such application exists

        Raises:
            ResolverError: If the database query fails
        """
        uuid = _parse_uuid(application_id)
        if uuid is None:
            return None

        stmt = (
            select(
                Application.id,
                Application.applicant_id,
                Application.status,
                Job.posted_by,
            )
            .outerjoin(Job, Job.id == Application.job_id)
            .where(Application.id == uuid)
        )
        try:
            result = await self.session.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as exc:
            logger.error(
                "application_ownership_query_failed",
                application_id=str(application_id),
                error=str(exc),
            )
            raise ResolverError(
                "Application ownership lookup failed",
                details={"application_id": str(application_id)},
            ) from exc

        if row is None:
            return None

        return ApplicationOwnership(
            id=row.id,
            applicant_id=row.applicant_id,
            job_owner_id=row.posted_by,
            status=str(row.status),
        )


class InMemoryOwnershipSource:
    """Dict-backed ownership source.

    Useful for wiring the pipeline without a database. Lookups return
    whatever is stored at call time.
    """

    def __init__(
        self,
        jobs: Iterable[JobOwnership] = (),
        applications: Iterable[ApplicationOwnership] = (),
    ) -> None:
        self.jobs: dict[str, JobOwnership] = {job.id: job for job in jobs}
        self.applications: dict[str, ApplicationOwnership] = {
            application.id: application for application in applications
        }

    def add_job(self, job: JobOwnership) -> None:
        self.jobs[job.id] = job

    def add_application(self, application: ApplicationOwnership) -> None:
        self.applications[application.id] = application

    async def get_job_ownership(self, job_id: str) -> JobOwnership | None:
        return self.jobs.get(str(job_id))

    async def get_application_ownership(
        self, application_id: str
    ) -> ApplicationOwnership | None:
        return self.applications.get(str(application_id))
