"""Ownership rules for jobs and applications.

The rule functions are pure: they take the actor, an ownership
projection and the intent, and return an OwnershipDecision. Fetching
the projection is the job of an OwnershipSource; OwnershipResolver
ties the two together for one request.
"""

from jobguard.core.auth.schemas import Actor
from jobguard.core.ownership.schemas import (
    ApplicationOwnership,
    Intent,
    JobOwnership,
    OwnershipDecision,
    OwnershipMatch,
)
from jobguard.core.ownership.sources import OwnershipSource
from jobguard.core.permissions.registry import PermissionRegistry, registry


# Permissions that bypass ownership entirely
JOB_OVERRIDE_PERMISSION = "jobs:updateAny"
APPLICATION_OVERRIDE_PERMISSION = "applications:readAny"

NOT_OWNER = "not owner"
SELF_STATUS_CHANGE = "owner cannot change own application status"
NO_RELATIONSHIP = "no relationship to resource"


def _same_identity(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and str(a) == str(b)


def resolve_job_access(
    actor: Actor,
    job: JobOwnership,
    intent: Intent,
    permissions: PermissionRegistry = registry,
) -> OwnershipDecision:
    """Decide whether ``actor`` may act on ``job`` with ``intent``.

    Admins are admitted unconditionally. Writes require the actor to be
    the job's owner. Reads are not ownership-scoped for jobs.
    """
    intent = Intent(intent)
    if permissions.is_allowed(actor.role, JOB_OVERRIDE_PERMISSION):
        return OwnershipDecision.admit(OwnershipMatch.ADMIN_OVERRIDE)

    is_owner = _same_identity(actor.id, job.owner_id)
    if intent is Intent.WRITE and not is_owner:
        return OwnershipDecision.deny(NOT_OWNER)

    return OwnershipDecision.admit(
        OwnershipMatch.OWNER_MATCH if is_owner else OwnershipMatch.NO_MATCH
    )


def resolve_application_access(
    actor: Actor,
    application: ApplicationOwnership,
    intent: Intent,
    permissions: PermissionRegistry = registry,
) -> OwnershipDecision:
    """Decide whether ``actor`` may act on ``application`` with ``intent``.

    Rules, in order:
      1. admins are admitted unconditionally
      2. the applicant is admitted, except for status changes (no self-approval)
      3. the owner of the targeted job is admitted
      4. anyone else is denied
    """
    intent = Intent(intent)
    if permissions.is_allowed(actor.role, APPLICATION_OVERRIDE_PERMISSION):
        return OwnershipDecision.admit(OwnershipMatch.ADMIN_OVERRIDE)

    if _same_identity(actor.id, application.applicant_id):
        if intent is Intent.UPDATE_STATUS:
            return OwnershipDecision.deny(SELF_STATUS_CHANGE)
        return OwnershipDecision.admit(OwnershipMatch.OWNER_MATCH)

    # Always the job's current owner, read fresh for this request
    if _same_identity(actor.id, application.job_owner_id):
        return OwnershipDecision.admit(OwnershipMatch.OWNER_MATCH)

    return OwnershipDecision.deny(NO_RELATIONSHIP)


class OwnershipResolver:
    """Fetches ownership projections and applies the ownership rules.

    One instance serves one request. Nothing is cached: every call
    reads the projection from the source again, so a write decision is
    never based on ownership data older than the request.
    """

    def __init__(
        self,
        source: OwnershipSource,
        permissions: PermissionRegistry = registry,
    ) -> None:
        self.source = source
        self.permissions = permissions

    async def resolve_job(
        self,
        actor: Actor,
        job_id: str,
        intent: Intent,
    ) -> tuple[JobOwnership, OwnershipDecision] | None:
        """Fetch the job and decide access.

        Returns:
            (projection, decision), or None when the job does not exist

        Raises:
            ResolverError: If the lookup failed
        """
        job = await self.source.get_job_ownership(job_id)
        if job is None:
            return None
        return job, resolve_job_access(actor, job, intent, self.permissions)

    async def resolve_application(
        self,
        actor: Actor,
        application_id: str,
        intent: Intent,
    ) -> tuple[ApplicationOwnership, OwnershipDecision] | None:
        """Fetch the application and decide access.

        Returns:
            (projection, decision), or None when the application does not exist

        Raises:
            ResolverError: If the lookup failed
        """
        application = await self.source.get_application_ownership(application_id)
        if application is None:
            return None
        return application, resolve_application_access(
            actor, application, intent, self.permissions
        )
