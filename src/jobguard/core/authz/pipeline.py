"""Request authorization pipeline.

Composes the permission registry, the ownership resolver and the audit
service into a single admit/deny decision per request:

    Unauthenticated -> PermissionChecked -> OwnershipChecked -> Admitted | Denied

Each step is a small function that returns either None (continue) or a
terminal outcome. The permission check runs first and never touches
storage, so callers without the base permission are rejected before
any resource is fetched.
"""

from typing import Any

import structlog

from jobguard.core.audit.schemas import PERMISSION_ACTIONS, AuditResource
from jobguard.core.audit.service import AuditService
from jobguard.core.auth.schemas import Actor
from jobguard.core.authz.outcomes import (
    Admitted,
    AuthorizationOutcome,
    OwnershipDenied,
    PermissionDenied,
    ResolverFailure,
    ResourceNotFound,
    Unauthenticated,
)
from jobguard.core.errors import ResolverError
from jobguard.core.ownership.resolver import OwnershipResolver
from jobguard.core.ownership.schemas import Intent, OwnershipDecision, OwnershipMatch
from jobguard.core.ownership.sources import OwnershipSource
from jobguard.core.permissions.registry import (
    PermissionRegistry,
    registry,
    split_permission,
)
from jobguard.core.permissions.roles import Role


logger = structlog.get_logger()


JOB_INTENT_PERMISSIONS: dict[Intent, str] = {
    Intent.READ: "jobs:read",
    Intent.WRITE: "jobs:update",
    Intent.UPDATE_STATUS: "jobs:update",
}

APPLICATION_INTENT_PERMISSIONS: dict[Intent, str] = {
    Intent.READ: "applications:read",
    Intent.WRITE: "applications:update",
    Intent.UPDATE_STATUS: "applications:updateStatus",
}

# Permission resource prefix -> audit resource type
RESOURCE_TYPES: dict[str, str] = {
    "users": AuditResource.USER.value,
    "jobs": AuditResource.JOB.value,
    "applications": AuditResource.APPLICATION.value,
}


def _resource_type_for(permission: str) -> str:
    resource, _ = split_permission(permission)
    return RESOURCE_TYPES.get(resource, resource)


class AuthorizationPipeline:
    """Per-request authorization decisions.

    Holds no state between calls beyond its collaborators: repeated
    identical calls against unchanged resources yield identical outcomes.
    Ownership is read from the source on every call.

    Example:
        outcome = await pipeline.authorize_job_action(actor, job_id, Intent.WRITE)
        raise_for_outcome(outcome)
        ...  # perform the update
    """

    def __init__(
        self,
        source: OwnershipSource,
        audit: AuditService,
        permissions: PermissionRegistry = registry,
    ) -> None:
        self.permissions = permissions
        self.resolver = OwnershipResolver(source, permissions)
        self.audit = audit

    # ------------------------------------------------------------------
    # Registry passthroughs
    # ------------------------------------------------------------------

    def check_permission(self, role: Role | str | None, permission: str) -> bool:
        return self.permissions.is_allowed(role, permission)

    def list_permissions(self, role: Role | str) -> tuple[str, ...]:
        return self.permissions.list_permissions(role)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _unauthenticated(self) -> Unauthenticated:
        logger.warning(
            "authorization_unauthenticated",
            correlation_id=self.audit.context.correlation_id,
        )
        return Unauthenticated()

    def _check_permission(self, actor: Actor, permission: str) -> PermissionDenied | None:
        if self.permissions.is_allowed(actor.role, permission):
            return None
        logger.warning(
            "authorization_denied",
            actor_id=actor.id,
            role=actor.role.value,
            permission=permission,
            correlation_id=self.audit.context.correlation_id,
        )
        return PermissionDenied(permission=permission)

    def _check_ownership(
        self,
        actor: Actor,
        permission: str,
        decision: OwnershipDecision,
        resource_type: str,
        resource_id: str,
    ) -> OwnershipDenied | None:
        if decision.admitted:
            return None
        reason = decision.reason or "access denied"
        logger.warning(
            "ownership_denied",
            actor_id=actor.id,
            role=actor.role.value,
            permission=permission,
            resource_type=resource_type,
            resource_id=resource_id,
            reason=reason,
            correlation_id=self.audit.context.correlation_id,
        )
        return OwnershipDenied(permission=permission, reason=reason)

    async def _admit(
        self,
        actor: Actor,
        permission: str,
        resource_type: str | None,
        resource_id: str | None,
        match: OwnershipMatch | None = None,
        details: dict[str, Any] | None = None,
        before: Any = None,
    ) -> Admitted:
        """Record intent-to-mutate (for mutating permissions) and admit."""
        audit_record_id = None
        if self.permissions.is_mutating(permission):
            record = await self.audit.log(
                PERMISSION_ACTIONS.get(permission, permission),
                resource_type or _resource_type_for(permission),
                resource_id=resource_id,
                details={
                    "permission": permission,
                    "match": match,
                    **(details or {}),
                },
                before=before,
                actor_id=actor.id,
            )
            audit_record_id = record.id if record else None

        logger.debug(
            "authorization_admitted",
            actor_id=actor.id,
            role=actor.role.value,
            permission=permission,
            resource_id=resource_id,
            match=match.value if match else None,
        )
        return Admitted(permission=permission, match=match, audit_record_id=audit_record_id)

    def _resolver_failure(
        self,
        exc: ResolverError,
        actor: Actor,
        resource_type: str,
        resource_id: str,
    ) -> ResolverFailure:
        logger.error(
            "ownership_lookup_failed",
            actor_id=actor.id,
            resource_type=resource_type,
            resource_id=resource_id,
            error=exc.message,
            correlation_id=self.audit.context.correlation_id,
        )
        return ResolverFailure(
            message=exc.message,
            resource_type=resource_type,
            resource_id=resource_id,
        )

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def authorize(
        self,
        actor: Actor | None,
        permission: str,
        *,
        resource_type: str | None = None,
        resource_id: str | None = None,
    ) -> AuthorizationOutcome:
        """Authorize an action that is not ownership-scoped.

        Creating a job, listing applications, changing a user's role and
        reading stats only need the base permission.
        """
        if actor is None:
            return self._unauthenticated()
        if (denied := self._check_permission(actor, permission)) is not None:
            return denied
        return await self._admit(actor, permission, resource_type, resource_id)

    async def require_role(
        self,
        actor: Actor | None,
        *roles: Role | str,
    ) -> AuthorizationOutcome:
        """Admit only actors whose role is one of ``roles``.

        Prefer permission checks; this exists for routes gated on role
        membership itself (e.g. admin dashboards).
        """
        if actor is None:
            return self._unauthenticated()

        required = [Role(role) for role in roles]
        key = "role:" + "|".join(role.value for role in required)
        if actor.role not in required:
            logger.warning(
                "role_requirement_not_met",
                actor_id=actor.id,
                role=actor.role.value,
                required_roles=[role.value for role in required],
                correlation_id=self.audit.context.correlation_id,
            )
            return PermissionDenied(
                permission=key,
                details={"required_roles": [role.value for role in required]},
            )
        return Admitted(permission=key)

    async def authorize_job_action(
        self,
        actor: Actor | None,
        job_id: str,
        intent: Intent | str,
        *,
        permission: str | None = None,
    ) -> AuthorizationOutcome:
        """Authorize an action on one job.

        Args:
            actor: The authenticated caller, or None
            job_id: The job being acted on
            intent: read, write or updateStatus
            permission: Base permission to check; defaults by intent
                (``jobs:read`` / ``jobs:update``). Pass ``jobs:delete``
                for deletions.
        """
        intent = Intent(intent)
        permission = permission or JOB_INTENT_PERMISSIONS[intent]
        resource_type = AuditResource.JOB.value
        job_id = str(job_id)

        if actor is None:
            return self._unauthenticated()
        if (denied := self._check_permission(actor, permission)) is not None:
            return denied

        # A job's status is part of the job: changing it is a write.
        ownership_intent = Intent.WRITE if intent is Intent.UPDATE_STATUS else intent
        try:
            resolved = await self.resolver.resolve_job(actor, job_id, ownership_intent)
        except ResolverError as exc:
            return self._resolver_failure(exc, actor, resource_type, job_id)

        if resolved is None:
            return ResourceNotFound(resource_type=resource_type, resource_id=job_id)
        job, decision = resolved

        if (
            denied := self._check_ownership(
                actor, permission, decision, resource_type, job_id
            )
        ) is not None:
            return denied

        return await self._admit(
            actor,
            permission,
            resource_type,
            job_id,
            match=decision.match,
            details={"intent": intent},
            before=job,
        )

    async def authorize_application_action(
        self,
        actor: Actor | None,
        application_id: str,
        intent: Intent | str,
        *,
        permission: str | None = None,
    ) -> AuthorizationOutcome:
        """Authorize an action on one application.

        Args:
            actor: The authenticated caller, or None
            application_id: The application being acted on
            intent: read, write or updateStatus
            permission: Base permission to check; defaults by intent
                (``applications:read`` / ``applications:update`` /
                ``applications:updateStatus``)
        """
        intent = Intent(intent)
        permission = permission or APPLICATION_INTENT_PERMISSIONS[intent]
        resource_type = AuditResource.APPLICATION.value
        application_id = str(application_id)

        if actor is None:
            return self._unauthenticated()
        if (denied := self._check_permission(actor, permission)) is not None:
            return denied

        try:
            resolved = await self.resolver.resolve_application(
                actor, application_id, intent
            )
        except ResolverError as exc:
            return self._resolver_failure(exc, actor, resource_type, application_id)

        if resolved is None:
            return ResourceNotFound(
                resource_type=resource_type, resource_id=application_id
            )
        application, decision = resolved

        if (
            denied := self._check_ownership(
                actor, permission, decision, resource_type, application_id
            )
        ) is not None:
            return denied

        return await self._admit(
            actor,
            permission,
            resource_type,
            application_id,
            match=decision.match,
            details={"intent": intent},
            before=application,
        )
