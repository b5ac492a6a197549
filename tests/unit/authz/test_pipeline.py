"""Unit tests for the authorization pipeline."""

import asyncio
from unittest.mock import patch

import pytest

from jobguard.core.audit import AuditAction, AuditService
from jobguard.core.auth.schemas import Actor
from jobguard.core.authz import (
    Admitted,
    AuthorizationPipeline,
    OutcomeKind,
    OwnershipDenied,
    PermissionDenied,
    ResolverFailure,
    ResourceNotFound,
    Unauthenticated,
)
from jobguard.core.ownership import (
    NOT_OWNER,
    SELF_STATUS_CHANGE,
    Intent,
    JobOwnership,
    OwnershipMatch,
)
from jobguard.core.permissions import Role
from tests.doubles import BlockingSource, CountingSource, FailingSink, FailingSource


pytestmark = pytest.mark.unit


class TestUnauthenticated:
    """A missing actor is rejected before anything else happens."""

    async def test_job_action(self, pipeline, ownership_source, audit_sink):
        outcome = await pipeline.authorize_job_action(None, "J1", Intent.WRITE)

        assert isinstance(outcome, Unauthenticated)
        assert outcome.admitted is False
        assert ownership_source.calls == 0
        assert len(audit_sink) == 0

    async def test_permission_only_action(self, pipeline):
        outcome = await pipeline.authorize(None, "jobs:create")

        assert outcome.kind is OutcomeKind.UNAUTHENTICATED

    async def test_application_action(self, pipeline, ownership_source):
        outcome = await pipeline.authorize_application_action(
            None, "P1", Intent.UPDATE_STATUS
        )

        assert isinstance(outcome, Unauthenticated)
        assert ownership_source.calls == 0

    async def test_require_role(self, pipeline):
        assert isinstance(await pipeline.require_role(None, Role.ADMIN), Unauthenticated)


class TestPermissionStep:
    """The base permission is checked before any resource is fetched."""

    async def test_viewer_cannot_update_job(self, pipeline, viewer, ownership_source):
        outcome = await pipeline.authorize_job_action(viewer, "J1", Intent.WRITE)

        assert isinstance(outcome, PermissionDenied)
        assert outcome.permission == "jobs:update"
        assert ownership_source.calls == 0

    async def test_denied_even_for_missing_resource(self, pipeline, viewer):
        """Existence is not revealed to callers without the permission."""
        outcome = await pipeline.authorize_job_action(viewer, "missing", Intent.WRITE)

        assert isinstance(outcome, PermissionDenied)

    async def test_candidate_cannot_update_application_status(
        self, pipeline, candidate, ownership_source
    ):
        outcome = await pipeline.authorize_application_action(
            candidate, "P1", Intent.UPDATE_STATUS
        )

        assert isinstance(outcome, PermissionDenied)
        assert outcome.permission == "applications:updateStatus"
        assert ownership_source.calls == 0

    async def test_candidate_cannot_create_job(self, pipeline, candidate, audit_sink):
        outcome = await pipeline.authorize(candidate, "jobs:create")

        assert isinstance(outcome, PermissionDenied)
        assert len(audit_sink) == 0

    async def test_unknown_permission_is_denied(self, pipeline, admin):
        outcome = await pipeline.authorize(admin, "jobs:teleport")

        assert isinstance(outcome, PermissionDenied)


class TestJobActions:
    async def test_owner_updates_own_job(self, pipeline, employer):
        outcome = await pipeline.authorize_job_action(employer, "J1", Intent.WRITE)

        assert isinstance(outcome, Admitted)
        assert outcome.match is OwnershipMatch.OWNER_MATCH
        assert outcome.permission == "jobs:update"

    async def test_other_employer_denied(self, pipeline, other_employer, audit_sink):
        outcome = await pipeline.authorize_job_action(other_employer, "J1", Intent.WRITE)

        assert isinstance(outcome, OwnershipDenied)
        assert outcome.reason == NOT_OWNER
        assert len(audit_sink) == 0

    async def test_other_employer_may_read(self, pipeline, other_employer, audit_sink):
        outcome = await pipeline.authorize_job_action(other_employer, "J1", Intent.READ)

        assert isinstance(outcome, Admitted)
        assert outcome.match is OwnershipMatch.NO_MATCH
        assert outcome.audit_record_id is None
        assert len(audit_sink) == 0

    async def test_status_change_requires_ownership(self, pipeline, other_employer):
        outcome = await pipeline.authorize_job_action(
            other_employer, "J1", Intent.UPDATE_STATUS
        )

        assert isinstance(outcome, OwnershipDenied)

    async def test_admin_override(self, pipeline, admin):
        outcome = await pipeline.authorize_job_action(admin, "J1", Intent.WRITE)

        assert isinstance(outcome, Admitted)
        assert outcome.match is OwnershipMatch.ADMIN_OVERRIDE

    async def test_delete_with_explicit_permission(self, pipeline, employer, audit_sink):
        outcome = await pipeline.authorize_job_action(
            employer, "J1", Intent.WRITE, permission="jobs:delete"
        )

        assert outcome.admitted is True
        assert audit_sink.records[0].action == AuditAction.JOB_DELETE.value

    async def test_missing_job(self, pipeline, employer):
        outcome = await pipeline.authorize_job_action(employer, "J404", Intent.WRITE)

        assert isinstance(outcome, ResourceNotFound)
        assert outcome.resource_type == "job"
        assert outcome.resource_id == "J404"

    async def test_intent_accepted_as_string(self, pipeline, employer):
        outcome = await pipeline.authorize_job_action(employer, "J1", "write")

        assert outcome.admitted is True

    async def test_reassigned_job_uses_current_owner(
        self, pipeline, employer, other_employer, ownership_source
    ):
        ownership_source.add_job(JobOwnership(id="J1", owner_id="U2", status="open"))

        assert (await pipeline.authorize_job_action(employer, "J1", "write")).admitted is False
        assert (
            await pipeline.authorize_job_action(other_employer, "J1", "write")
        ).admitted is True


class TestApplicationActions:
    async def test_applicant_cannot_self_approve(self, pipeline, ownership_source):
        """An applicant who somehow holds the permission is still refused."""
        dual = Actor(id="C1", role=Role.EMPLOYER, email="c1@example.com", name="C1")

        outcome = await pipeline.authorize_application_action(
            dual, "P1", Intent.UPDATE_STATUS
        )

        assert isinstance(outcome, OwnershipDenied)
        assert outcome.reason == SELF_STATUS_CHANGE
        assert ownership_source.calls == 1

    async def test_job_owner_updates_status(self, pipeline, job_owner):
        outcome = await pipeline.authorize_application_action(
            job_owner, "P1", Intent.UPDATE_STATUS
        )

        assert isinstance(outcome, Admitted)
        assert outcome.match is OwnershipMatch.OWNER_MATCH

    async def test_applicant_reads_own_application(self, pipeline, candidate):
        outcome = await pipeline.authorize_application_action(candidate, "P1", Intent.READ)

        assert outcome.admitted is True

    async def test_unrelated_employer_denied(self, pipeline, other_employer):
        outcome = await pipeline.authorize_application_action(
            other_employer, "P1", Intent.READ
        )

        assert isinstance(outcome, OwnershipDenied)

    async def test_missing_application(self, pipeline, candidate):
        outcome = await pipeline.authorize_application_action(candidate, "P404", "read")

        assert isinstance(outcome, ResourceNotFound)
        assert outcome.resource_type == "application"


class TestResolverFailure:
    async def test_lookup_failure_is_neither_admit_nor_deny(
        self, audit_service, employer, audit_sink
    ):
        source = FailingSource()
        pipeline = AuthorizationPipeline(source=source, audit=audit_service)

        outcome = await pipeline.authorize_job_action(employer, "J1", Intent.WRITE)

        assert isinstance(outcome, ResolverFailure)
        assert outcome.resource_id == "J1"
        assert source.calls == 1
        assert len(audit_sink) == 0

    async def test_application_lookup_failure(self, audit_service, candidate):
        pipeline = AuthorizationPipeline(source=FailingSource(), audit=audit_service)

        outcome = await pipeline.authorize_application_action(candidate, "P1", "read")

        assert outcome.kind is OutcomeKind.RESOLVER_ERROR


class TestCancellation:
    """Cancelling a request mid-lookup propagates and records nothing."""

    async def test_cancelled_job_lookup(self, audit_service, employer, job, audit_sink):
        source = BlockingSource(jobs=[job])
        pipeline = AuthorizationPipeline(source=source, audit=audit_service)
        task = asyncio.create_task(
            pipeline.authorize_job_action(employer, "J1", Intent.WRITE)
        )
        await source.entered.wait()

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(audit_sink) == 0

    async def test_cancelled_application_lookup(
        self, audit_service, job_owner, application, audit_sink
    ):
        source = BlockingSource(applications=[application])
        pipeline = AuthorizationPipeline(source=source, audit=audit_service)
        task = asyncio.create_task(
            pipeline.authorize_application_action(
                job_owner, "P1", Intent.UPDATE_STATUS
            )
        )
        await source.entered.wait()

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()
        assert len(audit_sink) == 0


class TestAuditEmission:
    """Admitted mutations produce exactly one audit record."""

    async def test_one_record_per_admitted_mutation(self, pipeline, employer, audit_sink):
        outcome = await pipeline.authorize_job_action(employer, "J1", Intent.WRITE)

        assert len(audit_sink) == 1
        record = audit_sink.records[0]
        assert outcome.audit_record_id == record.id
        assert record.actor_id == "U1"
        assert record.action == "job.update"
        assert record.resource_type == "job"
        assert record.resource_id == "J1"
        assert record.correlation_id == "corr-123"
        assert record.details == {
            "permission": "jobs:update",
            "match": "owner_match",
            "intent": "write",
        }
        assert record.changes["before"]["owner_id"] == "U1"

    async def test_permission_only_mutation_is_recorded(self, pipeline, employer, audit_sink):
        outcome = await pipeline.authorize(employer, "jobs:create")

        assert outcome.admitted is True
        assert audit_sink.records[0].action == "job.create"
        assert audit_sink.records[0].resource_type == "job"

    async def test_reads_are_not_recorded(self, pipeline, admin, audit_sink):
        await pipeline.authorize(admin, "audit:read")
        await pipeline.authorize_application_action(admin, "P1", Intent.READ)

        assert len(audit_sink) == 0

    async def test_sink_failure_does_not_block_admission(
        self, ownership_source, audit_context, employer
    ):
        sink = FailingSink()
        pipeline = AuthorizationPipeline(
            source=ownership_source,
            audit=AuditService(sink=sink, context=audit_context),
        )

        with patch("jobguard.core.audit.service.log") as mock_log:
            outcome = await pipeline.authorize_job_action(employer, "J1", Intent.WRITE)

        assert isinstance(outcome, Admitted)
        assert outcome.audit_record_id is None
        assert sink.attempts == 1
        mock_log.warning.assert_called_once()
        assert mock_log.warning.call_args.args[0] == "audit_write_failed"


class TestRequireRole:
    async def test_matching_role(self, pipeline, admin):
        outcome = await pipeline.require_role(admin, Role.ADMIN)

        assert outcome.admitted is True
        assert outcome.permission == "role:admin"

    async def test_any_of_several_roles(self, pipeline, employer):
        assert (await pipeline.require_role(employer, "admin", "employer")).admitted is True

    async def test_missing_role(self, pipeline, candidate, audit_sink):
        outcome = await pipeline.require_role(candidate, Role.ADMIN, Role.EMPLOYER)

        assert isinstance(outcome, PermissionDenied)
        assert outcome.details == {"required_roles": ["admin", "employer"]}
        assert len(audit_sink) == 0


class TestIdempotence:
    async def test_repeated_calls_yield_equal_outcomes(self, pipeline, other_employer):
        first = await pipeline.authorize_job_action(other_employer, "J1", Intent.WRITE)
        second = await pipeline.authorize_job_action(other_employer, "J1", Intent.WRITE)

        assert first == second

    async def test_each_call_reads_ownership(self, audit_service, employer, job):
        source = CountingSource(jobs=[job])
        pipeline = AuthorizationPipeline(source=source, audit=audit_service)

        await pipeline.authorize_job_action(employer, "J1", Intent.READ)
        await pipeline.authorize_job_action(employer, "J1", Intent.READ)

        assert source.calls == 2


class TestRegistryPassthrough:
    def test_check_permission(self, pipeline):
        assert pipeline.check_permission(Role.EMPLOYER, "jobs:create") is True
        assert pipeline.check_permission(None, "jobs:read") is False

    def test_list_permissions(self, pipeline):
        assert "admin:access" in pipeline.list_permissions(Role.ADMIN)
        assert "admin:access" not in pipeline.list_permissions(Role.VIEWER)
