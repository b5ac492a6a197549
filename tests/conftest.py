"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from jobguard.core.audit import AuditContext, AuditService, MemoryAuditSink
from jobguard.core.audit.models import AuditLog  # noqa: F401
from jobguard.core.auth.schemas import Actor
from jobguard.core.authz import AuthorizationPipeline
from jobguard.core.authz.dependencies import (
    Audit,
    CurrentActor,
    get_actor,
    get_audit_service,
    get_pipeline,
)
from jobguard.core.database import Base
from jobguard.core.ownership import ApplicationOwnership, JobOwnership
from jobguard.core.permissions import Role
from jobguard.main import create_app

# Import all models to ensure they are registered with Base.metadata
from jobguard.modules.applications.models import Application  # noqa: F401
from jobguard.modules.jobs.models import Job  # noqa: F401
from tests.doubles import CountingSource
from tests.factories.actor import ActorFactory


# ============================================================
# Actors
# ============================================================


@pytest.fixture
def employer() -> Actor:
    """Employer U1, owner of job J1."""
    return ActorFactory.build(id="U1", role=Role.EMPLOYER)


@pytest.fixture
def other_employer() -> Actor:
    """Employer U2, owns nothing."""
    return ActorFactory.build(id="U2", role=Role.EMPLOYER)


@pytest.fixture
def admin() -> Actor:
    return ActorFactory.build(id="A1", role=Role.ADMIN)


@pytest.fixture
def candidate() -> Actor:
    """Candidate C1, applicant of application P1."""
    return ActorFactory.build(id="C1", role=Role.CANDIDATE)


@pytest.fixture
def job_owner() -> Actor:
    """Employer E1, owner of the job P1 targets."""
    return ActorFactory.build(id="E1", role=Role.EMPLOYER)


@pytest.fixture
def viewer() -> Actor:
    return ActorFactory.build(id="V1", role=Role.VIEWER)


# ============================================================
# Ownership and audit
# ============================================================


@pytest.fixture
def job() -> JobOwnership:
    return JobOwnership(id="J1", owner_id="U1", status="open")


@pytest.fixture
def application() -> ApplicationOwnership:
    return ApplicationOwnership(
        id="P1", applicant_id="C1", job_owner_id="E1", status="pending"
    )


@pytest.fixture
def ownership_source(
    job: JobOwnership, application: ApplicationOwnership
) -> CountingSource:
    return CountingSource(jobs=[job], applications=[application])


@pytest.fixture
def audit_sink() -> MemoryAuditSink:
    return MemoryAuditSink()


@pytest.fixture
def audit_context() -> AuditContext:
    return AuditContext(
        correlation_id="corr-123",
        ip_address="10.0.0.1",
        user_agent="Test Agent",
    )


@pytest.fixture
def audit_service(audit_sink: MemoryAuditSink, audit_context: AuditContext) -> AuditService:
    return AuditService(sink=audit_sink, context=audit_context)


@pytest.fixture
def pipeline(
    ownership_source: CountingSource, audit_service: AuditService
) -> AuthorizationPipeline:
    return AuthorizationPipeline(source=ownership_source, audit=audit_service)


# ============================================================
# Application
# ============================================================


@pytest.fixture
def current_actor() -> dict[str, Actor | None]:
    """Mutable holder for the actor the authentication layer would set."""
    return {"actor": None}


@pytest.fixture
async def app(
    current_actor: dict[str, Actor | None],
    ownership_source: CountingSource,
    audit_sink: MemoryAuditSink,
) -> AsyncGenerator[FastAPI, None]:
    """Create test application instance without a database."""
    application = create_app()

    async def override_get_actor() -> Actor | None:
        return current_actor["actor"]

    async def override_get_audit_service(
        request: Request, actor: CurrentActor
    ) -> AuditService:
        return AuditService(
            sink=audit_sink, context=AuditContext.from_request(request, actor)
        )

    async def override_get_pipeline(audit: Audit) -> AuthorizationPipeline:
        return AuthorizationPipeline(source=ownership_source, audit=audit)

    application.dependency_overrides[get_actor] = override_get_actor
    application.dependency_overrides[get_audit_service] = override_get_audit_service
    application.dependency_overrides[get_pipeline] = override_get_pipeline

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"


# ============================================================
# Database
# ============================================================


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a file-backed SQLite engine with the full schema.

    pysqlite's own transaction handling is switched off so SAVEPOINT
    behaves as it does on PostgreSQL.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'jobguard.db'}",
        poolclass=NullPool,
        echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session shared by ownership reads and audit writes."""
    async with session_factory() as session:
        yield session
