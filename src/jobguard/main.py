"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from jobguard.api import api_router
from jobguard.config import settings
from jobguard.core.auth import RequestIdMiddleware
from jobguard.core.errors import register_exception_handlers
from jobguard.core.logging import RequestLoggingMiddleware, configure_logging
from jobguard.core.permissions import registry


configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
        permission_count=len(registry),
        audit_enabled=settings.audit_enabled,
    )

    yield

    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    The authentication collaborator is expected to run before the
    routes and place the verified Actor on ``request.state.actor``.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Role and ownership based authorization for the job board",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    # Added last runs first: the correlation id must exist before logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware, header_name=settings.correlation_header)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app
