"""Per-request database session.

Ownership reads and audit writes made while handling one request share
a session and one transaction. Audit rows go into savepoints inside it
(see SQLAlchemySink), so a failed audit insert never undoes the
request's own work.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from jobguard.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine described by ``config``."""
    return create_async_engine(
        config.async_database_url,
        pool_size=config.database_pool_size,
        max_overflow=config.database_max_overflow,
        echo=config.database_echo,
        pool_pre_ping=True,
    )


async_engine = build_engine(settings)

async_session_factory = async_sessionmaker(
    async_engine,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides the request's session.

    The transaction commits when the request completes and rolls back
    if the route raises, cancellation included.
    """
    async with async_session_factory() as session, session.begin():
        yield session
