"""Database layer - session management, base models, and mixins."""

from jobguard.core.database.base import Base, TimestampMixin, UUIDMixin
from jobguard.core.database.session import (
    async_engine,
    async_session_factory,
    build_engine,
    get_db,
)


__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "build_engine",
    "get_db",
]
