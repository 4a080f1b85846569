"""Database configuration and models."""

from voxprompt.core.database.base import Base, TimestampMixin, UUIDMixin
from voxprompt.core.database.session import (
    engine,
    async_session_factory,
    get_db,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "engine",
    "async_session_factory",
    "get_db",
]
