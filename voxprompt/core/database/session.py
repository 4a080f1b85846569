"""Async engine, session factory and the request-scoped session dependency."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from voxprompt.config import settings
from voxprompt.core.errors import PersistenceFailed
from voxprompt.core.logging import get_logger

logger = get_logger(__name__)

engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for one request."""
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def persistence_guard(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    """Roll back and raise PersistenceFailed when a database call fails."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("persistence_failed", operation=operation, error=str(exc))
        await db.rollback()
        raise PersistenceFailed(f"Failed to {operation}") from exc
