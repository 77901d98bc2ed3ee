"""Async engine and session management."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from taglinks.core.config import settings
from taglinks.db.base import Base

logger = logging.getLogger(__name__)


def create_engine_from_settings(url: Optional[str] = None) -> AsyncEngine:
    """Create an async engine for the configured database.

    Args:
        url: Optional database URL, defaults to ``settings.DATABASE_URL``

    Returns:
        AsyncEngine instance
    """
    return create_async_engine(url or settings.DATABASE_URL, echo=settings.SQL_ECHO)


engine = create_engine_from_settings()
AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


async def init_models(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables that do not exist yet."""
    # Register models on the metadata before create_all
    import taglinks.db.models  # noqa: F401

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema initialized")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def session_scope(
    factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional scope around a series of repository calls.

    Commits when the block exits cleanly and rolls back on any exception.

    Args:
        factory: Optional session factory, defaults to ``AsyncSessionLocal``
    """
    session = (factory or AsyncSessionLocal)()
    try:
        yield session
        await session.commit()
    except Exception:
        logger.warning("Rolling back transaction")
        await session.rollback()
        raise
    finally:
        await session.close()
