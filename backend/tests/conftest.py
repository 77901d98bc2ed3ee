"""Pytest configuration and fixtures."""
import os
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from taglinks.db.models.tag_user_link import TagUserLink
from taglinks.db.session import create_engine_from_settings, init_models
from taglinks.repositories.tag_user_link_repository import TagUserLinkRepository

# Point TEST_DATABASE_URL at another async database to run against it,
# otherwise every test gets its own SQLite file
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL")


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh database for each test."""
    url = TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'relations.db'}"
    engine = create_engine_from_settings(url)
    await init_models(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Session factory bound to the test database."""
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Open a session for the duration of a test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def repository(session: AsyncSession) -> TagUserLinkRepository:
    """Create tag-user-link repository."""
    return TagUserLinkRepository(session)


@pytest_asyncio.fixture
async def relations(repository: TagUserLinkRepository) -> List[TagUserLink]:
    """Seed relations: l1 held by two users under t1, l2 held by u1."""
    rows = [
        TagUserLink(tag_id="t1", user_id="u1", link_id="l1", link_score=1.0),
        TagUserLink(tag_id="t1", user_id="u2", link_id="l1", link_score=5.0),
        TagUserLink(tag_id="t1", user_id="u1", link_id="l2", link_score=3.0),
    ]
    for row in rows:
        await repository.create(row)
    return rows
