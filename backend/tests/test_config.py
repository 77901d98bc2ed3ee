"""Tests for application settings."""
from taglinks.core.config import Settings


def test_database_url_built_from_parts() -> None:
    """Test that the async Postgres URL is assembled from its parts."""
    settings = Settings(
        POSTGRES_USER="alice",
        POSTGRES_PASSWORD="secret",
        POSTGRES_HOST="db",
        POSTGRES_PORT=6543,
        POSTGRES_DB="relations",
        DATABASE_URL_OVERRIDE=None,
    )

    assert settings.DATABASE_URL == "postgresql+asyncpg://alice:secret@db:6543/relations"


def test_database_url_override() -> None:
    """Test that an explicit URL wins over the Postgres parts."""
    settings = Settings(DATABASE_URL_OVERRIDE="sqlite+aiosqlite:///./relations.db")

    assert settings.DATABASE_URL == "sqlite+aiosqlite:///./relations.db"


def test_paging_defaults_are_positive() -> None:
    """Test default page and fetch sizes."""
    settings = Settings()

    assert settings.DEFAULT_PAGE_SIZE > 0
    assert settings.DEFAULT_FETCH_SIZE > 0
