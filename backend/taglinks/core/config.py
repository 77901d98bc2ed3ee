"""Application configuration."""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    PROJECT_NAME: str = "Tag User Link Relations"

    # Database
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "symphony"

    # Full URL override, e.g. sqlite+aiosqlite:///./relations.db
    DATABASE_URL_OVERRIDE: Optional[str] = None

    SQL_ECHO: bool = False

    # Paging and ranking defaults
    DEFAULT_PAGE_SIZE: int = 20
    DEFAULT_FETCH_SIZE: int = 10

    @property
    def DATABASE_URL(self) -> str:
        """Async database URL for SQLAlchemy."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


settings = Settings()
