"""Database package."""
from taglinks.db.base import Base
from taglinks.db.session import AsyncSessionLocal, get_session, session_scope

__all__ = ["Base", "AsyncSessionLocal", "get_session", "session_scope"]
