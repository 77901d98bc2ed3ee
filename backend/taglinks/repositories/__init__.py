"""Repository exports."""
from taglinks.repositories.base_repository import BaseRepository, Page
from taglinks.repositories.tag_user_link_repository import TagUserLinkRepository

__all__ = [
    "BaseRepository",
    "Page",
    "TagUserLinkRepository",
]
