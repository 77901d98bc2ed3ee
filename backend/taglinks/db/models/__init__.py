"""Database models package."""
from taglinks.db.models.tag_user_link import TagUserLink

__all__ = [
    "TagUserLink",
]
