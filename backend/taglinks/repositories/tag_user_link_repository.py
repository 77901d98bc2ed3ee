"""Tag-user-link relation repository with score ranking."""
import logging
from typing import List, Optional

from sqlalchemy import and_, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taglinks.core.config import settings
from taglinks.db.models.tag_user_link import TagUserLink
from taglinks.repositories.base_repository import BaseRepository, Page, require_positive

logger = logging.getLogger(__name__)


class TagUserLinkRepository(BaseRepository[TagUserLink]):
    """Repository for TagUserLink relations.

    Ranking deduplicates by link: each link is scored with the maximum
    ``link_score`` among its rows and ties are ordered by ``link_id``.
    """

    def __init__(self, session: AsyncSession):
        """Initialize tag-user-link repository.

        Args:
            session: Async database session
        """
        super().__init__(TagUserLink, session)

    async def count_tag_link(self, tag_id: str) -> int:
        """Count distinct links related to a tag.

        Args:
            tag_id: Tag ID

        Returns:
            Number of distinct link IDs, 0 if the tag has no relations
        """
        rows = await self.select(
            select(func.count(distinct(TagUserLink.link_id)).label("ret")).filter(
                TagUserLink.tag_id == tag_id
            )
        )
        if not rows:
            return 0
        return int(rows[0]["ret"] or 0)

    async def update_tag_link_score(
        self, tag_id: str, link_id: str, score: float
    ) -> int:
        """Set the score of a tag/link pair for every user holding it.

        Every match is updated in one statement, without a paging cap.

        Args:
            tag_id: Tag ID
            link_id: Link ID
            score: New link score

        Returns:
            Number of updated relations
        """
        updated = await self.update_where(
            {"tag_id": tag_id, "link_id": link_id}, {"link_score": score}
        )
        logger.info(
            f"Updated score of link {link_id} under tag {tag_id} to {score} ({updated} relations)"
        )
        return updated

    async def remove_by_tag_id_user_id_and_link_id(
        self, tag_id: str, user_id: str, link_id: str
    ) -> int:
        """Remove relations matching a tag, user and link.

        Every match is deleted in one statement, without a paging cap.

        Args:
            tag_id: Tag ID
            user_id: User ID
            link_id: Link ID

        Returns:
            Number of deleted relations
        """
        deleted = await self.delete_where(
            {"tag_id": tag_id, "user_id": user_id, "link_id": link_id}
        )
        if deleted > 1:
            logger.warning(
                f"Removed {deleted} duplicate relations for tag {tag_id}, user {user_id}, link {link_id}"
            )
        return deleted

    async def get_by_tag_id(
        self, tag_id: str, fetch_size: Optional[int] = None
    ) -> List[str]:
        """Get the highest scored links of a tag.

        Args:
            tag_id: Tag ID
            fetch_size: Maximum number of links, defaults to ``settings.DEFAULT_FETCH_SIZE``

        Returns:
            Distinct link IDs ordered by score descending
        """
        return await self._ranked_links(TagUserLink.tag_id == tag_id, fetch_size)

    async def get_by_tag_id_and_user_id(
        self, tag_id: str, user_id: str, fetch_size: Optional[int] = None
    ) -> List[str]:
        """Get the highest scored links a user holds under a tag.

        Args:
            tag_id: Tag ID
            user_id: User ID
            fetch_size: Maximum number of links, defaults to ``settings.DEFAULT_FETCH_SIZE``

        Returns:
            Distinct link IDs ordered by score descending
        """
        return await self._ranked_links(
            and_(TagUserLink.tag_id == tag_id, TagUserLink.user_id == user_id),
            fetch_size,
        )

    async def _ranked_links(self, criteria, fetch_size: Optional[int]) -> List[str]:
        if fetch_size is None:
            fetch_size = settings.DEFAULT_FETCH_SIZE
        require_positive(fetch_size, "fetch_size")
        score = func.max(TagUserLink.link_score).label("score")
        query = (
            select(TagUserLink.link_id, score)
            .filter(criteria)
            .group_by(TagUserLink.link_id)
            .order_by(score.desc(), TagUserLink.link_id.asc())
            .limit(fetch_size)
        )
        rows = await self.select(query)
        return [row["link_id"] for row in rows]

    async def get_relation(
        self, tag_id: str, user_id: str, link_id: str
    ) -> Optional[TagUserLink]:
        """Get the relation for a tag, user and link.

        Writers call this before inserting to keep the triple unique.

        Args:
            tag_id: Tag ID
            user_id: User ID
            link_id: Link ID

        Returns:
            First matching TagUserLink or None if not found
        """
        page = await self.get(
            {"tag_id": tag_id, "user_id": user_id, "link_id": link_id},
            page_size=1,
            order_by=[TagUserLink.id],
        )
        return page.results[0] if page.results else None

    async def list_by_tag(
        self, tag_id: str, page_num: int = 1, page_size: Optional[int] = None
    ) -> Page:
        """List relation records of a tag, highest score first.

        Args:
            tag_id: Tag ID
            page_num: 1-based page number
            page_size: Page size, defaults to ``settings.DEFAULT_PAGE_SIZE``

        Returns:
            Page of TagUserLink instances
        """
        return await self.get(
            {"tag_id": tag_id},
            page_num=page_num,
            page_size=page_size,
            order_by=[TagUserLink.link_score.desc(), TagUserLink.id],
        )
