"""Tag-user-link relation model."""
import uuid
from typing import Any, Dict

from sqlalchemy import Column, Float, Index, String

from taglinks.db.base import Base

TAG = "tag"
USER = "user"
LINK = "link"

TAG_USER_LINK_TABLE = "_".join((TAG, USER, LINK))


def _new_id() -> str:
    return uuid.uuid4().hex


class TagUserLink(Base):
    """Scored association between a tag, a user and a link.

    The (tag_id, user_id, link_id) triple is unique by convention only;
    writers look the triple up before inserting.
    """

    __tablename__ = TAG_USER_LINK_TABLE

    id = Column(String(32), primary_key=True, default=_new_id)
    tag_id = Column(String(255), nullable=False)
    user_id = Column(String(255), nullable=False)
    link_id = Column(String(255), nullable=False)
    link_score = Column(Float, nullable=False, default=0.0)

    __table_args__ = (
        Index("idx_tag_user_link_tag_score", "tag_id", "link_score"),
        Index("idx_tag_user_link_tag_link", "tag_id", "link_id"),
        Index("idx_tag_user_link_triple", "tag_id", "user_id", "link_id"),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Row mapping keyed by the external field names."""
        return {
            "oId": self.id,
            "tagId": self.tag_id,
            "userId": self.user_id,
            "linkId": self.link_id,
            "linkScore": self.link_score,
        }

    def __repr__(self) -> str:
        return (
            f"<TagUserLink tag={self.tag_id} user={self.user_id} "
            f"link={self.link_id} score={self.link_score}>"
        )
