from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from hackorsnooze.core.db.tables.base import Base


class Favorite(Base):
    """Association between a user and a story they favorited"""

    __tablename__ = "favorites"

    username: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.username", ondelete="CASCADE"), primary_key=True
    )
    story_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stories.story_id", ondelete="CASCADE"), primary_key=True
    )
