"""
SavedSummary Model

Many-to-many link between users and articles carrying a summary snapshot
and the user's notes. The summary is copied at save time; later changes to
Article.ai_summary do not alter it.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newsbrief.db.base import BaseModel, utcnow

if TYPE_CHECKING:
    from newsbrief.models.article import Article


SAVED_SUMMARY_UNIQUE_CONSTRAINT = "uq_saved_summaries_user_article"


class SavedSummary(BaseModel):
    """
    A user's saved article.

    Table: saved_summaries
    ----------------------
    Unique on (user_id, article_id): concurrent saves of the same pair race
    on this constraint and exactly one wins.
    """

    __tablename__ = "saved_summaries"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning user"
    )

    article_id: Mapped[int] = mapped_column(
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Saved article"
    )

    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Summary text snapshot taken at save time"
    )

    notes: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="User notes"
    )

    tags: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="User tags"
    )

    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When the article was saved (UTC)"
    )

    article: Mapped["Article"] = relationship("Article", lazy="raise")

    __table_args__ = (
        UniqueConstraint("user_id", "article_id", name=SAVED_SUMMARY_UNIQUE_CONSTRAINT),
    )

    def __repr__(self) -> str:
        return f"SavedSummary(id={self.id}, user_id={self.user_id}, article_id={self.article_id})"
