"""
Article Model

A canonical, deduplicated news story. Articles are created the first time a
URL is ingested (from the provider, the mock dataset or seed data) and are
never overwritten by later ingestion: the unique constraint on ``url`` makes
the first write win.

The AI summary is filled lazily, on first view or first explicit
summarization request.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from newsbrief.db.base import BaseModel, String50, String255, String2048, utcnow


class ArticleCategory(str, enum.Enum):
    """
    Topic set an article may be filed under.

    Matches the provider's category vocabulary; anything else is rejected
    when the article is constructed.
    """

    TECHNOLOGY = "technology"
    SCIENCE = "science"
    HEALTH = "health"
    BUSINESS = "business"
    ENTERTAINMENT = "entertainment"
    SPORTS = "sports"
    ENVIRONMENT = "environment"
    POLITICS = "politics"
    TOP = "top"
    WORLD = "world"
    CRIME = "crime"
    DOMESTIC = "domestic"
    EDUCATION = "education"
    FOOD = "food"
    LIFESTYLE = "lifestyle"
    OTHER = "other"
    TOURISM = "tourism"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


DEFAULT_CATEGORY = ArticleCategory.TECHNOLOGY.value


class Article(BaseModel):
    """
    News article.

    Table: articles
    ---------------
    Inherits id, created_at and updated_at from BaseModel.

    Invariants:
    -----------
    - url is unique: re-ingesting the same story never creates a second row
    - title and url are required (non-empty)
    - category is one of ArticleCategory
    """

    __tablename__ = "articles"

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Headline"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="Short description or standfirst"
    )

    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Article body as supplied by the provider (often truncated)"
    )

    url: Mapped[str] = mapped_column(
        String2048,
        unique=True,
        nullable=False,
        comment="Canonical source URL. Deduplication key."
    )

    image_url: Mapped[str | None] = mapped_column(
        String2048,
        nullable=True,
        comment="Lead image URL (provider-supplied or fallback)"
    )

    source_name: Mapped[str | None] = mapped_column(
        String255,
        nullable=True,
        comment="Publisher display name"
    )

    source_id: Mapped[str] = mapped_column(
        String255,
        nullable=False,
        default="",
        comment="Provider identifier of the publisher"
    )

    category: Mapped[str] = mapped_column(
        String50,
        nullable=False,
        default=DEFAULT_CATEGORY,
        comment="Topic category (see ArticleCategory)"
    )

    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="Publication time (UTC)"
    )

    ai_summary: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Generated 2-3 sentence summary"
    )

    summary_generated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When ai_summary was generated (UTC)"
    )

    read_time: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=5,
        comment="Estimated read time in minutes"
    )

    __table_args__ = (
        Index("ix_articles_category_published_at", "category", "published_at"),
    )

    @validates("title", "url")
    def _validate_required(self, key: str, value: str | None) -> str:
        if value is None or not str(value).strip():
            raise ValueError(f"Article {key} is required")
        return str(value).strip() if key == "title" else str(value)

    @validates("category")
    def _validate_category(self, key: str, value: str | None) -> str:
        normalized = (value or DEFAULT_CATEGORY).lower()
        if normalized not in ArticleCategory.values():
            raise ValueError(f"'{value}' is not a valid article category")
        return normalized

    @property
    def source(self) -> dict[str, str | None]:
        return {"name": self.source_name, "id": self.source_id}

    def __repr__(self) -> str:
        return f"Article(id={self.id}, url={self.url})"
