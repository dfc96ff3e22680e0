"""
Database Base Classes and Common Utilities

This module provides the foundation for all database models in the application.

Key Concepts:
--------------
1. DeclarativeBase: SQLAlchemy's base class that enables ORM functionality
2. CommonTableAttributes: id/created_at/updated_at shared by every table
3. Naming convention: deterministic constraint names so that unique
   violations (duplicate email, duplicate article URL, duplicate save)
   can be recognised and Alembic diffs stay stable

Learning Resources:
- SQLAlchemy Declarative Base: https://docs.sqlalchemy.org/en/20/orm/declarative_config.html
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, registry


# ================================
# Naming Convention for Constraints
# ================================
# - ix_users_email: Index on 'users' table, 'email' column
# - uq_articles_url: Unique constraint on 'articles.url'
# - fk_saved_summaries_user_id_users: Foreign key from 'saved_summaries.user_id'
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

orm_registry = registry(metadata=metadata)


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Attach UTC to naive datetimes read back from the store.

    PostgreSQL returns aware values for TIMESTAMP WITH TIME ZONE; SQLite
    drops the offset. Everything is written in UTC, so a naive value is
    UTC by construction.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ================================
# Base DeclarativeBase Class
# ================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Usage:
        class User(Base):
            __tablename__ = "users"
            id: Mapped[int] = mapped_column(primary_key=True)
    """

    registry = orm_registry
    metadata = metadata

    __tablename__: str


# ================================
# Common Table Attributes Mixin
# ================================
class CommonTableAttributes:
    """
    Mixin that provides common fields and methods to all models.

    Common Fields Added:
    --------------------
    - id: Primary key (auto-incrementing integer)
    - created_at: When the record was created (set once, never changes)
    - updated_at: When the record was last modified (updates automatically)

    Timestamps are always stored in UTC; convert in the presentation layer.
    """

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        comment="Auto-incrementing primary key"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        comment="Timestamp when record was created (UTC)"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
        comment="Timestamp when record was last updated (UTC)"
    )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id})"

    def dict(self) -> dict[str, Any]:
        """Convert model instance to a column-name -> value dictionary."""
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }


# ================================
# Convenient Base Model
# ================================
class BaseModel(Base, CommonTableAttributes):
    """
    Ready-to-use base class for all application models.

    Every model automatically gets:
    - Primary key (id)
    - Creation timestamp (created_at)
    - Update timestamp (updated_at)
    """

    __abstract__ = True


# ================================
# String Length Constraints
# ================================
String50 = String(50)  # Example: category, source id
String100 = String(100)  # Example: names
String255 = String(255)  # Example: email, source names
String500 = String(500)  # Example: titles
String2048 = String(2048)  # Example: URLs (article links, image links)
