"""
Database Models

Import models from this module to ensure they're registered with SQLAlchemy:

    from newsbrief.models import Article, SavedSummary, User

This ensures that:
1. Alembic can detect all models for migrations
2. Relationships resolve correctly
3. create_all() sees every table
"""

from newsbrief.models.article import DEFAULT_CATEGORY, Article, ArticleCategory
from newsbrief.models.saved_summary import SAVED_SUMMARY_UNIQUE_CONSTRAINT, SavedSummary
from newsbrief.models.user import User

__all__ = [
    "User",
    "Article",
    "SavedSummary",
    # Enums and constants
    "ArticleCategory",
    "DEFAULT_CATEGORY",
    "SAVED_SUMMARY_UNIQUE_CONSTRAINT",
]
