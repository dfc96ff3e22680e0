"""
Saved articles: a user's bookmarks with a summary snapshot and notes.

Each save writes two records, the ``SavedSummary`` row and the id in
``User.saved_summary_ids``; both go out in one commit, and unsave removes
both in one commit. The id list is rebuilt from ``saved_summaries`` under a
lock on the user row, so two sessions saving for the same user at once
cannot overwrite each other's ids.

Duplicate saves of the same (user, article) pair are rejected by the
unique constraint on ``saved_summaries``; the pre-check only gives the
common case a clean error without touching the constraint.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from newsbrief.core.errors import ConflictError, NotFoundError
from newsbrief.core.logging import get_logger
from newsbrief.models import Article, SavedSummary, User
from newsbrief.services.news_service import NewsService

logger = get_logger(__name__)


async def _find_saved(db: AsyncSession, user_id: int, article_id: int) -> Optional[SavedSummary]:
    result = await db.execute(
        select(SavedSummary).where(
            SavedSummary.user_id == user_id,
            SavedSummary.article_id == article_id,
        )
    )
    return result.scalar_one_or_none()


async def _lock_user(db: AsyncSession, user_id: int) -> None:
    """Row lock on the user until commit; concurrent list updates queue up."""
    await db.execute(select(User.id).where(User.id == user_id).with_for_update())


async def _saved_ids(db: AsyncSession, user_id: int) -> list[int]:
    """The user's SavedSummary ids as the database sees them, oldest first."""
    result = await db.execute(
        select(SavedSummary.id).where(SavedSummary.user_id == user_id).order_by(SavedSummary.id)
    )
    return list(result.scalars().all())


class SavedArticleService:
    """Save, unsave and list a user's articles."""

    def __init__(self, news_service: NewsService):
        self.news_service = news_service

    async def save(
        self,
        db: AsyncSession,
        user: User,
        article_id: int,
        notes: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> SavedSummary:
        """
        Save an article for ``user``.

        If the article has no summary yet one is generated and stored on the
        article first; the saved record keeps a copy of it.

        Raises:
            NotFoundError: article does not exist
            ConflictError: the user already saved this article
        """
        article = await db.get(Article, article_id)
        if article is None:
            raise NotFoundError("Article not found")

        if await _find_saved(db, user.id, article.id) is not None:
            raise ConflictError("Article already saved")

        summary = await self.news_service.ensure_summary(db, article)
        # Rollback expires every instance; keep plain ids for the conflict log
        user_id = user.id

        saved = SavedSummary(
            user_id=user_id,
            article_id=article.id,
            summary=summary,
            notes=notes or "",
            tags=list(tags or []),
        )
        saved.article = article
        db.add(saved)

        try:
            await _lock_user(db, user_id)
            await db.flush()
            # Rebuilt from the rows, so a save committed by another session is kept
            user.saved_summary_ids = await _saved_ids(db, user_id)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("article_save_conflict", user_id=user_id, article_id=article_id)
            raise ConflictError("Article already saved")

        logger.info("article_saved", user_id=user.id, article_id=article.id, saved_id=saved.id)
        return saved

    async def unsave(self, db: AsyncSession, user: User, article_id: int) -> None:
        """
        Remove a saved article.

        Raises:
            NotFoundError: the user has not saved this article; nothing changes
        """
        saved = await _find_saved(db, user.id, article_id)
        if saved is None:
            raise NotFoundError("Saved article not found")

        saved_id = saved.id
        await _lock_user(db, user.id)
        await db.delete(saved)
        await db.flush()
        user.saved_summary_ids = await _saved_ids(db, user.id)
        await db.commit()

        logger.info("article_unsaved", user_id=user.id, article_id=article_id, saved_id=saved_id)

    async def list_saved(self, db: AsyncSession, user: User) -> list[SavedSummary]:
        """All of ``user``'s saved articles with the article loaded, newest first."""
        result = await db.execute(
            select(SavedSummary)
            .where(SavedSummary.user_id == user.id)
            .options(selectinload(SavedSummary.article))
            .order_by(SavedSummary.created_at.desc(), SavedSummary.id.desc())
        )
        return list(result.scalars().all())
