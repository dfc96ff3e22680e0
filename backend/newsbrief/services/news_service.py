"""
News retrieval: provider first, stored articles as fallback.

Path selection for headlines and search::

    provider configured?
      yes -> fetch -> non-empty? -> upsert_batch -> return canonical articles
                   -> error/empty -> store fallback
      no  -> store fallback

    store fallback: filter (category / search text), newest first, paginated.
    When nothing in the store matches a browse (or the store is empty),
    the built-in mock dataset is ingested first so the feed is never empty.

Callers get the same list of ``Article`` rows whichever path served them;
only the logs say which one did.
"""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.core.config import settings
from newsbrief.core.errors import NotFoundError, UpstreamError, ValidationError
from newsbrief.core.logging import get_logger
from newsbrief.db.base import utcnow
from newsbrief.models import Article
from newsbrief.services.news_provider import NewsProviderClient, mock_articles
from newsbrief.services.normalizer import count_articles, upsert_batch
from newsbrief.services.summarizer import Summarizer, article_summary_input

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class NewsService:
    """
    Ingestion and fallback orchestration.

    Usage:
    ------
    service = NewsService(provider=NewsProviderClient(), summarizer=Summarizer())
    articles = await service.get_headlines(db, category="science")
    article = await service.get_article(db, article_id=42)
    """

    def __init__(self, provider: NewsProviderClient, summarizer: Summarizer):
        self.provider = provider
        self.summarizer = summarizer

    # ========================================
    # Headlines & search
    # ========================================

    async def get_headlines(
        self,
        db: AsyncSession,
        category: Optional[str] = None,
        country: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> list[Article]:
        category = category.strip().lower() if category and category.strip() else None
        limit = limit or settings.DEFAULT_PAGE_LIMIT

        if self.provider.configured:
            try:
                raw = await self.provider.fetch_headlines(category=category, country=country, page=page)
            except UpstreamError as e:
                logger.warning("news_provider_failed", error=e.message, category=category, page=page)
                raw = []

            if raw:
                articles = await upsert_batch(db, raw, category)
                if articles:
                    logger.info("news_served", path="provider", count=len(articles), category=category)
                    return articles
            logger.info("news_provider_empty", category=category, page=page)
        else:
            logger.debug("news_provider_not_configured")

        return await self._from_store(db, category=category, page=page, limit=limit)

    async def search(
        self,
        db: AsyncSession,
        query: Optional[str],
        page: int = 1,
        limit: Optional[int] = None,
    ) -> list[Article]:
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        query = query.strip()
        limit = limit or settings.DEFAULT_PAGE_LIMIT

        if self.provider.configured:
            try:
                raw = await self.provider.search(query, page=page)
            except UpstreamError as e:
                logger.warning("news_provider_failed", error=e.message, query=query, page=page)
                raw = []

            if raw:
                articles = await upsert_batch(db, raw)
                if articles:
                    logger.info("news_served", path="provider", count=len(articles), query=query)
                    return articles
            logger.info("news_provider_empty", query=query, page=page)
        else:
            logger.debug("news_provider_not_configured")

        return await self._from_store(db, query=query, page=page, limit=limit)

    async def _from_store(
        self,
        db: AsyncSession,
        category: Optional[str] = None,
        query: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> list[Article]:
        articles = await self._query_store(db, category, query, page, limit)

        # Search only falls back to the mocks on a fresh store; they rarely match the text
        if not articles and page <= 1 and (not query or await count_articles(db) == 0):
            seeded = await upsert_batch(db, mock_articles(category), category)
            logger.info("news_mock_dataset_loaded", count=len(seeded), category=category)
            articles = await self._query_store(db, category, query, page, limit)

        logger.info("news_served", path="store", count=len(articles), category=category, query=query)
        return articles

    async def _query_store(
        self,
        db: AsyncSession,
        category: Optional[str],
        query: Optional[str],
        page: int,
        limit: int,
    ) -> list[Article]:
        stmt = select(Article)
        if category:
            stmt = stmt.where(Article.category == category)
        if query:
            pattern = f"%{_escape_like(query)}%"
            stmt = stmt.where(
                or_(
                    Article.title.ilike(pattern, escape="\\"),
                    Article.description.ilike(pattern, escape="\\"),
                )
            )
        stmt = (
            stmt.order_by(Article.published_at.desc(), Article.id.desc())
            .offset((max(page, 1) - 1) * limit)
            .limit(limit)
        )
        return list((await db.execute(stmt)).scalars().all())

    # ========================================
    # Single article
    # ========================================

    async def get_article(self, db: AsyncSession, article_id: int) -> Article:
        """
        Fetch one article, generating its summary on first view.

        Raises:
            NotFoundError: no article with this id
        """
        article = await db.get(Article, article_id)
        if article is None:
            raise NotFoundError("Article not found")

        if not article.ai_summary:
            await self.ensure_summary(db, article)
        return article

    async def regenerate_summary(self, db: AsyncSession, article_id: int) -> Article:
        """
        Summarize an article again and overwrite its stored summary.

        Raises:
            NotFoundError: no article with this id
        """
        article = await db.get(Article, article_id)
        if article is None:
            raise NotFoundError("Article not found")

        article.ai_summary = await self.summarizer.summarize(
            article_summary_input(article.title, article.description)
        )
        article.summary_generated_at = utcnow()
        await db.commit()
        logger.info("article_summary_generated", article_id=article.id, regenerated=True)
        return article

    async def ensure_summary(self, db: AsyncSession, article: Article) -> str:
        """Generate and persist ``article.ai_summary`` if it is still empty."""
        if article.ai_summary:
            return article.ai_summary

        article.ai_summary = await self.summarizer.summarize(
            article_summary_input(article.title, article.description)
        )
        article.summary_generated_at = utcnow()
        await db.commit()
        logger.info("article_summary_generated", article_id=article.id)
        return article.ai_summary
