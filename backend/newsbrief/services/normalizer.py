"""
Article normalization and persistence.

Raw article records reach us in several shapes (NewsData.io results mapped
by the provider client, the built-in mock dataset, seed data, older
NewsAPI-style payloads with ``urlToImage``). ``normalize_article`` turns any
of them into the column values of an ``Article``; ``upsert_batch`` persists a
batch with first-write-wins deduplication on URL.

Field resolution:
-----------------
- category: ``category`` -> ``categories[0]`` -> caller fallback -> "technology"
- source:   dict ``{name, id}`` or bare string (id "")
- image:    ``image_url`` -> ``imageUrl`` -> ``urlToImage`` -> ``image``
            -> keyword pool -> category image -> default
- readTime: explicit positive ``readTime``, else ceil(words / 200) of
            content (or description), at least 1
"""

import math
import random
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.core.logging import get_logger
from newsbrief.db.base import utcnow
from newsbrief.models import DEFAULT_CATEGORY, Article
from newsbrief.services.images import (
    LEGACY_DEFAULT_IMAGES,
    CategoryImageRotation,
    pick_image_by_content,
)

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200
DEFAULT_READ_TIME = 5

_IMAGE_FIELDS = ("image_url", "imageUrl", "urlToImage", "image")


# ========================================
# Field resolution
# ========================================

def resolve_category(raw: Mapping[str, Any], fallback: Optional[str] = None) -> str:
    category = raw.get("category")
    if isinstance(category, (list, tuple)):
        category = category[0] if category else None
    if not category:
        categories = raw.get("categories")
        if isinstance(categories, (list, tuple)) and categories:
            category = categories[0]
    return str(category or fallback or DEFAULT_CATEGORY).strip().lower()


def resolve_source(raw: Mapping[str, Any]) -> dict[str, Optional[str]]:
    source = raw.get("source")
    if isinstance(source, Mapping):
        return {"name": source.get("name"), "id": source.get("id") or ""}
    if isinstance(source, str):
        return {"name": source, "id": ""}
    return {"name": raw.get("source_name"), "id": raw.get("source_id") or ""}


def resolve_image(
    raw: Mapping[str, Any],
    category: str,
    rng: Optional[random.Random] = None,
) -> str:
    for field in _IMAGE_FIELDS:
        value = raw.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    text = f"{raw.get('title') or ''} {raw.get('description') or ''}"
    return pick_image_by_content(text, category, rng=rng)


def estimate_read_time(text: Any) -> int:
    """Minutes to read ``text`` at 200 words per minute, never below 1."""
    if not isinstance(text, str):
        return DEFAULT_READ_TIME
    words = len(text.split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def parse_published_at(value: Any) -> datetime:
    """
    Parse a provider timestamp into an aware UTC datetime.

    NewsData.io sends ``"2024-05-01 12:30:00"`` (UTC, no offset); other
    sources send ISO 8601 with ``Z`` or an offset. Unparseable or missing
    values fall back to now.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return utcnow()
    else:
        return utcnow()

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def normalize_article(
    raw: Mapping[str, Any],
    fallback_category: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> dict[str, Any]:
    """
    Map a raw article record onto ``Article`` column values.

    Pure apart from the random keyword-pool image choice. Does not validate
    required fields; constructing the ``Article`` does (empty title or URL,
    unknown category raise ``ValueError``).

    Args:
        raw: Raw record from the provider, mock dataset or seed data
        fallback_category: Category to use when the record carries none
            (typically the category the caller requested)
        rng: Random source for the keyword-pool image choice

    Returns:
        Keyword arguments for ``Article(...)``
    """
    category = resolve_category(raw, fallback_category)
    source = resolve_source(raw)
    content = raw.get("content") or None
    description = raw.get("description") or ""
    read_time = raw.get("readTime")
    if not isinstance(read_time, int) or isinstance(read_time, bool) or read_time < 1:
        read_time = estimate_read_time(content or description)

    return {
        "title": raw.get("title") or "",
        "description": description,
        "content": content,
        "url": (raw.get("url") or raw.get("link") or "").strip(),
        "image_url": resolve_image(raw, category, rng=rng),
        "source_name": source["name"],
        "source_id": source["id"],
        "category": category,
        "published_at": parse_published_at(raw.get("publishedAt") or raw.get("published_at")),
        "read_time": read_time,
    }


# ========================================
# Persistence
# ========================================

async def get_article_by_url(db: AsyncSession, url: str) -> Optional[Article]:
    result = await db.execute(select(Article).where(Article.url == url))
    return result.scalar_one_or_none()


async def upsert_batch(
    db: AsyncSession,
    raw_articles: Iterable[Mapping[str, Any]],
    fallback_category: Optional[str] = None,
) -> list[Article]:
    """
    Persist a batch of raw articles, deduplicating on URL.

    For each record: if an article with the same URL exists it is returned
    unchanged (first write wins); otherwise a new article is normalized,
    inserted and committed. A record that fails normalization or
    persistence is logged and skipped; it never fails the batch.

    Returns:
        Persisted articles (existing or new), in input order
    """
    persisted: list[Article] = []
    skipped = 0
    rolled_back = False

    for raw in raw_articles:
        url = (raw.get("url") or raw.get("link") or "").strip()
        if not url:
            skipped += 1
            logger.warning("article_skipped", reason="missing_url", title=raw.get("title"))
            continue

        existing = await get_article_by_url(db, url)
        if existing is not None:
            persisted.append(existing)
            continue

        try:
            article = Article(**normalize_article(raw, fallback_category))
        except ValueError as e:
            skipped += 1
            logger.warning("article_skipped", reason=str(e), url=url)
            continue

        try:
            db.add(article)
            await db.commit()
        except IntegrityError:
            # Another writer inserted the same URL between our select and commit
            await db.rollback()
            rolled_back = True
            existing = await get_article_by_url(db, url)
            if existing is not None:
                persisted.append(existing)
            else:
                skipped += 1
            continue
        except SQLAlchemyError as e:
            await db.rollback()
            rolled_back = True
            skipped += 1
            logger.warning("article_skipped", reason=str(e), url=url)
            continue

        persisted.append(article)

    # A rollback expires everything loaded so far; reload before callers read them
    if rolled_back:
        for article in persisted:
            await db.refresh(article)

    if skipped:
        logger.info("article_batch_persisted", persisted=len(persisted), skipped=skipped)
    return persisted


async def count_articles(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Article))
    return result.scalar_one()


# ========================================
# Image backfill
# ========================================

async def backfill_images(db: AsyncSession, force: bool = False) -> int:
    """
    Re-resolve images for articles that lack a real one.

    Targets articles with no image, or with one of the legacy single-image
    category defaults. With ``force`` every article is reassigned. The
    keyword pools are tried first; otherwise images rotate through each
    category's pool so neighbouring articles differ.

    Returns:
        Number of articles updated
    """
    stmt = select(Article).order_by(Article.published_at.desc(), Article.id.desc())
    if not force:
        stmt = stmt.where(
            or_(
                Article.image_url.is_(None),
                Article.image_url == "",
                Article.image_url.in_(sorted(LEGACY_DEFAULT_IMAGES)),
            )
        )

    articles = (await db.execute(stmt)).scalars().all()
    rotation = CategoryImageRotation()
    for article in articles:
        text = f"{article.title or ''} {article.description or ''}"
        article.image_url = rotation.pick(text, article.category)

    if articles:
        await db.commit()
    logger.info("article_images_backfilled", updated=len(articles), force=force)
    return len(articles)
