"""
News endpoints.

Headlines, category pages and search are served from the provider when
it answers and from stored articles otherwise; the response is the same
either way. Fixed paths (``/search``, ``/category/...``) are declared
before ``/{article_id}`` so they aren't captured by it.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from newsbrief.api.deps import NewsServiceDep
from newsbrief.core.config import settings
from newsbrief.db.deps import DBSession
from newsbrief.schemas import ArticleResponse, DataResponse, ListResponse

router = APIRouter(prefix="/news", tags=["News"])


PageParam = Annotated[int, Query(ge=1, description="Page number (1-based)")]
LimitParam = Annotated[
    int,
    Query(ge=1, le=settings.MAX_PAGE_LIMIT, description="Page size for results served from the store"),
]
CountryParam = Annotated[Optional[str], Query(min_length=2, max_length=2)]


def _article_list(articles) -> ListResponse[ArticleResponse]:
    items = [ArticleResponse.model_validate(article) for article in articles]
    return ListResponse[ArticleResponse](count=len(items), data=items)


@router.get("", response_model=ListResponse[ArticleResponse])
async def list_headlines(
    db: DBSession,
    news: NewsServiceDep,
    page: PageParam = 1,
    limit: LimitParam = settings.DEFAULT_PAGE_LIMIT,
    country: CountryParam = None,
):
    """Top headlines across all categories."""
    articles = await news.get_headlines(db, country=country, page=page, limit=limit)
    return _article_list(articles)


@router.get("/search", response_model=ListResponse[ArticleResponse])
async def search_news(
    db: DBSession,
    news: NewsServiceDep,
    q: Optional[str] = Query(None, description="Search text"),
    page: PageParam = 1,
    limit: LimitParam = settings.DEFAULT_PAGE_LIMIT,
):
    """
    Search articles.

    Errors:
    -------
    - 400: "Search query is required"
    """
    articles = await news.search(db, q, page=page, limit=limit)
    return _article_list(articles)


@router.get("/category/{category}", response_model=ListResponse[ArticleResponse])
async def list_category(
    category: str,
    db: DBSession,
    news: NewsServiceDep,
    page: PageParam = 1,
    limit: LimitParam = settings.DEFAULT_PAGE_LIMIT,
    country: CountryParam = None,
):
    """Headlines for one category."""
    articles = await news.get_headlines(db, category=category, country=country, page=page, limit=limit)
    return _article_list(articles)


@router.get("/{article_id}", response_model=DataResponse[ArticleResponse])
async def get_article(article_id: int, db: DBSession, news: NewsServiceDep):
    """
    Single article. Generates and stores the AI summary on first view.

    Errors:
    -------
    - 404: "Article not found"
    """
    article = await news.get_article(db, article_id)
    return DataResponse[ArticleResponse](data=ArticleResponse.model_validate(article))
