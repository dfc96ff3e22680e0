"""
NewsData.io client.

Fetches headlines and search results from ``GET {base}/news`` and maps
each result onto the raw article shape ``normalize_article`` consumes::

    {title, description, content, image_url, url, source, category, publishedAt}

Any transport error, non-2xx status or malformed body is raised as
``UpstreamError``; callers decide on the fallback path.

Also provides the built-in mock dataset used when no API key is
configured and the store is still empty.
"""

from datetime import timedelta
from typing import Any, Optional

import httpx

from newsbrief.core.config import settings
from newsbrief.core.errors import UpstreamError
from newsbrief.core.logging import get_logger
from newsbrief.db.base import utcnow
from newsbrief.models import DEFAULT_CATEGORY, ArticleCategory

logger = get_logger(__name__)


class NewsProviderClient:
    """
    Async client for the NewsData.io ``/news`` endpoint.

    Usage:
    ------
    provider = NewsProviderClient(api_key=settings.NEWS_API_KEY)
    if provider.configured:
        raw = await provider.fetch_headlines(category="science")
    await provider.aclose()

    Pass ``http_client`` to reuse a client (or a mock transport in tests).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        language: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.NEWS_API_KEY
        self.base_url = (base_url or settings.NEWS_API_BASE_URL).rstrip("/")
        self.page_size = page_size or settings.NEWS_PAGE_SIZE
        self.language = language or settings.NEWS_LANGUAGE
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout or settings.NEWS_API_TIMEOUT,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def aclose(self) -> None:
        await self._client.aclose()

    # ========================================
    # Endpoints
    # ========================================

    async def fetch_headlines(
        self,
        category: Optional[str] = None,
        country: Optional[str] = None,
        page: int = 1,
    ) -> list[dict[str, Any]]:
        """
        Top headlines, optionally restricted to one category.

        Raises:
            UpstreamError: provider unreachable, non-2xx, or malformed body
        """
        params: dict[str, Any] = {
            "language": self.language,
            "country": country or settings.NEWS_DEFAULT_COUNTRY,
        }
        if category and category.strip():
            params["category"] = category.strip().lower()

        results = await self._get_news(params, page)
        return [self._map_result(item, category) for item in results]

    async def search(self, query: str, page: int = 1) -> list[dict[str, Any]]:
        """
        Full-text search across the provider's index.

        Raises:
            UpstreamError: provider unreachable, non-2xx, or malformed body
        """
        params: dict[str, Any] = {"q": query, "language": self.language}
        results = await self._get_news(params, page)
        return [self._map_result(item, None) for item in results]

    async def _get_news(self, params: dict[str, Any], page: int) -> list[dict[str, Any]]:
        if not self.configured:
            raise UpstreamError("News provider API key is not configured")

        params = {**params, "apikey": self.api_key, "size": self.page_size}
        if page and page > 1:
            params["page"] = page

        # Never log the API key
        log_params = {k: v for k, v in params.items() if k != "apikey"}

        try:
            response = await self._client.get(f"{self.base_url}/news", params=params)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "news_provider_http_error",
                status=e.response.status_code,
                params=log_params,
            )
            raise UpstreamError(f"News provider returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("news_provider_unreachable", error=str(e), params=log_params)
            raise UpstreamError("News provider unreachable") from e
        except ValueError as e:
            logger.warning("news_provider_bad_body", error=str(e), params=log_params)
            raise UpstreamError("News provider returned an invalid body") from e

        results = body.get("results") if isinstance(body, dict) else None
        if not isinstance(results, list):
            logger.warning("news_provider_bad_body", status=body.get("status") if isinstance(body, dict) else None)
            raise UpstreamError("News provider returned no results list")

        logger.info("news_provider_fetched", count=len(results), params=log_params)
        return [item for item in results if isinstance(item, dict)]

    @staticmethod
    def _map_result(item: dict[str, Any], category: Optional[str]) -> dict[str, Any]:
        categories = item.get("category") or []
        if isinstance(categories, str):
            categories = [categories]
        return {
            "title": item.get("title"),
            "description": item.get("description") or "",
            "content": item.get("content") or item.get("description"),
            "image_url": item.get("image_url"),
            "url": item.get("link"),
            "source": {"name": item.get("source_name") or item.get("source_id"), "id": item.get("source_id") or ""},
            "category": categories[0] if categories else category,
            "publishedAt": item.get("pubDate"),
        }


# ========================================
# Mock dataset
# ========================================

def mock_articles(category: Optional[str] = None) -> list[dict[str, Any]]:
    """
    Six fixed demo articles in the raw provider shape.

    The first article is filed under the requested category so a category
    page is never empty. Each category gets its own copy of it (the URL is
    the dedup key), so a later category page still finds one after an
    earlier page stored the default copy. Publication times are relative
    to now (2 to 8 hours ago).
    """
    lead_category = (category or "").strip().lower()
    if lead_category not in ArticleCategory.values():
        lead_category = DEFAULT_CATEGORY
    lead_url = "https://example.com/ai-breakthrough-human-level"
    if lead_category != DEFAULT_CATEGORY:
        lead_url = f"{lead_url}?category={lead_category}"
    now = utcnow()

    def hours_ago(hours: int) -> str:
        return (now - timedelta(hours=hours)).isoformat()

    return [
        {
            "title": "AI Breakthroughs: New Model Achieves Human-Level Performance",
            "description": "Researchers unveil an AI model that matches human-level reasoning on complex "
                           "tasks, with better efficiency and safety controls.",
            "content": "A new generation of AI models is delivering human-level reasoning while "
                       "requiring fewer resources...",
            "image_url": "https://images.unsplash.com/photo-1677442136019-21780ecad995?auto=format&fit=crop&w=1200&q=80",
            "url": lead_url,
            "source": "Tech News Today",
            "category": lead_category,
            "publishedAt": hours_ago(2),
        },
        {
            "title": "New Species Discovered in Amazon Rainforest",
            "description": "Scientists uncover a previously unknown species during a deep rainforest "
                           "expedition, expanding biodiversity records.",
            "content": "Biologists documenting rainforest biodiversity encountered a new species "
                       "exhibiting unique adaptive traits...",
            "image_url": "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?auto=format&fit=crop&w=1200&q=80",
            "url": "https://example.com/amazon-new-species",
            "source": "Science Daily",
            "category": "science",
            "publishedAt": hours_ago(4),
        },
        {
            "title": "Quantum Computing Milestone: New Record Set",
            "description": "Engineers achieve a major quantum advantage benchmark with improved error "
                           "correction and stability.",
            "content": "A research team demonstrated sustained quantum coherence while scaling qubit "
                       "counts, setting a new industry record...",
            "image_url": "https://images.unsplash.com/photo-1635070041078-e363dbe005cb?auto=format&fit=crop&w=1200&q=80",
            "url": "https://example.com/quantum-record",
            "source": "Physics World",
            "category": "technology",
            "publishedAt": hours_ago(5),
        },
        {
            "title": "Healthcare AI Cuts ER Wait Times",
            "description": "Hospitals report reduced emergency room wait times after deploying triage "
                           "AI assistants.",
            "content": "Clinical teams are using AI to prioritize cases, leading to faster "
                       "interventions and improved patient satisfaction...",
            "image_url": "https://images.unsplash.com/photo-1576091160550-2173dba999ef?auto=format&fit=crop&w=1200&q=80",
            "url": "https://example.com/healthcare-ai-er",
            "source": "Healthline",
            "category": "health",
            "publishedAt": hours_ago(6),
        },
        {
            "title": "Global Markets Rally on Positive Earnings",
            "description": "Tech and industrial stocks lead gains as quarterly earnings surpass "
                           "forecasts across major indices.",
            "content": "Investors responded to strong earnings beats, driving a broad-based rally "
                       "and lifting market sentiment...",
            "image_url": "https://images.unsplash.com/photo-1460925895917-afdab827c52f?auto=format&fit=crop&w=1200&q=80",
            "url": "https://example.com/markets-rally",
            "source": "MarketWatch",
            "category": "business",
            "publishedAt": hours_ago(7),
        },
        {
            "title": "Championship Upset: Underdogs Claim the Title",
            "description": "An unexpected victory reshapes the playoff picture as the underdogs "
                           "secure the championship in overtime.",
            "content": "The final quarter saw dramatic swings before the underdogs closed out in "
                       "overtime, stunning analysts and fans alike...",
            "image_url": "https://images.unsplash.com/photo-1461896836934-ffe607ba8211?auto=format&fit=crop&w=1200&q=80",
            "url": "https://example.com/championship-upset",
            "source": "ESPN",
            "category": "sports",
            "publishedAt": hours_ago(8),
        },
    ]
