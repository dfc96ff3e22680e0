"""Business logic services."""

from dataclasses import dataclass
from typing import Optional

from newsbrief.services.accounts import AccountService
from newsbrief.services.mailer import EmailService
from newsbrief.services.news_provider import NewsProviderClient
from newsbrief.services.news_service import NewsService
from newsbrief.services.saved_articles import SavedArticleService
from newsbrief.services.summarizer import Summarizer


@dataclass
class ServiceRegistry:
    """The service objects one application instance works with."""

    provider: NewsProviderClient
    summarizer: Summarizer
    mailer: EmailService
    news: NewsService
    saved_articles: SavedArticleService
    accounts: AccountService

    async def aclose(self) -> None:
        await self.provider.aclose()


def build_services(
    provider: Optional[NewsProviderClient] = None,
    summarizer: Optional[Summarizer] = None,
    mailer: Optional[EmailService] = None,
) -> ServiceRegistry:
    """
    Wire the services together. Anything not passed in is built from settings.

    Tests pass fakes here (a provider over ``httpx.MockTransport``, a
    summarizer with a stub client, a mailer that records sends).
    """
    provider = provider or NewsProviderClient()
    summarizer = summarizer or Summarizer()
    mailer = mailer or EmailService()
    news = NewsService(provider=provider, summarizer=summarizer)
    return ServiceRegistry(
        provider=provider,
        summarizer=summarizer,
        mailer=mailer,
        news=news,
        saved_articles=SavedArticleService(news_service=news),
        accounts=AccountService(mailer=mailer),
    )


__all__ = [
    "AccountService",
    "EmailService",
    "NewsProviderClient",
    "NewsService",
    "SavedArticleService",
    "Summarizer",
    "ServiceRegistry",
    "build_services",
]
