"""
Service dependencies for FastAPI routes.

The application builds one ``ServiceRegistry`` at startup and keeps it on
``app.state``. Routes ask for the piece they need:

    @router.get("/news")
    async def list_news(db: DBSession, news: NewsServiceDep): ...

Tests override ``get_services`` to hand routes a registry built from fakes:

    app.dependency_overrides[get_services] = lambda: build_services(provider=fake)
"""

from typing import Annotated

from fastapi import Depends, Request

from newsbrief.services import (
    AccountService,
    NewsService,
    SavedArticleService,
    ServiceRegistry,
    Summarizer,
    build_services,
)


def get_services(request: Request) -> ServiceRegistry:
    services = getattr(request.app.state, "services", None)
    if services is None:
        # Lifespan didn't run (e.g. app mounted without it); build lazily
        services = build_services()
        request.app.state.services = services
    return services


def get_news_service(services: ServiceRegistry = Depends(get_services)) -> NewsService:
    return services.news


def get_saved_article_service(services: ServiceRegistry = Depends(get_services)) -> SavedArticleService:
    return services.saved_articles


def get_account_service(services: ServiceRegistry = Depends(get_services)) -> AccountService:
    return services.accounts


def get_summarizer(services: ServiceRegistry = Depends(get_services)) -> Summarizer:
    return services.summarizer


NewsServiceDep = Annotated[NewsService, Depends(get_news_service)]
SavedArticleServiceDep = Annotated[SavedArticleService, Depends(get_saved_article_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
SummarizerDep = Annotated[Summarizer, Depends(get_summarizer)]
