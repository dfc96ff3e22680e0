"""
Pytest configuration and fixtures.

This file is automatically discovered by pytest and provides
shared fixtures for all test modules.

Every test gets its own in-memory SQLite database and a service registry
built from fakes:
- news provider: real ``NewsProviderClient`` over ``httpx.MockTransport``
- summarizer: real ``Summarizer`` with a stub Anthropic client
- mailer: records messages instead of talking SMTP

References:
-----------
- Pytest Fixtures: https://docs.pytest.org/en/stable/fixture.html
- FastAPI Testing: https://fastapi.tiangolo.com/tutorial/testing/
- HTTPX Mock Transport: https://www.python-httpx.org/advanced/transports/#mock-transports
"""

import os

# Settings are read on import, so the environment has to be in place first
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "pytest-secret-key-0123456789abcdefghijklmnop"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["NEWS_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["LOG_FORMAT"] = "text"

from datetime import timedelta
from itertools import count
from types import SimpleNamespace
from typing import Any, AsyncGenerator
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from newsbrief.api.deps import get_services
from newsbrief.core.errors import EmailDeliveryError
from newsbrief.core.security import create_access_token, get_password_hash
from newsbrief.db.base import Base, utcnow
from newsbrief.db.deps import get_db, get_db_override
from newsbrief.main import app
from newsbrief.models import Article, User
from newsbrief.services import ServiceRegistry, build_services
from newsbrief.services.mailer import EmailService
from newsbrief.services.news_provider import NewsProviderClient
from newsbrief.services.summarizer import Summarizer

TEST_PASSWORD = "testpass123"
LLM_SUMMARY = "A concise two-sentence summary."


# ================================
# Database Fixtures
# ================================

@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh in-memory database per test.

    StaticPool keeps the single connection alive; an in-memory SQLite
    database disappears with its last connection.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session with the same settings as ``AsyncSessionLocal``."""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


# ================================
# Fake External Services
# ================================

class FakeNewsAPI:
    """
    Stand-in for the NewsData.io ``/news`` endpoint.

    Set ``results`` to what the next call should return, or
    ``status_code`` to make it fail.
    """

    def __init__(self) -> None:
        self.status_code = 200
        self.results: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"status": "error"})
        return httpx.Response(200, json={"status": "success", "results": self.results})

    @property
    def last_params(self) -> dict[str, str]:
        return dict(self.requests[-1].url.params)


class RecordingMailer(EmailService):
    """Keeps sent messages in memory; set ``fail`` to simulate SMTP errors."""

    def __init__(self) -> None:
        super().__init__(host="smtp.newsbrief.test", from_email="noreply@newsbrief.test")
        self.sent: list[dict[str, str]] = []
        self.fail = False

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append({"to": to, "subject": subject, "body": body})


def llm_response(text: str) -> SimpleNamespace:
    """Shape of an Anthropic ``messages.create`` result with one text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


@pytest.fixture
def news_api() -> FakeNewsAPI:
    return FakeNewsAPI()


@pytest_asyncio.fixture
async def provider(news_api: FakeNewsAPI) -> AsyncGenerator[NewsProviderClient, None]:
    client = NewsProviderClient(
        api_key="test-news-key",
        base_url="https://newsdata.test/api/1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(news_api.handler)),
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def offline_provider() -> AsyncGenerator[NewsProviderClient, None]:
    """Provider without an API key: never makes a request."""
    client = NewsProviderClient(api_key="")
    yield client
    await client.aclose()


@pytest.fixture
def llm_client() -> SimpleNamespace:
    return SimpleNamespace(
        messages=SimpleNamespace(create=AsyncMock(return_value=llm_response(LLM_SUMMARY)))
    )


@pytest.fixture
def summarizer(llm_client: SimpleNamespace) -> Summarizer:
    return Summarizer(api_key="", client=llm_client)


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def services(
    provider: NewsProviderClient,
    summarizer: Summarizer,
    mailer: RecordingMailer,
) -> ServiceRegistry:
    return build_services(provider=provider, summarizer=summarizer, mailer=mailer)


# ================================
# FastAPI Client Fixtures
# ================================

@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    services: ServiceRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client wired to the test database and fake services.

    Usage:
        async def test_something(client: AsyncClient):
            response = await client.get("/api/news")
            assert response.status_code == 200
    """
    app.dependency_overrides[get_db] = get_db_override(db_session)
    app.dependency_overrides[get_services] = lambda: services

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ================================
# Data Fixtures
# ================================

@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """
    Registered user. Password is "testpass123".
    """
    user = User(
        name="Test User",
        email="test@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        preferences={},
        saved_summary_ids=[],
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict[str, str]:
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_article(db_session: AsyncSession):
    """
    Factory for stored articles. Each call is published an hour before
    the previous one, so creation order is newest-first order.

    Usage:
        article = await make_article(category="science", title="Mars rover")
    """
    sequence = count(1)

    async def _make(**overrides: Any) -> Article:
        n = next(sequence)
        fields: dict[str, Any] = {
            "title": f"Stored story {n}",
            "description": f"Description of stored story {n}",
            "content": None,
            "url": f"https://news.example.com/stored-{n}",
            "image_url": "https://cdn.example.com/stored.jpg",
            "source_name": "Example Wire",
            "source_id": "example-wire",
            "category": "technology",
            "published_at": utcnow() - timedelta(hours=n),
            "read_time": 2,
        }
        fields.update(overrides)
        article = Article(**fields)
        db_session.add(article)
        await db_session.commit()
        return article

    return _make


@pytest.fixture
def newsdata_result():
    """
    Factory for one item of a NewsData.io ``results`` list.

    Usage:
        news_api.results = [newsdata_result(1), newsdata_result(2, category=["science"])]
    """

    def _make(n: int, **overrides: Any) -> dict[str, Any]:
        item: dict[str, Any] = {
            "article_id": f"nd-{n}",
            "title": f"Provider headline {n}",
            "link": f"https://provider.example.com/story-{n}",
            "description": f"Provider description {n}",
            "content": None,
            "pubDate": f"2024-05-0{n % 9 + 1} 12:30:00",
            "image_url": f"https://cdn.provider.example.com/{n}.jpg",
            "source_id": "wire",
            "source_name": "The Wire",
            "category": ["technology"],
            "language": "english",
        }
        item.update(overrides)
        return item

    return _make
