"""
Database Dependencies for FastAPI Routes

Routes declare what they need and FastAPI provides it:

    @router.get("/articles/{article_id}")
    async def get_article(article_id: int, db: DBSession):
        return await db.get(Article, article_id)

Sessions are always closed (and rolled back on error) after the request,
and tests can swap the session for one bound to a scratch database.

Learning Resources:
- FastAPI Dependencies: https://fastapi.tiangolo.com/tutorial/dependencies/
"""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.db.session import get_session


# ================================
# Database Session Dependency
# ================================

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session.

    Each request gets its own session/transaction:
    - Changes are isolated from other requests
    - Commit explicitly: await db.commit()
    - Rollback happens automatically on errors
    """
    async for session in get_session():
        yield session


# Reusable annotation: ``db: DBSession`` instead of
# ``db: AsyncSession = Depends(get_db)``
DBSession = Annotated[AsyncSession, Depends(get_db)]


# ================================
# Testing Helpers
# ================================

def get_db_override(session: AsyncSession) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """
    Create a dependency override for testing.

    Usage in Tests:
    ---------------
    app.dependency_overrides[get_db] = get_db_override(test_session)
    response = await client.get("/api/news/1")
    app.dependency_overrides.clear()
    """
    async def _override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    return _override


__all__ = [
    "get_db",
    "DBSession",
    "get_db_override",
]
