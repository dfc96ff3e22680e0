"""Database utilities and session management."""

from newsbrief.db.base import (
    Base,
    BaseModel,
    String50,
    String100,
    String255,
    String500,
    String2048,
    as_utc,
    utcnow,
)
from newsbrief.db.deps import DBSession, get_db, get_db_override
from newsbrief.db.session import (
    AsyncSessionLocal,
    check_db_health,
    close_db,
    engine,
    get_session,
    init_db,
)

__all__ = [
    # Base classes
    "Base",
    "BaseModel",
    # String types
    "String50",
    "String100",
    "String255",
    "String500",
    "String2048",
    # Time helpers
    "utcnow",
    "as_utc",
    # Session management
    "engine",
    "AsyncSessionLocal",
    "get_session",
    "init_db",
    "close_db",
    "check_db_health",
    # Dependencies
    "get_db",
    "DBSession",
    "get_db_override",
]
