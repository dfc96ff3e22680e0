"""
Authentication dependencies for FastAPI.

This module provides:
- Bearer token scheme
- Credential check used by login
- ``get_current_user`` dependency for protected routes

References:
-----------
- FastAPI Security Tutorial: https://fastapi.tiangolo.com/tutorial/security/oauth2-jwt/
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.core.errors import AuthError
from newsbrief.core.security import decode_access_token, verify_password
from newsbrief.db.deps import get_db
from newsbrief.models.user import User

# ================================
# Bearer Scheme
# ================================

# Extracts "<token>" from "Authorization: Bearer <token>" and adds the
# Authorize button to Swagger. auto_error=False so a missing header goes
# through our AuthError envelope instead of FastAPI's default 403.
bearer_scheme = HTTPBearer(auto_error=False)


# ================================
# Authentication Functions
# ================================

async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """
    Authenticate a user by email and password.

    Returns:
        User object if the credentials match, None otherwise. Callers
        report both cases the same way so the response never reveals
        whether the email is registered.
    """
    user = await get_user_by_email(db, email)
    if user is None:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the user behind the request's bearer token.

    Flow:
    -----
    1. HTTPBearer extracts the token from the Authorization header
    2. Signature and expiry are verified
    3. The ``sub`` claim (user id) is loaded from the database

    Raises:
        AuthError (401): missing, malformed, expired or tampered token, or
            a token for a user that no longer exists. All cases share one
            message.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError()

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthError()

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise AuthError()

    user = await db.get(User, user_id)
    if user is None:
        raise AuthError()

    return user


# Reusable annotation for protected routes: ``current_user: CurrentUser``
CurrentUser = Annotated[User, Depends(get_current_user)]
