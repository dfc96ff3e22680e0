"""
Security utilities for authentication and authorization.

This module provides:
- Password hashing and verification (bcrypt)
- JWT session token creation and validation (python-jose)
- Password reset token generation and hashing

References:
-----------
- FastAPI Security: https://fastapi.tiangolo.com/tutorial/security/oauth2-jwt/
- JWT Standard: https://jwt.io/introduction
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from newsbrief.core.config import settings

# ================================
# Password Hashing
# ================================

# bcrypt only looks at the first 72 bytes of the input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a bcrypt hash.

    Used during login. ``bcrypt.checkpw`` re-hashes the candidate with the
    salt embedded in ``hashed_password`` and compares in constant time.

    Args:
        plain_password: The password the user entered
        hashed_password: The stored bcrypt hash

    Returns:
        True if the password matches, False otherwise (including when the
        stored hash is malformed)

    Example:
        >>> hashed = get_password_hash("secret")
        >>> verify_password("secret", hashed)
        True
        >>> verify_password("wrong", hashed)
        False
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a plaintext password with a fresh random salt.

    Used on registration and password reset. Two hashes of the same
    password differ because each gets its own salt; the salt and cost
    factor are encoded into the returned string::

        $2b$12$R9h/cIPz0gi.URNNX3kh2OPST9/PgBkqquzi.Ss7KIUgO2t0jWMUW
        alg  cost  salt (22 chars)        hash (31 chars)

    Args:
        password: The plaintext password

    Returns:
        The bcrypt hash, safe to store
    """
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


# ================================
# JWT Session Tokens
# ================================


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT session token.

    Session tokens are stateless: the signature and ``exp`` claim are all
    that is needed to validate them, so no server-side session store
    exists.

    Args:
        data: Claims to include. Should carry ``sub`` with the user id.
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT string

    Example:
        >>> token = create_access_token({"sub": "42"}, timedelta(minutes=30))
        >>> decode_access_token(token)["sub"]
        '42'
    """
    to_encode = data.copy()

    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify a JWT session token.

    Checks structure, signature, algorithm and expiry.

    Returns:
        The claims if the token is valid, None if it is expired, tampered
        with or malformed.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


# ================================
# Password Reset Tokens
# ================================

# Lifecycle of a reset token:
#   none -> pending(hash, expiry) -> consumed | expired | email-send-failed -> none
# Only the SHA-256 digest is persisted; the raw token travels in the email.


def hash_reset_token(raw_token: str) -> str:
    """One-way hash of a raw reset token, as stored on the user row."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_reset_token(
    expires_minutes: int | None = None,
) -> tuple[str, str, datetime]:
    """
    Generate a new password reset token.

    Returns:
        (raw_token, token_hash, expires_at). The raw token goes into the
        reset link; only token_hash and expires_at are persisted.
    """
    raw_token = secrets.token_hex(20)
    minutes = expires_minutes if expires_minutes is not None else settings.RESET_TOKEN_EXPIRE_MINUTES
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return raw_token, hash_reset_token(raw_token), expires_at
