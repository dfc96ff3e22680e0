"""
Account management: registration, login, password reset and profile.

Password reset flow:
--------------------
1. ``request_password_reset(email)``: if the account exists, store the
   SHA-256 of a fresh random token plus an expiry and email the raw token
   inside ``{CLIENT_URL}/reset-password/{token}``. The response for an
   unknown email is the generic success message.
2. ``reset_password(raw_token, new_password)``: look the user up by token
   hash with an unexpired deadline, set the new password and clear the
   token. A consumed token can never match again.

If the email can't be sent the pending token is cleared before the error
propagates, so no usable token exists that the user never received.
"""

import math
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsbrief.core.auth import authenticate_user, get_user_by_email
from newsbrief.core.config import settings
from newsbrief.core.errors import AuthError, ConflictError, EmailDeliveryError, ValidationError
from newsbrief.core.logging import get_logger
from newsbrief.core.security import (
    create_access_token,
    generate_reset_token,
    get_password_hash,
    hash_reset_token,
)
from newsbrief.db.base import as_utc, utcnow
from newsbrief.models import SavedSummary, User
from newsbrief.services.mailer import EmailService

logger = get_logger(__name__)

RESET_REQUEST_GENERIC_MESSAGE = "If an account exists, a reset link has been sent."
PASSWORD_UPDATED_MESSAGE = "Password updated successfully."

PROFILE_FIELDS = ("name", "preferences")


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id)})


def reset_email_body(reset_url: str) -> str:
    return (
        "You requested a password reset.\n\n"
        f"Reset your password here: {reset_url}\n\n"
        "If you did not request this, you can ignore this email."
    )


class AccountService:
    """
    User account operations.

    Usage:
    ------
    accounts = AccountService(mailer=EmailService())
    user, token = await accounts.register(db, "Alice", "alice@example.com", "secret123")
    """

    def __init__(self, mailer: EmailService):
        self.mailer = mailer

    # ========================================
    # Registration & login
    # ========================================

    async def register(self, db: AsyncSession, name: str, email: str, password: str) -> tuple[User, str]:
        """
        Create an account.

        Raises:
            ConflictError: the email is already registered
        """
        email = email.lower()
        if await get_user_by_email(db, email) is not None:
            logger.warning("registration_rejected", reason="email_exists")
            raise ConflictError("User already exists")

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            preferences={},
            saved_summary_ids=[],
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning("registration_rejected", reason="email_exists")
            raise ConflictError("User already exists")
        await db.refresh(user)

        logger.info("user_registered", user_id=user.id)
        return user, issue_token(user)

    async def login(self, db: AsyncSession, email: str, password: str) -> tuple[User, str]:
        """
        Raises:
            AuthError: unknown email or wrong password (same message for both)
        """
        user = await authenticate_user(db, email, password)
        if user is None:
            logger.info("login_failed")
            raise AuthError("Invalid credentials")

        logger.info("login_succeeded", user_id=user.id)
        return user, issue_token(user)

    # ========================================
    # Password reset
    # ========================================

    async def request_password_reset(self, db: AsyncSession, email: str) -> str:
        """
        Start a password reset.

        Returns:
            The same message whether or not the account exists

        Raises:
            EmailDeliveryError: the account exists but the email could not
                be sent; the pending token has been cleared
        """
        user = await get_user_by_email(db, email)
        if user is None:
            return RESET_REQUEST_GENERIC_MESSAGE

        raw_token, token_hash, expires_at = generate_reset_token()
        user.reset_token_hash = token_hash
        user.reset_token_expires_at = expires_at
        await db.commit()

        reset_url = f"{settings.CLIENT_URL.rstrip('/')}/reset-password/{raw_token}"
        try:
            await self.mailer.send(
                to=user.email,
                subject="Password reset",
                body=reset_email_body(reset_url),
            )
        except EmailDeliveryError:
            user.clear_reset_token()
            await db.commit()
            logger.warning("password_reset_email_failed", user_id=user.id)
            raise

        logger.info("password_reset_requested", user_id=user.id)
        return RESET_REQUEST_GENERIC_MESSAGE

    async def reset_password(self, db: AsyncSession, raw_token: str, new_password: str) -> str:
        """
        Consume a reset token and set a new password.

        Raises:
            ValidationError: token unknown, expired or already used
        """
        result = await db.execute(
            select(User).where(
                User.reset_token_hash == hash_reset_token(raw_token),
                User.reset_token_expires_at > utcnow(),
            )
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ValidationError("Invalid or expired token")

        user.hashed_password = get_password_hash(new_password)
        user.clear_reset_token()
        await db.commit()

        logger.info("password_reset_completed", user_id=user.id)
        return PASSWORD_UPDATED_MESSAGE

    # ========================================
    # Profile
    # ========================================

    async def update_profile(self, db: AsyncSession, user: User, fields: dict[str, Any]) -> User:
        """Apply ``name`` and ``preferences``; every other key is ignored."""
        changes = {
            key: value
            for key, value in fields.items()
            if key in PROFILE_FIELDS and value is not None
        }
        for key, value in changes.items():
            setattr(user, key, value)

        if changes:
            await db.commit()
            logger.info("profile_updated", user_id=user.id, fields=sorted(changes))
        return user

    async def get_stats(self, db: AsyncSession, user: User) -> dict[str, int]:
        """
        Derived profile stats.

        ``articlesRead`` mirrors ``summariesGenerated`` until per-article
        read tracking exists.
        """
        result = await db.execute(
            select(func.count()).select_from(SavedSummary).where(SavedSummary.user_id == user.id)
        )
        summaries_generated = result.scalar_one()

        created_at = as_utc(user.created_at)
        days = (utcnow() - created_at).total_seconds() / 86400 if created_at else 0

        return {
            "summariesGenerated": summaries_generated,
            "articlesRead": summaries_generated,
            "daysActive": max(1, math.ceil(days)),
            "savedArticles": len(user.saved_summary_ids or []),
        }
