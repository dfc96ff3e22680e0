"""
User Model

Database Tables:
----------------
- users: account data, password hash, preferences, reset-token state and
  the ordered list of the user's SavedSummary ids

Password reset state machine:
-----------------------------
    none -> pending(reset_token_hash, reset_token_expires_at)
    pending -> none   (consumed, expired, or email send failed)

A new forgot-password request simply overwrites a pending token.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from newsbrief.db.base import BaseModel, String100, String255


class User(BaseModel):
    """
    User account model.

    Table: users
    ------------
    Inherits id, created_at and updated_at from BaseModel.

    Security Notes:
    ---------------
    - hashed_password is a bcrypt hash; it is never serialized to clients
    - reset_token_hash is a SHA-256 digest; the raw token only ever exists
      in the reset email
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Display name"
    )

    email: Mapped[str] = mapped_column(
        String255,
        unique=True,
        index=True,
        nullable=False,
        comment="Login email address. Must be unique."
    )

    hashed_password: Mapped[str] = mapped_column(
        String255,
        nullable=False,
        comment="bcrypt password hash"
    )

    preferences: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Free-form client preferences (categories, theme, ...)"
    )

    reset_token_hash: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        index=True,
        comment="SHA-256 hex digest of the pending password reset token"
    )

    reset_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the pending reset token stops being accepted (UTC)"
    )

    saved_summary_ids: Mapped[list[int]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered ids of the user's saved summaries"
    )

    def clear_reset_token(self) -> None:
        """Return the reset-token state machine to ``none``."""
        self.reset_token_hash = None
        self.reset_token_expires_at = None

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
