"""
Pydantic schemas for request/response validation.

Import all schemas here for easy access.
"""

from newsbrief.schemas.article import ArticleResponse, ArticleSource
from newsbrief.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ProfileStats,
    ProfileUpdate,
    ResetPasswordRequest,
    UserLogin,
    UserProfile,
    UserPublic,
    UserRegister,
)
from newsbrief.schemas.common import (
    DataResponse,
    ErrorResponse,
    ListResponse,
    MessageResponse,
)
from newsbrief.schemas.summary import (
    GeneratedSummary,
    GenerateSummaryRequest,
    SavedSummaryResponse,
    SaveArticleRequest,
)

__all__ = [
    # Envelopes
    "DataResponse",
    "ListResponse",
    "MessageResponse",
    "ErrorResponse",
    # Authentication
    "UserRegister",
    "UserLogin",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "ProfileUpdate",
    "UserPublic",
    "UserProfile",
    "ProfileStats",
    "AuthResponse",
    # Articles & summaries
    "ArticleSource",
    "ArticleResponse",
    "GenerateSummaryRequest",
    "GeneratedSummary",
    "SaveArticleRequest",
    "SavedSummaryResponse",
]
