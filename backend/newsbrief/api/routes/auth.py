"""
Authentication endpoints.

This module provides:
- Registration and login (JSON body, bearer token in the response)
- Forgot / reset password
- Current user profile with stats, and profile updates

References:
-----------
- FastAPI Security: https://fastapi.tiangolo.com/tutorial/security/oauth2-jwt/
"""

from fastapi import APIRouter, status

from newsbrief.api.deps import AccountServiceDep
from newsbrief.core.auth import CurrentUser
from newsbrief.core.logging import get_logger
from newsbrief.db.deps import DBSession
from newsbrief.schemas import (
    AuthResponse,
    DataResponse,
    ForgotPasswordRequest,
    MessageResponse,
    ProfileStats,
    ProfileUpdate,
    ResetPasswordRequest,
    UserLogin,
    UserProfile,
    UserPublic,
    UserRegister,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


# ================================
# Registration & Login
# ================================

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: DBSession, accounts: AccountServiceDep):
    """
    Register a new account and return a session token.

    Errors:
    -------
    - 400: email already registered ("User already exists") or invalid body
    """
    user, token = await accounts.register(db, user_data.name, user_data.email, user_data.password)
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, db: DBSession, accounts: AccountServiceDep):
    """
    Login with email and password.

    Errors:
    -------
    - 401: "Invalid credentials" (same for unknown email and wrong password)
    """
    user, token = await accounts.login(db, credentials.email, credentials.password)
    return AuthResponse(token=token, user=UserPublic.model_validate(user))


# ================================
# Password Reset
# ================================

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(body: ForgotPasswordRequest, db: DBSession, accounts: AccountServiceDep):
    """
    Email a password reset link.

    Answers with a generic success message for unknown emails so the
    endpoint can't be used to discover accounts.

    Errors:
    -------
    - 500: "Email could not be sent"
    """
    message = await accounts.request_password_reset(db, body.email)
    return MessageResponse(message=message)


@router.put("/reset-password/{reset_token}", response_model=MessageResponse)
async def reset_password(
    reset_token: str,
    body: ResetPasswordRequest,
    db: DBSession,
    accounts: AccountServiceDep,
):
    """
    Set a new password using the token from the reset email.

    Errors:
    -------
    - 400: "Invalid or expired token"
    """
    message = await accounts.reset_password(db, reset_token, body.password)
    return MessageResponse(message=message)


# ================================
# Profile
# ================================

@router.get("/me", response_model=DataResponse[UserProfile])
async def get_me(current_user: CurrentUser, db: DBSession, accounts: AccountServiceDep):
    """Current user's profile with derived stats."""
    stats = await accounts.get_stats(db, current_user)
    profile = UserProfile.model_validate(current_user).model_copy(
        update={"stats": ProfileStats(**stats)}
    )
    return DataResponse(data=profile)


@router.put("/profile", response_model=DataResponse[UserProfile])
async def update_profile(
    body: ProfileUpdate,
    current_user: CurrentUser,
    db: DBSession,
    accounts: AccountServiceDep,
):
    """Update name and/or preferences. Other fields in the body are ignored."""
    user = await accounts.update_profile(db, current_user, body.model_dump(exclude_unset=True))
    return DataResponse(data=UserProfile.model_validate(user))
