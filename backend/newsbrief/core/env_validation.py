"""
Environment variable validation and security checks.

Hard errors (session secret, database URL) abort startup in production and
are logged everywhere else. Missing optional integrations (news provider,
LLM, SMTP) only produce warnings: the app falls back to stored articles,
truncated summaries, and failing reset emails respectively.
"""

import sys
from typing import List, Optional, Tuple

from newsbrief.core.config import settings
from newsbrief.core.logging import get_logger

logger = get_logger(__name__)

ASYNC_DRIVERS = ("postgresql+asyncpg://", "sqlite+aiosqlite://")
PLACEHOLDER_MARKERS = ("change", "your-", "example")


def validate_secret_key(key_name: str, key_value: Optional[str], min_length: int = 32) -> List[str]:
    """
    Validate that a secret key meets security requirements.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not key_value:
        errors.append(f"{key_name} is not set")
        return errors

    if len(key_value) < min_length:
        errors.append(f"{key_name} is too short (must be at least {min_length} characters)")

    if any(marker in key_value.lower() for marker in PLACEHOLDER_MARKERS):
        errors.append(f"{key_name} appears to be a placeholder value - update with a real secret key")

    return errors


def validate_database_url() -> List[str]:
    errors = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")
        return errors

    if not settings.DATABASE_URL.startswith(ASYNC_DRIVERS):
        errors.append(
            "DATABASE_URL must use an async driver "
            "(postgresql+asyncpg://... or sqlite+aiosqlite://...)"
        )

    if settings.is_production and settings.DATABASE_URL.startswith("sqlite"):
        errors.append("DATABASE_URL points at SQLite - use PostgreSQL in production")

    return errors


def collect_integration_warnings() -> List[str]:
    """Optional services that are not configured."""
    warnings = []

    if not settings.NEWS_API_KEY:
        warnings.append("NEWS_API_KEY not set - news is served from stored and built-in articles only")

    if not settings.ANTHROPIC_API_KEY:
        warnings.append("ANTHROPIC_API_KEY not set - summaries fall back to truncated article text")

    if not settings.SMTP_HOST or not settings.FROM_EMAIL:
        warnings.append("SMTP_HOST/FROM_EMAIL not set - password reset emails cannot be sent")

    if settings.is_production:
        if settings.DEBUG:
            warnings.append("DEBUG is enabled in production")
        if "localhost" in ",".join(settings.ALLOWED_ORIGINS):
            warnings.append("ALLOWED_ORIGINS includes localhost in production")
        if settings.LOG_FORMAT != "json":
            warnings.append("LOG_FORMAT should be 'json' in production for log aggregation")

    return warnings


def validate_environment() -> Tuple[bool, List[str]]:
    """
    Validate all environment variables.

    Returns:
        (is_valid, list_of_errors)
    """
    logger.info("validating_environment", app_env=settings.APP_ENV, app_name=settings.APP_NAME)

    errors: List[str] = []
    errors.extend(validate_secret_key("SECRET_KEY", settings.SECRET_KEY))
    errors.extend(validate_database_url())

    for warning in collect_integration_warnings():
        logger.warning("environment_validation_warning", message=warning)

    if errors:
        logger.error("environment_validation_failed", errors=errors, error_count=len(errors))
        return False, errors

    logger.info(
        "environment_validation_successful",
        app_env=settings.APP_ENV,
        features_enabled={
            "news_provider": bool(settings.NEWS_API_KEY),
            "ai_summaries": bool(settings.ANTHROPIC_API_KEY),
            "email": bool(settings.SMTP_HOST and settings.FROM_EMAIL),
        },
    )
    return True, []


def validate_or_exit() -> None:
    """
    Validate the environment during startup.

    Exits the process on hard errors in production; elsewhere the errors
    are logged and startup continues.
    """
    is_valid, errors = validate_environment()
    if is_valid:
        return

    if settings.is_production:
        logger.critical("startup_aborted_invalid_environment", errors=errors)
        sys.exit(1)
