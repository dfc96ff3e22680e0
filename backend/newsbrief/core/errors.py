"""
Application error taxonomy and FastAPI exception handlers.

Services raise these exceptions; the handlers registered in
``register_exception_handlers`` turn them into the standard response
envelope::

    {"success": false, "error": "Article not found"}

Anything that is not an ``AppError`` is logged with its stack trace and
reported to the client as a generic 500.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from newsbrief.core.logging import get_logger

logger = get_logger(__name__)


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized to access this route"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    # The original client contract reports duplicates as 400
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class UpstreamError(AppError):
    """
    An external provider (news API, LLM) failed.

    Never surfaced to clients directly: callers catch it and take the
    documented fallback path.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service unavailable"


class EmailDeliveryError(AppError):
    default_message = "Email could not be sent"


def _envelope(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            error=exc.message,
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return _envelope(exc.status_code, exc.message, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        msg = err.get("msg", "Invalid value")
        messages.append(f"{loc}: {msg}" if loc else msg)
    return _envelope(status.HTTP_400_BAD_REQUEST, "; ".join(messages) or "Invalid request")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
