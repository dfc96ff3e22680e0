"""
Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from newsbrief.api import api_router
from newsbrief.core.config import settings
from newsbrief.core.env_validation import validate_or_exit
from newsbrief.core.errors import register_exception_handlers
from newsbrief.core.logging import get_logger, setup_logging
from newsbrief.db.session import AsyncSessionLocal, check_db_health, close_db, init_db
from newsbrief.services import build_services
from newsbrief.services.seed import seed_database

APP_VERSION = "1.0.0"

# Setup logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan events.
    Handles startup and shutdown tasks.
    """
    # Startup
    logger.info(
        "starting_application",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        version=APP_VERSION,
    )
    validate_or_exit()

    # Initialize database connection pool
    await init_db()

    app.state.services = build_services()

    if settings.SEED_ON_STARTUP:
        try:
            async with AsyncSessionLocal() as session:
                await seed_database(session, app.state.services.provider)
        except SQLAlchemyError as e:
            logger.error("seed_failed", error=str(e), exc_info=True)

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await app.state.services.aclose()
    await close_db()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="News aggregation with AI summaries - Backend API",
    version=APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

register_exception_handlers(app)


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check() -> JSONResponse:
    """
    Health check endpoint for monitoring.
    Includes database connectivity check.
    """
    db_healthy = await check_db_health()

    return JSONResponse(
        status_code=200 if db_healthy else 503,
        content={
            "success": db_healthy,
            "status": "healthy" if db_healthy else "unhealthy",
            "app_name": settings.APP_NAME,
            "environment": settings.APP_ENV,
            "version": APP_VERSION,
            "database": "connected" if db_healthy else "disconnected",
        },
    )


@app.get("/", tags=["root"])
async def root() -> JSONResponse:
    """
    Root endpoint.
    """
    return JSONResponse(
        content={
            "success": True,
            "message": f"Welcome to {settings.APP_NAME} API",
            "version": APP_VERSION,
            "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
        }
    )


# Include API routers
app.include_router(api_router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "newsbrief.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
