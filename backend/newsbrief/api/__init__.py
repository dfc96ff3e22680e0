"""
API routes initialization.

This module aggregates all API routers and provides a single router
to include in the main application.
"""

from fastapi import APIRouter

from newsbrief.api.routes import auth, news, summaries

# Create main API router
api_router = APIRouter()

# Include authentication routes
api_router.include_router(auth.router)

# Include news routes
api_router.include_router(news.router)

# Include summary / saved article routes
api_router.include_router(summaries.router)
