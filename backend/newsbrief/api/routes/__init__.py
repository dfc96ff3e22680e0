"""
API route modules.

Import all route modules here for easy access.
"""

from newsbrief.api.routes import auth, news, summaries

__all__ = ["auth", "news", "summaries"]
