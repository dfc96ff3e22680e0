"""Article schemas."""

from typing import Optional

from pydantic import Field

from newsbrief.schemas.common import CamelModel, UTCDateTime


class ArticleSource(CamelModel):
    name: Optional[str] = None
    id: str = ""


class ArticleResponse(CamelModel):
    """
    A canonical article as the client sees it.

    Example response:
        {
            "_id": 12,
            "title": "Quantum Computing Milestone: New Record Set",
            "imageUrl": "https://images.unsplash.com/...",
            "source": {"name": "Physics World", "id": ""},
            "category": "technology",
            "publishedAt": "2024-05-01T12:30:00Z",
            "aiSummary": null,
            "readTime": 1,
            ...
        }
    """
    id: int = Field(..., alias="_id")
    title: str
    description: str = ""
    content: Optional[str] = None
    url: str
    image_url: Optional[str] = None
    source: ArticleSource
    category: str
    published_at: UTCDateTime
    ai_summary: Optional[str] = None
    summary_generated_at: Optional[UTCDateTime] = None
    read_time: int
    created_at: UTCDateTime
