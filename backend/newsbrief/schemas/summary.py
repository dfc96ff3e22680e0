"""Summary generation and saved-article schemas."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from newsbrief.schemas.article import ArticleResponse
from newsbrief.schemas.common import CamelModel, UTCDateTime


class GenerateSummaryRequest(BaseModel):
    """
    Either an article to (re)summarize or free text.

    Example request:
        POST /api/summaries/generate
        {"articleId": 12}
    """
    article_id: Optional[int] = Field(
        None, validation_alias=AliasChoices("articleId", "article_id")
    )
    text: Optional[str] = None


class GeneratedSummary(CamelModel):
    summary: str
    article_id: Optional[int] = None


class SaveArticleRequest(BaseModel):
    notes: Optional[str] = Field(None, max_length=5000)
    tags: list[str] = Field(default_factory=list)


class SavedSummaryResponse(CamelModel):
    id: int = Field(..., alias="_id")
    article: ArticleResponse
    summary: str
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    saved_at: UTCDateTime
    created_at: UTCDateTime
