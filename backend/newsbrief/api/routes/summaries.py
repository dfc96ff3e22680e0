"""
Summary endpoints: on-demand generation and the user's saved articles.

All routes require a bearer token.
"""

from fastapi import APIRouter, status

from newsbrief.api.deps import NewsServiceDep, SavedArticleServiceDep, SummarizerDep
from newsbrief.core.auth import CurrentUser
from newsbrief.core.errors import ValidationError
from newsbrief.db.deps import DBSession
from newsbrief.schemas import (
    DataResponse,
    GeneratedSummary,
    GenerateSummaryRequest,
    ListResponse,
    SavedSummaryResponse,
    SaveArticleRequest,
)

router = APIRouter(prefix="/summaries", tags=["Summaries"])


@router.post("/generate", response_model=DataResponse[GeneratedSummary])
async def generate_summary(
    body: GenerateSummaryRequest,
    current_user: CurrentUser,
    db: DBSession,
    news: NewsServiceDep,
    summarizer: SummarizerDep,
):
    """
    Summarize an article (stored on it, replacing any previous summary) or
    arbitrary text (not stored).

    Errors:
    -------
    - 400: neither ``articleId`` nor ``text`` given
    - 404: article not found
    """
    if body.article_id is not None:
        article = await news.regenerate_summary(db, body.article_id)
        result = GeneratedSummary(summary=article.ai_summary or "", article_id=article.id)
    elif body.text and body.text.strip():
        result = GeneratedSummary(summary=await summarizer.summarize(body.text))
    else:
        raise ValidationError("Either articleId or text is required")

    return DataResponse[GeneratedSummary](data=result)


@router.get("/saved", response_model=ListResponse[SavedSummaryResponse])
async def list_saved(current_user: CurrentUser, db: DBSession, saved: SavedArticleServiceDep):
    """Current user's saved articles, newest first."""
    records = await saved.list_saved(db, current_user)
    items = [SavedSummaryResponse.model_validate(record) for record in records]
    return ListResponse[SavedSummaryResponse](count=len(items), data=items)


@router.post(
    "/save/{article_id}",
    response_model=DataResponse[SavedSummaryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def save_article(
    article_id: int,
    current_user: CurrentUser,
    db: DBSession,
    saved: SavedArticleServiceDep,
    body: SaveArticleRequest | None = None,
):
    """
    Save an article with optional notes and tags.

    Errors:
    -------
    - 400: "Article already saved"
    - 404: "Article not found"
    """
    body = body or SaveArticleRequest()
    record = await saved.save(db, current_user, article_id, notes=body.notes, tags=body.tags)
    return DataResponse[SavedSummaryResponse](data=SavedSummaryResponse.model_validate(record))


@router.delete("/unsave/{article_id}", response_model=DataResponse[dict])
async def unsave_article(
    article_id: int,
    current_user: CurrentUser,
    db: DBSession,
    saved: SavedArticleServiceDep,
):
    """
    Remove a saved article.

    Errors:
    -------
    - 404: "Saved article not found"
    """
    await saved.unsave(db, current_user, article_id)
    return DataResponse[dict](data={})
