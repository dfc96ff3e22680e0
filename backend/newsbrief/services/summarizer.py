"""
Article summarization with Claude.

``Summarizer.summarize`` never raises: when the API key is missing, the
call fails or the response is unusable, it degrades to a deterministic
fallback so article pages always have some summary text.
"""

from typing import Any, Optional

from anthropic import AsyncAnthropic

from newsbrief.core.config import settings
from newsbrief.core.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise, accurate summaries of news articles. "
    "Keep summaries to 2-3 sentences maximum."
)

SUMMARY_UNAVAILABLE = "Summary not available. The article content could not be summarized."
SUMMARY_EMPTY = "Summary could not be generated. Please try again."
FALLBACK_MAX_CHARS = 200


def fallback_summary(text: Optional[str]) -> str:
    """Deterministic stand-in used whenever the model can't be reached."""
    if not text or not text.strip():
        return SUMMARY_UNAVAILABLE
    if len(text) > FALLBACK_MAX_CHARS:
        return text[:FALLBACK_MAX_CHARS] + "..."
    return text


def article_summary_input(title: Optional[str], description: Optional[str]) -> str:
    """Text fed to the model for an article: ``"{title}. {description}"``."""
    return f"{title or ''}. {description or ''}"


class Summarizer:
    """
    Summarization service using Claude API.

    Usage:
    ------
    summarizer = Summarizer(api_key=settings.ANTHROPIC_API_KEY)
    summary = await summarizer.summarize("Long article text...")

    Tests pass ``client`` to replace the Anthropic client.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize the summarizer.

        Args:
            api_key: Anthropic API key (defaults to settings.ANTHROPIC_API_KEY).
                Without one, every call returns the fallback summary.
            model: Claude model (defaults to settings.ANTHROPIC_MODEL)
            max_tokens: Response token cap (default: 150)
            temperature: Sampling temperature (default: 0.3)
            timeout: Request timeout in seconds (default: 20)
            client: Pre-built AsyncAnthropic-compatible client
        """
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.ANTHROPIC_MODEL
        self.max_tokens = max_tokens or settings.SUMMARY_MAX_TOKENS
        self.temperature = temperature if temperature is not None else settings.SUMMARY_TEMPERATURE

        if client is not None:
            self.client = client
        elif self.api_key:
            self.client = AsyncAnthropic(
                api_key=self.api_key,
                timeout=timeout or settings.SUMMARY_TIMEOUT,
                max_retries=1,
            )
        else:
            self.client = None
            logger.warning("summarizer_not_configured")

    async def summarize(self, text: Optional[str]) -> str:
        """
        Summarize ``text`` in 2-3 sentences.

        Returns:
            The model's summary, ``SUMMARY_EMPTY`` if the model answered with
            nothing, or ``fallback_summary(text)`` on any failure
        """
        if self.client is None:
            return fallback_summary(text)
        if not text or not text.strip():
            return SUMMARY_UNAVAILABLE

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=[
                    {"role": "user", "content": f"Please summarize this news article: {text}"}
                ],
            )
            summary = "".join(
                block.text for block in response.content if getattr(block, "type", None) == "text"
            ).strip()
        except Exception as e:
            logger.warning("summary_generation_failed", error=str(e), error_type=type(e).__name__)
            return fallback_summary(text)

        return summary or SUMMARY_EMPTY
