"""
Daily affirmation generation.

Wraps the LLM client so that callers always get a short, SMS-sized string.
"""

from typing import Optional

from config.settings import settings
from core import get_logger
from prompts import AFFIRMATION_SYSTEM_PROMPT, AFFIRMATION_USER_MESSAGE, FALLBACK_AFFIRMATION
from utils.llm_client import LLMClient, llm_client

logger = get_logger(__name__)

MAX_AFFIRMATION_LENGTH = 160

_QUOTE_CHARS = "\"'“”‘’"


def clean_affirmation(text: Optional[str], max_length: int = MAX_AFFIRMATION_LENGTH) -> str:
    """
    Normalize model output into a single SMS-sized affirmation.

    Strips whitespace and wrapping quotes, collapses internal whitespace and cuts
    overlong text on a word boundary. Empty output becomes the fallback affirmation.
    """
    if not text:
        return FALLBACK_AFFIRMATION

    cleaned = " ".join(text.split()).strip(_QUOTE_CHARS).strip()
    if not cleaned:
        return FALLBACK_AFFIRMATION

    if len(cleaned) > max_length:
        cut = cleaned[:max_length]
        if " " in cut:
            cut = cut.rsplit(" ", 1)[0]
        cleaned = cut.rstrip(" ,;:-")

    return cleaned


class AffirmationGenerator:
    """Generates the daily affirmation text. Never raises."""

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.client = client or llm_client
        self.model = model or settings.MODEL_AFFIRMATION
        self.timeout_seconds = timeout_seconds or settings.EXTERNAL_CALL_TIMEOUT_SECONDS

    async def generate_daily_affirmation_text(self) -> str:
        """Return a fresh affirmation, or the fixed fallback if generation fails."""
        try:
            raw = await self.client.chat_with_system(
                model=self.model,
                system_prompt=AFFIRMATION_SYSTEM_PROMPT,
                user_message=AFFIRMATION_USER_MESSAGE,
                max_tokens=100,
                timeout=self.timeout_seconds,
            )
        except Exception as e:
            logger.warning("Affirmation generation failed, using fallback", model=self.model, error=str(e))
            return FALLBACK_AFFIRMATION

        affirmation = clean_affirmation(raw)
        logger.debug("Generated affirmation", model=self.model, length=len(affirmation))
        return affirmation
