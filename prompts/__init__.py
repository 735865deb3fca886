"""
Prompts module - LLM prompts and message templates.

Import prompts directly:
    from prompts import AFFIRMATION_SYSTEM_PROMPT, FALLBACK_AFFIRMATION
"""

from prompts.affirmation import (
    AFFIRMATION_SYSTEM_PROMPT,
    AFFIRMATION_USER_MESSAGE,
    FALLBACK_AFFIRMATION,
    DAILY_AFFIRMATION_SMS,
    MANUAL_AFFIRMATION_SMS,
)

__all__ = [
    "AFFIRMATION_SYSTEM_PROMPT",
    "AFFIRMATION_USER_MESSAGE",
    "FALLBACK_AFFIRMATION",
    "DAILY_AFFIRMATION_SMS",
    "MANUAL_AFFIRMATION_SMS",
]
