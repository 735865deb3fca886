"""
Daily affirmation prompt and message templates.

Used by the reminder scheduler for SMS affirmations.
"""

AFFIRMATION_SYSTEM_PROMPT = """You are a manifestation coach. Generate ONE powerful, positive affirmation
that helps with abundance, success, love, or personal growth.
Keep it under 160 characters for SMS. Just return the affirmation text, no quotes."""

AFFIRMATION_USER_MESSAGE = "Generate a daily affirmation"

FALLBACK_AFFIRMATION = "I am worthy of all the abundance the universe has to offer."

# SMS bodies
DAILY_AFFIRMATION_SMS = "Your daily affirmation:\n\n{affirmation}"

MANUAL_AFFIRMATION_SMS = (
    "Your daily affirmation:\n\n\"{affirmation}\"\n\n"
    "Take a moment to breathe and believe in your manifestation journey."
)
