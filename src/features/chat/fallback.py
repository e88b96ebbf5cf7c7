"""Canned replies used when the AI backend is unavailable."""

import random

FALLBACK_RESPONSES = (
    "I apologize, but I'm having trouble connecting to my knowledge base right now. Could you please try again?",
    "I'm experiencing some technical difficulties. Is there a specific way I can help you?",
    "Sorry for the inconvenience! While I resolve this issue, is there something urgent I can assist with?",
    "I'm temporarily unavailable, but I'd be happy to help you shortly. Please try again in a moment.",
)


def get_fallback_response() -> str:
    """Pick a fallback reply uniformly at random."""
    return random.choice(FALLBACK_RESPONSES)
