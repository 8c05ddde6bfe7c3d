"""
Lead Category Classifier

Keyword-based temperature classification of inbound messages.
"""

from ..data.models import Category

# Tiers are checked in this order; the first tier with any match wins.
HOT_KEYWORDS = [
    "quote",
    "price",
    "premium",
    "cost",
    "buy",
    "purchase",
    "proceed",
    "call me",
    "sign up",
    "ready",
    "how much",
    "let's do it",
]

COLD_KEYWORDS = [
    "not interested",
    "no thanks",
    "later",
    "maybe",
    "busy",
    "don't need",
    "already have",
]

WARM_KEYWORDS = [
    "interested",
    "comparing",
    "options",
    "benefits",
    "tell me more",
    "curious",
    "thinking",
]


def _matches(text: str, keywords: list[str]) -> bool:
    for keyword in keywords:
        if keyword in text:
            return True
    return False


def classify(previous: Category, text: str) -> Category:
    """
    Derive the lead's category from a message.

    Hot signals win over cold ones, cold over warm. A warm signal only
    lifts a cold lead back to warm; it never cools a hot lead.

    Args:
        previous: Category before this message
        text: Raw message text

    Returns:
        The new category (may equal `previous`)
    """
    lowered = (text or "").lower()

    if _matches(lowered, HOT_KEYWORDS):
        return Category.HOT

    if _matches(lowered, COLD_KEYWORDS):
        return Category.COLD

    if _matches(lowered, WARM_KEYWORDS):
        if previous == Category.COLD:
            return Category.WARM
        return previous

    return previous
