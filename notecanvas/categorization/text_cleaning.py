"""Small text helpers shared by the categorization and dictation paths."""

import re

GROCERY_CATEGORIES = ("grocery_item", "shopping_item")

_VERB = r"(?:buy|get|purchase|pick up|grab)"
_LEADING_VERB = re.compile(rf"^{_VERB}\s+", re.IGNORECASE)
_REMINDER_PHRASE = re.compile(
    rf"(?:need to|don't forget to|remember to|we should|should|have to)\s+{_VERB}\s+",
    re.IGNORECASE,
)
_ADD_TO_LIST = re.compile(r"^add\s+(.+)\s+to\s+(?:the\s+)?(?:grocery|shopping)(?:\s+list)?$", re.IGNORECASE)
_SENTENCE_BREAK = re.compile(r"[.!?]")


def clean_grocery_item_text(text: str) -> str:
    """Strip shopping verbs ("buy milk" -> "Milk") and capitalize the first letter."""
    cleaned = _LEADING_VERB.sub("", text, count=1)
    cleaned = _REMINDER_PHRASE.sub("", cleaned, count=1)
    cleaned = _ADD_TO_LIST.sub(r"\1", cleaned)

    if cleaned and cleaned[0] != cleaned[0].upper():
        cleaned = cleaned[0].upper() + cleaned[1:]
    return cleaned


def derive_title(segment: str, max_length: int = 30, default: str = "New Note") -> str:
    """Title from the first sentence of a segment, truncated to ``max_length``."""
    title = _SENTENCE_BREAK.split(segment, maxsplit=1)[0][:max_length].strip()
    return title or default
