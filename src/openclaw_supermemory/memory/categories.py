"""Category detection and per-session document identity."""

import re

from .models import MemoryCategory

# First match wins, so the order here is significant.
_CATEGORY_PATTERNS: list[tuple[MemoryCategory, re.Pattern[str]]] = [
    (MemoryCategory.PREFERENCE, re.compile(r"prefer|like|love|hate|want", re.IGNORECASE)),
    (MemoryCategory.DECISION, re.compile(r"decided|will use|going with", re.IGNORECASE)),
    (MemoryCategory.ENTITY, re.compile(r"\+\d{10,}|@[\w.-]+\.\w+|is called", re.IGNORECASE)),
    (MemoryCategory.FACT, re.compile(r"is|are|has|have", re.IGNORECASE)),
]

_NON_WORD = re.compile(r"[^a-zA-Z0-9_]")
_UNDERSCORE_RUN = re.compile(r"_+")


def detect_category(text: str) -> MemoryCategory:
    """Classify free text into a memory category.

    Args:
        text: The text to classify.

    Returns:
        The category of the first matching rule, or OTHER.
    """
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(text):
            return category
    return MemoryCategory.OTHER


def sanitize_tag(raw: str) -> str:
    """Replace characters outside ``[A-Za-z0-9_]`` with ``_``, collapse runs, trim the ends."""
    cleaned = _UNDERSCORE_RUN.sub("_", _NON_WORD.sub("_", raw))
    return cleaned.strip("_")


def build_document_id(session_key: str) -> str:
    """Derive the storage document id for a conversation.

    Keys that differ only in punctuation map to the same id
    (``"abc-123"`` and ``"abc_123"`` both give ``session_abc_123``).
    """
    return f"session_{sanitize_tag(session_key)}"
