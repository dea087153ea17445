"""Memory categorization, context assembly and lifecycle."""

from .categories import build_document_id, detect_category, sanitize_tag
from .context import deduplicate_memories, format_context, format_relative_time
from .lifecycle import collect_document_ids, wipe_container
from .models import (
    MEMORY_CATEGORIES,
    DocumentPage,
    ForgetOutcome,
    ForgetResult,
    MemoryCategory,
    ProfileResult,
    SearchHit,
    SearchResult,
    WipeResult,
    parse_similarity,
)
from .schedule import needs_recall, should_include_full_profile

__all__ = [
    "MEMORY_CATEGORIES",
    "DocumentPage",
    "ForgetOutcome",
    "ForgetResult",
    "MemoryCategory",
    "ProfileResult",
    "SearchHit",
    "SearchResult",
    "WipeResult",
    "build_document_id",
    "collect_document_ids",
    "deduplicate_memories",
    "detect_category",
    "format_context",
    "format_relative_time",
    "needs_recall",
    "parse_similarity",
    "sanitize_tag",
    "should_include_full_profile",
    "wipe_container",
]
