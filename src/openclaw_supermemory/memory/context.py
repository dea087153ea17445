"""Assembly of recalled memories into a bounded context block."""

from datetime import datetime, timezone

from .models import SearchHit

CONTEXT_TAG = "supermemory-context"

CONTEXT_INTRO = (
    "The following is recalled context about the user. "
    "Reference it only when relevant to the conversation."
)
CONTEXT_DISCLAIMER = (
    "Use these memories naturally when relevant, including indirect connections, "
    "but don't force them into every response or make assumptions beyond what's stated."
)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _parse_timestamp(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_relative_time(iso_timestamp: str, now: datetime | None = None) -> str:
    """Describe how long ago a timestamp was.

    Args:
        iso_timestamp: ISO-8601 timestamp. Naive values are read as UTC.
        now: Reference time, defaults to the current UTC time.

    Returns:
        A short label such as "just now", "12 mins ago", "3 hrs ago",
        "2 d ago", "5 Mar" or "5 Mar, 2023". Empty if the timestamp
        cannot be parsed.
    """
    if not isinstance(iso_timestamp, str):
        return ""
    try:
        dt = _parse_timestamp(iso_timestamp)
    except ValueError:
        return ""

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = (now - dt).total_seconds()
    minutes = seconds / 60
    hours = seconds / 3600
    days = seconds / 86400

    if minutes < 30:
        return "just now"
    if minutes < 60:
        return f"{int(minutes)} mins ago"
    if hours < 24:
        return f"{int(hours)} hrs ago"
    if days < 7:
        return f"{int(days)} d ago"

    label = f"{dt.day} {_MONTHS[dt.month - 1]}"
    if dt.year != now.year:
        label += f", {dt.year}"
    return label


def deduplicate_memories(
    static_facts: list[str],
    dynamic_facts: list[str],
    search_results: list[SearchHit],
) -> tuple[list[str], list[str], list[SearchHit]]:
    """Drop repeated memories across the three sources.

    One seen-set is shared by all sources, consumed in priority order
    (static, dynamic, search), so a memory is kept only where it first
    appears. Search hits without text are dropped.
    """
    seen: set[str] = set()

    unique_static = []
    for fact in static_facts:
        if fact not in seen:
            seen.add(fact)
            unique_static.append(fact)

    unique_dynamic = []
    for fact in dynamic_facts:
        if fact not in seen:
            seen.add(fact)
            unique_dynamic.append(fact)

    unique_search = []
    for hit in search_results:
        if hit.memory and hit.memory not in seen:
            seen.add(hit.memory)
            unique_search.append(hit)

    return unique_static, unique_dynamic, unique_search


def _similarity_percent(similarity: float) -> int:
    # Half-up rounding, so 0.125 shows as 13%.
    return int(similarity * 100 + 0.5)


def _format_hit(hit: SearchHit, now: datetime | None) -> str:
    time_label = format_relative_time(hit.updated_at, now) if hit.updated_at else ""
    prefix = f"[{time_label}] " if time_label else ""
    pct = f" [{_similarity_percent(hit.similarity)}%]" if hit.similarity is not None else ""
    return f"- {prefix}{hit.memory}{pct}"


def format_context(
    static_facts: list[str],
    dynamic_facts: list[str],
    search_results: list[SearchHit],
    max_results: int,
    now: datetime | None = None,
) -> str | None:
    """Build the context block injected ahead of the agent's prompt.

    Each source is deduplicated first and then cut to ``max_results``.

    Args:
        static_facts: Persistent profile facts.
        dynamic_facts: Recent profile facts.
        search_results: Hits relevant to the current prompt.
        max_results: Cap applied to each section.
        now: Reference time for relative timestamps.

    Returns:
        The wrapped context block, or None when there is nothing to inject.
    """
    statics, dynamics, hits = deduplicate_memories(static_facts, dynamic_facts, search_results)
    statics = statics[:max_results]
    dynamics = dynamics[:max_results]
    hits = hits[:max_results]

    if not statics and not dynamics and not hits:
        return None

    sections = []
    if statics:
        lines = "\n".join(f"- {fact}" for fact in statics)
        sections.append(f"## User Profile (Persistent)\n{lines}")
    if dynamics:
        lines = "\n".join(f"- {fact}" for fact in dynamics)
        sections.append(f"## Recent Context\n{lines}")
    if hits:
        lines = "\n".join(_format_hit(hit, now) for hit in hits)
        sections.append(f"## Relevant Memories (with relevance %)\n{lines}")

    body = "\n\n".join(sections)
    return f"<{CONTEXT_TAG}>\n{CONTEXT_INTRO}\n\n{body}\n\n{CONTEXT_DISCLAIMER}\n</{CONTEXT_TAG}>"
