"""Data models for memories returned by the Supermemory backend."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MemoryCategory(str, Enum):
    """Category attached to every stored memory."""

    PREFERENCE = "preference"
    FACT = "fact"
    DECISION = "decision"
    ENTITY = "entity"
    OTHER = "other"


MEMORY_CATEGORIES = [c.value for c in MemoryCategory]


def parse_similarity(value: Any) -> float | None:
    """A backend relevance score as a float, or None if it is not a number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


@dataclass(frozen=True)
class SearchHit:
    """A memory matched by the profile endpoint's similarity query.

    Attributes:
        memory: The memory text. Empty when the backend omitted it.
        similarity: Relevance score in [0, 1], if reported.
        updated_at: ISO-8601 timestamp of the last update, if reported.
        extra: Any other fields the backend returned.
    """

    memory: str = ""
    similarity: float | None = None
    updated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SearchHit":
        known = {"memory", "similarity", "updatedAt"}
        memory = data.get("memory")
        updated_at = data.get("updatedAt")
        return cls(
            memory=memory if isinstance(memory, str) else "",
            similarity=parse_similarity(data.get("similarity")),
            updated_at=updated_at if isinstance(updated_at, str) and updated_at else None,
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class SearchResult:
    """A memory returned by a direct search."""

    id: str
    content: str
    memory: str | None = None
    similarity: float | None = None
    metadata: dict[str, Any] | None = None

    @property
    def text(self) -> str:
        return self.content or self.memory or ""


@dataclass(frozen=True)
class ProfileResult:
    """The backend's profile of a user plus query-relevant hits."""

    static: list[str] = field(default_factory=list)
    dynamic: list[str] = field(default_factory=list)
    search_results: list[SearchHit] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentPage:
    """One page of a container's document listing."""

    ids: list[str]
    total_pages: int | None = None


@dataclass(frozen=True)
class ForgetResult:
    id: str
    forgotten: bool


@dataclass(frozen=True)
class ForgetOutcome:
    """User-facing outcome of a forget-by-query request."""

    success: bool
    message: str


@dataclass(frozen=True)
class WipeResult:
    deleted_count: int
