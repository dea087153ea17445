"""Agent tools for searching, storing, forgetting and profiling memories."""

from typing import Any

from ..client import SupermemoryClient, limit_text
from ..config import PluginConfig
from ..memory.categories import detect_category
from ..memory.models import MEMORY_CATEGORIES, SearchResult
from ..session import SessionContext
from ..validate import validate_content_length
from .base import Tool, ToolResult

STORE_PREVIEW_LENGTH = 80
DEFAULT_SEARCH_LIMIT = 5


def format_search_results(results: list[SearchResult]) -> str:
    """Numbered list of results with their relevance, when known."""
    lines = []
    for i, result in enumerate(results, 1):
        score = f" ({int(result.similarity * 100 + 0.5)}%)" if result.similarity else ""
        lines.append(f"{i}. {result.text}{score}")
    return "\n".join(lines)


class _MemoryTool(Tool):
    """Shared wiring for tools that may target a custom container."""

    def __init__(self, client: SupermemoryClient, config: PluginConfig) -> None:
        self.client = client
        self.config = config

    def _container_property(self) -> dict[str, Any]:
        if not self.config.enable_custom_container_tags or not self.config.custom_containers:
            return {}
        options = "; ".join(f"{c.tag}: {c.description}" for c in self.config.custom_containers)
        description = f"Optional container to use instead of the default. Options: {options}"
        if self.config.custom_container_instructions:
            description += f". {self.config.custom_container_instructions}"
        return {
            "containerTag": {
                "type": "string",
                "description": description,
                "enum": [c.tag for c in self.config.custom_containers],
            }
        }

    def _resolve_container(self, tag: str | None) -> tuple[str | None, str | None]:
        """Returns (container_tag, error)."""
        if not tag:
            return None, None
        if not self.config.enable_custom_container_tags:
            return None, "Custom container tags are disabled"
        container = self.config.custom_container(tag)
        if container is None:
            return None, f"Unknown container: {tag}"
        return container.tag, None


class SearchTool(_MemoryTool):
    """Tool for searching long-term memories."""

    @property
    def name(self) -> str:
        return "supermemory_search"

    @property
    def label(self) -> str:
        return "Memory Search"

    @property
    def description(self) -> str:
        return "Search through long-term memories for relevant information."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search query"},
                "limit": {
                    "type": "integer",
                    "description": f"Max results (default: {DEFAULT_SEARCH_LIMIT})",
                },
                **self._container_property(),
            },
            "required": ["query"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        query = kwargs.get("query", "")
        limit = kwargs.get("limit") or DEFAULT_SEARCH_LIMIT
        if not query:
            return ToolResult(success=False, output="", error="'query' is required")

        container_tag, error = self._resolve_container(kwargs.get("containerTag"))
        if error:
            return ToolResult(success=False, output="", error=error)

        results = await self.client.search(query, limit, container_tag)
        if not results:
            return ToolResult(success=True, output="No relevant memories found.")

        return ToolResult(
            success=True,
            output=f"Found {len(results)} memories:\n\n{format_search_results(results)}",
            details={
                "count": len(results),
                "memories": [
                    {"id": r.id, "content": r.content, "similarity": r.similarity}
                    for r in results
                ],
            },
        )


class StoreTool(_MemoryTool):
    """Tool for saving information to long-term memory."""

    def __init__(
        self, client: SupermemoryClient, config: PluginConfig, session: SessionContext
    ) -> None:
        super().__init__(client, config)
        self.session = session

    @property
    def name(self) -> str:
        return "supermemory_store"

    @property
    def label(self) -> str:
        return "Memory Store"

    @property
    def description(self) -> str:
        return "Save important information to long-term memory."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "text": {"type": "string", "description": "Information to remember"},
                "category": {"type": "string", "enum": MEMORY_CATEGORIES},
                **self._container_property(),
            },
            "required": ["text"],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        text = kwargs.get("text", "")
        valid, reason = validate_content_length(text.strip())
        if not valid:
            return ToolResult(success=False, output="", error=f"Invalid text: {reason}")

        container_tag, error = self._resolve_container(kwargs.get("containerTag"))
        if error:
            return ToolResult(success=False, output="", error=error)

        category = kwargs.get("category") or detect_category(text).value
        await self.client.add_memory(
            text,
            {"type": category, "source": "openclaw_tool"},
            self.session.document_id,
            container_tag,
        )

        preview = limit_text(text, STORE_PREVIEW_LENGTH)
        return ToolResult(success=True, output=f'Stored: "{preview}"', details={"category": category})


class ForgetTool(_MemoryTool):
    """Tool for deleting a memory by id or by description."""

    @property
    def name(self) -> str:
        return "supermemory_forget"

    @property
    def label(self) -> str:
        return "Memory Forget"

    @property
    def description(self) -> str:
        return "Forget/delete a specific memory. Searches for the closest match and removes it."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Describe the memory to forget"},
                "memoryId": {"type": "string", "description": "Direct memory ID to delete"},
            },
            "required": [],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        memory_id = kwargs.get("memoryId")
        query = kwargs.get("query")

        if memory_id:
            await self.client.delete_memory(memory_id)
            return ToolResult(success=True, output="Memory forgotten.")

        if query:
            outcome = await self.client.forget_by_query(query)
            return ToolResult(success=True, output=outcome.message, details={"forgotten": outcome.success})

        return ToolResult(success=True, output="Provide a query or memoryId to forget.")


class ProfileTool(_MemoryTool):
    """Tool for summarizing what is known about the user."""

    @property
    def name(self) -> str:
        return "supermemory_profile"

    @property
    def label(self) -> str:
        return "User Profile"

    @property
    def description(self) -> str:
        return (
            "Get a summary of what is known about the user: "
            "stable preferences and recent context."
        )

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Optional query to focus the profile"},
            },
            "required": [],
        }

    async def execute(self, **kwargs: Any) -> ToolResult:
        profile = await self.client.get_profile(kwargs.get("query"))

        if not profile.static and not profile.dynamic:
            return ToolResult(success=True, output="No profile information available yet.")

        sections = []
        if profile.static:
            lines = "\n".join(f"- {fact}" for fact in profile.static)
            sections.append(f"## User Profile (Persistent)\n{lines}")
        if profile.dynamic:
            lines = "\n".join(f"- {fact}" for fact in profile.dynamic)
            sections.append(f"## Recent Context\n{lines}")

        return ToolResult(
            success=True,
            output="\n\n".join(sections),
            details={"staticCount": len(profile.static), "dynamicCount": len(profile.dynamic)},
        )
