"""Base interface for agent-callable memory tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
    "number": (int, float),
    "boolean": (bool,),
}


@dataclass
class ToolResult:
    """Result from tool execution."""

    success: bool
    output: str
    error: str | None = None
    details: dict[str, Any] | None = None

    def to_content(self) -> list[dict[str, str]]:
        """Text content blocks as the host expects them."""
        return [{"type": "text", "text": self.output if self.success else self.error or ""}]


class Tool(ABC):
    """Base interface for all tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name."""
        ...

    @property
    @abstractmethod
    def label(self) -> str:
        """Short human-readable name."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description for LLM."""
        ...

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """JSON Schema for tool parameters."""
        ...

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with given arguments."""
        ...

    def get_schema(self) -> dict[str, Any]:
        """Get tool schema for LLM function calling."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def validate_args(self, args: dict[str, Any]) -> tuple[bool, str | None]:
        """Validate arguments against schema. Returns (valid, error_message)."""
        properties = self.parameters.get("properties", {})

        for field in self.parameters.get("required", []):
            if field not in args:
                return False, f"Missing required argument: {field}"

        for key, value in args.items():
            if key not in properties or value is None:
                continue
            spec = properties[key]
            expected = _JSON_TYPES.get(spec.get("type", ""))
            # bool is an int subclass; never accept it for numbers
            if expected and (
                not isinstance(value, expected)
                or (isinstance(value, bool) and spec["type"] != "boolean")
            ):
                return False, f"Argument '{key}' must be of type {spec['type']}"
            if "enum" in spec and value not in spec["enum"]:
                return False, f"Argument '{key}' must be one of: {', '.join(map(str, spec['enum']))}"

        return True, None
