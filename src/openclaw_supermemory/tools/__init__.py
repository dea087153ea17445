"""Tool registry and memory tool implementations."""

from .base import Tool, ToolResult
from .memory import ForgetTool, ProfileTool, SearchTool, StoreTool, format_search_results
from .registry import ToolRegistry

__all__ = [
    "ForgetTool",
    "ProfileTool",
    "SearchTool",
    "StoreTool",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "format_search_results",
]
