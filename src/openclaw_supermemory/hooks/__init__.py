"""Conversation hooks for automatic recall and capture."""

from .capture import CaptureHandler
from .recall import RecallHandler, RecallResult

__all__ = ["CaptureHandler", "RecallHandler", "RecallResult"]
