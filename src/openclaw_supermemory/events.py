"""Typed views of the host runtime's conversation events.

The host hands over loosely shaped dicts. They are validated here, once,
so the recall and capture hooks only ever see ``Message`` objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class OtherBlock:
    """A non-text content block (image, tool call, ...), kept only by type."""

    type: str


ContentBlock = TextBlock | OtherBlock


@dataclass(frozen=True)
class Message:
    role: Role
    blocks: list[ContentBlock] = field(default_factory=list)

    @property
    def text_parts(self) -> list[str]:
        return [b.text for b in self.blocks if isinstance(b, TextBlock)]


def _parse_blocks(content: Any) -> list[ContentBlock]:
    if isinstance(content, str):
        return [TextBlock(content)]
    if not isinstance(content, list):
        return []

    blocks: list[ContentBlock] = []
    for block in content:
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if block_type == "text":
            if isinstance(block.get("text"), str):
                blocks.append(TextBlock(block["text"]))
        elif isinstance(block_type, str):
            blocks.append(OtherBlock(block_type))
    return blocks


def parse_message(raw: Any) -> Message | None:
    """Parse one host message, or None if it is not a user/assistant message."""
    if not isinstance(raw, dict):
        return None
    try:
        role = Role(raw.get("role"))
    except ValueError:
        return None
    return Message(role=role, blocks=_parse_blocks(raw.get("content")))


def parse_messages(raw: Any) -> list[Message]:
    """Parse a host message list, skipping anything that is not a user/assistant message."""
    if not isinstance(raw, list):
        return []
    messages = []
    for item in raw:
        message = parse_message(item)
        if message is not None:
            messages.append(message)
    return messages


def count_user_turns(messages: list[Message]) -> int:
    return sum(1 for m in messages if m.role is Role.USER)


def last_turn(messages: list[Message]) -> list[Message]:
    """Messages from the last user message onward (all of them if there is none)."""
    for idx in range(len(messages) - 1, -1, -1):
        if messages[idx].role is Role.USER:
            return messages[idx:]
    return messages


@dataclass(frozen=True)
class RecallEvent:
    prompt: str
    messages: list[Message]

    @classmethod
    def from_dict(cls, event: dict[str, Any]) -> "RecallEvent":
        prompt = event.get("prompt")
        return cls(
            prompt=prompt if isinstance(prompt, str) else "",
            messages=parse_messages(event.get("messages")),
        )


@dataclass(frozen=True)
class CaptureEvent:
    success: bool
    messages: list[Message]

    @classmethod
    def from_dict(cls, event: dict[str, Any]) -> "CaptureEvent":
        return cls(
            success=bool(event.get("success")),
            messages=parse_messages(event.get("messages")),
        )
