"""Capture hook: store each finished turn in memory."""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from ..client import SupermemoryClient
from ..config import CaptureMode, PluginConfig
from ..errors import GatewayError
from ..events import CaptureEvent, Message, last_turn
from ..memory.context import CONTEXT_TAG
from ..session import SessionContext

logger = logging.getLogger(__name__)

CAPTURE_SOURCE = "openclaw"
MIN_CAPTURE_LENGTH = 10

_INJECTED_CONTEXT = re.compile(rf"<{CONTEXT_TAG}>[\s\S]*?</{CONTEXT_TAG}>\s*")


def strip_injected_context(text: str) -> str:
    """Remove context blocks this plugin injected earlier."""
    return _INJECTED_CONTEXT.sub("", text).strip()


def format_message(message: Message) -> str | None:
    parts = message.text_parts
    if not parts:
        return None
    role = message.role.value
    body = "\n".join(parts)
    return f"[role: {role}]\n{body}\n[{role}:end]"


def collect_texts(messages: list[Message], mode: CaptureMode) -> list[str]:
    """Render the last turn into the texts to store.

    In ALL mode injected context is stripped and short leftovers dropped.
    """
    texts = [t for t in (format_message(m) for m in last_turn(messages)) if t]
    if mode is CaptureMode.EVERYTHING:
        return texts
    cleaned = (strip_injected_context(t) for t in texts)
    return [t for t in cleaned if len(t) >= MIN_CAPTURE_LENGTH]


class CaptureHandler:
    """Writes the latest turn to the session's memory document."""

    def __init__(
        self,
        client: SupermemoryClient,
        config: PluginConfig,
        session: SessionContext,
    ) -> None:
        self.client = client
        self.config = config
        self.session = session

    async def __call__(self, event: dict[str, Any]) -> None:
        capture = CaptureEvent.from_dict(event)
        if not capture.success or not capture.messages:
            return

        texts = collect_texts(capture.messages, self.config.capture_mode)
        if not texts:
            return

        content = "\n\n".join(texts)
        custom_id = self.session.document_id
        logger.debug(
            "capturing %d texts (%d chars) -> %s",
            len(texts),
            len(content),
            custom_id or "no-session-key",
        )

        try:
            await self.client.add_memory(
                content,
                {"source": CAPTURE_SOURCE, "timestamp": datetime.now(timezone.utc).isoformat()},
                custom_id,
            )
        except GatewayError as e:
            logger.error("supermemory: capture failed: %s", e)
        except Exception:
            logger.exception("supermemory: capture failed unexpectedly")
