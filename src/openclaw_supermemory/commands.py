"""Chat commands: /remember and /recall."""

import logging
from dataclasses import dataclass

from .client import SupermemoryClient, limit_text
from .errors import GatewayError
from .memory.categories import detect_category
from .session import SessionContext
from .tools.memory import format_search_results

logger = logging.getLogger(__name__)

REMEMBER_PREVIEW_LENGTH = 60
RECALL_LIMIT = 5


@dataclass(frozen=True)
class CommandReply:
    text: str


class MemoryCommands:
    """Handlers for the memory chat commands."""

    def __init__(self, client: SupermemoryClient, session: SessionContext) -> None:
        self.client = client
        self.session = session

    async def remember(self, args: str | None) -> CommandReply:
        """Save the command's text as a memory."""
        text = (args or "").strip()
        if not text:
            return CommandReply("Usage: /remember <text to remember>")

        logger.debug('/remember command: "%s"', text[:50])
        try:
            category = detect_category(text)
            await self.client.add_memory(
                text,
                {"type": category.value, "source": "openclaw_command"},
                self.session.document_id,
            )
        except GatewayError as e:
            logger.error("supermemory: /remember failed: %s", e)
            return CommandReply("Failed to save memory. Check logs for details.")

        return CommandReply(f'Remembered: "{limit_text(text, REMEMBER_PREVIEW_LENGTH)}"')

    async def recall(self, args: str | None) -> CommandReply:
        """Search memories for the command's text."""
        query = (args or "").strip()
        if not query:
            return CommandReply("Usage: /recall <search query>")

        logger.debug('/recall command: "%s"', query)
        try:
            results = await self.client.search(query, RECALL_LIMIT)
        except GatewayError as e:
            logger.error("supermemory: /recall failed: %s", e)
            return CommandReply("Failed to search memories. Check logs for details.")

        if not results:
            return CommandReply(f'No memories found for: "{query}"')
        return CommandReply(f"Found {len(results)} memories:\n\n{format_search_results(results)}")
