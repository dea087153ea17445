"""Recall hook: inject remembered context before the agent runs."""

import logging
from dataclasses import dataclass
from typing import Any

from ..client import SupermemoryClient
from ..config import PluginConfig
from ..errors import GatewayError
from ..events import RecallEvent, count_user_turns
from ..memory.context import format_context
from ..memory.schedule import needs_recall, should_include_full_profile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecallResult:
    prepend_context: str

    def to_dict(self) -> dict[str, str]:
        return {"prependContext": self.prepend_context}


class RecallHandler:
    """Builds the memory context for each incoming prompt.

    The search section is recalled every turn; the persistent and recent
    profile sections only on turns picked by ``should_include_full_profile``.
    """

    def __init__(self, client: SupermemoryClient, config: PluginConfig) -> None:
        self.client = client
        self.config = config

    async def __call__(
        self, event: dict[str, Any], container_tag: str | None = None
    ) -> RecallResult | None:
        """Handle a before-agent-start event.

        Args:
            event: Host event with ``prompt`` and ``messages``.
            container_tag: Optional container to recall from.

        Returns:
            RecallResult with the context to prepend, or None.
        """
        recall = RecallEvent.from_dict(event)
        if not needs_recall(recall.prompt):
            return None

        turn = count_user_turns(recall.messages)
        include_profile = should_include_full_profile(turn, self.config.profile_frequency)
        logger.debug("recalling for turn %d (profile: %s)", turn, include_profile)

        try:
            profile = await self.client.get_profile(recall.prompt, container_tag)
            context = format_context(
                profile.static if include_profile else [],
                profile.dynamic if include_profile else [],
                profile.search_results,
                self.config.max_recall_results,
            )
        except GatewayError as e:
            logger.error("supermemory: recall failed: %s", e)
            return None
        except Exception:
            logger.exception("supermemory: recall failed unexpectedly")
            return None

        if context is None:
            logger.debug("no profile data to inject")
            return None

        logger.debug("injecting context (%d chars, turn %d)", len(context), turn)
        return RecallResult(prepend_context=context)
