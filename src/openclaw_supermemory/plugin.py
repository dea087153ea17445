"""Plugin entry point: wires config, client, hooks, tools and commands."""

import logging
from typing import Any

from .client import SupermemoryClient
from .commands import MemoryCommands
from .config import PluginConfig, load_config
from .errors import ValidationError
from .hooks import CaptureHandler, RecallHandler
from .logging import JSONLLogger
from .memory.models import ForgetOutcome, WipeResult
from .session import SessionContext
from .tools import ForgetTool, ProfileTool, SearchTool, StoreTool, ToolRegistry

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "supermemory: not configured - set apiKey or SUPERMEMORY_OPENCLAW_API_KEY"


class SupermemoryPlugin:
    """Long-term memory for an agent, backed by Supermemory.

    Without an API key the plugin is inert: no tools are registered and
    the hooks do nothing.
    """

    def __init__(
        self,
        config: PluginConfig,
        client: SupermemoryClient | None = None,
        json_logger: JSONLLogger | None = None,
    ) -> None:
        self.config = config
        self.session = SessionContext()
        self.registry = ToolRegistry()
        self.client: SupermemoryClient | None = client
        self.recall: RecallHandler | None = None
        self.capture: CaptureHandler | None = None
        self.commands: MemoryCommands | None = None

        if self.client is None and config.api_key:
            self.client = SupermemoryClient(
                config.api_key,
                config.container_tag,
                base_url=config.base_url,
                json_logger=json_logger or JSONLLogger(debug=config.debug),
            )

        if self.client is None:
            logger.info(NOT_CONFIGURED_MESSAGE)
            return

        self.registry.register(SearchTool(self.client, config))
        self.registry.register(StoreTool(self.client, config, self.session))
        self.registry.register(ForgetTool(self.client, config))
        self.registry.register(ProfileTool(self.client, config))
        self.commands = MemoryCommands(self.client, self.session)

        if config.auto_recall:
            self.recall = RecallHandler(self.client, config)
        if config.auto_capture:
            self.capture = CaptureHandler(self.client, config, self.session)

    @classmethod
    def from_config(cls, config: PluginConfig | None = None) -> "SupermemoryPlugin":
        """Build the plugin from a parsed config, or from the host config file."""
        return cls(config if config is not None else load_config())

    @property
    def configured(self) -> bool:
        return self.client is not None

    def _require_client(self) -> SupermemoryClient:
        if self.client is None:
            raise ValidationError(NOT_CONFIGURED_MESSAGE)
        return self.client

    async def before_agent_start(
        self, event: dict[str, Any], ctx: dict[str, Any] | None = None
    ) -> dict[str, str] | None:
        """Host hook run before each agent turn.

        Records the session key from ``ctx`` and returns
        ``{"prependContext": ...}`` when there is something to recall.
        """
        ctx = ctx or {}
        session_key = ctx.get("sessionKey")
        if isinstance(session_key, str):
            self.session.update(session_key)

        if self.recall is None:
            return None
        result = await self.recall(event, ctx.get("containerTag"))
        return result.to_dict() if result else None

    async def agent_end(self, event: dict[str, Any]) -> None:
        """Host hook run after each agent turn."""
        if self.capture is not None:
            await self.capture(event)

    async def forget(self, query: str) -> ForgetOutcome:
        """Forget the memory closest to a description."""
        query = query.strip()
        if not query:
            return ForgetOutcome(success=False, message="Usage: forget <description of the memory>")
        return await self._require_client().forget_by_query(query)

    async def wipe(self, container_tag: str | None = None) -> WipeResult:
        """Delete every memory in a container. Failures propagate."""
        return await self._require_client().wipe_all_memories(container_tag)

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()
