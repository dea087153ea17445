"""Plugin configuration loader.

Reads the plugin's entry from ``~/.openclaw/openclaw.json``:

```json
{
  "plugins": {
    "entries": {
      "openclaw-supermemory": {
        "enabled": true,
        "config": {
          "apiKey": "${SUPERMEMORY_OPENCLAW_API_KEY}",
          "containerTag": "my_laptop",
          "maxRecallResults": 10,
          "profileFrequency": 50,
          "captureMode": "all"
        }
      }
    }
  }
}
```
"""

import json
import logging
import os
import re
import socket
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError
from .memory.categories import sanitize_tag

logger = logging.getLogger(__name__)

PLUGIN_ID = "openclaw-supermemory"
DEFAULT_CONFIG_PATH = Path.home() / ".openclaw" / "openclaw.json"
DEFAULT_BASE_URL = "https://api.supermemory.ai"
API_KEY_ENV = "SUPERMEMORY_OPENCLAW_API_KEY"

ALLOWED_KEYS = frozenset(
    {
        "apiKey",
        "baseUrl",
        "containerTag",
        "autoRecall",
        "autoCapture",
        "maxRecallResults",
        "profileFrequency",
        "captureMode",
        "debug",
        "enableCustomContainerTags",
        "customContainers",
        "customContainerInstructions",
    }
)

_ENV_REF = re.compile(r"\$\{([^}]+)\}")


class CaptureMode(Enum):
    """How much of a finished turn is written to memory.

    ALL strips previously injected context and drops fragments;
    EVERYTHING stores the turn as it is.
    """

    ALL = "all"
    EVERYTHING = "everything"


@dataclass(frozen=True)
class CustomContainer:
    tag: str
    description: str


def default_container_tag() -> str:
    return sanitize_tag(f"openclaw_{socket.gethostname()}")


@dataclass
class PluginConfig:
    """Resolved plugin settings. Every field has a value.

    Attributes:
        api_key: Supermemory API key; None leaves the plugin unconfigured.
        container_tag: Default container for all memory operations.
        auto_recall: Inject recalled memories before each agent run.
        auto_capture: Store each finished turn.
        max_recall_results: Cap per section of the recalled context.
        profile_frequency: Send the full profile every N user turns.
        capture_mode: See CaptureMode.
        debug: Trace backend requests and responses.
        enable_custom_container_tags: Let tools target custom containers.
        custom_containers: Containers tools may target.
        custom_container_instructions: Guidance on picking a container.
        base_url: Backend API root.
    """

    api_key: str | None = None
    container_tag: str = field(default_factory=default_container_tag)
    auto_recall: bool = True
    auto_capture: bool = True
    max_recall_results: int = 10
    profile_frequency: int = 50
    capture_mode: CaptureMode = CaptureMode.ALL
    debug: bool = False
    enable_custom_container_tags: bool = False
    custom_containers: list[CustomContainer] = field(default_factory=list)
    custom_container_instructions: str = ""
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        if self.max_recall_results < 1:
            raise ConfigError("maxRecallResults must be at least 1")
        if self.profile_frequency < 1:
            raise ConfigError("profileFrequency must be at least 1")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def custom_container(self, tag: str) -> CustomContainer | None:
        """Find a configured custom container by (sanitized) tag."""
        wanted = sanitize_tag(tag)
        for container in self.custom_containers:
            if container.tag == wanted:
                return container
        return None


def resolve_env_vars(value: str) -> str:
    """Expand ``${VAR}`` references.

    Raises:
        ConfigError: A referenced variable is unset or empty.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        env_value = os.environ.get(name)
        if not env_value:
            raise ConfigError(f"Environment variable {name} is not set")
        return env_value

    return _ENV_REF.sub(_replace, value)


def _resolve_api_key(raw: Any) -> str | None:
    if isinstance(raw, str) and raw:
        try:
            return resolve_env_vars(raw)
        except ConfigError as e:
            logger.warning("apiKey not resolved: %s", e)
            return None
    return os.environ.get(API_KEY_ENV) or None


def _bool(cfg: dict[str, Any], key: str, default: bool) -> bool:
    value = cfg.get(key)
    return value if isinstance(value, bool) else default


def _int(cfg: dict[str, Any], key: str, default: int) -> int:
    value = cfg.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


def _parse_custom_containers(raw: Any) -> list[CustomContainer]:
    containers: list[CustomContainer] = []
    if not isinstance(raw, list):
        return containers
    for item in raw:
        if (
            isinstance(item, dict)
            and isinstance(item.get("tag"), str)
            and isinstance(item.get("description"), str)
        ):
            containers.append(
                CustomContainer(tag=sanitize_tag(item["tag"]), description=item["description"])
            )
        else:
            logger.warning("Skipping invalid custom container: %r", item)
    return containers


def parse_config(raw: Any) -> PluginConfig:
    """Build a PluginConfig from the host's plugin config mapping.

    Args:
        raw: The ``config`` object of the plugin entry. Anything that is
            not a mapping is treated as empty.

    Returns:
        The resolved configuration.

    Raises:
        ConfigError: Unknown keys or out-of-range values.
    """
    cfg: dict[str, Any] = raw if isinstance(raw, dict) else {}

    unknown = sorted(set(cfg) - ALLOWED_KEYS)
    if unknown:
        raise ConfigError(f"supermemory config has unknown keys: {', '.join(unknown)}")

    container_tag = cfg.get("containerTag")
    instructions = cfg.get("customContainerInstructions")
    base_url = cfg.get("baseUrl")

    return PluginConfig(
        api_key=_resolve_api_key(cfg.get("apiKey")),
        container_tag=(
            sanitize_tag(container_tag)
            if isinstance(container_tag, str) and container_tag
            else default_container_tag()
        ),
        auto_recall=_bool(cfg, "autoRecall", True),
        auto_capture=_bool(cfg, "autoCapture", True),
        max_recall_results=_int(cfg, "maxRecallResults", 10),
        profile_frequency=_int(cfg, "profileFrequency", 50),
        capture_mode=(
            CaptureMode.EVERYTHING if cfg.get("captureMode") == "everything" else CaptureMode.ALL
        ),
        debug=_bool(cfg, "debug", False),
        enable_custom_container_tags=_bool(cfg, "enableCustomContainerTags", False),
        custom_containers=_parse_custom_containers(cfg.get("customContainers")),
        custom_container_instructions=instructions if isinstance(instructions, str) else "",
        base_url=base_url if isinstance(base_url, str) and base_url else DEFAULT_BASE_URL,
    )


def load_config(config_path: Path | None = None) -> PluginConfig:
    """Load the plugin config from the host's JSON config file.

    A ``.env`` file found from the working directory is loaded first so
    ``${VAR}`` references and the API key fallback can use it.

    Args:
        config_path: Path to the host config. Defaults to
            ``~/.openclaw/openclaw.json``.

    Returns:
        PluginConfig, with defaults if the file is missing or unreadable.
    """
    load_dotenv(find_dotenv(usecwd=True))

    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return parse_config({})

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to read config from %s: %s", path, e)
        return parse_config({})

    node: Any = data
    for key in ("plugins", "entries", PLUGIN_ID, "config"):
        node = node.get(key) if isinstance(node, dict) else None
    return parse_config(node)
