"""Supermemory long-term memory plugin for OpenClaw agents."""

from .client import SupermemoryClient
from .config import CaptureMode, PluginConfig, load_config, parse_config
from .errors import ConfigError, GatewayError, SupermemoryError, ValidationError, WipeError
from .plugin import SupermemoryPlugin

__version__ = "0.1.0"

__all__ = [
    "CaptureMode",
    "ConfigError",
    "GatewayError",
    "PluginConfig",
    "SupermemoryClient",
    "SupermemoryError",
    "SupermemoryPlugin",
    "ValidationError",
    "WipeError",
    "load_config",
    "parse_config",
]
