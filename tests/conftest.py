"""Shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from openclaw_supermemory.client import SupermemoryClient
from openclaw_supermemory.config import PluginConfig
from openclaw_supermemory.logging import JSONLLogger
from openclaw_supermemory.memory.models import ProfileResult, WipeResult
from openclaw_supermemory.session import SessionContext

TEST_API_KEY = "sm_test_0123456789abcdef"


@pytest.fixture
def config() -> PluginConfig:
    return PluginConfig(api_key=TEST_API_KEY, container_tag="test_container")


@pytest.fixture
def session() -> SessionContext:
    return SessionContext()


@pytest.fixture
def json_logger(tmp_path: Path) -> JSONLLogger:
    return JSONLLogger(log_dir=tmp_path / "logs", debug=True)


@pytest.fixture
def mock_client() -> Mock:
    """A SupermemoryClient stand-in with async methods."""
    client = Mock(spec=SupermemoryClient)
    client.container_tag = "test_container"
    client.add_memory = AsyncMock(return_value="doc_1")
    client.search = AsyncMock(return_value=[])
    client.get_profile = AsyncMock(return_value=ProfileResult())
    client.delete_memory = AsyncMock()
    client.forget_by_query = AsyncMock()
    client.wipe_all_memories = AsyncMock(return_value=WipeResult(deleted_count=0))
    client.close = AsyncMock()
    return client
