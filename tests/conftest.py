import os
import sys
from unittest.mock import AsyncMock

import pytest

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

from mem0_mcp.backend.base import MemoryBackendClient
from mem0_mcp.config import EffectiveConfig
from mem0_mcp.server_impl import Mem0MemoryServer


@pytest.fixture
def mock_client():
    """Backend client double; add succeeds and search returns no matches by default."""
    client = AsyncMock(spec=MemoryBackendClient)
    client.add.return_value = None
    client.search.return_value = []
    return client


@pytest.fixture
def effective_config():
    return EffectiveConfig(api_key="test-key", default_user_id="configured-user")


@pytest.fixture
def memory_server(effective_config, mock_client):
    """Server instance wired to the mock backend."""
    return Mem0MemoryServer(effective_config, client=mock_client)
