"""
End-to-end tests over an in-memory MCP client session.

These go through the real protocol layer (list_tools / call_tool) with the
backend replaced by an AsyncMock.
"""

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from mem0_mcp.backend.base import BackendError
from mem0_mcp.server_impl import create_server

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_list_tools_over_protocol(memory_server):
    async with create_connected_server_and_client_session(memory_server.server) as client:
        listing = await client.list_tools()

    tools = {tool.name: tool for tool in listing.tools}
    assert list(tools) == ["add-memory", "search-memories"]
    assert tools["add-memory"].inputSchema["required"] == ["content"]
    assert "remember" in tools["add-memory"].description


@pytest.mark.asyncio
async def test_add_then_search_scenario(mock_client):
    server = create_server({"mem0ApiKey": "k"}, client=mock_client)
    mock_client.search.return_value = [{"memory": "User prefers dark mode", "score": 0.92}]

    async with create_connected_server_and_client_session(server.server) as client:
        added = await client.call_tool("add-memory", {"content": "User prefers dark mode"})
        found = await client.call_tool("search-memories", {"query": "theme preference"})

    assert not added.isError
    assert added.content[0].text == "Memory added successfully"
    assert mock_client.add.await_args.kwargs["user_id"] == server.config.default_user_id
    assert mock_client.add.await_args.args[0][1]["content"] == "User prefers dark mode"

    assert not found.isError
    assert found.content[0].text == "Memory: User prefers dark mode\nRelevance: 0.92\n---"


@pytest.mark.asyncio
async def test_backend_failure_over_protocol(memory_server, mock_client):
    mock_client.add.side_effect = BackendError("Invalid API key", status=401)

    async with create_connected_server_and_client_session(memory_server.server) as client:
        failed = await client.call_tool("add-memory", {"content": "x"})
        mock_client.add.side_effect = None
        recovered = await client.call_tool("add-memory", {"content": "x"})

    assert failed.isError is True
    assert "Invalid API key" in failed.content[0].text
    assert not recovered.isError


@pytest.mark.asyncio
async def test_invalid_arguments_never_reach_backend(memory_server, mock_client):
    async with create_connected_server_and_client_session(memory_server.server) as client:
        result = await client.call_tool("add-memory", {"content": ""})

    assert result.isError is True
    assert result.content[0].type == "text"
    mock_client.add.assert_not_awaited()


def test_sessions_do_not_share_configuration(mock_client, monkeypatch):
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)

    first = create_server({"defaultUserId": "alice", "mem0ApiKey": "a"}, client=mock_client)
    second = create_server({"defaultUserId": "bob"}, client=mock_client)

    assert first.config.default_user_id == "alice"
    assert second.config.default_user_id == "bob"
    assert first.config.api_key == "a"
    assert first.dispatcher is not second.dispatcher
    assert first.server is not second.server
