"""
Tests for the Mem0 REST client against a local aiohttp server.
"""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer as Mem0TestServer

from mem0_mcp.backend.base import BackendError
from mem0_mcp.backend.mem0_client import Mem0Client
from mem0_mcp.config import EffectiveConfig


@pytest_asyncio.fixture
async def mem0_api():
    """Minimal stand-in for the Mem0 HTTP API; replies are set per test."""
    state = {
        "requests": [],
        "add_reply": web.json_response([{"id": "1", "event": "ADD"}]),
        "search_reply": web.json_response([]),
    }

    async def record(request):
        state["requests"].append({
            "path": request.path,
            "authorization": request.headers.get("Authorization"),
            "json": await request.json(),
        })

    async def add(request):
        await record(request)
        return state["add_reply"]

    async def search(request):
        await record(request)
        return state["search_reply"]

    app = web.Application()
    app.router.add_post("/v1/memories/", add)
    app.router.add_post("/v1/memories/search/", search)

    server = Mem0TestServer(app)
    await server.start_server()
    state["base_url"] = str(server.make_url(""))
    yield state
    await server.close()


@pytest_asyncio.fixture
async def client(mem0_api):
    client = Mem0Client(api_key="secret", base_url=mem0_api["base_url"], timeout=5)
    yield client
    await client.close()


@pytest.mark.asyncio
async def test_add_posts_messages_and_user(client, mem0_api):
    messages = [
        {"role": "system", "content": "Memory storage system"},
        {"role": "user", "content": "User prefers dark mode"},
    ]

    await client.add(messages, user_id="alice")

    request = mem0_api["requests"][0]
    assert request["path"] == "/v1/memories/"
    assert request["authorization"] == "Token secret"
    assert request["json"] == {"messages": messages, "user_id": "alice"}


@pytest.mark.asyncio
async def test_search_returns_list(client, mem0_api):
    mem0_api["search_reply"] = web.json_response([
        {"id": "1", "memory": "User prefers dark mode", "score": 0.92},
    ])

    results = await client.search("theme preference", user_id="alice")

    assert results == [{"id": "1", "memory": "User prefers dark mode", "score": 0.92}]
    assert mem0_api["requests"][0]["json"] == {"query": "theme preference", "user_id": "alice"}


@pytest.mark.asyncio
async def test_search_unwraps_results_envelope(client, mem0_api):
    mem0_api["search_reply"] = web.json_response({"results": [{"memory": "m", "score": 0.5}]})

    assert await client.search("q", user_id="u") == [{"memory": "m", "score": 0.5}]


@pytest.mark.asyncio
async def test_search_rejects_unexpected_shape(client, mem0_api):
    mem0_api["search_reply"] = web.json_response("not a list")

    with pytest.raises(BackendError):
        await client.search("q", user_id="u")


@pytest.mark.asyncio
async def test_authentication_failure_carries_remote_detail(client, mem0_api):
    mem0_api["add_reply"] = web.json_response({"detail": "Invalid API key"}, status=401)

    with pytest.raises(BackendError) as exc_info:
        await client.add([{"role": "user", "content": "x"}], user_id="u")

    assert exc_info.value.message == "Invalid API key"
    assert exc_info.value.status == 401


@pytest.mark.asyncio
async def test_error_without_json_body_uses_text_or_status(client, mem0_api):
    mem0_api["search_reply"] = web.Response(status=502, text="Bad Gateway")

    with pytest.raises(BackendError, match="Bad Gateway"):
        await client.search("q", user_id="u")

    mem0_api["search_reply"] = web.Response(status=500)

    with pytest.raises(BackendError, match="HTTP 500"):
        await client.search("q", user_id="u")


@pytest.mark.asyncio
async def test_invalid_json_reply_raises_backend_error(client, mem0_api):
    mem0_api["search_reply"] = web.Response(status=200, text="{not json", content_type="application/json")

    with pytest.raises(BackendError, match="Invalid JSON"):
        await client.search("q", user_id="u")


@pytest.mark.asyncio
async def test_missing_api_key_does_not_fail_construction(mem0_api):
    client = Mem0Client(api_key="", base_url=mem0_api["base_url"])
    try:
        assert client.session is None
        await client.add([{"role": "user", "content": "x"}], user_id="u")
        assert mem0_api["requests"][0]["authorization"].strip() == "Token"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_connection_error_wrapped():
    client = Mem0Client(api_key="k", base_url="http://127.0.0.1:1", timeout=2)
    try:
        with pytest.raises(BackendError, match="search"):
            await client.search("q", user_id="u")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_close_is_idempotent(client, mem0_api):
    await client.search("q", user_id="u")

    await client.close()
    await client.close()

    assert client.session is None


def test_from_config():
    config = EffectiveConfig(api_key="k", default_user_id="u", api_host="http://example.test/", timeout=3)

    client = Mem0Client.from_config(config)

    assert client.api_key == "k"
    assert client.base_url == "http://example.test"
    assert client.timeout.total == 3
