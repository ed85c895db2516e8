# Copyright 2024 Heinrich Krupp
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Streamable-HTTP transport for the Mem0 MCP server.

Serves the MCP endpoint at /mcp plus a /health probe, using FastAPI and
uvicorn. All HTTP sessions share the tools of the one server instance they
were built from; hosts needing per-session configuration build one instance
per session with create_server().
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import uvicorn
from fastapi import FastAPI
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from pydantic import BaseModel
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from ..config import SERVER_NAME, SERVER_VERSION

if TYPE_CHECKING:
    from ..server_impl import Mem0MemoryServer

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"


class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    service: str
    version: str
    timestamp: str
    uptime_seconds: float


class StreamableHTTPEndpoint:
    """ASGI app forwarding MCP requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_http_app(memory_server: 'Mem0MemoryServer') -> FastAPI:
    """Build the FastAPI application exposing one server instance over HTTP."""
    session_manager = StreamableHTTPSessionManager(app=memory_server.server)
    started_at = time.time()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with session_manager.run():
            logger.info(f"Memory MCP Server accepting streamable HTTP sessions at {MCP_PATH}")
            try:
                yield
            finally:
                await memory_server.close()
                logger.info("HTTP transport stopped")

    app = FastAPI(title=SERVER_NAME, version=SERVER_VERSION, lifespan=lifespan)

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        return HealthResponse(
            status="healthy",
            service=SERVER_NAME,
            version=SERVER_VERSION,
            timestamp=datetime.now(timezone.utc).isoformat(),
            uptime_seconds=time.time() - started_at,
        )

    app.router.routes.append(
        Route(MCP_PATH, endpoint=StreamableHTTPEndpoint(session_manager), methods=["GET", "POST", "DELETE"])
    )
    return app


async def serve_http(memory_server: 'Mem0MemoryServer', host: str, port: int) -> None:
    """Run the HTTP transport until shutdown."""
    app = create_http_app(memory_server)
    log_level = logging.getLevelName(logging.getLogger().getEffectiveLevel()).lower()
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level)
    logger.info(f"Starting Mem0 MCP HTTP server on {host}:{port}")
    await uvicorn.Server(config).serve()
