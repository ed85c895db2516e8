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
MCP server shell for the Mem0 memory tools.

One Mem0MemoryServer owns its resolved configuration, backend client, tool
registry and dispatcher, and is bound to exactly one transport. Hosting
layers that open one session per connection call create_server() once per
session, so configuration never leaks between independently configured
sessions.
"""

import asyncio
import logging
import signal
import sys
import traceback
from typing import Any, Dict, List, Optional, Union

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from dotenv import load_dotenv

from .backend.base import MemoryBackendClient
from .backend.mem0_client import Mem0Client
from .config import (
    API_KEY_ENV,
    HTTP_HOST,
    HTTP_PORT,
    SERVER_NAME,
    SERVER_VERSION,
    EffectiveConfig,
    SessionConfig,
    resolve_config,
)
from .server.dispatcher import ToolDispatcher
from .server.logging_config import configure_logging
from .server.tools import build_default_registry

logger = logging.getLogger(__name__)

TRANSPORTS = ("stdio", "http")


class Mem0MemoryServer:
    def __init__(self, config: EffectiveConfig, client: Optional[MemoryBackendClient] = None):
        """
        Build a server instance around one resolved configuration.

        Args:
            config: Effective configuration for this instance
            client: Backend client; defaults to a Mem0Client built from config
        """
        self.config = config
        self.server = Server(SERVER_NAME)
        self.client = client if client is not None else Mem0Client.from_config(config)
        self.registry = build_default_registry()
        self.dispatcher = ToolDispatcher(config, self.client, self.registry)

        if not config.has_api_key:
            logger.warning(f"{API_KEY_ENV} is not set; memory operations will fail until a key is configured")

        self.register_handlers()
        logger.info(f"Server initialized with {len(self.registry)} tools (default user: {config.default_user_id})")

    def register_handlers(self):
        @self.server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return self.registry.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict | None) -> types.CallToolResult:
            return await self.dispatcher.dispatch(name, arguments)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> types.CallToolResult:
        """Invoke a tool directly, bypassing the transport."""
        return await self.dispatcher.dispatch(name, arguments)

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=SERVER_NAME,
            server_version=SERVER_VERSION,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

    async def run_stdio(self) -> None:
        """Serve a single client over stdin/stdout until the stream closes."""
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            print("Memory MCP Server running on stdio", file=sys.stderr, flush=True)
            try:
                await self.server.run(read_stream, write_stream, self.initialization_options())
            except asyncio.CancelledError:
                logger.info("Server run cancelled")
                raise
            finally:
                await self.close()
                logger.info("Server run completed")

    async def run_http(self, host: str = HTTP_HOST, port: int = HTTP_PORT) -> None:
        """Serve streamable-HTTP sessions at /mcp."""
        from .server.http_transport import serve_http
        await serve_http(self, host=host, port=port)

    async def close(self) -> None:
        await self.client.close()


def create_server(session_config: Union[SessionConfig, Dict[str, Any], None] = None,
                  client: Optional[MemoryBackendClient] = None) -> Mem0MemoryServer:
    """
    Factory called once per session by hosting layers.

    Args:
        session_config: Session-supplied settings (model or raw mapping with
            ``mem0ApiKey`` / ``defaultUserId`` keys); unset values fall back to
            the environment, then to defaults
        client: Optional backend client to use instead of a new Mem0Client
    """
    if isinstance(session_config, dict):
        session_config = SessionConfig.model_validate(session_config)
    return Mem0MemoryServer(resolve_config(session_config), client=client)


async def async_main(transport: str = "stdio",
                     host: str = HTTP_HOST,
                     port: int = HTTP_PORT,
                     session_config: Optional[SessionConfig] = None) -> None:
    """Main async entry point; the transport is chosen explicitly by the caller."""
    if transport not in TRANSPORTS:
        raise ValueError(f"Unknown transport: {transport}")

    print(f"Initializing Mem0 Memory MCP Server ({transport} mode)...", file=sys.stderr, flush=True)
    memory_server = create_server(session_config)

    if transport == "http":
        await memory_server.run_http(host=host, port=port)
    else:
        await memory_server.run_stdio()


def main(transport: str = "stdio",
         host: str = HTTP_HOST,
         port: int = HTTP_PORT,
         session_config: Optional[SessionConfig] = None,
         log_level: Optional[str] = None) -> None:
    load_dotenv()
    configure_logging(transport=transport, level=log_level)

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down gracefully...")
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        asyncio.run(async_main(transport=transport, host=host, port=port, session_config=session_config))
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
    except SystemExit as e:
        # uvicorn exits with its own status when the bind fails
        if e.code in (0, None):
            raise
        logger.error(f"Fatal error running server: exit status {e.code}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error running server: {str(e)}\n{traceback.format_exc()}")
        sys.exit(1)


if __name__ == "__main__":
    main()
