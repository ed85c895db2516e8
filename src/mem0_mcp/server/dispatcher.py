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
Tool dispatch: argument validation, user resolution and routing to handlers.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from mcp import types
from pydantic import ValidationError

from ..backend.base import MemoryBackendClient
from ..config import EffectiveConfig
from .handlers import memory as memory_handlers
from .handlers.memory import text_result
from .tools import ADD_MEMORY, SEARCH_MEMORIES, ToolInput, ToolRegistry

logger = logging.getLogger(__name__)

Handler = Callable[[MemoryBackendClient, Any, str], Awaitable[types.CallToolResult]]

HANDLERS: Dict[str, Handler] = {
    ADD_MEMORY: memory_handlers.handle_add_memory,
    SEARCH_MEMORIES: memory_handlers.handle_search_memories,
}


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one line."""
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


class ToolDispatcher:
    """Validates invocations and routes them to the matching handler."""

    def __init__(self, config: EffectiveConfig, client: MemoryBackendClient, registry: ToolRegistry):
        self.config = config
        self.client = client
        self.registry = registry

    def resolve_user_id(self, params: ToolInput) -> str:
        """Per-call userId wins over the configured default; empty counts as omitted."""
        return params.user_id or self.config.default_user_id

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        declaration = self.registry.get(name)
        handler = HANDLERS.get(name)
        if declaration is None or handler is None:
            logger.warning(f"Unknown tool requested: {name}")
            return text_result(f"Unknown tool: {name}", is_error=True)

        try:
            params = declaration.input_model.model_validate(arguments or {})
        except ValidationError as e:
            details = format_validation_error(e)
            logger.warning(f"Rejected {name} call: {details}")
            return text_result(f"Invalid arguments for {name}: {details}", is_error=True)

        user_id = self.resolve_user_id(params)
        logger.info(f"Calling {name} for user {user_id}")
        return await handler(self.client, params, user_id)
