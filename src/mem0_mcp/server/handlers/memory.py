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
Memory handler functions for the MCP server.

Each handler performs one backend call and converts the outcome into a
CallToolResult. Backend failures never escape a handler.
"""

import logging
import math
import traceback
from decimal import Decimal
from typing import Any, Dict, List, Optional

from mcp import types

from ...backend.base import MemoryBackendClient
from ..tools import AddMemoryInput, SearchMemoriesInput

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Memory storage system"
ADD_SUCCESS_MESSAGE = "Memory added successfully"
NO_MEMORIES_MESSAGE = "No memories found"
RESULT_SEPARATOR = "---"


def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    """Wrap a single text block in a tool result envelope."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def describe_error(error: BaseException) -> str:
    """Best human-readable message for an exception."""
    message = getattr(error, "message", None) or str(error)
    return message if message else repr(error)


def format_score(score: Any) -> str:
    """Render a relevance score the way JSON numbers print: 1.0 as 1, 1e-07 as 1e-7."""
    if isinstance(score, bool):
        return "true" if score else "false"
    if isinstance(score, float) and math.isfinite(score):
        if score.is_integer() and abs(score) < 1e21:
            return str(int(score))
        text = repr(score)
        if "e" not in text:
            return text
        mantissa, exponent = text.split("e")
        # JSON-style numbers only switch to exponent form below 1e-6
        if -7 < int(exponent) < 0:
            return format(Decimal(text), "f")
        return f"{mantissa}e{int(exponent):+d}"
    return str(score)


def format_search_results(results: Optional[List[Dict[str, Any]]]) -> str:
    """Render matches in backend order, or the no-match message."""
    formatted = "\n".join(
        f"Memory: {result.get('memory')}\nRelevance: {format_score(result.get('score'))}\n{RESULT_SEPARATOR}"
        for result in results or []
    )
    return formatted or NO_MEMORIES_MESSAGE


async def handle_add_memory(client: MemoryBackendClient, params: AddMemoryInput,
                            user_id: str) -> types.CallToolResult:
    try:
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": params.content},
        ]
        await client.add(messages, user_id=user_id)
        return text_result(ADD_SUCCESS_MESSAGE)

    except Exception as e:
        logger.error(f"Error adding memory: {describe_error(e)}\n{traceback.format_exc()}")
        return text_result(f"Error adding memory: {describe_error(e)}", is_error=True)


async def handle_search_memories(client: MemoryBackendClient, params: SearchMemoriesInput,
                                 user_id: str) -> types.CallToolResult:
    try:
        results = await client.search(params.query, user_id=user_id)
        return text_result(format_search_results(results))

    except Exception as e:
        logger.error(f"Error searching memories: {describe_error(e)}\n{traceback.format_exc()}")
        return text_result(f"Error searching memories: {describe_error(e)}", is_error=True)
