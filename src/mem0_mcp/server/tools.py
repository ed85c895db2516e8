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
Tool declarations for the Mem0 MCP server.

Each tool pairs the JSON schema advertised to MCP clients with a pydantic
model used to validate arguments before anything reaches the backend.
The descriptions tell the calling agent when to use each tool; keep them
stable, agents key their behaviour off this wording.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from mcp import types
from pydantic import BaseModel, ConfigDict, Field

ADD_MEMORY = "add-memory"
SEARCH_MEMORIES = "search-memories"

USER_ID_DESCRIPTION = "User ID for memory storage. If omitted, uses config.defaultUserId."


class ToolInput(BaseModel):
    """Common base for tool arguments."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    user_id: Optional[str] = Field(default=None, alias="userId", description=USER_ID_DESCRIPTION)


class AddMemoryInput(ToolInput):
    content: str = Field(min_length=1, description="The content to store in memory")


class SearchMemoriesInput(ToolInput):
    query: str = Field(
        min_length=1,
        description="The search query, typically derived from the user's current question.",
    )


@dataclass(frozen=True)
class ToolDeclaration:
    """A named, schema-typed operation exposed to MCP clients."""
    name: str
    description: str
    input_schema: Dict[str, Any]
    input_model: Type[ToolInput]

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(name=self.name, description=self.description, inputSchema=self.input_schema)


class ToolRegistry:
    """Fixed set of tools, registered once when a server instance is built."""

    def __init__(self):
        self._tools: Dict[str, ToolDeclaration] = {}

    def register(self, declaration: ToolDeclaration) -> None:
        if declaration.name in self._tools:
            raise ValueError(f"Tool already registered: {declaration.name}")
        self._tools[declaration.name] = declaration

    def get(self, name: str) -> Optional[ToolDeclaration]:
        return self._tools.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self) -> List[types.Tool]:
        """MCP tool listing, in registration order."""
        return [declaration.to_mcp_tool() for declaration in self._tools.values()]


ADD_MEMORY_TOOL = ToolDeclaration(
    name=ADD_MEMORY,
    description=(
        "Add a new memory about the user. Call this whenever the user shares preferences, "
        "facts about themselves, or explicitly asks you to remember something."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "content": {
                "type": "string",
                "minLength": 1,
                "description": "The content to store in memory"
            },
            "userId": {
                "type": "string",
                "description": USER_ID_DESCRIPTION
            }
        },
        "required": ["content"]
    },
    input_model=AddMemoryInput,
)

SEARCH_MEMORIES_TOOL = ToolDeclaration(
    name=SEARCH_MEMORIES,
    description=(
        "Search through stored memories. Call this whenever you need to recall prior "
        "information relevant to the user query."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "minLength": 1,
                "description": "The search query, typically derived from the user's current question."
            },
            "userId": {
                "type": "string",
                "description": USER_ID_DESCRIPTION
            }
        },
        "required": ["query"]
    },
    input_model=SearchMemoriesInput,
)


def build_default_registry() -> ToolRegistry:
    """Registry holding add-memory and search-memories."""
    registry = ToolRegistry()
    registry.register(ADD_MEMORY_TOOL)
    registry.register(SEARCH_MEMORIES_TOOL)
    return registry
