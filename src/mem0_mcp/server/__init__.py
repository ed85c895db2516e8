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
Server package for the Mem0 MCP server.

Modular server components:
- tools: tool declarations and the tool registry
- dispatcher: argument validation and routing to handlers
- handlers: backend calls and result formatting
- logging_config: transport-aware logging configuration
- http_transport: streamable-HTTP binding (imported on demand)
"""

from .logging_config import DualStreamHandler, configure_logging
from .tools import (
    ADD_MEMORY,
    SEARCH_MEMORIES,
    AddMemoryInput,
    SearchMemoriesInput,
    ToolDeclaration,
    ToolRegistry,
    build_default_registry,
)
from .dispatcher import ToolDispatcher

__all__ = [
    # Logging
    'DualStreamHandler',
    'configure_logging',

    # Tools
    'ADD_MEMORY',
    'SEARCH_MEMORIES',
    'AddMemoryInput',
    'SearchMemoriesInput',
    'ToolDeclaration',
    'ToolRegistry',
    'build_default_registry',

    # Dispatch
    'ToolDispatcher',
]
