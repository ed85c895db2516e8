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

"""Mem0 MCP - Model Context Protocol tools for the Mem0 memory service."""

from ._version import __version__
from .backend import BackendError, Mem0Client, Mem0MCPError, MemoryBackendClient
from .config import EffectiveConfig, SessionConfig, resolve_config
from .server_impl import Mem0MemoryServer, create_server

__all__ = [
    '__version__',
    'BackendError',
    'Mem0Client',
    'Mem0MCPError',
    'MemoryBackendClient',
    'EffectiveConfig',
    'SessionConfig',
    'resolve_config',
    'Mem0MemoryServer',
    'create_server',
]
