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
Memory backend interface.

The server never stores or ranks memories itself; it forwards requests to a
remote memory service through an implementation of MemoryBackendClient.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class Mem0MCPError(Exception):
    """Base class for errors raised by this package."""


class BackendError(Mem0MCPError):
    """A remote memory operation failed (network, authentication, bad response)."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class MemoryBackendClient(ABC):
    """Abstract request/response client for a remote memory service."""

    @abstractmethod
    async def add(self, messages: List[Dict[str, str]], *, user_id: str) -> None:
        """
        Store a conversation exchange as memories for a user.

        Args:
            messages: Ordered ``{"role", "content"}`` messages
            user_id: User the memories are attributed to

        Raises:
            BackendError: If the remote service rejects or fails the write
        """
        pass

    @abstractmethod
    async def search(self, query: str, *, user_id: str) -> Optional[List[Dict[str, Any]]]:
        """
        Search a user's memories.

        Returns:
            Matches in ranked order, each with at least ``memory`` and ``score``.
            May be empty or None when nothing matches.

        Raises:
            BackendError: If the remote search fails
        """
        pass

    async def close(self) -> None:
        """Release network resources. Safe to call more than once."""
        pass
