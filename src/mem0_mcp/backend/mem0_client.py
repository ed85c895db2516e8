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
HTTP client for the Mem0 platform API.
Implements the MemoryBackendClient interface by forwarding requests to the remote service.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from .base import BackendError, MemoryBackendClient
from ..config import DEFAULT_API_HOST, DEFAULT_TIMEOUT, EffectiveConfig

logger = logging.getLogger(__name__)

ADD_PATH = "/v1/memories/"
SEARCH_PATH = "/v1/memories/search/"


class Mem0Client(MemoryBackendClient):
    """
    Mem0 REST client.

    The underlying aiohttp session is opened on first use, so constructing a
    client never fails; a missing or invalid API key is reported by the
    remote service as an authentication error on the first request.
    """

    def __init__(self, api_key: str, base_url: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the Mem0 client.

        Args:
            api_key: Mem0 API key (may be empty)
            base_url: Base URL of the Mem0 API
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_API_HOST).rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

        logger.info(f"Initialized Mem0 client for: {self.base_url}")

    @classmethod
    def from_config(cls, config: EffectiveConfig) -> "Mem0Client":
        return cls(api_key=config.api_key, base_url=config.api_host, timeout=config.timeout)

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={
                    "Authorization": f"Token {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
        return self.session

    def _handle_http_error(self, e: Exception, operation: str) -> BackendError:
        """Centralized HTTP error handling with context-specific logging."""
        if isinstance(e, aiohttp.ServerTimeoutError):
            error_msg = f"Mem0 server timeout during {operation}: {str(e)}"
        elif isinstance(e, aiohttp.ClientError):
            error_msg = f"Mem0 connection error during {operation}: {str(e)}"
        elif isinstance(e, asyncio.TimeoutError):
            error_msg = f"{operation.capitalize()} operation timed out"
        elif isinstance(e, json.JSONDecodeError):
            error_msg = f"Invalid JSON response during {operation}: {str(e)}"
        else:
            error_msg = f"Unexpected {operation} error: {type(e).__name__}: {str(e)}"

        logger.error(error_msg)
        return BackendError(error_msg)

    @staticmethod
    def _extract_error_message(status: int, body: str) -> str:
        """Pull a readable message out of an error response body."""
        try:
            data = json.loads(body) if body else None
        except json.JSONDecodeError:
            data = None

        if isinstance(data, dict):
            for key in ("detail", "error", "message"):
                if data.get(key):
                    detail = data[key]
                    return detail if isinstance(detail, str) else json.dumps(detail)
        if body and body.strip():
            return body.strip()
        return f"HTTP {status}"

    async def _post(self, path: str, payload: Dict[str, Any], operation: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().post(url, json=payload) as response:
                body = await response.text()
                if response.status >= 400:
                    error_msg = self._extract_error_message(response.status, body)
                    logger.error(f"Mem0 {operation} failed: HTTP {response.status}: {error_msg}")
                    raise BackendError(error_msg, status=response.status)
                return json.loads(body) if body.strip() else None
        except BackendError:
            raise
        except Exception as e:
            raise self._handle_http_error(e, operation) from e

    async def add(self, messages: List[Dict[str, str]], *, user_id: str) -> None:
        """Store messages as memories via the Mem0 API."""
        payload = {"messages": messages, "user_id": user_id}
        await self._post(ADD_PATH, payload, "add")
        logger.info(f"Added memory via Mem0 for user: {user_id}")

    async def search(self, query: str, *, user_id: str) -> Optional[List[Dict[str, Any]]]:
        """Search memories via the Mem0 API."""
        payload = {"query": query, "user_id": user_id}
        data = await self._post(SEARCH_PATH, payload, "search")

        # v1 returns a bare list, newer output formats wrap it in "results"
        if isinstance(data, dict):
            data = data.get("results")
        if data is not None and not isinstance(data, list):
            raise self._handle_http_error(
                TypeError(f"expected a list of matches, got {type(data).__name__}"), "search"
            )

        logger.info(f"Retrieved {len(data or [])} memories via Mem0 for query: {query}")
        return data

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info("Mem0 client connection closed")
