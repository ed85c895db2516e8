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
Configuration for the Mem0 MCP server.

Effective settings are resolved from three layers, highest precedence first:
explicit session configuration, process environment, hard-coded defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ._version import __version__

logger = logging.getLogger(__name__)

SERVER_NAME = "mem0-mcp"
SERVER_VERSION = __version__

# Environment variable names
API_KEY_ENV = "MEM0_API_KEY"
DEFAULT_USER_ID_ENV = "DEFAULT_USER_ID"
API_HOST_ENV = "MEM0_API_HOST"
TIMEOUT_ENV = "MEM0_TIMEOUT"

DEFAULT_USER_ID = "mem0-mcp-user"
DEFAULT_API_HOST = "https://api.mem0.ai"
DEFAULT_TIMEOUT = 30.0

HTTP_HOST = os.getenv("MCP_HTTP_HOST", "127.0.0.1")


def safe_get_int_env(name: str, default: int, min_value: Optional[int] = None,
                     max_value: Optional[int] = None) -> int:
    """Read an integer environment variable, falling back to default on bad or out-of-range values."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using default {default}")
        return default
    if min_value is not None and value < min_value:
        logger.warning(f"{name}={value} is below minimum {min_value}, using default {default}")
        return default
    if max_value is not None and value > max_value:
        logger.warning(f"{name}={value} is above maximum {max_value}, using default {default}")
        return default
    return value


def safe_get_float(raw: Optional[str], default: float, name: str = "value") -> float:
    """Parse a positive float, falling back to default."""
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {name}: {raw!r}, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} must be positive, got {value}; using default {default}")
        return default
    return value


HTTP_PORT = safe_get_int_env("MCP_HTTP_PORT", 8000, min_value=1, max_value=65535)


class SessionConfig(BaseModel):
    """Configuration supplied by a hosting layer for one server session.

    Field aliases match the camelCase keys hosts send (``mem0ApiKey``,
    ``defaultUserId``); snake_case names are accepted as well.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    mem0_api_key: Optional[str] = Field(
        default=None,
        alias="mem0ApiKey",
        description="Mem0 API key. Defaults to MEM0_API_KEY env var if not provided.",
    )
    default_user_id: Optional[str] = Field(
        default=None,
        alias="defaultUserId",
        description="Default user ID when not provided in tool input",
    )


@dataclass(frozen=True)
class EffectiveConfig:
    """Resolved, read-only configuration owned by one server instance."""
    api_key: str
    default_user_id: str
    api_host: str = DEFAULT_API_HOST
    timeout: float = DEFAULT_TIMEOUT

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def resolve_config(session_config: Optional[SessionConfig] = None,
                   environ: Optional[Mapping[str, str]] = None) -> EffectiveConfig:
    """
    Derive the effective configuration for a server instance.

    Args:
        session_config: Explicit per-session values; empty strings count as absent
        environ: Environment mapping to read (defaults to ``os.environ``)

    Returns:
        EffectiveConfig. A missing API key resolves to an empty string; it is
        reported by the backend on first use, not here.
    """
    env = os.environ if environ is None else environ
    session = session_config or SessionConfig()

    api_key = session.mem0_api_key or env.get(API_KEY_ENV) or ""
    default_user_id = session.default_user_id or env.get(DEFAULT_USER_ID_ENV) or DEFAULT_USER_ID
    api_host = (env.get(API_HOST_ENV) or DEFAULT_API_HOST).rstrip("/")
    timeout = safe_get_float(env.get(TIMEOUT_ENV), DEFAULT_TIMEOUT, name=TIMEOUT_ENV)

    return EffectiveConfig(
        api_key=api_key,
        default_user_id=default_user_id,
        api_host=api_host,
        timeout=timeout,
    )
