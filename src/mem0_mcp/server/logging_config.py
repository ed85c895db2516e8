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
Logging configuration for the Mem0 MCP server.

Provides transport-aware logging. In stdio mode stdout carries the JSON-RPC
stream, so every record goes to stderr. In HTTP mode stdout is free and
INFO/DEBUG go there while WARNING and above go to stderr.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(levelname)s:%(name)s:%(message)s'


class DualStreamHandler(logging.Handler):
    """Transport-aware handler that routes records by level."""

    def __init__(self, transport: str = 'stdio'):
        super().__init__()
        self.transport = transport
        self.stdout_handler = logging.StreamHandler(sys.stdout)
        self.stderr_handler = logging.StreamHandler(sys.stderr)

        formatter = logging.Formatter(LOG_FORMAT)
        self.stdout_handler.setFormatter(formatter)
        self.stderr_handler.setFormatter(formatter)

    def emit(self, record):
        """Route log records based on transport and level."""
        # stdout belongs to the protocol in stdio mode
        if self.transport == 'stdio' or record.levelno >= logging.WARNING:
            self.stderr_handler.emit(record)
        else:
            self.stdout_handler.emit(record)


def configure_logging(transport: str = 'stdio', level: Optional[str] = None) -> logging.Logger:
    """Configure the root logger once at process start."""
    log_level = (level or os.getenv('LOG_LEVEL', 'WARNING')).upper()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.WARNING))

    # Remove any existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(DualStreamHandler(transport=transport))

    return logging.getLogger(__name__)
