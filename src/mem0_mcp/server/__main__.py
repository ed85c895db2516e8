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
Entry point for running the server package as a module.

Runs the stdio transport:
    python -m mem0_mcp.server
"""

import argparse

from ..server_impl import main
from .._version import __version__


def run_with_args():
    """Handle --version/--help before starting the stdio server."""
    parser = argparse.ArgumentParser(
        prog='python -m mem0_mcp.server',
        description='Mem0 MCP Server - memory tools over the Model Context Protocol (stdio)',
        add_help=True
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    parser.parse_known_args()

    main(transport='stdio')


if __name__ == '__main__':
    run_with_args()
