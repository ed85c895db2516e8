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
Main CLI entry point for the Mem0 MCP server.
"""

import click
from dotenv import load_dotenv

from .. import __version__
from ..config import HTTP_HOST, HTTP_PORT, SessionConfig


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="Mem0 MCP")
@click.pass_context
def cli(ctx):
    """
    Mem0 MCP - memory tools for AI assistants over the Model Context Protocol.

    Exposes add-memory and search-memories backed by the Mem0 platform.
    """
    ctx.ensure_object(dict)
    # Load .env before subcommand options read their environment variables
    load_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('--transport', '-t', default='stdio', show_default=True,
              type=click.Choice(['stdio', 'http']),
              help='Transport to serve: stdio for a local client, http for streamable HTTP sessions')
@click.option('--host', default=HTTP_HOST, envvar='MCP_HTTP_HOST', show_default=True,
              help='Bind address for the http transport')
@click.option('--port', default=HTTP_PORT, envvar='MCP_HTTP_PORT', type=click.IntRange(1, 65535),
              show_default=True, help='Port for the http transport')
@click.option('--api-key', default=None, help='Mem0 API key (overrides MEM0_API_KEY)')
@click.option('--default-user-id', default=None, help='Default user ID (overrides DEFAULT_USER_ID)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def server(transport, host, port, api_key, default_user_id, debug):
    """
    Start the Mem0 MCP server.

    The transport is always chosen explicitly; stdio is the default for
    Claude Desktop and other local MCP clients.
    """
    from ..server_impl import main as server_main

    session_config = SessionConfig(mem0_api_key=api_key, default_user_id=default_user_id)
    server_main(
        transport=transport,
        host=host,
        port=port,
        session_config=session_config,
        log_level='DEBUG' if debug else None,
    )


def main():
    """Console script entry point."""
    cli()


if __name__ == '__main__':
    main()
