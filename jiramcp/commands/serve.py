"""Serve command for the JIRA MCP server."""

import click

from ..config import defaults
from ..mcp import launcher
from .common import cli, load_config


@cli.command("serve")
@click.option(
    "--host", default=defaults.DEFAULT_HOST, help="Host to bind the SSE transport"
)
@click.pass_context
def serve_cmd(ctx, host=defaults.DEFAULT_HOST):
    """Start the MCP server (stdio or SSE)."""
    wconfig = load_config(ctx)
    launcher.serve(wconfig, host=host)
