"""Common utilities and helpers for jira-mcp CLI commands."""

import pathlib

import click

from .. import config
from ..config import defaults
from ..mcp import stdio


@click.group(invoke_without_command=True)
@click.option("--jira-url", envvar="JIRA_URL", help="Jira URL (e.g. https://your-domain.atlassian.net)")
@click.option("--jira-email", envvar="JIRA_EMAIL", help="Jira account email")
@click.option("--jira-api-token", envvar="JIRA_API_TOKEN", help="Jira API token")
@click.option("--port", envvar="PORT", type=int, help="Port for the SSE transport")
@click.option(
    "--transport",
    envvar="MCP_TRANSPORT",
    type=click.Choice(defaults.TRANSPORTS, case_sensitive=False),
    help="Force the transport instead of detecting it",
)
@click.option("--insecure", is_flag=True, help="Disable SSL verification for requests")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "-c",
    "--config-file",
    default=str(defaults.CONFIG_FILE),
    help="Config file to use",
)
@click.pass_context
def cli(
    ctx,
    jira_url,
    jira_email,
    jira_api_token,
    port,
    transport,
    insecure,
    verbose,
    config_file,
):
    """JIRA MCP Server"""
    ctx.obj = {
        "flags": {
            "jira_url": jira_url,
            "jira_email": jira_email,
            "jira_api_token": jira_api_token,
            "port": port,
            "transport": transport,
            "insecure": insecure,
            "verbose": verbose,
        },
        "config_file": pathlib.Path(config_file),
    }

    if ctx.invoked_subcommand is None:
        # pylint: disable=import-outside-toplevel
        from .serve import serve_cmd

        ctx.invoke(serve_cmd)
    elif ctx.invoked_subcommand != "serve":
        stdio.release_gate()


def load_config(ctx: click.Context) -> dict:
    """Build the configuration from the group flags and the config file."""
    obj = ctx.find_root().obj
    return config.make_config(dict(obj["flags"]), obj["config_file"])
