"""CLI entry point for the JIRA MCP server."""

import sys

import click
from dotenv import load_dotenv

from . import commands, utils
from .mcp import stdio


def main():
    verbose = False
    if "--verbose" in sys.argv or "-v" in sys.argv:
        verbose = True

    if "-h" in sys.argv:
        sys.argv.remove("-h")
        sys.argv.append("--help")

    # An MCP client owns stdout when it pipes our stdin, hold back any
    # output until the transport is attached.
    if not sys.stdin.isatty():
        stdio.install_gate()

    load_dotenv()

    try:
        # pylint: disable=no-value-for-parameter
        commands.cli()
    except KeyboardInterrupt:
        click.secho("Server stopped by user", fg="yellow", err=True)
        sys.exit(0)
    except Exception as e:
        click.secho(f"Fatal error: {e}", fg="red", err=True)
        if verbose:
            utils.log("Verbose mode enabled. Full error details:", level="ERROR")
            raise e
        sys.exit(1)
    finally:
        stdio.release_gate()


if __name__ == "__main__":
    main()
