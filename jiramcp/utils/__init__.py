"""Shared helpers for jira-mcp-server."""

import click

from jiramcp.config import defaults


def log(message, level="INFO", verbose_only=False, verbose=False):
    """
    Log a message with color-coded level prefix.

    Everything goes to stderr: stdout may be carrying the stdio protocol
    channel.

    Args:
        message (str): The message to log.
        level (str): The log level (e.g., INFO, WARNING, ERROR).
        verbose_only (bool): Only log if verbose mode is enabled.
        verbose (bool): Whether verbose mode is enabled.
    """
    if verbose_only and not verbose:
        return

    color = defaults.LOG_LEVELS.get(level, "reset")
    prefix = f"[{level}] " if level else ""
    click.secho(f"{prefix}{message}", fg=color.lower(), err=True)


def browse_url(server: str, key: str) -> str:
    """Return the browser URL for an issue."""
    return f"{server}/browse/{key}"
