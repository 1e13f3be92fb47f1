"""jira-mcp CLI command group initialization."""

from . import ready, serve
from .common import cli as cli

__all__ = ["cli", "ready", "serve"]
