"""MCP server giving AI assistants access to JIRA issues over stdio or SSE."""

__version__ = "1.0.0"
