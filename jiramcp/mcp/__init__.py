"""MCP server exposing Jira search, read, create and update operations."""
