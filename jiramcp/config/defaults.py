"""Default configuration values and constants for jira-mcp-server."""

import pathlib

SERVER_NAME = "jira-mcp-server"
SERVER_VERSION = "1.0.0"

API_VERSION = "3"

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"

TRANSPORT_STDIO = "stdio"
TRANSPORT_SSE = "sse"
TRANSPORTS = (TRANSPORT_STDIO, TRANSPORT_SSE)

SSE_PATH = "/sse"
MESSAGE_PATH = "/message"

SEARCH_ENDPOINT = "search/jql"

SEARCH_MAX_RESULTS = 50
SEARCH_FIELDS = [
    "summary",
    "status",
    "issuetype",
    "issuelinks",
    "comment",
    "updated",
]
SEARCH_EXPAND = "renderedFields"

RESOURCE_SEARCH_MAX_RESULTS = 100
RESOURCE_SEARCH_FIELDS = [
    "summary",
    "status",
    "assignee",
    "created",
    "updated",
    "priority",
    "issuetype",
    "description",
    "labels",
    "components",
]

# Inward linked issues of these types must be in one of the ready statuses
READY_BLOCKING_TYPES = ("Bug", "LO Bug")
READY_STATUSES = ("Ready for QA", "Closed")
READY_DONE_MARKER = "completed"
READY_FIELDS = ["summary", "status", "comment", "updated", "key", "issuelinks"]

# Lines written to stdout before the stdio transport is attached
GATE_BUFFER_LIMIT = 1000

LOG_LEVELS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "SUCCESS": "blue",
}

CONFIG_FILE = pathlib.Path.home() / ".config" / "jira-mcp" / "config.yaml"

REQUIRED_SETTINGS = {
    "jira_url": ("JIRA_URL", "e.g., https://your-domain.atlassian.net"),
    "jira_email": ("JIRA_EMAIL", ""),
    "jira_api_token": ("JIRA_API_TOKEN", ""),
}
