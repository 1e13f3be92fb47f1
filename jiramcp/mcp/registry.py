"""Static descriptors for the tools and resources the server exposes."""

from typing import List

from mcp import types
from pydantic import AnyUrl

from jiramcp.config import defaults

SEARCH_TOOL = "jira_search"
GET_ISSUE_TOOL = "jira_get_issue"
CREATE_ISSUE_TOOL = "jira_create_issue"
UPDATE_ISSUE_TOOL = "jira_update_issue"

SEARCH_RESOURCE_PREFIX = "jira://search?jql="
ISSUE_RESOURCE_PREFIX = "jira://issue/"

JSON_MIME_TYPE = "application/json"

_ISSUE_KEY = {
    "type": "string",
    "description": "JIRA issue key (e.g., 'PROJ-123')",
}

TOOLS: List[types.Tool] = [
    types.Tool(
        name=SEARCH_TOOL,
        description="Search for JIRA issues using JQL (JIRA Query Language). "
        "Returns a list of issues matching the query.",
        inputSchema={
            "type": "object",
            "properties": {
                "jql": {
                    "type": "string",
                    "description": "JQL query string (e.g., 'project = PROJ AND status = Open')",
                },
                "maxResults": {
                    "type": "number",
                    "description": "Maximum number of results to return "
                    f"(default: {defaults.SEARCH_MAX_RESULTS})",
                    "default": defaults.SEARCH_MAX_RESULTS,
                },
                "startAt": {
                    "type": "number",
                    "description": "Starting index for pagination (default: 0)",
                    "default": 0,
                },
                "fields": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of field names to return "
                    "(e.g., ['summary', 'status', 'assignee'])",
                },
            },
            "required": ["jql"],
        },
    ),
    types.Tool(
        name=GET_ISSUE_TOOL,
        description="Get detailed information about a specific JIRA issue "
        "by its key (e.g., PROJ-123)",
        inputSchema={
            "type": "object",
            "properties": {
                "issueKey": _ISSUE_KEY,
                "fields": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of field names to return (optional)",
                },
            },
            "required": ["issueKey"],
        },
    ),
    types.Tool(
        name=CREATE_ISSUE_TOOL,
        description="Create a new JIRA issue",
        inputSchema={
            "type": "object",
            "properties": {
                "projectKey": {
                    "type": "string",
                    "description": "Project key (e.g., 'PROJ')",
                },
                "summary": {"type": "string", "description": "Issue summary/title"},
                "description": {"type": "string", "description": "Issue description"},
                "issueType": {
                    "type": "string",
                    "description": "Issue type (e.g., 'Task', 'Bug', 'Story')",
                },
                "priority": {
                    "type": "string",
                    "description": "Priority (e.g., 'High', 'Medium', 'Low') - optional",
                },
                "assignee": {
                    "type": "string",
                    "description": "Assignee account ID - optional",
                },
                "labels": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of labels - optional",
                },
            },
            "required": ["projectKey", "summary", "issueType"],
        },
    ),
    types.Tool(
        name=UPDATE_ISSUE_TOOL,
        description="Update an existing JIRA issue",
        inputSchema={
            "type": "object",
            "properties": {
                "issueKey": _ISSUE_KEY,
                "summary": {
                    "type": "string",
                    "description": "New summary/title - optional",
                },
                "description": {
                    "type": "string",
                    "description": "New description - optional",
                },
                "priority": {"type": "string", "description": "New priority - optional"},
                "assignee": {
                    "type": "string",
                    "description": "New assignee account ID - optional",
                },
                "labels": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "New labels array - optional",
                },
                "status": {
                    "type": "string",
                    "description": "New status/transition name "
                    "(e.g., 'In Progress', 'Done') - optional",
                },
            },
            "required": ["issueKey"],
        },
    ),
]

RESOURCES: List[types.Resource] = [
    types.Resource(
        uri=AnyUrl(SEARCH_RESOURCE_PREFIX),
        name="JIRA Search",
        description="Search JIRA issues using JQL query. "
        "Append your JQL query after 'jql='",
        mimeType=JSON_MIME_TYPE,
    ),
    types.Resource(
        uri=AnyUrl(ISSUE_RESOURCE_PREFIX),
        name="JIRA Issue",
        description="Get a specific JIRA issue. Append issue key after 'issue/' "
        "(e.g., jira://issue/PROJ-123)",
        mimeType=JSON_MIME_TYPE,
    ),
]

TOOL_NAMES = frozenset(tool.name for tool in TOOLS)


def list_tools() -> List[types.Tool]:
    """All tool descriptors, unfiltered."""
    return list(TOOLS)


def list_resources() -> List[types.Resource]:
    """All resource descriptors, unfiltered."""
    return list(RESOURCES)
