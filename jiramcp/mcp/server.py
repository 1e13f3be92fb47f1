"""MCP server routing tool calls and resource reads to the Jira client."""

import functools
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import unquote

import anyio
from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from jiramcp import utils, views
from jiramcp.api import jira_client as jirahttp
from jiramcp.config import defaults
from jiramcp.exceptions import RoutingError

from . import registry

ToolHandler = Callable[["ServerContext", Dict[str, Any]], Awaitable[Dict[str, Any]]]


class ServerContext:
    """Context class holding config and a Jira client."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize the server context with config and Jira client."""
        self.config = config
        self.verbose = config.get("verbose", False)
        self.jira = jirahttp.JiraHTTP(config)

    @property
    def jira_url(self) -> str:
        return self.config["jira_url"]


async def _call(func: Callable[..., Any], *args, **kwargs) -> Any:
    """Run a blocking Jira call in a worker thread.

    The call is not cancellable: if the client goes away meanwhile the
    request still completes and its result is dropped.
    """
    return await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))


def _dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _require(arguments: Dict[str, Any], name: str) -> Any:
    value = arguments.get(name)
    if value is None or value == "":
        raise ValueError(f"Missing required argument: {name}")
    return value


def error_payload(error: Exception) -> Dict[str, Any]:
    """Shape a failure as the ``error`` envelope returned to the client."""
    return {
        "error": getattr(error, "message", None) or str(error),
        "details": getattr(error, "details", None),
    }


async def _handle_search(
    context: ServerContext, arguments: Dict[str, Any]
) -> Dict[str, Any]:
    jql = _require(arguments, "jql")
    result = await _call(
        context.jira.search_issues,
        jql,
        start_at=int(arguments.get("startAt", 0)),
        max_results=int(arguments.get("maxResults", defaults.SEARCH_MAX_RESULTS)),
        fields=arguments.get("fields") or defaults.SEARCH_FIELDS,
        expand=defaults.SEARCH_EXPAND,
    )
    return {
        "total": result["total"],
        "issues": [views.search_issue_view(issue) for issue in result["issues"]],
    }


async def _handle_get_issue(
    context: ServerContext, arguments: Dict[str, Any]
) -> Dict[str, Any]:
    issue = await _call(
        context.jira.get_issue,
        _require(arguments, "issueKey"),
        fields=arguments.get("fields"),
    )
    return views.issue_detail_view(issue)


async def _handle_create_issue(
    context: ServerContext, arguments: Dict[str, Any]
) -> Dict[str, Any]:
    issue = await _call(
        context.jira.create_issue,
        _require(arguments, "projectKey"),
        _require(arguments, "summary"),
        _require(arguments, "issueType"),
        description=arguments.get("description"),
        priority=arguments.get("priority"),
        assignee=arguments.get("assignee"),
        labels=arguments.get("labels"),
    )
    return {
        "key": issue.get("key"),
        "id": issue.get("id"),
        "self": issue.get("self"),
        "message": "Issue created successfully",
    }


async def _handle_update_issue(
    context: ServerContext, arguments: Dict[str, Any]
) -> Dict[str, Any]:
    status = arguments.get("status")
    result = await _call(
        context.jira.update_issue,
        _require(arguments, "issueKey"),
        summary=arguments.get("summary"),
        description=arguments.get("description"),
        priority=arguments.get("priority"),
        assignee=arguments.get("assignee"),
        labels=arguments.get("labels"),
        status=status,
    )
    response = {"issueKey": result["issueKey"], "message": "Issue updated successfully"}
    if "transitioned" in result:
        response["transitioned"] = result["transitioned"]
        if result["transitioned"]:
            response["transition"] = result.get("transition")
        else:
            response["warning"] = f"Transition not found: {status}"
            response["availableTransitions"] = result.get("availableTransitions", [])
    return response


TOOL_HANDLERS: Dict[str, ToolHandler] = {
    registry.SEARCH_TOOL: _handle_search,
    registry.GET_ISSUE_TOOL: _handle_get_issue,
    registry.CREATE_ISSUE_TOOL: _handle_create_issue,
    registry.UPDATE_ISSUE_TOOL: _handle_update_issue,
}


async def call_tool(
    context: ServerContext, name: str, arguments: Dict[str, Any]
) -> types.CallToolResult:
    """Run one tool; failures come back as an ``error`` payload, never raised.

    The result is flagged with ``isError`` when the payload is an error.
    """
    is_error = False
    try:
        if name not in registry.TOOL_NAMES:
            raise RoutingError(f"Unknown tool: {name}")
        payload = await TOOL_HANDLERS[name](context, arguments)
    except Exception as e:  # pylint: disable=broad-exception-caught
        utils.log(f"Tool {name} failed: {e}", level="ERROR")
        payload = error_payload(e)
        is_error = True
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=_dumps(payload))],
        isError=is_error,
    )



async def _read_search_resource(context: ServerContext, jql: str) -> Dict[str, Any]:
    result = await _call(
        context.jira.search_issues,
        jql,
        start_at=0,
        max_results=defaults.RESOURCE_SEARCH_MAX_RESULTS,
        fields=defaults.RESOURCE_SEARCH_FIELDS,
    )
    return {
        "total": result["total"],
        "issues": [
            views.search_resource_view(issue, context.jira_url)
            for issue in result["issues"]
        ],
    }


async def _read_issue_resource(
    context: ServerContext, issue_key: str
) -> Dict[str, Any]:
    issue = await _call(context.jira.get_issue, issue_key)
    return views.issue_resource_view(issue, context.jira_url)


async def read_resource(context: ServerContext, uri: str) -> str:
    """Read a resource by URI and return its JSON text."""
    try:
        # The search prefix is checked first.
        if uri.startswith(registry.SEARCH_RESOURCE_PREFIX):
            jql = unquote(uri[len(registry.SEARCH_RESOURCE_PREFIX) :])
            payload = await _read_search_resource(context, jql)
        elif uri.startswith(registry.ISSUE_RESOURCE_PREFIX):
            issue_key = uri[len(registry.ISSUE_RESOURCE_PREFIX) :]
            payload = await _read_issue_resource(context, issue_key)
        else:
            raise RoutingError(f"Unsupported resource URI: {uri}")
    except Exception as e:  # pylint: disable=broad-exception-caught
        utils.log(f"Reading {uri} failed: {e}", level="ERROR")
        payload = error_payload(e)
    return _dumps(payload)


def create_server(context: ServerContext) -> Server:
    """Create a fresh MCP server bound to the given context."""
    server = Server(defaults.SERVER_NAME, version=defaults.SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return registry.list_tools()

    @server.list_resources()
    async def handle_list_resources() -> List[types.Resource]:
        return registry.list_resources()

    @server.read_resource()
    async def handle_read_resource(uri: AnyUrl) -> List[ReadResourceContents]:
        text = await read_resource(context, str(uri))
        return [ReadResourceContents(content=text, mime_type=registry.JSON_MIME_TYPE)]

    @server.call_tool()
    async def handle_call_tool(
        name: str, arguments: Optional[Dict[str, Any]]
    ) -> types.CallToolResult:
        if context.verbose:
            utils.log(f"Tool call: {name} {arguments}", level="DEBUG")
        return await call_tool(context, name, arguments or {})

    return server
