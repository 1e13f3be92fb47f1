"""Projections of raw Jira issues into the shapes returned to clients."""

from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from jiramcp.config import defaults

from .utils import adf, browse_url


def _name(value: Optional[Dict[str, Any]]) -> Optional[str]:
    return value.get("name") if isinstance(value, dict) else None


def _display_name(value: Optional[Dict[str, Any]]) -> Optional[str]:
    return value.get("displayName") if isinstance(value, dict) else None


def _updated_key(comment: Dict[str, Any]) -> float:
    updated = comment.get("updated")
    if not updated:
        return float("-inf")
    try:
        return datetime.strptime(updated, "%Y-%m-%dT%H:%M:%S.%f%z").timestamp()
    except ValueError:
        return float("-inf")


def latest_comments_first(fields: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Comments of an issue, most recently updated first."""
    comments = (fields.get("comment") or {}).get("comments") or []
    return sorted(comments, key=_updated_key, reverse=True)


def inward_links(fields: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Issue links pointing at this issue, reduced to key, status and type."""
    links = []
    for link in fields.get("issuelinks") or []:
        inward = link.get("inwardIssue")
        if not inward:
            continue
        inward_fields = inward.get("fields") or {}
        links.append(
            {
                "inwardIssue": {
                    "key": inward.get("key"),
                    "fields": {
                        "status": _name(inward_fields.get("status")),
                        "issuetype": _name(inward_fields.get("issuetype")),
                    },
                }
            }
        )
    return links


def search_issue_view(issue: Dict[str, Any]) -> Dict[str, Any]:
    """Summary projection of a search hit, comments flattened to text."""
    fields = issue.get("fields") or {}
    return {
        "key": issue.get("key"),
        "fields": {
            "summary": fields.get("summary"),
            "issuelinks": inward_links(fields),
            "comment": {
                "comments": [
                    adf.extract_comment_text(comment.get("body"))
                    for comment in latest_comments_first(fields)
                ]
            },
            "status": _name(fields.get("status")),
            "issuetype": _name(fields.get("issuetype")),
        },
    }


def issue_detail_view(issue: Dict[str, Any]) -> Dict[str, Any]:
    """Full passthrough of a single issue."""
    return {
        "key": issue.get("key"),
        "id": issue.get("id"),
        "self": issue.get("self"),
        "fields": issue.get("fields"),
    }


def _common_resource_fields(issue: Dict[str, Any], server: str) -> Dict[str, Any]:
    fields = issue.get("fields") or {}
    return {
        "summary": fields.get("summary"),
        "status": _name(fields.get("status")),
        "assignee": _display_name(fields.get("assignee")) or "Unassigned",
        "priority": _name(fields.get("priority")),
        "type": _name(fields.get("issuetype")),
        "created": fields.get("created"),
        "updated": fields.get("updated"),
        "description": fields.get("description"),
        "labels": fields.get("labels"),
        "components": [c.get("name") for c in fields.get("components") or []],
        "url": browse_url(server, issue.get("key")),
    }


def search_resource_view(issue: Dict[str, Any], server: str) -> Dict[str, Any]:
    """Projection of a search hit for the ``jira://search`` resource."""
    view = {"key": issue.get("key"), "id": issue.get("id")}
    view.update(_common_resource_fields(issue, server))
    return view


def issue_resource_view(issue: Dict[str, Any], server: str) -> Dict[str, Any]:
    """Projection of one issue for the ``jira://issue`` resource."""
    fields = issue.get("fields") or {}
    view = {"key": issue.get("key"), "id": issue.get("id")}
    view.update(_common_resource_fields(issue, server))
    view["reporter"] = _display_name(fields.get("reporter"))
    view["comments"] = [
        {
            "author": _display_name(comment.get("author")),
            "body": adf.extract_comment_text(comment.get("body")),
            "created": comment.get("created"),
        }
        for comment in (fields.get("comment") or {}).get("comments") or []
    ]
    return view


def is_ready(issue: Dict[str, Any]) -> bool:
    """Tell whether an issue is ready to be picked up.

    Its latest comment must not mark it completed and every inward linked
    bug must already be ready for QA or closed.
    """
    fields = issue.get("fields") or {}

    comments = latest_comments_first(fields)
    if comments:
        last = adf.extract_comment_text(comments[0].get("body"))
        if defaults.READY_DONE_MARKER in last.lower():
            return False

    for link in fields.get("issuelinks") or []:
        inward = link.get("inwardIssue")
        if not inward:
            continue
        inward_fields = inward.get("fields") or {}
        if _name(inward_fields.get("issuetype")) in defaults.READY_BLOCKING_TYPES:
            if _name(inward_fields.get("status")) not in defaults.READY_STATUSES:
                return False
    return True


def ticket_url(issue: Dict[str, Any]) -> str:
    """Browser URL of an issue derived from its API ``self`` link."""
    key = issue.get("key") or ""
    parsed = urlparse(issue.get("self") or "")
    if not parsed.scheme or not parsed.netloc:
        return key
    return browse_url(f"{parsed.scheme}://{parsed.netloc}", key)


def ready_issue_lines(issues: List[Dict[str, Any]]) -> List[str]:
    """Numbered ``url - summary`` lines for the ready issues."""
    ready = [issue for issue in issues if is_ready(issue)]
    return [
        f"{index}. {ticket_url(issue)} - {(issue.get('fields') or {}).get('summary') or ''}"
        for index, issue in enumerate(ready, start=1)
    ]
