"""Jira REST API client used by the MCP server."""

from typing import Any, Dict, List, Optional

from jiramcp.config import defaults

from ..utils import adf, log
from . import auth, request_handler


class JiraHTTP:
    """Thin client over the Jira v3 REST API with fixed field sets."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize the Jira client.

        Args:
            config: Configuration dictionary with jira_url, jira_email and
                jira_api_token set
        """
        self.config = config
        self.verbose = config.get("verbose", False)
        self.server = config["jira_url"]
        self.base_url = f"{self.server}/rest/api/{defaults.API_VERSION}"

        self.authenticator = auth.BasicAuthenticator(
            config.get("jira_email"), config.get("jira_api_token")
        )
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self.headers.update(self.authenticator.get_headers())

        self.request_handler = request_handler.JiraRequestHandler(
            base_url=self.base_url,
            headers=self.headers,
            verbose=self.verbose,
            insecure=config.get("insecure", False),
        )

        if self.verbose:
            log(
                f"Initialized JiraHTTP: server={self.server}, "
                f"api_version={defaults.API_VERSION}, insecure={config.get('insecure', False)}",
                level="DEBUG",
            )

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        jeez: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return self.request_handler.request(
            method=method, endpoint=endpoint, params=params, json_data=jeez
        )

    def search_issues(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = defaults.SEARCH_MAX_RESULTS,
        fields: Optional[List[str]] = None,
        expand: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Search for issues using JQL."""
        params: Dict[str, Any] = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
        }
        if fields:
            params["fields"] = ",".join(fields)
        if expand:
            params["expand"] = expand

        if self.verbose:
            log(f"Searching issues with JQL: '{jql}'", level="DEBUG")
            log(f"Start at: {start_at}, Max results: {max_results}", level="DEBUG")

        result = self._request("GET", defaults.SEARCH_ENDPOINT, params=params)
        issues = result.get("issues", [])
        return {"total": result.get("total", len(issues)), "issues": issues}

    def get_issue(
        self, issue_key: str, fields: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Get a specific issue by key."""
        params = {}
        if fields:
            params["fields"] = ",".join(fields)

        if self.verbose:
            log(f"Getting issue: {issue_key} with fields: {fields}", level="DEBUG")

        return self._request("GET", f"issue/{issue_key}", params=params)

    def create_issue(
        self,
        project_key: str,
        summary: str,
        issuetype: str,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
        labels: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Create a new issue."""
        fields: Dict[str, Any] = {
            "project": {"key": project_key},
            "summary": summary,
            "issuetype": {"name": issuetype},
        }
        fields.update(
            self._build_field_edits(
                description=description,
                priority=priority,
                assignee=assignee,
                labels=labels,
            )
        )
        return self._request("POST", "issue", jeez={"fields": fields})

    @staticmethod
    def _build_field_edits(
        summary: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
        labels: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Map the optional edit arguments to Jira fields, skipping unset ones."""
        fields: Dict[str, Any] = {}

        if summary:
            fields["summary"] = summary

        if description:
            fields["description"] = adf.create_adf_from_text(description)

        if priority:
            fields["priority"] = {"name": priority}

        if assignee:
            fields["assignee"] = {"id": assignee}

        if labels:
            fields["labels"] = labels

        return fields

    # pylint: disable=too-many-arguments
    def update_issue(
        self,
        issue_key: str,
        summary: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[str] = None,
        assignee: Optional[str] = None,
        labels: Optional[List[str]] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Update an issue's fields, then move it to ``status`` if asked.

        The status is matched case-insensitively against the names of the
        transitions currently available on the issue. When nothing matches
        the update still succeeds; ``transitioned`` is False in the result.
        """
        result: Dict[str, Any] = {"issueKey": issue_key}

        fields = self._build_field_edits(
            summary=summary,
            description=description,
            priority=priority,
            assignee=assignee,
            labels=labels,
        )
        if fields:
            if self.verbose:
                log(f"Updating issue: {issue_key}", level="DEBUG")
                log(f"Fields to update: {list(fields.keys())}", level="DEBUG")
            self._request("PUT", f"issue/{issue_key}", jeez={"fields": fields})

        if not status:
            return result

        transitions = self.get_transitions(issue_key).get("transitions", [])
        transition = find_transition(transitions, status)
        if transition is None:
            log(
                f"No transition named '{status}' available for {issue_key}",
                level="WARNING",
            )
            result["transitioned"] = False
            result["availableTransitions"] = [t.get("name") for t in transitions]
            return result

        self.transition_issue(issue_key, transition["id"])
        result["transitioned"] = True
        result["transition"] = transition.get("name")
        return result

    def get_transitions(self, issue_key: str) -> Dict[str, Any]:
        """Get available transitions for an issue."""
        return self._request("GET", f"issue/{issue_key}/transitions")

    def transition_issue(self, issue_key: str, transition_id: str) -> Dict[str, Any]:
        """Transition an issue to a new status."""
        payload = {"transition": {"id": transition_id}}

        if self.verbose:
            log(
                f"Transitioning issue: {issue_key} with transition ID: {transition_id}",
                level="DEBUG",
            )

        return self._request("POST", f"issue/{issue_key}/transitions", jeez=payload)


def find_transition(
    transitions: List[Dict[str, Any]], status: str
) -> Optional[Dict[str, Any]]:
    """Return the transition whose name equals ``status`` ignoring case."""
    wanted = status.lower()
    for transition in transitions:
        if (transition.get("name") or "").lower() == wanted:
            return transition
    return None
