"""Tests for the Jira REST client."""

from unittest.mock import patch

import pytest

from jiramcp.api.jira_client import JiraHTTP, find_transition
from jiramcp.exceptions import ConfigurationError

TRANSITIONS = {
    "transitions": [
        {"id": "11", "name": "To Do"},
        {"id": "21", "name": "In Progress"},
        {"id": "31", "name": "Done"},
    ]
}


def test_init(sample_config):
    client = JiraHTTP(sample_config)
    assert client.base_url == "https://test-jira.example.com/rest/api/3"
    assert client.headers["Authorization"].startswith("Basic ")
    assert client.headers["Content-Type"] == "application/json"


def test_init_requires_credentials(sample_config):
    sample_config["jira_api_token"] = ""
    with pytest.raises(ConfigurationError):
        JiraHTTP(sample_config)


def test_search_issues_params(sample_config):
    client = JiraHTTP(sample_config)
    with patch.object(client, "_request") as mock_request:
        mock_request.return_value = {"issues": [{"key": "A-1"}], "total": 7}
        result = client.search_issues(
            "project = A", start_at=5, max_results=10, fields=["summary", "status"]
        )

    args, kwargs = mock_request.call_args
    assert args == ("GET", "search/jql")
    assert kwargs["params"] == {
        "jql": "project = A",
        "startAt": 5,
        "maxResults": 10,
        "fields": "summary,status",
    }
    assert result == {"total": 7, "issues": [{"key": "A-1"}]}


def test_search_issues_total_falls_back_to_count(sample_config):
    client = JiraHTTP(sample_config)
    with patch.object(client, "_request") as mock_request:
        mock_request.return_value = {"issues": [{"key": "A-1"}, {"key": "A-2"}]}
        result = client.search_issues("project = A")
    assert result["total"] == 2


def test_create_issue_omits_unset_fields(sample_config):
    client = JiraHTTP(sample_config)
    with patch.object(client, "_request") as mock_request:
        client.create_issue("PROJ", "Title", "Task")

    args, kwargs = mock_request.call_args
    assert args == ("POST", "issue")
    assert kwargs["jeez"] == {
        "fields": {
            "project": {"key": "PROJ"},
            "summary": "Title",
            "issuetype": {"name": "Task"},
        }
    }


def test_create_issue_with_all_fields(sample_config):
    client = JiraHTTP(sample_config)
    with patch.object(client, "_request") as mock_request:
        client.create_issue(
            "PROJ",
            "Title",
            "Bug",
            description="Broken",
            priority="High",
            assignee="acc-1",
            labels=["a", "b"],
        )

    fields = mock_request.call_args.kwargs["jeez"]["fields"]
    assert fields["description"]["type"] == "doc"
    assert fields["description"]["content"][0]["content"][0]["text"] == "Broken"
    assert fields["priority"] == {"name": "High"}
    assert fields["assignee"] == {"id": "acc-1"}
    assert fields["labels"] == ["a", "b"]


class TestUpdateIssue:
    def test_fields_only(self, sample_config):
        client = JiraHTTP(sample_config)
        with patch.object(client, "_request") as mock_request:
            result = client.update_issue("PROJ-1", summary="New")

        mock_request.assert_called_once_with(
            "PUT", "issue/PROJ-1", jeez={"fields": {"summary": "New"}}
        )
        assert result == {"issueKey": "PROJ-1"}

    def test_status_only_skips_field_update(self, sample_config):
        client = JiraHTTP(sample_config)
        with patch.object(client, "_request") as mock_request:
            mock_request.side_effect = [TRANSITIONS, {}]
            result = client.update_issue("PROJ-1", status="done")

        calls = mock_request.call_args_list
        assert len(calls) == 2
        assert calls[0].args == ("GET", "issue/PROJ-1/transitions")
        assert calls[1].args == ("POST", "issue/PROJ-1/transitions")
        assert calls[1].kwargs["jeez"] == {"transition": {"id": "31"}}
        assert result == {"issueKey": "PROJ-1", "transitioned": True, "transition": "Done"}

    def test_unknown_status_still_succeeds(self, sample_config):
        client = JiraHTTP(sample_config)
        with patch.object(client, "_request") as mock_request:
            mock_request.side_effect = [{}, TRANSITIONS]
            result = client.update_issue("PROJ-1", priority="Low", status="Shipped")

        calls = mock_request.call_args_list
        assert calls[0].args == ("PUT", "issue/PROJ-1")
        assert calls[0].kwargs["jeez"] == {"fields": {"priority": {"name": "Low"}}}
        assert len(calls) == 2
        assert result["transitioned"] is False
        assert result["availableTransitions"] == ["To Do", "In Progress", "Done"]

    def test_nothing_to_do(self, sample_config):
        client = JiraHTTP(sample_config)
        with patch.object(client, "_request") as mock_request:
            result = client.update_issue("PROJ-1")
        mock_request.assert_not_called()
        assert result == {"issueKey": "PROJ-1"}


def test_find_transition_ignores_case():
    transitions = TRANSITIONS["transitions"]
    assert find_transition(transitions, "in progress")["id"] == "21"
    assert find_transition(transitions, "IN PROGRESS")["id"] == "21"
    assert find_transition(transitions, "Blocked") is None
    assert find_transition([], "Done") is None
