from unittest.mock import MagicMock

import pytest
import yaml

from jiramcp.mcp.server import ServerContext


def adf_doc(*paragraphs):
    """Build an ADF document with one paragraph per string."""
    return {
        "type": "doc",
        "version": 1,
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": text}]}
            for text in paragraphs
        ],
    }


@pytest.fixture
def sample_config():
    """Return a sample configuration dictionary."""
    return {
        "jira_url": "https://test-jira.example.com",
        "jira_email": "tester@example.com",
        "jira_api_token": "secret-token",
        "port": None,
        "transport": None,
        "insecure": False,
        "verbose": False,
    }


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file with a general section."""
    config_file = tmp_path / "config.yaml"
    with open(config_file, "w") as f:
        yaml.dump(
            {
                "general": {
                    "jira_url": "file-jira.example.com/",
                    "jira_email": "file@example.com",
                    "jira_api_token": "file-token",
                    "port": "4000",
                }
            },
            f,
        )
    return config_file


@pytest.fixture
def sample_issues():
    """Return a search answer in the shape Jira sends it."""
    return {
        "issues": [
            {
                "id": "10001",
                "key": "TEST-123",
                "self": "https://test-jira.example.com/rest/api/3/issue/10001",
                "fields": {
                    "summary": "Test issue 1",
                    "issuetype": {"name": "Story"},
                    "assignee": {"displayName": "Test User"},
                    "reporter": {"displayName": "Reporter User"},
                    "status": {"name": "In Progress"},
                    "priority": {"name": "Major"},
                    "created": "2023-01-01T10:00:00.000+0000",
                    "updated": "2023-01-02T11:00:00.000+0000",
                    "description": adf_doc("Test description for issue 1"),
                    "components": [{"name": "Backend"}, {"name": "API"}],
                    "labels": ["test"],
                    "issuelinks": [
                        {
                            "type": {"name": "Blocks"},
                            "inwardIssue": {
                                "key": "TEST-900",
                                "fields": {
                                    "status": {"name": "Ready for QA"},
                                    "issuetype": {"name": "Bug"},
                                    "summary": "Blocking bug",
                                },
                            },
                        },
                        {
                            "type": {"name": "Relates"},
                            "outwardIssue": {"key": "TEST-901"},
                        },
                    ],
                    "comment": {
                        "comments": [
                            {
                                "author": {"displayName": "Old Commenter"},
                                "created": "2023-01-01T12:00:00.000+0000",
                                "updated": "2023-01-01T12:00:00.000+0000",
                                "body": adf_doc("first look"),
                            },
                            {
                                "author": {"displayName": "Test User"},
                                "created": "2023-01-02T10:00:00.000+0000",
                                "updated": "2023-01-02T10:00:00.000+0000",
                                "body": adf_doc("still", "in progress"),
                            },
                        ],
                        "total": 2,
                    },
                },
            },
            {
                "id": "10002",
                "key": "TEST-124",
                "self": "https://test-jira.example.com/rest/api/3/issue/10002",
                "fields": {
                    "summary": "Test issue 2",
                    "issuetype": {"name": "Task"},
                    "assignee": None,
                    "status": {"name": "To Do"},
                    "priority": {"name": "Minor"},
                    "created": "2023-01-03T10:00:00.000+0000",
                    "updated": "2023-01-04T11:00:00.000+0000",
                    "description": None,
                },
            },
        ],
        "total": 2,
    }


@pytest.fixture
def mock_context(sample_config):
    """A ServerContext whose Jira client is a mock."""
    context = MagicMock(spec=ServerContext)
    context.config = sample_config
    context.verbose = False
    context.jira_url = sample_config["jira_url"]
    context.jira = MagicMock()
    return context
