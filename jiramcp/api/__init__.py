"""Jira REST API access."""

from .exceptions import UpstreamError
from .jira_client import JiraHTTP

__all__ = ["JiraHTTP", "UpstreamError"]
