"""Custom exception classes for Jira API errors."""

import json
from typing import Any


class UpstreamError(Exception):
    """A non-success answer (or no answer at all) from the Jira REST API."""

    def __init__(
        self, message: str, endpoint: str, status_code: int, response_body: str
    ):
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    @property
    def details(self) -> Any:
        """The upstream error body, decoded when it is JSON."""
        if not self.response_body:
            return None
        try:
            return json.loads(self.response_body)
        except ValueError:
            return self.response_body

    def __str__(self):
        return (
            f"{super().__str__()}\n"
            f"Endpoint: {self.endpoint}\n"
            f"Status: {self.status_code}\n"
            f"Response: {self.response_body}"
        )
