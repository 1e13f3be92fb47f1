"""Authentication handler for the Jira API."""

import base64
from typing import Dict

from jiramcp.exceptions import ConfigurationError


class BasicAuthenticator:
    """Basic authentication with the account email and an API token."""

    def __init__(self, email: str, api_token: str):
        if not email or not api_token:
            raise ConfigurationError(
                "Basic authentication requires both JIRA_EMAIL and JIRA_API_TOKEN"
            )
        self.email = email
        self.api_token = api_token

    def get_headers(self) -> Dict[str, str]:
        auth_string = f"{self.email}:{self.api_token}"
        encoded_auth = base64.b64encode(auth_string.encode("utf-8")).decode("utf-8")
        return {"Authorization": f"Basic {encoded_auth}"}
