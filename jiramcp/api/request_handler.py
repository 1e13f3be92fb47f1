"""HTTP request handler for Jira API."""

import json
import ssl
import urllib.error
import urllib.request
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from ..utils import log
from .exceptions import UpstreamError


class JiraRequestHandler:
    """Handles HTTP requests to Jira API."""

    def __init__(
        self,
        base_url: str,
        headers: Dict[str, str],
        verbose: bool = False,
        insecure: bool = False,
    ):
        self.base_url = base_url
        self.headers = headers
        self.verbose = verbose
        self.insecure = insecure
        self.ssl_context = self._make_ssl_context() if insecure else None

    def _make_ssl_context(self) -> ssl.SSLContext:
        """Setup SSL context that doesn't verify certificates."""
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

        log("SSL certificate verification disabled", level="WARNING")
        return context

    def _get_curl_command(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate an equivalent curl command for debugging purposes."""
        curl_parts = [f"curl -X {method}"]

        if self.insecure:
            curl_parts.append("-k")

        for key, value in headers.items():
            if key == "Authorization":
                value = "Basic ${JIRA_BASIC_AUTH}"
            curl_parts.append(f'-H "{key}: {value}"')

        final_url = url
        if params:
            final_url = f"{url}?{urlencode(params)}"

        if json_data:
            curl_parts.append(f"-d '{json.dumps(json_data)}'")

        curl_parts.append(f"'{final_url}'")
        return " ".join(curl_parts)

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request to Jira API.

        Raises UpstreamError for any non-2xx answer, keeping the response
        body untouched, and for network failures (status 0).
        """
        url = f"{self.base_url}/{endpoint}"

        if self.verbose:
            log(f"API call Requested: {method} {url}", level="DEBUG")
            if params:
                log(f"Parameters: {params}", level="DEBUG")
            if json_data:
                log(f"Request body: {json_data}", level="DEBUG")
            curl_cmd = self._get_curl_command(
                method, url, self.headers, params, json_data
            )
            log(f"curl command :\n{curl_cmd}", level="DEBUG")

        full_url = f"{url}?{urlencode(params)}" if params else url

        request = urllib.request.Request(full_url, method=method)
        for key, value in self.headers.items():
            request.add_header(key, value)

        data = None
        if json_data is not None:
            data = json.dumps(json_data).encode("utf-8")

        try:
            return self._execute_request(request, data)
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            log(f"HTTP error occurred: {e}", level="ERROR")
            raise UpstreamError(
                f"Request failed with status code {e.code}", endpoint, e.code, body
            ) from e
        except urllib.error.URLError as e:
            log(f"URL error occurred: {e}", level="ERROR")
            raise UpstreamError(f"URL error: {e.reason}", endpoint, 0, "") from e

    def _execute_request(
        self, request: urllib.request.Request, data: Optional[bytes]
    ) -> Dict[str, Any]:
        """Execute the HTTP request and parse response."""
        with urllib.request.urlopen(
            request, data=data, context=self.ssl_context
        ) as response:
            status_code = response.status
            response_text = response.read().decode("utf-8")
            response_data = json.loads(response_text) if response_text else {}

        if self.verbose:
            log(f"Response status: {status_code}", level="DEBUG")

        return response_data
