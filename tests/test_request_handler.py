"""Tests for the HTTP request handler."""

import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from jiramcp.api.exceptions import UpstreamError
from jiramcp.api.request_handler import JiraRequestHandler

BASE_URL = "https://test-jira.example.com/rest/api/3"


@pytest.fixture
def handler():
    return JiraRequestHandler(
        BASE_URL,
        {"Authorization": "Basic abc", "Accept": "application/json"},
    )


def _response(payload, status=200):
    response = MagicMock()
    response.status = status
    response.read.return_value = json.dumps(payload).encode("utf-8") if payload else b""
    response.__enter__.return_value = response
    return response


@patch("jiramcp.api.request_handler.urllib.request.urlopen")
def test_get_with_params(mock_urlopen, handler):
    mock_urlopen.return_value = _response({"key": "A-1"})

    result = handler.request("GET", "issue/A-1", params={"fields": "summary"})

    assert result == {"key": "A-1"}
    request = mock_urlopen.call_args.args[0]
    assert request.full_url == f"{BASE_URL}/issue/A-1?fields=summary"
    assert request.get_method() == "GET"
    assert request.get_header("Authorization") == "Basic abc"
    assert mock_urlopen.call_args.kwargs["data"] is None
    assert mock_urlopen.call_args.kwargs["context"] is None


@patch("jiramcp.api.request_handler.urllib.request.urlopen")
def test_post_sends_json(mock_urlopen, handler):
    mock_urlopen.return_value = _response({"id": "1"})

    handler.request("POST", "issue", json_data={"fields": {"summary": "x"}})

    data = mock_urlopen.call_args.kwargs["data"]
    assert json.loads(data) == {"fields": {"summary": "x"}}


@patch("jiramcp.api.request_handler.urllib.request.urlopen")
def test_empty_body_is_empty_dict(mock_urlopen, handler):
    mock_urlopen.return_value = _response(None, status=204)
    assert handler.request("PUT", "issue/A-1", json_data={"fields": {}}) == {}


@patch("jiramcp.api.request_handler.urllib.request.urlopen")
def test_http_error_keeps_body(mock_urlopen, handler):
    body = json.dumps({"errorMessages": ["Issue does not exist"]})
    mock_urlopen.side_effect = urllib.error.HTTPError(
        f"{BASE_URL}/issue/NOPE-1", 404, "Not Found", {}, io.BytesIO(body.encode())
    )

    with pytest.raises(UpstreamError) as excinfo:
        handler.request("GET", "issue/NOPE-1")

    error = excinfo.value
    assert error.status_code == 404
    assert error.endpoint == "issue/NOPE-1"
    assert error.message == "Request failed with status code 404"
    assert error.response_body == body
    assert error.details == {"errorMessages": ["Issue does not exist"]}


@patch("jiramcp.api.request_handler.urllib.request.urlopen")
def test_url_error(mock_urlopen, handler):
    mock_urlopen.side_effect = urllib.error.URLError("connection refused")

    with pytest.raises(UpstreamError) as excinfo:
        handler.request("GET", "myself")

    assert excinfo.value.status_code == 0
    assert excinfo.value.details is None


def test_upstream_error_details_plain_text():
    error = UpstreamError("Request failed with status code 502", "search/jql", 502, "Bad gateway")
    assert error.details == "Bad gateway"
    assert "Status: 502" in str(error)


def test_insecure_context():
    handler = JiraRequestHandler(BASE_URL, {}, insecure=True)
    assert handler.ssl_context is not None
    assert handler.ssl_context.check_hostname is False


def test_curl_command_masks_credentials(handler):
    cmd = handler._get_curl_command(
        "GET", f"{BASE_URL}/myself", handler.headers, params={"a": "b"}
    )
    assert "Basic abc" not in cmd
    assert "${JIRA_BASIC_AUTH}" in cmd
    assert f"'{BASE_URL}/myself?a=b'" in cmd
