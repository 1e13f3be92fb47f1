"""Configuration utilities for jira-mcp-server."""

import pathlib
from typing import Optional

import yaml

from jiramcp import utils
from jiramcp.exceptions import ConfigurationError

from . import defaults

FILE_KEYS = [
    "jira_url",
    "jira_email",
    "jira_api_token",
    "port",
    "transport",
    "insecure",
]


def make_config(config: dict, config_file: pathlib.Path) -> dict:
    """Build the runtime configuration and fail early on missing credentials."""
    config = read_config(config, pathlib.Path(config_file))

    missing = [
        (env, example)
        for key, (env, example) in defaults.REQUIRED_SETTINGS.items()
        if not config.get(key)
    ]
    if missing:
        lines = ["Missing required environment variables:"]
        for env, example in missing:
            lines.append(f"- {env} ({example})" if example else f"- {env}")
        raise ConfigurationError("\n".join(lines))

    utils.log(
        f"Using Jira at {config['jira_url']} as {config['jira_email']}",
        verbose=config.get("verbose", False),
        verbose_only=True,
    )
    return config


def read_config(ret: dict, config_file: pathlib.Path) -> dict:
    """Merge settings from the yaml config file under the values already set.

    Values given on the command line (or through their environment
    variables) win over the file.
    """

    def checks():
        url = ret.get("jira_url")
        if url:
            if not url.startswith(("https://", "http://")):
                url = "https://" + url
            ret["jira_url"] = url.rstrip("/")

        if ret.get("port") is not None:
            try:
                ret["port"] = int(ret["port"])
            except ValueError as e:
                raise ConfigurationError(f"Invalid port: {ret['port']}") from e

        if ret.get("transport"):
            transport = str(ret["transport"]).lower()
            if transport not in defaults.TRANSPORTS:
                raise ConfigurationError(
                    f"Invalid transport: {ret['transport']} "
                    f"(expected one of {', '.join(defaults.TRANSPORTS)})"
                )
            ret["transport"] = transport

        if "insecure" not in ret or ret["insecure"] is None:
            ret["insecure"] = False

    if not config_file.exists():
        checks()
        return ret

    with config_file.open() as file:
        config = yaml.safe_load(file) or {}

    general = config.get("general") or {}

    def from_file(x) -> Optional[object]:
        return general.get(x) if x in general and general.get(x) else None

    for x in FILE_KEYS:
        if ret.get(x) in (None, "", False) and from_file(x) is not None:
            ret[x] = from_file(x)
    checks()
    return ret
