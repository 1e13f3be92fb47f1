"""Pick the transport once at startup and run the server on it."""

import sys
from typing import Any, Dict, Optional

import anyio

from jiramcp import utils
from jiramcp.config import defaults
from jiramcp.exceptions import TransportError

from . import sse, stdio
from .server import ServerContext


def select_transport(
    override: Optional[str], stdin_is_tty: bool, port: Optional[int]
) -> str:
    """Decide between the stdio and sse transports.

    An explicit override wins. Otherwise a piped stdin means an MCP client
    launched us, so stdio; a port together with an interactive terminal
    means sse; anything else falls back to stdio.
    """
    if override:
        return override.lower()
    if not stdin_is_tty:
        return defaults.TRANSPORT_STDIO
    if port:
        return defaults.TRANSPORT_SSE
    return defaults.TRANSPORT_STDIO


def serve(config: Dict[str, Any], host: str = defaults.DEFAULT_HOST) -> None:
    """Run the server on the transport the configuration selects."""
    transport = select_transport(
        config.get("transport"), sys.stdin.isatty(), config.get("port")
    )
    utils.log(
        f"Selected {transport} transport",
        level="DEBUG",
        verbose=config.get("verbose", False),
        verbose_only=True,
    )

    if transport == defaults.TRANSPORT_STDIO:
        stdio.install_gate()
        context = ServerContext(config)
        try:
            anyio.run(stdio.run_stdio, context)
        except TransportError as e:
            utils.log(f"{e}, shutting down", level="WARNING")
        return

    stdio.release_gate()
    context = ServerContext(config)
    sse.run_sse(context, config.get("port") or defaults.DEFAULT_PORT, host=host)
