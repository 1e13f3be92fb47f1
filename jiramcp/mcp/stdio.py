"""Single-channel mode: one MCP session over the process stdin/stdout."""

import os
import sys
from io import TextIOWrapper
from typing import List, Optional, TextIO

import anyio
from mcp.server.stdio import stdio_server

from jiramcp import utils
from jiramcp.config import defaults
from jiramcp.exceptions import TransportError

from .server import ServerContext, create_server


class _GateBuffer:
    """Binary view of an ``OutputGate``; bytes are decoded and gated."""

    closed = False

    def __init__(self, gate: "OutputGate"):
        self.gate = gate

    def writable(self) -> bool:
        return True

    def readable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return False

    def write(self, data: bytes) -> int:
        self.gate.write(bytes(data).decode(self.gate.encoding, "replace"))
        return len(data)

    def flush(self) -> None:
        self.gate.flush()

    def isatty(self) -> bool:
        return False


class OutputGate:
    """Stand-in for ``sys.stdout`` protecting the protocol framing.

    Until the transport is attached nothing reaches the real stdout: writes
    are held back (up to ``limit`` chunks, the rest dropped) and replayed on
    stderr at attach time. Once attached, writes pass straight through.

    Like a real text stream it only accepts ``str``; bytes go through
    ``buffer``.
    """

    def __init__(
        self,
        stream: TextIO,
        fallback: TextIO,
        limit: int = defaults.GATE_BUFFER_LIMIT,
    ):
        self.stream = stream
        self.fallback = fallback
        self.limit = limit
        self.attached = False
        self.dropped = 0
        self.buffer = _GateBuffer(self)
        self._pending: List[str] = []

    @property
    def encoding(self) -> str:
        return getattr(self.stream, "encoding", None) or "utf-8"

    @property
    def errors(self) -> Optional[str]:
        return getattr(self.stream, "errors", None)

    @property
    def pending(self) -> List[str]:
        return list(self._pending)

    def write(self, text: str) -> int:
        if not isinstance(text, str):
            raise TypeError(
                f"write() argument must be str, not {type(text).__name__}"
            )
        if self.attached:
            return self.stream.write(text)
        if len(self._pending) < self.limit:
            self._pending.append(text)
        else:
            self.dropped += 1
        return len(text)

    def writelines(self, lines) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        if self.attached:
            self.stream.flush()

    def isatty(self) -> bool:
        return False

    def fileno(self) -> int:
        return self.stream.fileno()

    def _replay(self, target: TextIO) -> None:
        pending, self._pending = self._pending, []
        if pending:
            target.write("".join(pending))
            target.flush()
        if self.dropped:
            utils.log(
                f"Dropped {self.dropped} writes made before the transport was ready",
                level="WARNING",
            )
            self.dropped = 0

    def attach(self) -> None:
        """Switch to pass-through; held back output goes to the fallback."""
        if self.attached:
            return
        self.attached = True
        self._replay(self.fallback)

    def release(self) -> None:
        """Hand back held back output to the real stream."""
        self._replay(self.stream)


def install_gate() -> OutputGate:
    """Put an ``OutputGate`` in front of stdout, once."""
    if isinstance(sys.stdout, OutputGate):
        return sys.stdout
    gate = OutputGate(sys.stdout, sys.stderr)
    sys.stdout = gate
    return gate


def release_gate() -> None:
    """Restore the real stdout, replaying anything held back onto it."""
    gate = sys.stdout
    if not isinstance(gate, OutputGate):
        return
    sys.stdout = gate.stream
    gate.release()


def is_broken_pipe(error: BaseException) -> bool:
    """Whether ``error`` is, or wraps, a broken pipe on the output side."""
    if isinstance(error, BrokenPipeError):
        return True
    return any(is_broken_pipe(e) for e in getattr(error, "exceptions", ()))


def _silence_stdout(stream: TextIO) -> None:
    # Point the closed descriptor at devnull so the final flush at exit
    # does not fail again.
    try:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, stream.fileno())
    except (OSError, ValueError):
        pass


async def run_stdio(context: ServerContext) -> None:
    """Serve the single implicit session until stdin closes.

    Raises TransportError when the client closes its end of stdout.
    """
    gate = install_gate()
    server = create_server(context)
    stdout = anyio.wrap_file(TextIOWrapper(gate.stream.buffer, encoding="utf-8"))

    utils.log("Starting JIRA MCP Server in stdio mode...")
    try:
        async with stdio_server(stdout=stdout) as (read_stream, write_stream):
            gate.attach()
            utils.log("JIRA MCP Server connected via stdio")
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    except Exception as e:  # pylint: disable=broad-exception-caught
        if is_broken_pipe(e):
            _silence_stdout(gate.stream)
            raise TransportError("Client closed the stdio channel") from e
        raise
