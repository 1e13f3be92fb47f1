"""Multi-channel mode: one MCP session per Server-Sent-Events connection."""

import uuid
from dataclasses import dataclass
from typing import AsyncIterator, Callable, Dict, List, Optional

import anyio
import uvicorn
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from mcp import types
from mcp.server import Server
from mcp.shared.message import SessionMessage
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from jiramcp import utils
from jiramcp.config import defaults

from .server import ServerContext, create_server


class SseSessionTransport:
    """The pair of streams tying one SSE connection to its MCP server.

    Client messages posted for this session go into ``read_stream``; what
    the server writes to ``write_stream`` is sent back as SSE events.
    """

    def __init__(self, session_id: str, message_path: str = defaults.MESSAGE_PATH):
        self.session_id = session_id
        self.message_path = message_path
        self._read_writer, self.read_stream = anyio.create_memory_object_stream(0)
        self.write_stream, self._write_reader = anyio.create_memory_object_stream(0)
        self.closed = False

    @property
    def endpoint(self) -> str:
        """Where the client must POST its messages for this session."""
        return f"{self.message_path}?sessionId={self.session_id}"

    async def events(self) -> AsyncIterator[Dict[str, str]]:
        """SSE events: the message endpoint first, then server messages."""
        yield {"event": "endpoint", "data": self.endpoint}
        async with self._write_reader:
            async for session_message in self._write_reader:
                yield {
                    "event": "message",
                    "data": session_message.message.model_dump_json(
                        by_alias=True, exclude_none=True
                    ),
                }

    async def deliver(self, message: types.JSONRPCMessage) -> None:
        """Hand one client message to this session's server."""
        await self._read_writer.send(SessionMessage(message))

    async def aclose(self) -> None:
        self.closed = True
        await self._read_writer.aclose()
        await self._write_reader.aclose()
        await self.read_stream.aclose()
        await self.write_stream.aclose()


@dataclass
class Session:
    """One open SSE client with its own transport and server."""

    session_id: str
    transport: SseSessionTransport
    server: Server

    async def serve(self) -> None:
        await self.server.run(
            self.transport.read_stream,
            self.transport.write_stream,
            self.server.create_initialization_options(),
        )


class SessionRegistry:
    """Open sessions by id. Only ``SessionManager`` holds one."""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def add(self, session: Session) -> None:
        if session.session_id in self._sessions:
            raise KeyError(f"Session already open: {session.session_id}")
        self._sessions[session.session_id] = session

    def remove(self, session_id: str) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def ids(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


class SessionManager:
    """Creates, looks up and releases SSE sessions."""

    def __init__(
        self,
        context: ServerContext,
        server_factory: Callable[[ServerContext], Server] = create_server,
    ):
        self.context = context
        self.server_factory = server_factory
        self._registry = SessionRegistry()

    def open_session(self) -> Session:
        session_id = uuid.uuid4().hex
        session = Session(
            session_id=session_id,
            transport=SseSessionTransport(session_id),
            server=self.server_factory(self.context),
        )
        self._registry.add(session)
        utils.log(f"Created transport with sessionId: {session_id}")
        return session

    async def close_session(self, session_id: str) -> None:
        session = self._registry.remove(session_id)
        if session is None:
            return
        await session.transport.aclose()
        utils.log(f"SSE connection closed for session: {session_id}")

    def get(self, session_id: Optional[str]) -> Optional[Session]:
        if not session_id:
            return None
        return self._registry.get(session_id)

    def session_ids(self) -> List[str]:
        return self._registry.ids()

    def __len__(self) -> int:
        return len(self._registry)


class SseEndpoint:
    """ASGI endpoint holding one SSE stream open per client."""

    def __init__(self, manager: SessionManager):
        self.manager = manager

    async def _serve(self, session: Session) -> None:
        try:
            await session.serve()
        except Exception as e:  # pylint: disable=broad-exception-caught
            utils.log(f"Session {session.session_id} failed: {e}", level="ERROR")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        utils.log("New SSE connection established")
        session = self.manager.open_session()
        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._serve, session)
                response = EventSourceResponse(session.transport.events())
                await response(scope, receive, send)
                # Client gone: unregister before waiting on in-flight calls.
                await self.manager.close_session(session.session_id)
                tg.cancel_scope.cancel()
        finally:
            with anyio.CancelScope(shield=True):
                await self.manager.close_session(session.session_id)


def create_app(manager: SessionManager) -> FastAPI:
    """Build the HTTP application serving the SSE sessions."""
    app = FastAPI(title=defaults.SERVER_NAME)
    app.state.sessions = manager

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "server": defaults.SERVER_NAME}

    @app.post(defaults.MESSAGE_PATH)
    async def post_message(
        request: Request, session_id: Optional[str] = Query(None, alias="sessionId")
    ):
        utils.log(
            f"Received message for session: {session_id}",
            level="DEBUG",
            verbose=manager.context.verbose,
            verbose_only=True,
        )
        session = manager.get(session_id)
        if session is None:
            utils.log(f"No transport found for session: {session_id}", level="WARNING")
            return JSONResponse({"error": "Session not found"}, status_code=404)

        body = await request.body()
        try:
            message = types.JSONRPCMessage.model_validate_json(body)
        except ValidationError as e:
            return JSONResponse(
                {"error": "Invalid message", "details": str(e)}, status_code=400
            )

        try:
            await session.transport.deliver(message)
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            return JSONResponse({"error": "Session not found"}, status_code=404)
        return PlainTextResponse("Accepted", status_code=202)

    app.router.routes.append(
        Route(defaults.SSE_PATH, endpoint=SseEndpoint(manager), methods=["GET"])
    )
    return app


def run_sse(
    context: ServerContext, port: int, host: str = defaults.DEFAULT_HOST
) -> None:
    """Serve SSE sessions over HTTP until interrupted."""
    app = create_app(SessionManager(context))
    utils.log(f"JIRA MCP Server running on http://localhost:{port}")
    utils.log(f"SSE endpoint: http://localhost:{port}{defaults.SSE_PATH}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="debug" if context.verbose else "info",
    )
