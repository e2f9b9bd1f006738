import contextlib
import json
import socket

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response, StreamingResponse
from starlette.routing import Route

from configs.settings import Settings
from sse.session_manager import SessionManager
from utils.errors import StartupError, UnroutableSessionError
from utils.logger import log_event

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def create_app(manager: SessionManager, messages_path: str = "/messages") -> Starlette:
    """Build the HTTP app for the network channel around one SessionManager."""

    @contextlib.asynccontextmanager
    async def lifespan(_: Starlette):
        yield
        await manager.shutdown()

    async def health(_: Request) -> Response:
        return PlainTextResponse("Cloud Architect MCP Server is running")

    async def sse(request: Request) -> Response:
        client = request.client.host if request.client else "unknown"
        log_event("info", "SSE connection request received", client=client)
        session = await manager.open()
        return StreamingResponse(
            manager.stream(session),
            media_type="text/event-stream",
            headers={**SSE_HEADERS, "X-Session-Id": session.id},
        )

    async def messages(request: Request) -> Response:
        session_id = request.query_params.get("sessionId")
        if not session_id:
            return PlainTextResponse("sessionId is required", status_code=400)
        try:
            body = json.loads(await request.body())
        except (json.JSONDecodeError, UnicodeDecodeError):
            log_event("warning", "Could not parse message", session_id=session_id)
            return PlainTextResponse("Could not parse message", status_code=400)
        try:
            await manager.post(session_id, body)
        except UnroutableSessionError as e:
            return PlainTextResponse(str(e), status_code=400)
        return PlainTextResponse("Accepted", status_code=202)

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Route("/sse", sse, methods=["GET"]),
            Route(messages_path, messages, methods=["POST"]),
        ],
        middleware=[Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])],
        lifespan=lifespan,
    )


def bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise StartupError(f"Could not bind {host}:{port}: {e}") from e
    sock.set_inheritable(True)
    return sock


def run_http_server(settings: Settings, manager: SessionManager) -> None:
    sock = bind_socket(settings.host, settings.port)
    app = create_app(manager, settings.messages_path)
    config = uvicorn.Config(app, log_level=settings.log_level.lower(), lifespan="on")
    log_event("info", "Cloud Architect MCP Server running on SSE", url=f"http://{settings.host}:{settings.port}")
    log_event("info", "To connect, use the /sse endpoint; health check at /health")
    uvicorn.Server(config).run(sockets=[sock])
