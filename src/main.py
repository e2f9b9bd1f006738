import argparse
import sys
from typing import List, Optional

from configs.settings import Settings, load_settings
from services.dispatcher import RequestDispatcher
from services.protocol import McpProtocol
from tools.registry import build_registry
from utils.errors import StartupError
from utils.logger import configure_logging, log_event


def build_protocol() -> McpProtocol:
    return McpProtocol(RequestDispatcher(build_registry()))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Azure Architecture Advisor MCP server")
    parser.add_argument("--mode", choices=["stdio", "sse"], default=None)
    parser.add_argument("--sse", action="store_true", help="shortcut for --mode sse")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--log-level", default=None)
    return parser.parse_args(argv)


def serve(settings: Settings) -> None:
    protocol = build_protocol()
    if settings.use_sse:
        from sse.run_http_server import run_http_server
        from sse.session_manager import SessionManager

        manager = SessionManager(protocol, settings.messages_path, settings.keepalive_seconds)
        log_event("info", "Starting Azure Architecture Advisor MCP Server with SSE transport", port=settings.port)
        run_http_server(settings, manager)
    else:
        from stdio.run_stdio_server import run_stdio_server

        log_event("info", "Starting Azure Architecture Advisor MCP Server with stdio transport")
        run_stdio_server(protocol)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    transport = "sse" if args.sse else args.mode
    try:
        settings = load_settings(transport=transport, host=args.host, port=args.port, log_level=args.log_level)
    except StartupError as e:
        configure_logging()
        log_event("error", "Fatal error running server", error=str(e))
        return 1

    configure_logging(settings.log_level, settings.log_format)
    try:
        serve(settings)
    except StartupError as e:
        log_event("error", "Fatal error running server", error=str(e))
        return 1
    except KeyboardInterrupt:
        log_event("info", "Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
