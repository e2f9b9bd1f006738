import json
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from models.envelope import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcMessage,
    RequestEnvelope,
    jsonrpc_error,
    jsonrpc_result,
)
from services.dispatcher import RequestDispatcher

logger = structlog.get_logger(__name__)

SERVER_NAME = "cloud-architect"
SERVER_VERSION = "0.1.0"
DEFAULT_PROTOCOL_VERSION = "2024-11-05"


class McpProtocol:
    """JSON-RPC 2.0 handling shared by the stdio and SSE channels."""

    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self.dispatcher = dispatcher

    def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        try:
            raw = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("Unparseable frame", error=str(e))
            return jsonrpc_error(None, PARSE_ERROR, "Parse error")
        return self.handle_message(raw)

    def handle_message(self, raw: Any) -> Optional[Dict[str, Any]]:
        """
        Handle one decoded frame. Returns the response frame, or None when
        the frame expects no response (notifications, client responses).
        """
        req_id = raw.get("id") if isinstance(raw, dict) else None
        try:
            msg = JsonRpcMessage.model_validate(raw)
        except ValidationError:
            return jsonrpc_error(req_id if isinstance(req_id, (int, str)) else None, INVALID_REQUEST, "Invalid Request")

        if msg.method is None:
            # a response to something we never send; nothing to answer
            logger.debug("Ignoring frame without method", id=msg.id)
            return None
        if msg.is_notification:
            logger.debug("Notification received", method=msg.method)
            return None

        try:
            return self._handle_request(msg)
        except Exception as e:
            logger.error("Internal error handling request", method=msg.method, error=str(e), exc_info=True)
            return jsonrpc_error(msg.id, INTERNAL_ERROR, f"Internal error: {e}")

    def _handle_request(self, msg: JsonRpcMessage) -> Dict[str, Any]:
        params = msg.params or {}

        if msg.method == "initialize":
            version = params.get("protocolVersion")
            return jsonrpc_result(msg.id, {
                "protocolVersion": version if isinstance(version, str) and version else DEFAULT_PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            })

        if msg.method == "ping":
            return jsonrpc_result(msg.id, {})

        if msg.method == "tools/list":
            return jsonrpc_result(msg.id, {"tools": self.dispatcher.registry.describe()})

        if msg.method == "tools/call":
            try:
                arguments = params.get("arguments")
                request = RequestEnvelope(toolName=params.get("name"), arguments={} if arguments is None else arguments)
            except ValidationError as e:
                return jsonrpc_error(msg.id, INVALID_PARAMS, f"Invalid params: {e.errors()[0].get('msg', 'invalid')}")
            envelope = self.dispatcher.dispatch(request.toolName, request.arguments)
            return jsonrpc_result(msg.id, envelope.to_wire())

        return jsonrpc_error(msg.id, METHOD_NOT_FOUND, f"Method not found: {msg.method}")
