from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ResponseEnvelope(BaseModel):
    content: List[TextContent] = Field(default_factory=list)
    isError: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ResponseEnvelope":
        return cls(content=[TextContent(text=text)], isError=is_error)

    @classmethod
    def failure(cls, message: str, **extra: Any) -> "ResponseEnvelope":
        body = {"error": message, "status": "failed", **extra}
        return cls.text(json.dumps(body, indent=2, ensure_ascii=False), is_error=True)

    def to_wire(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"content": [c.model_dump() for c in self.content]}
        if self.isError:
            out["isError"] = True
        return out


class RequestEnvelope(BaseModel):
    toolName: str = Field(..., min_length=1)
    arguments: Any = Field(default_factory=dict)


class JsonRpcMessage(BaseModel):
    """Incoming JSON-RPC 2.0 frame. `id` is absent for notifications."""

    jsonrpc: str = "2.0"
    id: Optional[Union[int, str]] = None
    method: Optional[str] = None
    params: Optional[Dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


def jsonrpc_result(req_id: Optional[Union[int, str]], result: Dict[str, Any]) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "result": result}


def jsonrpc_error(req_id: Optional[Union[int, str]], code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}


PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
