import json
from typing import Any, Dict, Optional, Union


def sse_event(data: Union[Dict[str, Any], str], event: Optional[str] = None) -> str:
    """Format 1 SSE frame"""
    payload = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
    lines = [f"event: {event}"] if event else []
    lines += [f"data: {line}" for line in payload.splitlines() or [""]]
    return "\n".join(lines) + "\n\n"


def sse_comment(text: str = "ping") -> str:
    return f": {text}\n\n"
