import asyncio
import uuid
from collections import OrderedDict
from typing import Any, AsyncIterator, Dict, List, Optional

from services.protocol import McpProtocol
from utils.errors import UnroutableSessionError
from utils.logger import log_event
from utils.sse import sse_comment, sse_event
from utils.state import InMemorySessionTable, Session

_CLOSE = object()

# how many closed ids are remembered and never handed out again
RETIRED_WINDOW = 4096


class SessionManager:
    """
    Owns the network channel's sessions: handshake, routing of POSTed
    messages, and cleanup when a stream ends.

    Each session's sink is an asyncio.Queue drained by exactly one stream,
    so responses for one session are written one at a time and in order.
    """

    def __init__(
        self,
        protocol: McpProtocol,
        messages_path: str = "/messages",
        keepalive_seconds: float = 15.0,
        table: Optional[InMemorySessionTable] = None,
        retired_window: int = RETIRED_WINDOW,
    ) -> None:
        self.protocol = protocol
        self.messages_path = messages_path
        self.keepalive_seconds = keepalive_seconds
        self.table = table if table is not None else InMemorySessionTable()
        self.retired_window = retired_window
        self._retired: "OrderedDict[str, None]" = OrderedDict()

    def _new_id(self) -> str:
        while True:
            session_id = uuid.uuid4().hex
            if session_id not in self.table and session_id not in self._retired:
                return session_id

    def _retire(self, session_id: str) -> None:
        self._retired[session_id] = None
        while len(self._retired) > self.retired_window:
            self._retired.popitem(last=False)

    def is_retired(self, session_id: str) -> bool:
        return session_id in self._retired

    def endpoint_for(self, session: Session) -> str:
        return f"{self.messages_path}?sessionId={session.id}"

    async def open(self) -> Session:
        session = Session(id=self._new_id(), sink=asyncio.Queue())
        self.table.insert(session)
        log_event("info", "SSE session opened", session_id=session.id, open_sessions=len(self.table))
        return session

    def close(self, session_id: str) -> bool:
        session = self.table.remove(session_id)
        if session is None:
            return False
        session.closed = True
        self._retire(session_id)
        session.sink.put_nowait(_CLOSE)
        log_event("info", "SSE session closed", session_id=session_id, open_sessions=len(self.table))
        return True

    async def shutdown(self) -> None:
        for session_id in self.table.ids():
            self.close(session_id)

    def ids(self) -> List[str]:
        return self.table.ids()

    async def post(self, session_id: str, message: Any) -> Optional[Dict[str, Any]]:
        """
        Route one decoded message to its session. The response (if any) is
        queued for that session's stream and also returned.
        """
        session = self.table.lookup(session_id)
        if session is None:
            log_event("warning", "No session found for message", session_id=session_id)
            raise UnroutableSessionError(session_id)

        log_event("debug", "Message received", session_id=session_id)
        resp = self.protocol.handle_message(message)
        if resp is not None and not session.closed:
            session.sink.put_nowait(resp)
        return resp

    async def stream(self, session: Session) -> AsyncIterator[str]:
        """
        Body of the SSE response: the endpoint event, then one message event
        per queued response. The session is closed when the stream ends for
        any reason, including the client going away.
        """
        queue: asyncio.Queue = session.sink
        try:
            yield sse_event(self.endpoint_for(session), event="endpoint")
            while True:
                try:
                    item = await asyncio.wait_for(queue.get(), timeout=self.keepalive_seconds)
                except asyncio.TimeoutError:
                    yield sse_comment("ping")
                    continue
                if item is _CLOSE:
                    break
                yield sse_event(item, event="message")
        finally:
            self.close(session.id)
