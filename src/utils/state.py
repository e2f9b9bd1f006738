from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import threading


@dataclass
class Session:
    id: str
    sink: Any
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed: bool = False


class BaseSessionTable:
    def insert(self, session: Session) -> None:
        raise NotImplementedError
    def lookup(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError
    def remove(self, session_id: str) -> Optional[Session]:
        raise NotImplementedError


class InMemorySessionTable(BaseSessionTable):
    """Keyed collection of open sessions. The only shared mutable state of the server."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._data: Dict[str, Session] = {}

    def insert(self, session: Session) -> None:
        with self._lock:
            if session.id in self._data:
                raise KeyError(f"session {session.id} already registered")
            self._data[session.id] = session

    def lookup(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._data.get(session_id)

    def remove(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._data.pop(session_id, None)

    def ids(self) -> List[str]:
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._data
