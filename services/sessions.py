"""EditorSessionStore — in-memory editor graphs keyed by editor id."""

from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Callable, TypeVar

from config import settings
from schemas.graph import EditorGraph
from services.errors import EditorNotFound

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EditorSessionStore:
    """Holds one :class:`EditorGraph` per editor session.

    Graphs are immutable; :meth:`apply` swaps in the graph an operation
    returns, under the lock, so an operation that raises stores nothing.
    Sessions idle for longer than ``ttl`` seconds are dropped on access.
    """

    def __init__(self, ttl: int | None = None):
        self._sessions: dict[str, tuple[float, EditorGraph]] = {}
        self._lock = threading.Lock()
        self._ttl = ttl if ttl is not None else settings.SESSION_TTL_SECONDS

    def create(self) -> str:
        editor_id = secrets.token_hex(8)
        with self._lock:
            self._expire()
            self._sessions[editor_id] = (time.monotonic(), EditorGraph())
        logger.info("Created editor session %s", editor_id)
        return editor_id

    def get(self, editor_id: str) -> EditorGraph:
        with self._lock:
            self._expire()
            return self._touch(editor_id)

    def apply(self, editor_id: str, operation: Callable[[EditorGraph], tuple[EditorGraph, T]]) -> T:
        """Run *operation* on the session's graph and store the graph it returns."""
        with self._lock:
            self._expire()
            graph, result = operation(self._touch(editor_id))
            self._sessions[editor_id] = (time.monotonic(), graph)
            return result

    def delete(self, editor_id: str) -> None:
        with self._lock:
            if self._sessions.pop(editor_id, None) is None:
                raise EditorNotFound(editor_id)
        logger.info("Deleted editor session %s", editor_id)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _touch(self, editor_id: str) -> EditorGraph:
        entry = self._sessions.get(editor_id)
        if entry is None:
            raise EditorNotFound(editor_id)
        graph = entry[1]
        self._sessions[editor_id] = (time.monotonic(), graph)
        return graph

    def _expire(self) -> None:
        if self._ttl <= 0:
            return
        cutoff = time.monotonic() - self._ttl
        stale = [k for k, (ts, _) in self._sessions.items() if ts < cutoff]
        for k in stale:
            del self._sessions[k]
        if stale:
            logger.info("Expired %d idle editor session(s)", len(stale))


editor_sessions = EditorSessionStore()


def get_store() -> EditorSessionStore:
    """FastAPI dependency returning the process-wide session store."""
    return editor_sessions
