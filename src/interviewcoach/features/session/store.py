from __future__ import annotations

import threading
from typing import Protocol

from ...core.models import InterviewSession

__all__ = ["InMemorySessionStore", "SessionStore"]


class SessionStore(Protocol):
    """Whole-record persistence for sessions keyed by id."""

    def create(self, session: InterviewSession) -> None: ...

    def find_by_id(self, session_id: str) -> InterviewSession | None: ...

    def save(self, session: InterviewSession) -> None: ...


class InMemorySessionStore:
    """Process-local store.

    Sessions are frozen values, so handing out the stored instance cannot
    leak mutations back into the store.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, InterviewSession] = {}
        self._lock = threading.Lock()

    def create(self, session: InterviewSession) -> None:
        with self._lock:
            if session.id in self._sessions:
                raise ValueError(f"session '{session.id}' already exists")
            self._sessions[session.id] = session

    def find_by_id(self, session_id: str) -> InterviewSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def save(self, session: InterviewSession) -> None:
        with self._lock:
            self._sessions[session.id] = session
