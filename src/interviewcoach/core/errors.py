"""Typed failures surfaced by the session use-cases."""

from __future__ import annotations

__all__ = [
    "InterviewError",
    "InvalidInputError",
    "InvalidStateError",
    "SessionNotFoundError",
]


class InterviewError(Exception):
    """Base class for every failure the session core raises on purpose."""


class SessionNotFoundError(InterviewError, LookupError):
    def __init__(self, session_id: str) -> None:
        super().__init__(f"session '{session_id}' not found")
        self.session_id = session_id


class InvalidInputError(InterviewError, ValueError):
    pass


class InvalidStateError(InterviewError, RuntimeError):
    pass
