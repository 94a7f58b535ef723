"""Session feature: state machine service, store, schemas, and API router."""

from .router import create_session_router
from .schemas import (
    AnswerResult,
    FeedbackPayload,
    PromptPayload,
    SessionCreatedPayload,
    SessionResultPayload,
    TimingSummaryPayload,
)
from .service import AnswerSubmission, SessionConfig, SessionManager
from .store import InMemorySessionStore, SessionStore

__all__ = [
    "AnswerResult",
    "AnswerSubmission",
    "FeedbackPayload",
    "InMemorySessionStore",
    "PromptPayload",
    "SessionConfig",
    "SessionCreatedPayload",
    "SessionManager",
    "SessionResultPayload",
    "SessionStore",
    "TimingSummaryPayload",
    "create_session_router",
]
