from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Literal, Union

SessionStatus = Literal["in_progress", "completed"]
PromptType = Literal["question", "follow_up", "completed"]


@dataclass(frozen=True)
class TimingSummary:
    avg_response_delay_sec: float
    long_pauses_count: int
    # Counts individual recorded delays, so an answered follow-up adds a second entry.
    total_turns: int


@dataclass(frozen=True)
class CorrectionItem:
    original: str
    corrected: str
    reason: str


@dataclass(frozen=True)
class ImprovedBestAnswer:
    question: str
    answer: str


@dataclass(frozen=True)
class InterviewFeedback:
    timing_summary: TimingSummary
    corrections: tuple[CorrectionItem, ...] = ()
    improved_best_answer: ImprovedBestAnswer = ImprovedBestAnswer(question="", answer="")
    interview_tips: tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionTurn:
    question: str
    answer: str
    follow_up_question: str | None
    main_response_delay_sec: float
    follow_up_answer: str | None = None
    follow_up_response_delay_sec: float | None = None

    def with_follow_up_answer(self, answer: str, delay_sec: float) -> SessionTurn:
        return replace(self, follow_up_answer=answer, follow_up_response_delay_sec=delay_sec)


@dataclass(frozen=True)
class TranscriptEntry:
    question_number: int
    question: str
    answer: str
    follow_up_question: str | None
    follow_up_answer: str | None


@dataclass(frozen=True)
class InterviewerReply:
    reply_text: str
    follow_up_question: str | None = None


# Session phase. Exactly one of these is held by a session at any time.


@dataclass(frozen=True)
class AwaitingQuestion:
    pass


@dataclass(frozen=True)
class AwaitingFollowUp:
    question: str


@dataclass(frozen=True)
class Completed:
    result: InterviewFeedback


SessionPhase = Union[AwaitingQuestion, AwaitingFollowUp, Completed]


@dataclass(frozen=True)
class InterviewSession:
    """Immutable snapshot of one mock-interview run.

    Transitions build a new snapshot with :func:`dataclasses.replace`; the
    store only ever sees whole sessions.
    """

    id: str
    created_at: datetime
    allow_follow_ups: bool
    questions: tuple[str, ...]
    question_index: int = 0
    phase: SessionPhase = field(default_factory=AwaitingQuestion)
    turns: tuple[SessionTurn, ...] = ()

    @property
    def status(self) -> SessionStatus:
        return "completed" if isinstance(self.phase, Completed) else "in_progress"

    @property
    def result(self) -> InterviewFeedback | None:
        return self.phase.result if isinstance(self.phase, Completed) else None

    @property
    def awaiting_follow_up(self) -> bool:
        return isinstance(self.phase, AwaitingFollowUp)

    @property
    def pending_follow_up_question(self) -> str | None:
        return self.phase.question if isinstance(self.phase, AwaitingFollowUp) else None

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> str | None:
        if 0 <= self.question_index < len(self.questions):
            return self.questions[self.question_index]
        return None

    @property
    def questions_exhausted(self) -> bool:
        return self.question_index >= len(self.questions)
