from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...core.models import InterviewFeedback, TimingSummary

__all__ = [
    "AnswerResult",
    "CorrectionPayload",
    "FeedbackPayload",
    "ImprovedAnswerPayload",
    "PromptPayload",
    "SessionCreatedPayload",
    "SessionResultPayload",
    "TimingSummaryPayload",
]

Status = Literal["in_progress", "completed"]
PromptKind = Literal["question", "follow_up", "completed"]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    def to_dict(self) -> dict[str, Any]:
        # Nulls are part of the contract (prompt, nextPrompt, result), so keep them.
        return self.model_dump(by_alias=True, mode="json")


class TimingSummaryPayload(_APIModel):
    avg_response_delay_sec: float
    long_pauses_count: int
    total_turns: int

    @classmethod
    def from_summary(cls, summary: TimingSummary) -> TimingSummaryPayload:
        return cls(
            avg_response_delay_sec=summary.avg_response_delay_sec,
            long_pauses_count=summary.long_pauses_count,
            total_turns=summary.total_turns,
        )


class CorrectionPayload(_APIModel):
    original: str
    corrected: str
    reason: str


class ImprovedAnswerPayload(_APIModel):
    question: str
    answer: str


class FeedbackPayload(_APIModel):
    timing_summary: TimingSummaryPayload
    corrections: list[CorrectionPayload]
    improved_best_answer: ImprovedAnswerPayload
    interview_tips: list[str]

    @classmethod
    def from_feedback(cls, feedback: InterviewFeedback) -> FeedbackPayload:
        return cls(
            timing_summary=TimingSummaryPayload.from_summary(feedback.timing_summary),
            corrections=[
                CorrectionPayload(original=item.original, corrected=item.corrected, reason=item.reason)
                for item in feedback.corrections
            ],
            improved_best_answer=ImprovedAnswerPayload(
                question=feedback.improved_best_answer.question,
                answer=feedback.improved_best_answer.answer,
            ),
            interview_tips=list(feedback.interview_tips),
        )


class SessionCreatedPayload(_APIModel):
    session_id: str
    status: Status
    allow_follow_ups: bool
    question_number: int
    total_questions: int
    prompt_type: PromptKind
    prompt: str


class PromptPayload(_APIModel):
    session_id: str
    status: Status
    prompt: str | None
    prompt_type: PromptKind
    question_number: int
    total_questions: int


class AnswerResult(_APIModel):
    session_id: str
    status: Status
    used_transcript: str
    interviewer_message: str
    next_prompt: str | None
    prompt_type: PromptKind
    result: FeedbackPayload | None = None


class SessionResultPayload(_APIModel):
    session_id: str
    status: Status
    result: FeedbackPayload | None = None
