from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

import pytest

# Ensure "src" is on sys.path for imports in tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from interviewcoach.core.models import (  # noqa: E402
    CorrectionItem,
    ImprovedBestAnswer,
    InterviewerReply,
    InterviewFeedback,
    TimingSummary,
    TranscriptEntry,
)
from interviewcoach.features.session import SessionManager  # noqa: E402


class FakeCoach:
    """Scripted coaching oracle.

    ``follow_ups`` is consumed one entry per main answer; ``None`` entries (or
    an exhausted list) mean no follow-up for that answer.
    """

    def __init__(self, follow_ups: Sequence[str | None] = (), *, fail_feedback: bool = False) -> None:
        self.follow_ups = list(follow_ups)
        self.fail_feedback = fail_feedback
        self.reply_calls: list[tuple[str, str]] = []
        self.close_calls: list[tuple[str, str, str, str]] = []
        self.feedback_calls: list[tuple[TimingSummary, list[TranscriptEntry]]] = []

    def interviewer_reply(self, question: str, answer: str) -> InterviewerReply:
        self.reply_calls.append((question, answer))
        follow_up = self.follow_ups.pop(0) if self.follow_ups else None
        return InterviewerReply(reply_text="Thanks for walking me through that.", follow_up_question=follow_up)

    def follow_up_close(self, question: str, answer: str, follow_up_question: str, follow_up_answer: str) -> str:
        self.close_calls.append((question, answer, follow_up_question, follow_up_answer))
        return "Great, thanks for clarifying."

    def feedback(self, timing_summary: TimingSummary, transcript: Sequence[TranscriptEntry]) -> InterviewFeedback:
        if self.fail_feedback:
            raise RuntimeError("feedback model unavailable")
        self.feedback_calls.append((timing_summary, list(transcript)))
        # Deliberately echo a wrong timing summary; the service must replace it.
        return InterviewFeedback(
            timing_summary=TimingSummary(avg_response_delay_sec=99.0, long_pauses_count=99, total_turns=99),
            corrections=(CorrectionItem(original="I has done", corrected="I have done", reason="Verb agreement."),),
            improved_best_answer=ImprovedBestAnswer(question="Q", answer="A concise answer."),
            interview_tips=("Lead with the outcome.",),
        )


class FakeTranscriber:
    def __init__(self, text: str = "transcribed answer") -> None:
        self.text = text
        self.calls: list[tuple[bytes, str]] = []

    def transcribe(self, audio: bytes, mime_type: str) -> str:
        self.calls.append((audio, mime_type))
        return self.text


class FakeSynthesizer:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def synthesize(self, text: str) -> bytes:
        self.calls.append(text)
        return b"ID3-fake-mp3"


@pytest.fixture
def coach() -> FakeCoach:
    return FakeCoach()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def manager(coach: FakeCoach, transcriber: FakeTranscriber, synthesizer: FakeSynthesizer) -> SessionManager:
    return SessionManager(coach, transcriber, synthesizer=synthesizer)
