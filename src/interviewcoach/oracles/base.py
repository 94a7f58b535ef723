"""Capabilities the session core borrows from the outside world."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..core.models import InterviewerReply, InterviewFeedback, TimingSummary, TranscriptEntry

__all__ = ["InterviewCoach", "SpeechSynthesizer", "Transcriber"]


class Transcriber(Protocol):
    def transcribe(self, audio: bytes, mime_type: str) -> str: ...


class InterviewCoach(Protocol):
    def interviewer_reply(self, question: str, answer: str) -> InterviewerReply: ...

    def follow_up_close(
        self,
        question: str,
        answer: str,
        follow_up_question: str,
        follow_up_answer: str,
    ) -> str: ...

    def feedback(
        self,
        timing_summary: TimingSummary,
        transcript: Sequence[TranscriptEntry],
    ) -> InterviewFeedback: ...


class SpeechSynthesizer(Protocol):
    def synthesize(self, text: str) -> bytes: ...
