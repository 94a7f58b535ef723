from __future__ import annotations

import base64
import binascii
import logging
import math
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from ...core.catalog import QUESTION_BANK, select_questions
from ...core.errors import InvalidInputError, InvalidStateError, SessionNotFoundError
from ...core.models import (
    AwaitingFollowUp,
    AwaitingQuestion,
    Completed,
    InterviewSession,
    SessionTurn,
    TranscriptEntry,
)
from ...core.timing import DELAY_PRECISION, compute_timing_summary
from ...oracles.base import InterviewCoach, SpeechSynthesizer, Transcriber
from .concurrency import run_blocking
from .schemas import (
    AnswerResult,
    FeedbackPayload,
    PromptPayload,
    SessionCreatedPayload,
    SessionResultPayload,
)
from .store import InMemorySessionStore, SessionStore

__all__ = [
    "AnswerSubmission",
    "SessionConfig",
    "SessionManager",
    "build_transcript",
    "created_payload",
    "normalize_delay",
    "prompt_payload",
]

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "audio/wav"
MAX_SPEECH_CHARS = 5000


@dataclass(frozen=True)
class SessionConfig:
    """Options accepted when a session is created; ``None`` means default."""

    question_count: int | None = None
    allow_follow_ups: bool | None = None


@dataclass(frozen=True)
class AnswerSubmission:
    answer_text: str | None = None
    audio_base64: str | None = None
    mime_type: str | None = None
    response_delay_sec: float | None = None


def normalize_delay(value: float | None) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError("responseDelaySec must be a non-negative number.")
    if not math.isfinite(value) or value < 0:
        raise InvalidInputError("responseDelaySec must be a non-negative number.")
    return round(float(value), DELAY_PRECISION)


def build_transcript(turns: tuple[SessionTurn, ...]) -> list[TranscriptEntry]:
    return [
        TranscriptEntry(
            question_number=index,
            question=turn.question,
            answer=turn.answer,
            follow_up_question=turn.follow_up_question,
            follow_up_answer=turn.follow_up_answer,
        )
        for index, turn in enumerate(turns, start=1)
    ]


def prompt_payload(session: InterviewSession) -> PromptPayload:
    total = session.total_questions
    if isinstance(session.phase, Completed):
        return PromptPayload(
            session_id=session.id,
            status=session.status,
            prompt=None,
            prompt_type="completed",
            question_number=total,
            total_questions=total,
        )
    if isinstance(session.phase, AwaitingFollowUp):
        return PromptPayload(
            session_id=session.id,
            status=session.status,
            prompt=session.phase.question,
            prompt_type="follow_up",
            question_number=session.question_index + 1,
            total_questions=total,
        )
    return PromptPayload(
        session_id=session.id,
        status=session.status,
        prompt=session.current_question,
        prompt_type="question",
        question_number=session.question_index + 1,
        total_questions=total,
    )


def created_payload(session: InterviewSession) -> SessionCreatedPayload:
    return SessionCreatedPayload(
        session_id=session.id,
        status=session.status,
        allow_follow_ups=session.allow_follow_ups,
        question_number=1,
        total_questions=session.total_questions,
        prompt_type="question",
        prompt=session.questions[0],
    )


def _feedback_payload(session: InterviewSession) -> FeedbackPayload | None:
    result = session.result
    return FeedbackPayload.from_feedback(result) if result is not None else None


class SessionManager:
    """Owns the interview session lifecycle independent of the transport layer.

    Every transition reads the stored snapshot, computes a replacement and
    saves it only after all oracle calls succeed, so a failing oracle leaves
    the stored session untouched.  Submissions for the same session are
    serialised with a per-session lock.
    """

    def __init__(
        self,
        coach: InterviewCoach,
        transcriber: Transcriber | None = None,
        *,
        store: SessionStore | None = None,
        synthesizer: SpeechSynthesizer | None = None,
        question_bank: tuple[str, ...] = QUESTION_BANK,
    ) -> None:
        self._coach = coach
        self._transcriber = transcriber
        self._synthesizer = synthesizer
        self._store: SessionStore = store if store is not None else InMemorySessionStore()
        self._question_bank = question_bank
        self._lock = threading.Lock()
        # One lock per answered session; entries live as long as the in-memory store keeps the session.
        self._session_locks: dict[str, threading.Lock] = {}

    # ------------------------------------------------------------------ lifecycle
    def create_session(self, config: SessionConfig | None = None) -> InterviewSession:
        config = config or SessionConfig()
        allow_follow_ups = True if config.allow_follow_ups is None else bool(config.allow_follow_ups)
        session = InterviewSession(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
            allow_follow_ups=allow_follow_ups,
            questions=select_questions(config.question_count, self._question_bank),
        )
        self._store.create(session)
        logger.info(
            "session created",
            extra={
                "session_id": session.id,
                "questions": session.total_questions,
                "allow_follow_ups": allow_follow_ups,
            },
        )
        return session

    async def create_session_async(self, config: SessionConfig | None = None) -> InterviewSession:
        return await run_blocking(self.create_session, config)

    def current_prompt(self, session_id: str) -> PromptPayload:
        return prompt_payload(self._require_session(session_id))

    async def current_prompt_async(self, session_id: str) -> PromptPayload:
        return await run_blocking(self.current_prompt, session_id)

    def session_result(self, session_id: str) -> SessionResultPayload:
        session = self._require_session(session_id)
        return SessionResultPayload(
            session_id=session.id,
            status=session.status,
            result=_feedback_payload(session),
        )

    async def session_result_async(self, session_id: str) -> SessionResultPayload:
        return await run_blocking(self.session_result, session_id)

    def get_session(self, session_id: str) -> InterviewSession:
        return self._require_session(session_id)

    # ------------------------------------------------------------------ answers
    def submit_answer(self, session_id: str, submission: AnswerSubmission) -> AnswerResult:
        self._require_session(session_id)
        with self._session_lock(session_id):
            session = self._require_session(session_id)
            if session.status == "completed":
                raise InvalidStateError("Session is already completed.")

            delay = normalize_delay(submission.response_delay_sec)
            transcript = self._resolve_transcript(submission)

            if isinstance(session.phase, AwaitingFollowUp):
                updated, message = self._answer_follow_up(session, transcript, delay)
            else:
                updated, message = self._answer_main(session, transcript, delay)

            self._store.save(updated)

        return self._answer_result(updated, transcript, message)

    async def submit_answer_async(self, session_id: str, submission: AnswerSubmission) -> AnswerResult:
        return await run_blocking(self.submit_answer, session_id, submission)

    def _answer_main(
        self, session: InterviewSession, transcript: str, delay: float
    ) -> tuple[InterviewSession, str]:
        question = session.current_question
        if not question:
            raise InvalidStateError("No active question found for this session.")

        reply = self._coach.interviewer_reply(question, transcript)
        follow_up = reply.follow_up_question if session.allow_follow_ups else None

        turn = SessionTurn(
            question=question,
            answer=transcript,
            follow_up_question=follow_up,
            main_response_delay_sec=delay,
        )
        turns = (*session.turns, turn)

        if follow_up:
            logger.debug(
                "follow-up issued",
                extra={"session_id": session.id, "question_number": session.question_index + 1},
            )
            return replace(session, turns=turns, phase=AwaitingFollowUp(question=follow_up)), reply.reply_text

        advanced = replace(session, turns=turns, question_index=session.question_index + 1)
        return self._complete_if_finished(advanced), reply.reply_text

    def _answer_follow_up(
        self, session: InterviewSession, transcript: str, delay: float
    ) -> tuple[InterviewSession, str]:
        active = session.turns[-1] if session.turns else None
        if active is None or not active.follow_up_question:
            raise InvalidStateError("Follow-up is not available for this session state.")

        close_text = self._coach.follow_up_close(
            active.question,
            active.answer,
            active.follow_up_question,
            transcript,
        )

        turns = (*session.turns[:-1], active.with_follow_up_answer(transcript, delay))
        advanced = replace(
            session,
            turns=turns,
            phase=AwaitingQuestion(),
            question_index=session.question_index + 1,
        )
        return self._complete_if_finished(advanced), close_text

    def _complete_if_finished(self, session: InterviewSession) -> InterviewSession:
        if not session.questions_exhausted:
            logger.debug(
                "advanced to next question",
                extra={"session_id": session.id, "question_number": session.question_index + 1},
            )
            return session

        timing = compute_timing_summary(session.turns)
        feedback = self._coach.feedback(timing, build_transcript(session.turns))
        # The locally computed timing summary is authoritative.
        result = replace(feedback, timing_summary=timing)
        logger.info(
            "session completed",
            extra={
                "session_id": session.id,
                "avg_response_delay_sec": timing.avg_response_delay_sec,
                "long_pauses_count": timing.long_pauses_count,
                "total_turns": timing.total_turns,
            },
        )
        return replace(session, phase=Completed(result=result))

    def _resolve_transcript(self, submission: AnswerSubmission) -> str:
        text = submission.answer_text
        if text and text.strip():
            return text.strip()

        if not submission.audio_base64:
            raise InvalidInputError("Provide either answerText or audioBase64.")

        try:
            audio = base64.b64decode(submission.audio_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidInputError("audioBase64 must be a valid base64 string.") from exc
        if not audio:
            raise InvalidInputError("Decoded audio payload is empty.")

        if self._transcriber is None:
            raise InvalidStateError("Audio answers are not supported: no transcriber configured.")
        mime_type = (submission.mime_type or "").strip() or DEFAULT_MIME_TYPE
        transcript = self._transcriber.transcribe(audio, mime_type)
        if not transcript or not transcript.strip():
            raise InvalidInputError("Transcription returned empty text.")
        return transcript.strip()

    def _answer_result(self, session: InterviewSession, transcript: str, message: str) -> AnswerResult:
        if isinstance(session.phase, AwaitingFollowUp):
            next_prompt: str | None = session.phase.question
            prompt_type = "follow_up"
        elif isinstance(session.phase, Completed):
            next_prompt = None
            prompt_type = "completed"
        else:
            next_prompt = session.current_question
            prompt_type = "question"
        return AnswerResult(
            session_id=session.id,
            status=session.status,
            used_transcript=transcript,
            interviewer_message=message,
            next_prompt=next_prompt,
            prompt_type=prompt_type,
            result=_feedback_payload(session),
        )

    # ------------------------------------------------------------------ speech
    def synthesize_speech(self, text: str) -> bytes:
        if not text or not text.strip():
            raise InvalidInputError("Text must not be empty.")
        if len(text) > MAX_SPEECH_CHARS:
            raise InvalidInputError(f"Text must be at most {MAX_SPEECH_CHARS} characters.")
        if self._synthesizer is None:
            raise InvalidStateError("Speech synthesis is not configured.")
        return self._synthesizer.synthesize(text)

    async def synthesize_speech_async(self, text: str) -> bytes:
        return await run_blocking(self.synthesize_speech, text)

    # ------------------------------------------------------------------ helpers
    def _require_session(self, session_id: str) -> InterviewSession:
        session = self._store.find_by_id(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _session_lock(self, session_id: str) -> threading.Lock:
        with self._lock:
            lock = self._session_locks.get(session_id)
            if lock is None:
                lock = self._session_locks[session_id] = threading.Lock()
            return lock
