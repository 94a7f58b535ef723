from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from openai import OpenAI

from ..core.models import InterviewerReply, InterviewFeedback, TimingSummary, TranscriptEntry
from .sanitize import normalize_close, normalize_feedback, normalize_reply, parse_json_object

__all__ = ["OpenAIInterviewCoach"]

logger = logging.getLogger(__name__)

_REPLY_PROMPT = "\n".join(
    [
        "You are a friendly big-tech interviewer.",
        "Given the question and candidate answer, return strict JSON with keys:",
        "- replyText: short spoken response (1-2 sentences)",
        "- followUpQuestion: either one concise follow-up question OR null",
        "Rules:",
        "- Ask at most one follow-up question.",
        "- Keep tone encouraging and professional.",
        "- JSON only, no markdown.",
    ]
)

_CLOSE_PROMPT = (
    "You are a friendly interviewer. Write one short spoken acknowledgement (max 20 words). No follow-up question."
)

_FEEDBACK_PROMPT = "\n".join(
    [
        "You are an English coach for technical interviews.",
        "Return strict JSON with shape:",
        "{",
        '  "corrections": [',
        '    { "original": string, "corrected": string, "reason": string }',
        "  ],",
        '  "improvedBestAnswer": { "question": string, "answer": string },',
        '  "interviewTips": [string]',
        "}",
        "Rules:",
        "- Provide 5 to 8 corrections.",
        "- Provide 2 to 3 interviewTips.",
        "- improvedBestAnswer must be concise and interview-quality.",
        "- JSON only.",
    ]
)


def _timing_dict(summary: TimingSummary) -> dict[str, Any]:
    return {
        "avgResponseDelaySec": summary.avg_response_delay_sec,
        "longPausesCount": summary.long_pauses_count,
        "totalTurns": summary.total_turns,
    }


def _transcript_dict(entry: TranscriptEntry) -> dict[str, Any]:
    return {
        "questionNumber": entry.question_number,
        "question": entry.question,
        "answer": entry.answer,
        "followUpQuestion": entry.follow_up_question,
        "followUpAnswer": entry.follow_up_answer,
    }


class OpenAIInterviewCoach:
    """Interviewer persona and English coach backed by chat completions."""

    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    def _complete(self, system: str, payload: dict[str, Any], *, temperature: float, json_mode: bool) -> str:
        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        completion = self._client.chat.completions.create(
            model=self._model,
            temperature=temperature,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
            ],
            **kwargs,
        )
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""

    def _complete_json(self, system: str, payload: dict[str, Any], *, temperature: float) -> dict[str, Any]:
        content = self._complete(system, payload, temperature=temperature, json_mode=True)
        parsed = parse_json_object(content)
        if not parsed:
            logger.warning("coach reply was not a JSON object", extra={"model": self._model, "chars": len(content)})
        return parsed

    def interviewer_reply(self, question: str, answer: str) -> InterviewerReply:
        data = self._complete_json(_REPLY_PROMPT, {"question": question, "answer": answer}, temperature=0.5)
        return normalize_reply(data)

    def follow_up_close(
        self,
        question: str,
        answer: str,
        follow_up_question: str,
        follow_up_answer: str,
    ) -> str:
        payload = {
            "question": question,
            "answer": answer,
            "followUpQuestion": follow_up_question,
            "followUpAnswer": follow_up_answer,
        }
        return normalize_close(self._complete(_CLOSE_PROMPT, payload, temperature=0.4, json_mode=False))

    def feedback(
        self,
        timing_summary: TimingSummary,
        transcript: Sequence[TranscriptEntry],
    ) -> InterviewFeedback:
        payload = {
            "timingSummary": _timing_dict(timing_summary),
            "transcript": [_transcript_dict(entry) for entry in transcript],
        }
        data = self._complete_json(_FEEDBACK_PROMPT, payload, temperature=0.4)
        return normalize_feedback(data, timing_summary)
