"""Coerce free-form oracle output into the shapes the session core expects.

Language models drift from the requested JSON contract: keys go missing,
lists grow past the requested size, strings come back as numbers.  Every
helper here accepts ``Any`` and returns a well-formed value, so the
transition logic never has to look at raw model output.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any

from ..core.models import (
    CorrectionItem,
    ImprovedBestAnswer,
    InterviewerReply,
    InterviewFeedback,
    TimingSummary,
)

MAX_CORRECTIONS = 8
MAX_TIPS = 3
DEFAULT_REPLY_TEXT = "Thanks, that helps me understand your approach."
DEFAULT_CLOSE_TEXT = "Thanks for clarifying."

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)


def _as_text(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(value).strip()


def parse_json_object(text: str | None) -> dict[str, Any]:
    """Best-effort extraction of a JSON object from a model reply.

    Tries the raw text, then a fenced ```json block, then the outermost
    brace pair.  Returns an empty dict when nothing parses.
    """

    raw = (text or "").strip()
    if not raw:
        return {}

    candidates = [raw]
    fenced = _FENCED_JSON.search(raw)
    if fenced:
        candidates.append(fenced.group(1))
    start, end = raw.find("{"), raw.rfind("}")
    if start != -1 and end > start:
        candidates.append(raw[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (TypeError, ValueError):
            continue
        if isinstance(parsed, dict):
            return parsed
    return {}


def normalize_reply(data: Mapping[str, Any]) -> InterviewerReply:
    reply_text = data.get("replyText")
    follow_up = data.get("followUpQuestion")
    reply = reply_text.strip() if isinstance(reply_text, str) else ""
    question = follow_up.strip() if isinstance(follow_up, str) else ""
    return InterviewerReply(
        reply_text=reply or DEFAULT_REPLY_TEXT,
        follow_up_question=question or None,
    )


def normalize_close(text: str | None) -> str:
    return _as_text(text) or DEFAULT_CLOSE_TEXT


def normalize_corrections(value: Any) -> tuple[CorrectionItem, ...]:
    if not isinstance(value, list):
        return ()
    items: list[CorrectionItem] = []
    for raw in value:
        if not isinstance(raw, Mapping):
            continue
        item = CorrectionItem(
            original=_as_text(raw.get("original")),
            corrected=_as_text(raw.get("corrected")),
            reason=_as_text(raw.get("reason")),
        )
        # All three fields are required for a correction to be useful.
        if item.original and item.corrected and item.reason:
            items.append(item)
        if len(items) >= MAX_CORRECTIONS:
            break
    return tuple(items)


def normalize_improved_answer(value: Any) -> ImprovedBestAnswer:
    if not isinstance(value, Mapping):
        return ImprovedBestAnswer(question="", answer="")
    return ImprovedBestAnswer(
        question=_as_text(value.get("question")),
        answer=_as_text(value.get("answer")),
    )


def normalize_tips(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    tips = [_as_text(tip) for tip in value]
    return tuple(tip for tip in tips if tip)[:MAX_TIPS]


def normalize_feedback(data: Mapping[str, Any], timing_summary: TimingSummary) -> InterviewFeedback:
    """Build feedback from model output.

    ``timing_summary`` always comes from the caller; whatever the model echoed
    back under ``timingSummary`` is ignored.
    """

    return InterviewFeedback(
        timing_summary=timing_summary,
        corrections=normalize_corrections(data.get("corrections")),
        improved_best_answer=normalize_improved_answer(data.get("improvedBestAnswer")),
        interview_tips=normalize_tips(data.get("interviewTips")),
    )
