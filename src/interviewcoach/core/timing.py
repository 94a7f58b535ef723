from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import SessionTurn, TimingSummary

LONG_PAUSE_THRESHOLD_SEC = 4.0
DELAY_PRECISION = 2


def _flatten_delays(turns: Iterable[SessionTurn]) -> list[float]:
    delays: list[float] = []
    for turn in turns:
        delays.append(float(turn.main_response_delay_sec))
        if turn.follow_up_response_delay_sec is not None:
            delays.append(float(turn.follow_up_response_delay_sec))
    return delays


def compute_timing_summary(turns: Sequence[SessionTurn]) -> TimingSummary:
    """Aggregate response delays across every main and follow-up answer."""

    delays = _flatten_delays(turns)
    avg = round(sum(delays) / len(delays), DELAY_PRECISION) if delays else 0.0
    long_pauses = sum(1 for delay in delays if delay > LONG_PAUSE_THRESHOLD_SEC)
    return TimingSummary(
        avg_response_delay_sec=avg,
        long_pauses_count=long_pauses,
        total_turns=len(delays),
    )
