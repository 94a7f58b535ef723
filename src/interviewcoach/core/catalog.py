from __future__ import annotations

from typing import Final

QUESTION_BANK: Final[tuple[str, ...]] = (
    "Tell me about yourself and your current backend focus.",
    "Describe a challenging production incident you handled. What did you do?",
    "How would you design a URL shortener service?",
    "How do you ensure reliability in a distributed system?",
    "Explain the difference between horizontal and vertical scaling.",
    "How do you diagnose slow database queries in production?",
    "Describe a time you disagreed with a teammate and how you resolved it.",
    "What tradeoffs would you consider when introducing caching?",
    "How would you make an API backward compatible over time?",
    "Why are you interested in this role and what value would you bring?",
)

DEFAULT_QUESTION_COUNT: Final = 3


def select_questions(count: int | None, bank: tuple[str, ...] = QUESTION_BANK) -> tuple[str, ...]:
    """Return the first ``count`` prompts of ``bank``.

    Out-of-range counts are clamped to ``[1, len(bank)]`` rather than rejected.
    """

    requested = DEFAULT_QUESTION_COUNT if count is None else count
    size = max(1, min(requested, len(bank)))
    return bank[:size]
