"""Matching a model-stated correct answer against a question's options.

The substring fallback is a heuristic: it accepts answers the model echoed in a
truncated or padded form, and it can also accept short strings that happen to
appear inside an unrelated option ("A" inside "Option A"). Keep it in this
module so it can be tuned without touching extraction.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

_WS_RE = re.compile(r"\s+")


def collapse_whitespace(text: str | None) -> str:
    return _WS_RE.sub(" ", (text or "").strip())


def normalize_answer(text: str | None) -> str:
    """Trim, collapse internal whitespace and case-fold; punctuation is kept."""
    return collapse_whitespace(text).casefold()


@dataclass(frozen=True, slots=True)
class AnswerMatch:
    """Result of matching an answer to an option.

    ``correct`` is always the literal (trimmed) option text. ``exact`` is False
    when the answer was healed through containment.
    """

    correct: str
    option_index: int
    exact: bool


def match_answer_to_option(answer: str, options: Sequence[str]) -> AnswerMatch | None:
    """Resolve ``answer`` against ``options`` or return None on mismatch.

    Exact normalized equality wins over containment; among containment matches
    the first option in presentation order wins.
    """
    wanted = normalize_answer(answer)
    if not wanted:
        return None

    normalized = [normalize_answer(opt) for opt in options]
    for idx, opt in enumerate(normalized):
        if opt and opt == wanted:
            return AnswerMatch(correct=options[idx].strip(), option_index=idx, exact=True)

    for idx, opt in enumerate(normalized):
        if opt and (wanted in opt or opt in wanted):
            return AnswerMatch(correct=options[idx].strip(), option_index=idx, exact=False)

    return None


__all__ = [
    "AnswerMatch",
    "collapse_whitespace",
    "match_answer_to_option",
    "normalize_answer",
]
