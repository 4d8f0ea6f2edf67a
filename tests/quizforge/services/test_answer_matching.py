from __future__ import annotations

import pytest
from quizforge.services.answer_matching import match_answer_to_option, normalize_answer

OPTIONS = ["London", "Berlin", "Paris, the capital of France", "Madrid"]


def test_normalize_answer_collapses_whitespace_and_case_keeps_punctuation():
    assert normalize_answer("  Paris,\t the   CAPITAL \n") == "paris, the capital"
    assert normalize_answer(None) == ""


def test_exact_match_returns_option_text():
    match = match_answer_to_option("  madrid ", OPTIONS)

    assert match is not None
    assert match.exact is True
    assert match.option_index == 3
    assert match.correct == "Madrid"


@pytest.mark.parametrize(
    "answer",
    ["Paris", "paris, the capital of france, obviously"],
)
def test_containment_in_either_direction_heals_to_option(answer):
    match = match_answer_to_option(answer, OPTIONS)

    assert match is not None
    assert match.exact is False
    assert match.correct == "Paris, the capital of France"


def test_exact_match_preferred_over_earlier_containment():
    match = match_answer_to_option("Java", ["JavaScript", "Java", "Kotlin", "Go"])

    assert match is not None
    assert match.option_index == 1
    assert match.exact is True


def test_no_match_returns_none():
    assert match_answer_to_option("Rome", OPTIONS) is None
    assert match_answer_to_option("   ", OPTIONS) is None


def test_short_answers_can_match_unrelated_options():
    # Known limitation of the containment fallback.
    match = match_answer_to_option("A", ["Option A", "Option B", "Option C", "Option D"])

    assert match is not None
    assert match.correct == "Option A"
