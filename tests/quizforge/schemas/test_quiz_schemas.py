from __future__ import annotations

import pytest
from pydantic import ValidationError
from quizforge.schemas.quiz import (
    GradeReport,
    ParsedQuestion,
    ParsedQuiz,
    QuizFailureKind,
    QuizParseReport,
    SubmittedAnswer,
)


def test_question_requires_exactly_four_options():
    with pytest.raises(ValidationError):
        ParsedQuestion(text="Q?", options=["a", "b", "c"], correct="a")
    with pytest.raises(ValidationError):
        ParsedQuestion(text="Q?", options=["a", "b", "c", "d", "e"], correct="a")


def test_question_rejects_blank_options_and_text():
    with pytest.raises(ValidationError):
        ParsedQuestion(text="Q?", options=["a", " ", "c", "d"], correct="a")
    with pytest.raises(ValidationError):
        ParsedQuestion(text="", options=["a", "b", "c", "d"], correct="a")


def test_parsed_models_are_immutable():
    question = ParsedQuestion(text="Q?", options=["a", "b", "c", "d"], correct="a")

    with pytest.raises(ValidationError):
        question.correct = "b"


def test_report_ok_property():
    assert QuizParseReport(quiz=ParsedQuiz()).ok is True
    assert QuizParseReport(failure=QuizFailureKind.ZERO_VALID_QUESTIONS).ok is False


def test_report_serializes_failure_kind_as_string():
    report = QuizParseReport(failure=QuizFailureKind.NO_QUESTION_BLOCKS_FOUND)

    assert report.model_dump(mode="json")["failure"] == "no_question_blocks_found"


def test_answer_and_score_bounds():
    with pytest.raises(ValidationError):
        SubmittedAnswer(question_index=-1, user_answer="a")
    with pytest.raises(ValidationError):
        GradeReport(score=101)
