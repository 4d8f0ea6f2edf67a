"""Pydantic schemas shared across the app."""

from .quiz import (
    DEFAULT_QUIZ_TITLE,
    REQUIRED_OPTION_COUNT,
    AnswerResult,
    Difficulty,
    GradeReport,
    ParsedQuestion,
    ParsedQuiz,
    ParseIssue,
    QuizFailureKind,
    QuizParseReport,
    SubmittedAnswer,
)
from .topics import TopicSuggestions, TopicValidation

__all__ = [
    "DEFAULT_QUIZ_TITLE",
    "REQUIRED_OPTION_COUNT",
    "AnswerResult",
    "Difficulty",
    "GradeReport",
    "ParseIssue",
    "ParsedQuestion",
    "ParsedQuiz",
    "QuizFailureKind",
    "QuizParseReport",
    "SubmittedAnswer",
    "TopicSuggestions",
    "TopicValidation",
]
