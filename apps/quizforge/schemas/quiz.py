from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_OPTION_COUNT = 4
DEFAULT_QUIZ_TITLE = "Untitled Quiz"


class Difficulty(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class QuizFailureKind(str, Enum):
    """Why a completion did not yield a usable quiz (or why a block was dropped)."""

    NO_QUESTION_BLOCKS_FOUND = "no_question_blocks_found"
    ZERO_VALID_QUESTIONS = "zero_valid_questions"
    EMPTY_QUESTION_TEXT = "empty_question_text"
    INCOMPLETE_OPTIONS = "incomplete_options"
    UNRESOLVED_ANSWER = "unresolved_answer"
    ANSWER_OPTION_MISMATCH = "answer_option_mismatch"
    MISSING_EXPLANATIONS = "missing_explanations"


class ParsedQuestion(BaseModel):
    """A multiple-choice question extracted from model output."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    options: List[str] = Field(min_length=REQUIRED_OPTION_COUNT, max_length=REQUIRED_OPTION_COUNT)
    correct: str = Field(min_length=1)
    explanation: Optional[str] = None

    @field_validator("options")
    @classmethod
    def _options_not_blank(cls, value: List[str]) -> List[str]:
        if any(not (opt or "").strip() for opt in value):
            raise ValueError("options must be non-empty")
        return value


class ParsedQuiz(BaseModel):
    """Quiz assembled from one completion; questions keep their source order."""

    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_QUIZ_TITLE
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    topic: str = ""
    questions: List[ParsedQuestion] = Field(default_factory=list)


class ParseIssue(BaseModel):
    """Diagnostic for a dropped block or a rejected quiz."""

    kind: QuizFailureKind
    message: str
    block_index: Optional[int] = None
    question_text: Optional[str] = None
    options: Optional[List[str]] = None
    stated_answer: Optional[str] = None
    extra: dict[str, Any] = Field(default_factory=dict)


class QuizParseReport(BaseModel):
    """Outcome of parsing one completion: either a quiz or a failure kind."""

    quiz: Optional[ParsedQuiz] = None
    failure: Optional[QuizFailureKind] = None
    issues: List[ParseIssue] = Field(default_factory=list)
    blocks_found: int = 0
    expected_count: Optional[int] = None
    degraded: bool = False

    @property
    def ok(self) -> bool:
        return self.quiz is not None and self.failure is None


class SubmittedAnswer(BaseModel):
    question_index: int = Field(ge=0)
    user_answer: str


class AnswerResult(BaseModel):
    question_index: int
    question_text: Optional[str] = None
    user_answer: str
    correct_answer: Optional[str] = None
    is_correct: bool = False
    explanation: Optional[str] = None
    error: Optional[str] = None


class GradeReport(BaseModel):
    """Scored attempt against a parsed quiz."""

    results: List[AnswerResult] = Field(default_factory=list)
    correct_count: int = 0
    total_questions: int = 0
    score: float = Field(default=0.0, ge=0, le=100)


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
]
