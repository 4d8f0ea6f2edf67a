"""Service layer package.

Keep imports lazy to avoid initializing heavyweight dependencies at import time
(e.g., LLM clients). Downstream code can still access common symbols from
`quizforge.services` thanks to `__getattr__` proxies.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "QuizGenerator",
    "TopicAdvisor",
    "grade_answers",
    "parse_quiz_report",
    "parse_quiz_response",
]


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in {"parse_quiz_report", "parse_quiz_response"}:
        from . import quiz_parser

        return getattr(quiz_parser, name)
    if name == "grade_answers":
        from .quiz_grading import grade_answers

        return grade_answers
    if name == "QuizGenerator":
        from .quiz_generator import QuizGenerator

        return QuizGenerator
    if name == "TopicAdvisor":
        from .topic_advisor import TopicAdvisor

        return TopicAdvisor
    raise AttributeError(name)
