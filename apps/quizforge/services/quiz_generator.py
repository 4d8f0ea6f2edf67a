from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from quizforge.core.exceptions import QuizGenerationError
from quizforge.core.settings import settings
from quizforge.prompts import load_prompt, render_prompt
from quizforge.schemas.quiz import Difficulty, ParsedQuiz, QuizParseReport
from quizforge.services.quiz_parser import parse_quiz_report

if TYPE_CHECKING:
    from quizforge.services.llm_service import CompletionProvider

logger = logging.getLogger(__name__)

FORMAT_RULES = load_prompt("quiz", "format_rules.md")
QUIZ_SYSTEM_PROMPT = render_prompt("quiz", "system.md", format_rules=FORMAT_RULES)


def _coerce_difficulty(value: Difficulty | str) -> Difficulty:
    try:
        return Difficulty(str(getattr(value, "value", value)).strip().upper())
    except ValueError as exc:
        raise ValueError(
            "difficulty is required and must be BEGINNER, INTERMEDIATE, or ADVANCED"
        ) from exc


def _truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n…"


def build_quiz_messages(
    *, title: str, topic: str, difficulty: Difficulty, question_count: int
) -> list[dict[str, str]]:
    user_prompt = render_prompt(
        "quiz",
        "user.md",
        question_count=question_count,
        difficulty=difficulty.value,
        title=title,
        topic=topic,
    )
    return [
        {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def build_document_quiz_messages(
    *,
    document_context: str,
    difficulty: Difficulty,
    question_count: int,
    focus: Optional[str] = None,
) -> list[dict[str, str]]:
    focus = (focus or "").strip()
    system_prompt = render_prompt(
        "document_quiz",
        "system.md",
        difficulty_label=difficulty.value.lower(),
        question_count=question_count,
        document_context=document_context,
        focus_instruction=f"\n- Pay special attention to: {focus}" if focus else "",
        format_rules=FORMAT_RULES,
    )
    user_prompt = render_prompt(
        "document_quiz",
        "user.md",
        difficulty=difficulty.value,
        question_count=question_count,
        focus_suffix=f" Focus on: {focus}" if focus else "",
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


@dataclass
class QuizGenerator:
    """Ask the LLM for a quiz in the ``### Question`` markup and parse the answer.

    The parser never retries; ``max_attempts`` decides how many times the model is
    asked again after an unusable completion (1 means once, no retry).
    """

    llm: Optional[CompletionProvider] = None
    require_explanations: Optional[bool] = None
    max_attempts: Optional[int] = None

    def __post_init__(self) -> None:
        if self.llm is None:
            from quizforge.core.dependencies import get_llm_service

            self.llm = get_llm_service()
        if self.require_explanations is None:
            self.require_explanations = settings.quiz_require_explanations
        if self.max_attempts is None:
            self.max_attempts = settings.quiz_generation_attempts

    def _validate_count(self, question_count: int) -> int:
        if isinstance(question_count, bool) or not isinstance(question_count, int):
            raise ValueError("question_count is required and must be a positive number")
        if question_count <= 0:
            raise ValueError("question_count is required and must be a positive number")
        if question_count > settings.quiz_max_questions:
            raise ValueError(f"question_count must be at most {settings.quiz_max_questions}")
        return question_count

    def _complete_and_parse(self, messages: list[dict[str, str]], *, expected_count: int) -> ParsedQuiz:
        attempts = max(1, int(self.max_attempts or 1))
        report: QuizParseReport | None = None
        for attempt in range(1, attempts + 1):
            quiz_text = self.llm.chat(
                messages,
                model=settings.quiz_model,
                temperature=settings.quiz_temperature,
                max_tokens=settings.quiz_max_tokens,
            )
            if not (quiz_text or "").strip():
                logger.warning("Attempt %d/%d: model returned no quiz text", attempt, attempts)
                if attempt == attempts:
                    raise QuizGenerationError("No quiz generated", code="empty_completion")
                continue

            report = parse_quiz_report(
                quiz_text,
                require_explanations=bool(self.require_explanations),
                expected_count=expected_count,
            )
            if report.ok and report.quiz is not None:
                return report.quiz
            logger.warning(
                "Attempt %d/%d: quiz parse failed (%s)",
                attempt,
                attempts,
                report.failure.value if report.failure else "unknown",
            )

        if report is None:
            raise QuizGenerationError("No quiz generated", code="empty_completion")
        raise QuizGenerationError.from_report(report)

    def generate_quiz(
        self,
        *,
        title: str,
        topic: str = "",
        difficulty: Difficulty | str = Difficulty.INTERMEDIATE,
        question_count: int = 5,
    ) -> ParsedQuiz:
        title = (title or "").strip()
        if not title:
            raise ValueError("title is required and must be a non-empty string")
        level = _coerce_difficulty(difficulty)
        count = self._validate_count(question_count)

        messages = build_quiz_messages(
            title=title, topic=(topic or "").strip(), difficulty=level, question_count=count
        )
        quiz = self._complete_and_parse(messages, expected_count=count)
        # The request is authoritative for metadata the prompt tells the model to omit.
        quiz = quiz.model_copy(
            update={"title": title, "topic": (topic or "").strip() or quiz.topic, "difficulty": level}
        )
        logger.info("Generated quiz %r with %d/%d questions", title, len(quiz.questions), count)
        return quiz

    def generate_document_quiz(
        self,
        *,
        document_context: str,
        difficulty: Difficulty | str = Difficulty.INTERMEDIATE,
        question_count: int = 5,
        focus: Optional[str] = None,
    ) -> ParsedQuiz:
        context = (document_context or "").strip()
        if not context:
            raise ValueError("document_context is required and must be a non-empty string")
        level = _coerce_difficulty(difficulty)
        count = self._validate_count(question_count)

        messages = build_document_quiz_messages(
            document_context=_truncate(context, settings.quiz_document_context_chars),
            difficulty=level,
            question_count=count,
            focus=focus,
        )
        quiz = self._complete_and_parse(messages, expected_count=count)
        return quiz.model_copy(update={"difficulty": level})


__all__ = [
    "QuizGenerator",
    "build_document_quiz_messages",
    "build_quiz_messages",
]
