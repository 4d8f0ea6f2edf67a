"""Whole-quiz checks applied after per-block extraction."""

from __future__ import annotations

import logging

from quizforge.schemas.quiz import (
    REQUIRED_OPTION_COUNT,
    ParsedQuestion,
    ParseIssue,
    QuizFailureKind,
    QuizParseReport,
)
from quizforge.services.answer_matching import match_answer_to_option

logger = logging.getLogger(__name__)


def _reject(report: QuizParseReport, kind: QuizFailureKind, issues: list[ParseIssue]) -> QuizParseReport:
    return report.model_copy(
        update={"quiz": None, "failure": kind, "issues": [*report.issues, *issues]}
    )


def _has_complete_options(question: ParsedQuestion) -> bool:
    return len(question.options) == REQUIRED_OPTION_COUNT and all(
        opt and opt.strip() for opt in question.options
    )


def validate_quiz_report(
    report: QuizParseReport,
    *,
    require_explanations: bool = False,
    expected_count: int | None = None,
) -> QuizParseReport:
    """Accept or reject the quiz in ``report`` as a whole.

    - No surviving questions fails with ``ZERO_VALID_QUESTIONS``.
    - A question with anything other than four non-empty options, or whose
      answer no longer resolves to an option, rejects the whole quiz.
    - With ``require_explanations`` one missing explanation rejects the quiz.
    - Fewer questions than blocks (or than ``expected_count``) is only logged.
    """
    report = report.model_copy(update={"expected_count": expected_count})
    if report.failure is not None or report.quiz is None:
        return report

    quiz = report.quiz
    if not quiz.questions:
        logger.error("No valid questions parsed from quiz response (%d blocks)", report.blocks_found)
        return _reject(
            report,
            QuizFailureKind.ZERO_VALID_QUESTIONS,
            [
                ParseIssue(
                    kind=QuizFailureKind.ZERO_VALID_QUESTIONS,
                    message=f"None of the {report.blocks_found} question blocks passed validation",
                )
            ],
        )

    incomplete = [
        ParseIssue(
            kind=QuizFailureKind.INCOMPLETE_OPTIONS,
            block_index=idx,
            message=f"must have exactly {REQUIRED_OPTION_COUNT} non-empty options",
            question_text=q.text,
            options=list(q.options),
        )
        for idx, q in enumerate(quiz.questions, start=1)
        if not _has_complete_options(q)
    ]
    if incomplete:
        logger.error("Found %d questions with invalid options", len(incomplete))
        return _reject(report, QuizFailureKind.INCOMPLETE_OPTIONS, incomplete)

    healed: list[ParsedQuestion] = []
    mismatched: list[ParseIssue] = []
    for idx, q in enumerate(quiz.questions, start=1):
        match = match_answer_to_option(q.correct, q.options)
        if match is None:
            mismatched.append(
                ParseIssue(
                    kind=QuizFailureKind.ANSWER_OPTION_MISMATCH,
                    block_index=idx,
                    message="correct answer doesn't match any option",
                    question_text=q.text,
                    options=list(q.options),
                    stated_answer=q.correct,
                )
            )
            continue
        healed.append(q if match.correct == q.correct else q.model_copy(update={"correct": match.correct}))
    if mismatched:
        logger.error(
            "Found %d questions where correct answer doesn't match any option", len(mismatched)
        )
        return _reject(report, QuizFailureKind.ANSWER_OPTION_MISMATCH, mismatched)

    if require_explanations:
        explained = sum(1 for q in healed if q.explanation)
        if explained < len(healed):
            message = (
                f"The AI did not provide explanations for all questions. Expected {len(healed)} "
                f"explanations but only got {explained}."
            )
            logger.error(message)
            return _reject(
                report,
                QuizFailureKind.MISSING_EXPLANATIONS,
                [
                    ParseIssue(
                        kind=QuizFailureKind.MISSING_EXPLANATIONS,
                        message=message,
                        extra={"expected_explanations": len(healed), "actual_explanations": explained},
                    )
                ],
            )

    wanted = max(report.blocks_found, expected_count or 0)
    degraded = len(healed) < wanted
    if degraded:
        logger.warning(
            "Expected %d questions but only %d passed validation (%d blocks found)",
            wanted,
            len(healed),
            report.blocks_found,
        )

    return report.model_copy(
        update={"quiz": quiz.model_copy(update={"questions": healed}), "degraded": degraded}
    )


__all__ = ["validate_quiz_report"]
