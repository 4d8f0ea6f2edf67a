from __future__ import annotations

from typing import Iterable

from quizforge.schemas.quiz import AnswerResult, GradeReport, ParsedQuiz, SubmittedAnswer


def _same_answer(left: str | None, right: str | None) -> bool:
    return (left or "").strip().lower() == (right or "").strip().lower()


def grade_answers(quiz: ParsedQuiz, answers: Iterable[SubmittedAnswer]) -> GradeReport:
    """Score submitted answers against the stored correct answers.

    Answers are compared by trimmed, case-insensitive text. An answer for an
    unknown question index is reported with an error and counts as wrong; only
    the first answer per question is graded. The score is a percentage over all
    questions in the quiz, rounded to 2 places.
    """
    results: list[AnswerResult] = []
    seen: set[int] = set()
    for answer in answers:
        if answer.question_index in seen:
            continue
        seen.add(answer.question_index)
        if answer.question_index >= len(quiz.questions):
            results.append(
                AnswerResult(
                    question_index=answer.question_index,
                    user_answer=answer.user_answer,
                    error="Question not found",
                )
            )
            continue
        question = quiz.questions[answer.question_index]
        results.append(
            AnswerResult(
                question_index=answer.question_index,
                question_text=question.text,
                user_answer=answer.user_answer,
                correct_answer=question.correct,
                is_correct=_same_answer(question.correct, answer.user_answer),
                explanation=question.explanation,
            )
        )

    correct_count = sum(1 for r in results if r.is_correct and not r.error)
    total = len(quiz.questions)
    score = round(correct_count / total * 100, 2) if total else 0.0
    return GradeReport(
        results=results,
        correct_count=correct_count,
        total_questions=total,
        score=score,
    )


__all__ = ["grade_answers"]
