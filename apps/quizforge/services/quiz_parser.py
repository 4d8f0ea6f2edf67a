"""Parse LLM quiz completions written in the ``### Question <N>`` markup.

Expected shape of one question block::

    ### Question 1
    What is 2 + 2?

    A) 3
    B) 4
    C) 5
    D) 6
    ✅ Correct answer: B) 4

    Explanation: 2 + 2 equals 4.

An optional leading ``### <title>`` line and ``Difficulty:`` / ``Topic:`` lines
may appear anywhere. Model output drifts from this shape, so every block is
scanned line by line and judged on its own: a broken block is dropped with a
diagnostic, never an exception. ``parse_quiz_report`` runs extraction followed by
the aggregate checks in :mod:`quizforge.services.quiz_validation`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from quizforge.schemas.quiz import (
    DEFAULT_QUIZ_TITLE,
    REQUIRED_OPTION_COUNT,
    Difficulty,
    ParsedQuestion,
    ParsedQuiz,
    ParseIssue,
    QuizFailureKind,
    QuizParseReport,
)
from quizforge.services.answer_matching import match_answer_to_option
from quizforge.services.quiz_validation import validate_quiz_report

logger = logging.getLogger(__name__)

_QUESTION_MARKER_RE = re.compile(
    r"^[ \t]*###[ \t]*Question[ \t]+\d+(?:[ \t]+of[ \t]+\d+)?\b[ \t]*[:.)-]?[ \t]*(?P<rest>[^\n]*)$",
    re.IGNORECASE | re.MULTILINE,
)
_TITLE_RE = re.compile(r"^###[ \t]*(?P<title>.+)$")
_DIFFICULTY_RE = re.compile(r"Difficulty:\s*(BEGINNER|INTERMEDIATE|ADVANCED)\b", re.IGNORECASE)
_TOPIC_RE = re.compile(r"^[ \t]*-?[ \t]*Topic:[ \t]*(?P<topic>[^\n]*)$", re.IGNORECASE | re.MULTILINE)

_OPTION_RE = re.compile(r"^(?P<letter>[A-D])\)[ \t]*(?P<text>.*)$")
_ANSWER_RE = re.compile(r"^(?:✅\ufe0f?[ \t]*)?Correct[ \t]+answer[ \t]*:[ \t]*(?P<rest>.*)$", re.IGNORECASE)
_ANSWER_LETTER_RE = re.compile(r"^(?P<letter>[A-Da-d])\)[ \t]*(?P<text>.*)$")
_BARE_LETTER_RE = re.compile(r"^(?P<letter>[A-Da-d])\.?$")
_EXPLANATION_RE = re.compile(r"^Explanation[ \t]*:[ \t]*(?P<text>.*)$", re.IGNORECASE)
# An option line may run straight into the answer or explanation marker; a bare
# check mark is cut off too.
_INLINE_MARKER_RE = re.compile(r"✅|Correct[ \t]+answer[ \t]*:|Explanation[ \t]*:", re.IGNORECASE)


class _ScanState(Enum):
    AWAITING_QUESTION = "awaiting_question"
    IN_OPTIONS = "in_options"
    AWAITING_ANSWER = "awaiting_answer"
    IN_EXPLANATION = "in_explanation"


@dataclass
class _BlockScanner:
    """Line-oriented state machine for the body of one question block."""

    question_lines: list[str] = field(default_factory=list)
    options: list[list[str]] = field(default_factory=list)
    answer_letter: str | None = None
    answer_text: str | None = None
    answer_seen: bool = False
    explanation_lines: list[str] | None = None
    state: _ScanState = _ScanState.AWAITING_QUESTION
    option_open: bool = False

    def feed(self, raw: str) -> None:
        line = raw.strip()
        if not line:
            # Blank lines end option continuation, and the explanation paragraph
            # once it has text (the text may start a few lines below the marker).
            self.option_open = False
            if self.state is _ScanState.IN_EXPLANATION and any(self.explanation_lines or ()):
                self.state = _ScanState.AWAITING_ANSWER
            return

        answer = _ANSWER_RE.match(line)
        if answer:
            if not self.answer_seen:
                self._record_answer(answer.group("rest"))
            self.option_open = False
            self.state = _ScanState.AWAITING_ANSWER
            return

        explanation = _EXPLANATION_RE.match(line)
        if explanation:
            self.option_open = False
            if self.explanation_lines is None:
                self.explanation_lines = [explanation.group("text")]
                self.state = _ScanState.IN_EXPLANATION
            else:
                self.state = _ScanState.AWAITING_ANSWER
            return

        if self.state is _ScanState.IN_EXPLANATION:
            if line.startswith("###"):
                self.state = _ScanState.AWAITING_ANSWER
                return
            self.explanation_lines.append(line)  # type: ignore[union-attr]
            return

        option = _OPTION_RE.match(line)
        if option:
            text = option.group("text")
            tail = ""
            inline = _INLINE_MARKER_RE.search(text)
            if inline:
                text, tail = text[: inline.start()], text[inline.start() :]
            self.options.append([option.group("letter"), text.strip()])
            self.option_open = True
            self.state = _ScanState.IN_OPTIONS
            if _ANSWER_RE.match(tail) or _EXPLANATION_RE.match(tail):
                self.feed(tail)
            return

        if self.state is _ScanState.AWAITING_QUESTION:
            self.question_lines.append(line)
        elif self.state is _ScanState.IN_OPTIONS and self.option_open:
            self.options[-1][1] = f"{self.options[-1][1]} {line}".strip()
        # Anything else is stray commentary between sections.

    def _record_answer(self, rest: str) -> None:
        self.answer_seen = True
        rest = rest.strip()
        lettered = _ANSWER_LETTER_RE.match(rest)
        if lettered:
            self.answer_letter = lettered.group("letter").upper()
            self.answer_text = lettered.group("text").strip()
            return
        bare = _BARE_LETTER_RE.match(rest)
        if bare:
            self.answer_letter = bare.group("letter").upper()
            return
        self.answer_text = rest

    @property
    def question_text(self) -> str:
        return "\n".join(self.question_lines).strip()

    @property
    def explanation(self) -> str | None:
        if self.explanation_lines is None:
            return None
        text = "\n".join(self.explanation_lines).strip()
        return text or None


def extract_title(text: str) -> str:
    """Return the leading ``###`` title, ignoring question markers."""
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if _QUESTION_MARKER_RE.match(stripped):
            return DEFAULT_QUIZ_TITLE
        m = _TITLE_RE.match(stripped)
        if not m:
            return DEFAULT_QUIZ_TITLE
        title = m.group("title").strip().lstrip("#").strip()
        return title or DEFAULT_QUIZ_TITLE
    return DEFAULT_QUIZ_TITLE


def extract_difficulty(text: str) -> Difficulty:
    """First recognizable ``Difficulty:`` level, else INTERMEDIATE.

    Case-insensitive matching also accepts look-alike letters such as ``İ``
    that do not upper-case back to a level name; those lines are skipped.
    """
    for m in _DIFFICULTY_RE.finditer(text):
        try:
            return Difficulty(m.group(1).upper())
        except ValueError:
            logger.debug("Ignoring unrecognized difficulty %r", m.group(1))
    return Difficulty.INTERMEDIATE


def extract_topic(text: str) -> str:
    m = _TOPIC_RE.search(text)
    return m.group("topic").strip() if m else ""


def split_question_blocks(text: str) -> list[tuple[str, str]]:
    """Split ``text`` into ``(header_rest, body)`` pairs, one per question marker.

    ``header_rest`` is whatever followed the marker on the same line (usually
    empty). Text before the first marker is not part of any block.
    """
    markers = list(_QUESTION_MARKER_RE.finditer(text))
    blocks: list[tuple[str, str]] = []
    for idx, marker in enumerate(markers):
        end = markers[idx + 1].start() if idx + 1 < len(markers) else len(text)
        blocks.append((marker.group("rest").strip(), text[marker.end() : end]))
    return blocks


def _canonical_options(captured: list[list[str]]) -> list[list[str]]:
    """The single place extra options are cut to ``REQUIRED_OPTION_COUNT``."""
    return captured[:REQUIRED_OPTION_COUNT]


def _issue(
    kind: QuizFailureKind,
    index: int,
    message: str,
    **fields: object,
) -> ParseIssue:
    logger.warning("Question %d: %s", index, message)
    return ParseIssue(kind=kind, block_index=index, message=message, **fields)


def build_question(index: int, header_rest: str, body: str) -> ParsedQuestion | ParseIssue:
    """Extract and check one block; ``index`` is 1-based and only used for diagnostics."""
    scanner = _BlockScanner()
    if header_rest:
        scanner.question_lines.append(header_rest)
    for raw in body.splitlines():
        scanner.feed(raw)

    text = scanner.question_text
    if not text:
        return _issue(QuizFailureKind.EMPTY_QUESTION_TEXT, index, "has no text. Skipping.")

    captured = scanner.options
    if len(captured) < REQUIRED_OPTION_COUNT:
        return _issue(
            QuizFailureKind.INCOMPLETE_OPTIONS,
            index,
            f"has only {len(captured)} options (expected {REQUIRED_OPTION_COUNT}). Skipping.",
            question_text=text,
            options=[opt for _, opt in captured],
        )

    canonical = _canonical_options(captured)
    options = [opt for _, opt in canonical]
    valid = [opt for opt in options if opt]
    if len(valid) < REQUIRED_OPTION_COUNT:
        return _issue(
            QuizFailureKind.INCOMPLETE_OPTIONS,
            index,
            f"has {len(valid)} valid options (expected {REQUIRED_OPTION_COUNT}). Skipping.",
            question_text=text,
            options=options,
        )

    by_letter: dict[str, str] = {}
    for letter, opt in canonical:
        by_letter.setdefault(letter, opt)

    correct = ""
    if scanner.answer_letter and scanner.answer_letter in by_letter:
        correct = by_letter[scanner.answer_letter]
    elif scanner.answer_text:
        correct = scanner.answer_text
    if not correct:
        return _issue(
            QuizFailureKind.UNRESOLVED_ANSWER,
            index,
            "has no correct answer marked. Skipping.",
            question_text=text,
            options=options,
        )

    match = match_answer_to_option(correct, options)
    if match is None:
        return _issue(
            QuizFailureKind.ANSWER_OPTION_MISMATCH,
            index,
            f'correct answer "{correct}" doesn\'t match any option. Options: {", ".join(options)}',
            question_text=text,
            options=options,
            stated_answer=correct,
        )
    if not match.exact:
        logger.info("Question %d: correct answer %r healed to option %r", index, correct, match.correct)

    return ParsedQuestion(
        text=text,
        options=options,
        correct=match.correct,
        explanation=scanner.explanation,
    )


def parse_quiz_text(text: str) -> QuizParseReport:
    """Run header extraction, segmentation and per-block extraction.

    With no question markers the report carries ``NO_QUESTION_BLOCKS_FOUND`` and
    no quiz. Otherwise the quiz holds every block that survived, possibly none;
    rejecting an empty quiz is left to the aggregate checks.
    """
    text = text or ""
    blocks = split_question_blocks(text)
    if not blocks:
        logger.error("No questions found in quiz response")
        return QuizParseReport(
            failure=QuizFailureKind.NO_QUESTION_BLOCKS_FOUND,
            issues=[
                ParseIssue(
                    kind=QuizFailureKind.NO_QUESTION_BLOCKS_FOUND,
                    message="No '### Question' markers found in model output",
                )
            ],
        )

    questions: list[ParsedQuestion] = []
    issues: list[ParseIssue] = []
    for index, (header_rest, body) in enumerate(blocks, start=1):
        outcome = build_question(index, header_rest, body)
        if isinstance(outcome, ParseIssue):
            issues.append(outcome)
        else:
            questions.append(outcome)

    quiz = ParsedQuiz(
        title=extract_title(text),
        difficulty=extract_difficulty(text),
        topic=extract_topic(text),
        questions=questions,
    )
    return QuizParseReport(quiz=quiz, issues=issues, blocks_found=len(blocks))


def parse_quiz_report(
    text: str,
    *,
    require_explanations: bool = False,
    expected_count: int | None = None,
) -> QuizParseReport:
    """Parse ``text`` and apply the aggregate checks; never raises on bad input."""
    report = parse_quiz_text(text)
    return validate_quiz_report(
        report,
        require_explanations=require_explanations,
        expected_count=expected_count,
    )


def parse_quiz_response(
    text: str,
    *,
    require_explanations: bool = False,
    expected_count: int | None = None,
) -> ParsedQuiz | None:
    """Return the validated quiz, or None when the completion is unusable."""
    report = parse_quiz_report(
        text,
        require_explanations=require_explanations,
        expected_count=expected_count,
    )
    return report.quiz if report.ok else None


__all__ = [
    "build_question",
    "extract_difficulty",
    "extract_title",
    "extract_topic",
    "parse_quiz_report",
    "parse_quiz_response",
    "parse_quiz_text",
    "split_question_blocks",
]
