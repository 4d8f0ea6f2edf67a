from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from quizforge.core.exceptions import QuizGenerationError
from quizforge.core.settings import settings
from quizforge.prompts import load_prompt, render_prompt
from quizforge.schemas.topics import TopicSuggestions, TopicValidation

if TYPE_CHECKING:
    from quizforge.services.llm_service import CompletionProvider

logger = logging.getLogger(__name__)

VALIDATE_PROMPT = load_prompt("topics", "validate.md")

_NUMBERING_RE = re.compile(r"^\s*\d+[.)]\s*")
_BULLET_RE = re.compile(r"^\s*[-*•]\s*")


def clean_topic_line(line: str) -> str:
    """Strip list numbering, bullets and wrapping quotes from one reply line."""
    cleaned = _NUMBERING_RE.sub("", line)
    cleaned = _BULLET_RE.sub("", cleaned)
    return cleaned.strip().strip("\"'").strip()


def parse_topic_lines(text: str, *, limit: int) -> list[str]:
    topics = [clean_topic_line(line) for line in (text or "").splitlines()]
    return [topic for topic in topics if topic][: max(1, int(limit))]


@dataclass
class TopicAdvisor:
    """Suggest and sanity-check quiz topics with the LLM."""

    llm: Optional[CompletionProvider] = None

    def __post_init__(self) -> None:
        if self.llm is None:
            from quizforge.core.dependencies import get_llm_service

            self.llm = get_llm_service()

    def suggest_topics(self, user_topic: str) -> TopicSuggestions:
        query = (user_topic or "").strip()
        if not query:
            raise ValueError("user_topic is required and must be a non-empty string")

        count = settings.topic_suggestion_count
        messages = [
            {"role": "system", "content": render_prompt("topics", "suggest.md", count=count)},
            {
                "role": "user",
                "content": f'Suggest {count} quiz topics for practice and study related to: "{query}"',
            },
        ]
        raw = self.llm.chat(messages, model=settings.topic_model, temperature=0.7)
        topics = parse_topic_lines(raw, limit=count)
        if not topics:
            raise QuizGenerationError("No valid topics", code="no_topics")
        return TopicSuggestions(query=query, topics=topics)

    def validate_topic(self, name: str) -> TopicValidation:
        name = (name or "").strip()
        if not name:
            raise ValueError("name is required and must be a non-empty string")

        messages = [
            {"role": "system", "content": VALIDATE_PROMPT},
            {"role": "user", "content": f'Validate the quiz topic: "{name}"'},
        ]
        raw = (self.llm.chat(messages, model=settings.topic_model, temperature=0.3) or "").strip()
        if not raw:
            raise QuizGenerationError("No validation response", code="empty_completion")

        if "true" in raw.lower():
            return TopicValidation(
                name=name, is_valid=True, message="Topic is valid for quiz generation"
            )
        logger.info("Topic %r rejected: %s", name, raw)
        return TopicValidation(name=name, is_valid=False, message=raw)


__all__ = ["TopicAdvisor", "clean_topic_line", "parse_topic_lines"]
