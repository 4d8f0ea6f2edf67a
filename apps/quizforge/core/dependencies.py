"""Central dependency providers.

These helpers keep the LLM client and the services built on it process-scoped
and reusable, and let tests clear the caches or pass fakes instead.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quizforge.services.llm_service import LLMService
    from quizforge.services.quiz_generator import QuizGenerator
    from quizforge.services.topic_advisor import TopicAdvisor


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    from quizforge.services.llm_service import LLMService

    return LLMService()


@lru_cache(maxsize=1)
def get_quiz_generator() -> QuizGenerator:
    from quizforge.services.quiz_generator import QuizGenerator

    return QuizGenerator(llm=get_llm_service())


@lru_cache(maxsize=1)
def get_topic_advisor() -> TopicAdvisor:
    from quizforge.services.topic_advisor import TopicAdvisor

    return TopicAdvisor(llm=get_llm_service())
