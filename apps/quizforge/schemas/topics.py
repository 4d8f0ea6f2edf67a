from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class TopicSuggestions(BaseModel):
    """Quiz-friendly topics suggested for a free-form subject."""

    query: str
    topics: List[str] = Field(default_factory=list)


class TopicValidation(BaseModel):
    """Verdict on whether a topic is specific enough to quiz on."""

    name: str
    is_valid: bool
    message: str
