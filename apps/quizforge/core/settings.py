from __future__ import annotations

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    openai = "openai"
    ollama = "ollama"


class Settings(BaseSettings):
    """Unified application settings for quizforge.

    Loads from env with support for repo ".env" files. Avoids manual load_dotenv().
    """

    _app_env = (os.getenv("APP_ENV") or "").strip().lower()
    _env_files = (
        []
        if _app_env in {"test", "ci"}
        else [
            str((Path(__file__).resolve().parents[1] / ".env")),  # apps/quizforge/.env
            str((Path(__file__).resolve().parents[3] / ".env")),  # repo root .env
        ]
    )

    model_config = SettingsConfigDict(
        env_file=_env_files,
        case_sensitive=False,
        extra="ignore",
    )

    # --- App / Core ---
    app_env: str = Field(default="dev", alias="APP_ENV")
    app_name: str = Field(default="quizforge", alias="APP_NAME")
    # Logging
    log_level: str | None = Field(default=None, alias="QUIZFORGE_LOG_LEVEL")
    log_level_fallback: str | None = Field(default=None, alias="LOG_LEVEL")

    # OpenAI
    openai_api_key: SecretStr | None = Field(default=None, alias="OPENAI_API_KEY")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    openai_organization: Optional[str] = Field(default=None, alias="OPENAI_ORG")

    # --- LLM unified ---
    llm_provider: LLMProvider = Field(default=LLMProvider.openai, alias="QUIZFORGE_LLM_PROVIDER")
    llm_model: str = Field(default="gpt-4.1-mini", alias="QUIZFORGE_LLM_MODEL")
    llm_temperature: float = Field(default=0.2, alias="QUIZFORGE_LLM_TEMPERATURE")

    # Ollama specifics
    ollama_chat_model: str = Field(default="llama3.2", alias="QUIZFORGE_OLLAMA_CHAT_MODEL")

    # --- Quiz generation ---
    quiz_model: str | None = Field(default=None, alias="QUIZ_MODEL")
    quiz_temperature: float = Field(default=0.1, alias="QUIZ_TEMPERATURE", ge=0, le=2)
    quiz_max_tokens: int = Field(default=4000, alias="QUIZ_MAX_TOKENS", ge=256)
    quiz_require_explanations: bool = Field(default=True, alias="QUIZ_REQUIRE_EXPLANATIONS")
    quiz_generation_attempts: int = Field(
        default=1,
        alias="QUIZ_GENERATION_ATTEMPTS",
        ge=1,
        le=5,
        description="1 disables re-asking the model after a parse failure.",
    )
    quiz_max_questions: int = Field(default=50, alias="QUIZ_MAX_QUESTIONS", ge=1, le=200)
    quiz_document_context_chars: int = Field(
        default=12_000, alias="QUIZ_DOCUMENT_CONTEXT_CHARS", ge=500
    )

    # --- Topics ---
    topic_model: str | None = Field(default=None, alias="TOPIC_MODEL")
    topic_suggestion_count: int = Field(default=3, alias="TOPIC_SUGGESTION_COUNT", ge=1, le=10)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


# Convenience singleton for modules expecting a module-level "settings"
settings = get_settings()
