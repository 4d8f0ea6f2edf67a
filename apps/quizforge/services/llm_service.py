from __future__ import annotations

import importlib.util
import logging
from typing import Optional, Protocol, runtime_checkable

import openai
from openai import OpenAI

from quizforge.core.exceptions import ConfigurationError, RateLimitError, ServiceUnavailableError
from quizforge.core.settings import LLMProvider, Settings, settings

logger = logging.getLogger(__name__)


def _get_ollama_chat():
    if importlib.util.find_spec("ollama") is None:
        return None
    from ollama import chat as ollama_chat  # type: ignore[import-not-found]

    return ollama_chat


@runtime_checkable
class CompletionProvider(Protocol):
    """Anything that turns chat messages into completion text.

    Quiz and topic services take one of these; tests pass a canned fake.
    """

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str: ...


class LLMService:
    """
    Unified LLM access for quizforge.
    - Supports OpenAI (cloud) and Ollama (local).
    - Provider failures surface as quizforge exceptions.
    """

    def __init__(
        self,
        *,
        openai_client: Optional[OpenAI] = None,
        cfg: Optional[Settings] = None,
    ) -> None:
        self.cfg = cfg or settings
        self._openai_client: Optional[OpenAI] = openai_client

    # ---------- internal helpers ----------

    @property
    def openai_client(self) -> OpenAI:
        if self._openai_client is None:
            api_key = (
                self.cfg.openai_api_key.get_secret_value() if self.cfg.openai_api_key else ""
            )
            if not api_key:
                raise ConfigurationError("OpenAI API key is not configured", code="missing_api_key")
            kwargs: dict[str, object] = {"api_key": api_key}
            if self.cfg.openai_base_url:
                kwargs["base_url"] = self.cfg.openai_base_url
            if self.cfg.openai_organization:
                kwargs["organization"] = self.cfg.openai_organization
            self._openai_client = OpenAI(**kwargs)
        return self._openai_client

    def _openai_chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str,
        temperature: float,
        max_tokens: Optional[int],
    ) -> str:
        kwargs: dict[str, object] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
        }
        if max_tokens:
            kwargs["max_tokens"] = max_tokens
        try:
            resp = self.openai_client.chat.completions.create(**kwargs)
        except openai.RateLimitError as exc:
            logger.warning("OpenAI rate limit hit: %s", exc)
            raise RateLimitError("OpenAI API quota exceeded. Please check your billing.") from exc
        except openai.AuthenticationError as exc:
            raise ConfigurationError("OpenAI API key is invalid", code="invalid_api_key") from exc
        except (openai.APIConnectionError, openai.APITimeoutError) as exc:
            raise ServiceUnavailableError("OpenAI API is unreachable") from exc
        if not resp.choices:
            return ""
        return resp.choices[0].message.content or ""

    # ---------- Chat (simple text) ----------

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Non-streaming text response.
        messages: [{"role": "system"|"user"|"assistant", "content": "..."}]
        """
        provider = provider or self.cfg.llm_provider
        temperature = temperature if temperature is not None else self.cfg.llm_temperature

        if provider == LLMProvider.openai:
            return self._openai_chat(
                messages,
                model=model or self.cfg.llm_model,
                temperature=temperature,
                max_tokens=max_tokens,
            )

        if provider == LLMProvider.ollama:
            ollama_chat = _get_ollama_chat()
            if ollama_chat is None:
                raise ConfigurationError(
                    "Ollama provider is not available (missing 'ollama' package)"
                )
            resp = ollama_chat(
                model=model or self.cfg.ollama_chat_model,
                messages=messages,
                stream=False,
                options={"temperature": temperature},
            )
            return resp["message"]["content"]

        raise ValueError(f"Unsupported provider: {provider}")


__all__ = ["CompletionProvider", "LLMService"]
