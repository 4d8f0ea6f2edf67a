from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest
from quizforge.core.exceptions import ConfigurationError, RateLimitError, ServiceUnavailableError
from quizforge.core.settings import LLMProvider, Settings
from quizforge.services.llm_service import CompletionProvider, LLMService
from quizforge.services.quiz_generator import QuizGenerator

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class _FakeCompletions:
    def __init__(self, *, content: str | None = "hello", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):  # noqa: ANN003
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(completions: _FakeCompletions) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


def test_chat_passes_model_and_sampling_options():
    completions = _FakeCompletions(content="### Question 1")
    svc = LLMService(openai_client=_client(completions), cfg=_settings())

    out = svc.chat([{"role": "user", "content": "hi"}], temperature=0.1, max_tokens=4000)

    assert out == "### Question 1"
    call = completions.calls[0]
    assert call["model"] == "gpt-4.1-mini"
    assert call["temperature"] == 0.1
    assert call["max_tokens"] == 4000


def test_chat_uses_configured_defaults_and_omits_max_tokens():
    completions = _FakeCompletions()
    cfg = _settings(QUIZFORGE_LLM_MODEL="gpt-4o", QUIZFORGE_LLM_TEMPERATURE=0.5)

    LLMService(openai_client=_client(completions), cfg=cfg).chat([], model=None)

    call = completions.calls[0]
    assert call["model"] == "gpt-4o"
    assert call["temperature"] == 0.5
    assert "max_tokens" not in call


def test_none_content_becomes_empty_string():
    svc = LLMService(openai_client=_client(_FakeCompletions(content=None)), cfg=_settings())

    assert svc.chat([]) == ""


def test_missing_api_key_is_a_configuration_error():
    svc = LLMService(cfg=_settings(OPENAI_API_KEY=""))

    with pytest.raises(ConfigurationError) as exc_info:
        svc.chat([{"role": "user", "content": "hi"}])

    assert exc_info.value.code == "missing_api_key"
    assert exc_info.value.status_code == 500


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (
            openai.RateLimitError(
                "quota", response=httpx.Response(429, request=_REQUEST), body=None
            ),
            RateLimitError,
        ),
        (
            openai.AuthenticationError(
                "bad key", response=httpx.Response(401, request=_REQUEST), body=None
            ),
            ConfigurationError,
        ),
        (openai.APIConnectionError(request=_REQUEST), ServiceUnavailableError),
    ],
)
def test_provider_errors_are_translated(error, expected):
    svc = LLMService(openai_client=_client(_FakeCompletions(error=error)), cfg=_settings())

    with pytest.raises(expected):
        svc.chat([])


def test_ollama_without_package_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr("quizforge.services.llm_service._get_ollama_chat", lambda: None)
    svc = LLMService(cfg=_settings())

    with pytest.raises(ConfigurationError):
        svc.chat([], provider=LLMProvider.ollama)


def test_ollama_uses_its_own_model(monkeypatch):
    seen: dict = {}

    def _fake_ollama_chat(**kwargs):  # noqa: ANN003
        seen.update(kwargs)
        return {"message": {"content": "ok"}}

    monkeypatch.setattr("quizforge.services.llm_service._get_ollama_chat", lambda: _fake_ollama_chat)
    svc = LLMService(cfg=_settings(QUIZFORGE_LLM_PROVIDER="ollama"))

    assert svc.chat([{"role": "user", "content": "hi"}], temperature=0.3) == "ok"
    assert seen["model"] == "llama3.2"
    assert seen["options"] == {"temperature": 0.3}


def test_llm_service_and_fakes_satisfy_completion_provider(fake_llm):
    assert isinstance(LLMService(cfg=_settings()), CompletionProvider)
    assert isinstance(fake_llm("x"), CompletionProvider)
    assert isinstance(QuizGenerator(llm=fake_llm("x")).llm, CompletionProvider)
