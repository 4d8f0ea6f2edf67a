from __future__ import annotations

import os
import socket
from typing import Any

import pytest

# Ensure the app runs in a unit-test-safe configuration during pytest collection.
# This keeps a developer's local .env (API keys, model overrides) out of unit tests.
os.environ.setdefault("APP_ENV", "test")


class NetworkBlockedError(RuntimeError):
    pass


def _blocked(*_args: Any, **_kwargs: Any) -> Any:
    raise NetworkBlockedError(
        "Network access is disabled during tests. "
        "Mark the test with @pytest.mark.integration/@pytest.mark.network or set ALLOW_NETWORK=1."
    )


@pytest.fixture(autouse=True)
def _disable_network(monkeypatch: pytest.MonkeyPatch, request: pytest.FixtureRequest) -> None:
    """Prevent accidental outbound network calls in unit tests."""

    if os.getenv("ALLOW_NETWORK") == "1":
        return

    if request.node.get_closest_marker("integration") or request.node.get_closest_marker("network"):
        return

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket, "getaddrinfo", _blocked)


def make_question_block(
    number: int,
    question: str,
    options: list[str],
    *,
    answer: str | None,
    explanation: str | None = "Because it is.",
) -> str:
    """Render one block in the ``### Question <N>`` markup the prompts ask for."""
    lines = [f"### Question {number}", question, ""]
    lines += [f"{letter}) {text}" for letter, text in zip("ABCD", options)]
    if answer is not None:
        lines.append(f"✅ Correct answer: {answer}")
    if explanation is not None:
        lines += ["", f"Explanation: {explanation}"]
    return "\n".join(lines) + "\n"


class FakeLLM:
    """Returns canned completions in order and records every call."""

    def __init__(self, *replies: str) -> None:
        self.replies = list(replies)
        self.calls: list[dict[str, Any]] = []

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        self.calls.append({"messages": messages, **kwargs})
        if not self.replies:
            return ""
        if len(self.replies) == 1:
            return self.replies[0]
        return self.replies.pop(0)


@pytest.fixture
def question_block():
    return make_question_block


@pytest.fixture
def well_formed_quiz(question_block) -> str:
    return "\n".join(
        [
            question_block(1, "What is 2 + 2?", ["3", "4", "5", "6"], answer="B) 4"),
            question_block(
                2,
                "What is the capital of France?",
                ["London", "Berlin", "Paris", "Madrid"],
                answer="C) Paris",
                explanation="Paris is the capital and largest city of France.",
            ),
            question_block(
                3,
                "Which keyword defines a function in Python?",
                ["func", "def", "lambda", "fn"],
                answer="B) def",
            ),
        ]
    )


@pytest.fixture
def fake_llm():
    return FakeLLM
