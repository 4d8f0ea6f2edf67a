"""Errors raised by quizforge services.

Every error carries a ``status_code`` and a machine-readable ``code`` so a host
web app can translate it without knowing the service internals; see
:mod:`quizforge.core.handlers` for the FastAPI wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from quizforge.schemas.quiz import QuizParseReport


class QuizforgeException(Exception):
    """Base exception for quizforge."""

    status_code: int = 400
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        """JSON body for an error response: ``{error, code, type[, details]}``."""
        payload: dict[str, Any] = {
            "error": self.message,
            "code": self.code,
            "type": type(self).__name__,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(QuizforgeException):
    """Server-side misconfiguration (missing API key, missing provider package)."""

    status_code = 500
    default_code = "configuration_error"


class ServiceUnavailableError(QuizforgeException):
    """The LLM provider could not be reached."""

    status_code = 503
    default_code = "service_unavailable"


class RateLimitError(QuizforgeException):
    """The LLM provider refused the call for rate or quota reasons."""

    status_code = 429
    default_code = "rate_limited"


class QuizGenerationError(QuizforgeException):
    """The model output could not be turned into a usable quiz.

    Built from a failed parse report, ``code`` is the report's failure kind and
    ``details`` carries the block count and per-block issues so the caller can
    decide whether asking the model again is worthwhile.
    """

    status_code = 400
    default_code = "quiz_generation_failed"

    @classmethod
    def from_report(
        cls,
        report: QuizParseReport,
        message: str = "Failed to parse quiz. Please try again.",
    ) -> QuizGenerationError:
        details = {
            "failure": report.failure.value if report.failure else None,
            "blocks_found": report.blocks_found,
            "expected_count": report.expected_count,
            "issues": [issue.model_dump(exclude_none=True, mode="json") for issue in report.issues],
        }
        return cls(message, code=details["failure"], details=details)

    @property
    def issues(self) -> list[dict[str, Any]]:
        if isinstance(self.details, dict):
            return list(self.details.get("issues") or [])
        return []


__all__ = [
    "ConfigurationError",
    "QuizGenerationError",
    "QuizforgeException",
    "RateLimitError",
    "ServiceUnavailableError",
]
