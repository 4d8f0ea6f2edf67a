"""Markdown prompt templates shipped with quizforge.

Templates live next to this module, grouped by service (``quiz/``,
``document_quiz/``, ``topics/``), and use ``str.format`` placeholders.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from quizforge.core.exceptions import ConfigurationError

_PROMPTS_ROOT = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(*relative_parts: str) -> str:
    """Return the stripped template at ``relative_parts``, e.g. ("quiz", "system.md")."""
    path = _PROMPTS_ROOT.joinpath(*relative_parts)
    if not path.is_file():
        raise FileNotFoundError(f"Prompt template missing: {path}")
    return path.read_text(encoding="utf-8").strip()


def render_prompt(*relative_parts: str, **values: object) -> str:
    """Load a template and fill its placeholders.

    A placeholder without a value is a packaging mistake, not bad user input,
    so it surfaces as :class:`ConfigurationError`.
    """
    template = load_prompt(*relative_parts)
    try:
        return template.format(**values)
    except KeyError as exc:
        name = "/".join(relative_parts)
        raise ConfigurationError(
            f"Prompt template {name} expects a value for {exc.args[0]!r}",
            code="prompt_placeholder_missing",
        ) from exc


__all__ = ["load_prompt", "render_prompt"]
