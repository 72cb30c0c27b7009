"""Thin wrapper around the ``openai`` package for the LLM theme ranker.

Only :mod:`survey_dashboard.analysis.themes` talks to OpenAI, and only when
``SURVEY_THEME_RANKER=openai``. The package is imported lazily so the
keyword-only pipeline never needs credentials.
"""
from __future__ import annotations

import importlib
import os
import types
from typing import Any, Dict, List


class OpenAIClientError(RuntimeError):
    """Raised when the OpenAI client cannot be configured."""


DEFAULT_MODEL = "gpt-4.1"


def _load_openai() -> types.ModuleType:
    """Import ``openai`` on first use (tests inject a stub via ``sys.modules``)."""
    return importlib.import_module("openai")


def _api_key() -> str:
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise OpenAIClientError("OPENAI_API_KEY environment variable is not set.")
    return api_key


def get_openai_client() -> Any:
    """Return an ``openai.OpenAI`` client configured from the environment."""

    openai = _load_openai()
    kwargs: Dict[str, Any] = {"api_key": _api_key()}
    org = os.getenv("OPENAI_ORG")
    if org:
        kwargs["organization"] = org
    return openai.OpenAI(**kwargs)


def chat_completion(
    messages: List[Dict[str, str]],
    *,
    model: str | None = None,
    **kwargs: Any,
) -> str:
    """Send *messages* and return the content of the first choice.

    ``model`` defaults to ``SURVEY_OPENAI_MODEL`` or ``gpt-4.1``; remaining
    keyword arguments go to ``chat.completions.create`` unchanged.
    """

    client = get_openai_client()
    completion = client.chat.completions.create(
        model=model or os.getenv("SURVEY_OPENAI_MODEL", DEFAULT_MODEL),
        messages=messages,
        **kwargs,
    )
    try:
        content = completion.choices[0].message.content
    except (AttributeError, IndexError) as exc:
        raise ValueError("Model response missing expected fields") from exc
    return content or ""
