"""OpenAI-backed theme ranking.

Drop-in alternative to :class:`~survey_dashboard.analysis.keywords.KeywordThemeRanker`
for free-text buckets. The model is asked for a JSON array of
``{"term", "description", "count"}`` objects; if the call or the parsing
fails, the ranker degrades to the keyword heuristic.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional, Sequence

from survey_dashboard.analysis.keywords import ThemeRanker
from survey_dashboard.models import RankedTheme
from survey_dashboard.openai_client import chat_completion

logger = logging.getLogger(__name__)

# Regex to capture the first JSON array in the model response (robust to extra text)
_RESPONSE_RE = re.compile(r"\[[\s\S]*\]")

_PROMPT_SYSTEM = (
    "You analyse free-text answers from a post-workshop survey. Identify the "
    "most common themes. Respond ONLY with a minified JSON array of objects "
    'like [{"term":"實作時間","description":"實作時間不足","count":3}], '
    "ordered by count descending. Terms must be short noun phrases in the "
    "language of the answers."
)


def _parse_response(content: str) -> List[RankedTheme]:
    """Return ranked themes from the raw model *content* string."""

    match = _RESPONSE_RE.search(content)
    if not match:
        raise ValueError("Model response did not contain a JSON array")

    try:
        data: Any = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ValueError("Failed to parse JSON from model response") from exc

    if not isinstance(data, list):
        raise ValueError("JSON payload was not an array")

    themes = []
    for item in data:
        if not isinstance(item, dict) or not isinstance(item.get("term"), str):
            raise ValueError(f"Unexpected theme entry: {item!r}")
        count = item.get("count", 1)
        if not isinstance(count, int) or isinstance(count, bool):
            raise ValueError(f"Theme count not an integer: {count!r}")
        themes.append(
            RankedTheme(
                term=item["term"],
                description=str(item.get("description") or item["term"]),
                count=max(count, 0),
            )
        )
    return sorted(themes, key=lambda theme: theme.count, reverse=True)


class LLMThemeRanker:
    """Rank themes with an OpenAI chat model."""

    def __init__(
        self,
        *,
        max_themes: int = 5,
        temperature: float = 0.0,
        fallback: Optional[ThemeRanker] = None,
    ) -> None:
        self.max_themes = max_themes
        self.temperature = temperature
        self._fallback = fallback

    def summarize(self, texts: Sequence[str]) -> List[RankedTheme]:
        if not texts:
            return []

        joined = "\n".join(f"- {line}" for line in texts)
        messages = [
            {"role": "system", "content": _PROMPT_SYSTEM},
            {
                "role": "user",
                "content": (
                    f"List up to {self.max_themes} themes for these answers. "
                    "Return ONLY the JSON array.\n\nAnswers:\n" + joined
                ),
            },
        ]

        try:
            content = chat_completion(messages, temperature=self.temperature)
            return _parse_response(content)[: self.max_themes]
        except Exception as exc:  # noqa: BLE001 – fall back to keywords
            if self._fallback is None:
                raise
            logger.warning("LLM theme ranking failed, using fallback: %s", exc)
            return self._fallback.summarize(texts)
