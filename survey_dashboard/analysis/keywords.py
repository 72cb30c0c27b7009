"""Keyword-frequency theme ranking.

A deliberately simple heuristic: each configured term is counted as a
literal, case-sensitive substring of every text. No tokenization or
stemming is done, which keeps it predictable for CJK text.
"""
from __future__ import annotations

from typing import List, Protocol, Sequence, Tuple

from survey_dashboard.config import GENERAL_FEEDBACK_LABEL
from survey_dashboard.models import RankedTheme


class ThemeRanker(Protocol):
    def summarize(self, texts: Sequence[str]) -> List[RankedTheme]:
        """Return the most common themes in *texts*, most frequent first."""


class KeywordThemeRanker:
    """Rank ``(term, description)`` pairs by substring occurrences."""

    def __init__(
        self,
        keywords: Sequence[Tuple[str, str]],
        *,
        fallback_label: str = GENERAL_FEEDBACK_LABEL,
    ) -> None:
        self.keywords = tuple(keywords)
        self.fallback_label = fallback_label

    def summarize(self, texts: Sequence[str]) -> List[RankedTheme]:
        if not texts:
            return []

        themes = []
        for term, description in self.keywords:
            if not term:
                continue
            count = sum(text.count(term) for text in texts)
            if count > 0:
                themes.append(RankedTheme(term=term, description=description, count=count))

        if not themes:
            return [
                RankedTheme(
                    term=self.fallback_label,
                    description=self.fallback_label,
                    count=len(texts),
                )
            ]

        # sorted() is stable, so equal counts keep configuration order
        return sorted(themes, key=lambda theme: theme.count, reverse=True)
