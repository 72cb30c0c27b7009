"""Bucket free-text answers and rank the recurring themes."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from survey_dashboard.analysis.keywords import KeywordThemeRanker, ThemeRanker
from survey_dashboard.config import HARVEST_KEYWORDS, SUGGESTION_KEYWORDS
from survey_dashboard.models import (
    FeedbackEntry,
    LinkEntry,
    QualitativeSummary,
    Respondent,
)

# Answers this short are noise ("無", "ok")
MIN_TEXT_LENGTH = 2
MIN_LINK_LENGTH = 5

_TEXT_BUCKETS = ("harvest", "suggestion", "application")


def extract_buckets(
    respondents: Sequence[Respondent],
) -> Tuple[dict[str, List[FeedbackEntry]], List[LinkEntry]]:
    """Return ``({bucket: entries}, links)`` for the non-trivial answers."""

    buckets: dict[str, List[FeedbackEntry]] = {name: [] for name in _TEXT_BUCKETS}
    links: List[LinkEntry] = []

    for r in respondents:
        for name in _TEXT_BUCKETS:
            text = getattr(r.feedback, name).strip()
            if len(text) > MIN_TEXT_LENGTH:
                buckets[name].append(FeedbackEntry(id=r.id, role=r.role, text=text))
        url = r.feedback.link.strip()
        if len(url) > MIN_LINK_LENGTH:
            links.append(LinkEntry(id=r.id, role=r.role, url=url))

    return buckets, links


def synthesize(
    respondents: Sequence[Respondent],
    *,
    reason_ranker: Optional[ThemeRanker] = None,
    pain_ranker: Optional[ThemeRanker] = None,
) -> QualitativeSummary:
    """Bucket feedback and rank top reasons (harvest) and improvements (suggestion).

    Rankers default to keyword matching over the built-in term lists.
    """

    reason_ranker = reason_ranker or KeywordThemeRanker(HARVEST_KEYWORDS)
    pain_ranker = pain_ranker or KeywordThemeRanker(SUGGESTION_KEYWORDS)

    buckets, links = extract_buckets(respondents)

    return QualitativeSummary(
        harvest=buckets["harvest"],
        suggestion=buckets["suggestion"],
        application=buckets["application"],
        links=links,
        top_reasons=reason_ranker.summarize([e.text for e in buckets["harvest"]]),
        top_improvements=pain_ranker.summarize([e.text for e in buckets["suggestion"]]),
    )
