"""One dashboard session: fetch once, then derive views on demand."""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import httpx

from survey_dashboard import aggregator
from survey_dashboard.analysis.keywords import KeywordThemeRanker, ThemeRanker
from survey_dashboard.analysis.synthesizer import synthesize
from survey_dashboard.analysis.themes import LLMThemeRanker
from survey_dashboard.config import DashboardConfig
from survey_dashboard.fetcher import load_records
from survey_dashboard.instructor import (
    FieldInstructorClassifier,
    InstructorClassifier,
    PositionalInstructorClassifier,
)
from survey_dashboard.models import AggregateView, Respondent
from survey_dashboard.normalizer import normalize_all

logger = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"
READY_WITH_FALLBACK = "ready-with-fallback"


def build_rankers(config: DashboardConfig) -> Tuple[ThemeRanker, ThemeRanker]:
    """Return ``(reason_ranker, pain_ranker)`` for ``config.theme_ranker``."""

    reasons = KeywordThemeRanker(
        config.harvest_keywords, fallback_label=config.general_feedback_label
    )
    pains = KeywordThemeRanker(
        config.suggestion_keywords, fallback_label=config.general_feedback_label
    )
    if config.theme_ranker == "openai":
        return LLMThemeRanker(fallback=reasons), LLMThemeRanker(fallback=pains)
    if config.theme_ranker != "keyword":
        logger.warning(
            "Unknown theme ranker '%s'; using keyword ranking", config.theme_ranker
        )
    return reasons, pains


class DashboardPipeline:
    """Owns the respondent collection for a single dashboard session.

    ``load()`` performs the only fetch of the session; afterwards the
    respondents are read-only and :meth:`view` recomputes aggregates for any
    ``(role_filter, view_mode)`` combination.
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        client: Optional[httpx.Client] = None,
        classifier: Optional[InstructorClassifier] = None,
        reason_ranker: Optional[ThemeRanker] = None,
        pain_ranker: Optional[ThemeRanker] = None,
    ) -> None:
        self.config = config
        self._client = client
        self._classifier = classifier or FieldInstructorClassifier(
            fallback=PositionalInstructorClassifier(config.it_session_indices)
        )
        default_reasons, default_pains = build_rankers(config)
        self._reason_ranker = reason_ranker or default_reasons
        self._pain_ranker = pain_ranker or default_pains

        self.state: str = LOADING
        self.fallback_reason: Optional[str] = None
        self._respondents: Tuple[Respondent, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return self.state == READY_WITH_FALLBACK

    @property
    def respondents(self) -> Tuple[Respondent, ...]:
        return self._respondents

    def load(self) -> Tuple[Respondent, ...]:
        """Fetch and normalize the survey data (once per session)."""

        if self.state != LOADING:
            return self._respondents

        result = load_records(self.config, client=self._client)
        self._respondents = tuple(
            normalize_all(result.records, classifier=self._classifier)
        )
        self.fallback_reason = result.reason
        self.state = READY_WITH_FALLBACK if result.is_fallback else READY
        logger.info(
            "Dashboard ready: %d respondents (state=%s)",
            len(self._respondents),
            self.state,
        )
        return self._respondents

    def roles(self) -> List[str]:
        """Roles offered by the filter: ``"All"`` followed by the fixed set."""
        return [aggregator.ALL_ROLES, *self.config.roles]

    def view(
        self,
        role_filter: str = aggregator.ALL_ROLES,
        view_mode: str = aggregator.OVERVIEW,
    ) -> AggregateView:
        """Compute the aggregate view for *role_filter* and *view_mode*.

        Raises
        ------
        ValueError
            If *view_mode* is not ``"overview"`` or ``"deep-dive"``.
        """

        if view_mode not in aggregator.VIEW_MODES:
            raise ValueError(f"Unknown view mode: {view_mode!r}")

        everyone = self.load()
        filtered = aggregator.filter_by_role(everyone, role_filter)
        logger.debug(
            "Computing view role=%s mode=%s (%d/%d respondents)",
            role_filter,
            view_mode,
            len(filtered),
            len(everyone),
        )

        cfg = self.config
        kpi = aggregator.compute_kpi(filtered)
        return AggregateView(
            role_filter=role_filter or aggregator.ALL_ROLES,
            view_mode=view_mode,
            is_fallback=self.is_fallback,
            kpi=kpi,
            response_rate=aggregator.response_rate(kpi.count, cfg.total_expected),
            radar=aggregator.compute_radar(filtered, everyone, view_mode, cfg.roles),
            satisfaction=aggregator.compute_satisfaction_detail(
                filtered, cfg.satisfaction_labels
            ),
            role_comparison=aggregator.compute_role_comparison(everyone, cfg.roles),
            role_table=aggregator.compute_role_table(
                everyone, cfg.roles, cfg.satisfaction_labels
            ),
            instructor_comparison=aggregator.compute_instructor_comparison(everyone),
            qualitative=synthesize(
                filtered,
                reason_ranker=self._reason_ranker,
                pain_ranker=self._pain_ranker,
            ),
            recent_feedback=aggregator.recent_feedback(
                filtered, cfg.recent_feedback_limit
            ),
        )
