"""Aggregate respondents into the dashboard view-model.

All functions are pure and read-only over their inputs. Rounding is
round-half-away-from-zero, done on :class:`~decimal.Decimal` so the result
keeps exactly the requested number of decimal places.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Sequence

from survey_dashboard.config import DIFFICULTY_ITEM_INDEX, ROLES, SATISFACTION_LABELS
from survey_dashboard.models import (
    ADMIN_LED,
    DIMENSIONS,
    IT_LED,
    Cell,
    FeedbackCard,
    InstructorComparison,
    InstructorStats,
    Kpi,
    RadarPoint,
    Respondent,
    RoleComparisonRow,
    RoleRow,
    SatisfactionBar,
    SatisfactionDetail,
)
from survey_dashboard.normalizer import average

logger = logging.getLogger(__name__)

ALL_ROLES = "All"
OVERVIEW = "overview"
DEEP_DIVE = "deep-dive"
VIEW_MODES = (OVERVIEW, DEEP_DIVE)

PROMOTER_THRESHOLD = 4.5
DETRACTOR_THRESHOLD = 3.0

# (lower bound, band) checked top-down
SEVERITY_BANDS = (
    (Decimal("4.5"), "best"),
    (Decimal("4.0"), "good"),
    (Decimal("3.5"), "fair"),
)
WEAKEST_BAND = "weak"

EMPTY_CELL = "-"
NO_FEEDBACK_TEXT = "無文字回饋"


def round_half_up(value: float, places: int) -> Decimal:
    """Round *value* half away from zero to *places* decimals."""
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def severity_band(value: Decimal) -> str:
    for bound, band in SEVERITY_BANDS:
        if value >= bound:
            return band
    return WEAKEST_BAND


def _mean_of(respondents: Sequence[Respondent], key: str) -> float:
    return average([r.score(key) for r in respondents])


def _item_mean(respondents: Sequence[Respondent], index: int) -> float:
    # Respondents that skipped the item count as 0, like any missing score.
    return average(
        [
            r.satisfaction_items[index] if index < len(r.satisfaction_items) else 0.0
            for r in respondents
        ]
    )


def filter_by_role(
    respondents: Sequence[Respondent], role: Optional[str]
) -> List[Respondent]:
    """Respondents whose role equals *role*; ``None`` or ``"All"`` keeps all."""
    if role is None or role == ALL_ROLES:
        return list(respondents)
    return [r for r in respondents if r.role == role]


def compute_nps(respondents: Sequence[Respondent]) -> int:
    """Satisfaction-based NPS in [-100, 100]; 0 for an empty set."""

    count = len(respondents)
    if count == 0:
        return 0
    promoters = sum(1 for r in respondents if r.satisfaction_overall >= PROMOTER_THRESHOLD)
    detractors = sum(
        1 for r in respondents if r.satisfaction_overall <= DETRACTOR_THRESHOLD
    )
    score = Decimal(promoters - detractors) * 100 / Decimal(count)
    return int(score.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_kpi(respondents: Sequence[Respondent]) -> Kpi:
    count = len(respondents)
    if count == 0:
        return Kpi(
            count=0,
            avg_satisfaction=round_half_up(0, 1),
            avg_learning_effectiveness=round_half_up(0, 1),
            nps=0,
        )
    return Kpi(
        count=count,
        avg_satisfaction=round_half_up(_mean_of(respondents, "satisfaction_overall"), 1),
        avg_learning_effectiveness=round_half_up(
            _mean_of(respondents, "learning_effectiveness"), 1
        ),
        nps=compute_nps(respondents),
    )


def compute_radar(
    filtered: Sequence[Respondent],
    everyone: Sequence[Respondent],
    view_mode: str = OVERVIEW,
    roles: Sequence[str] = ROLES,
) -> List[RadarPoint]:
    """Radar axes for *view_mode*.

    Overview: mean of each dimension over *filtered*. Deep-dive: per-role
    means over *everyone*, ignoring the role filter. Nothing to plot when
    the set a mode reads from is empty.
    """

    if view_mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode: {view_mode!r}")
    if view_mode == DEEP_DIVE:
        if not everyone:
            return []
        by_role = {role: filter_by_role(everyone, role) for role in roles}
        return [
            RadarPoint(
                key=dim.key,
                subject=dim.name,
                series={
                    role: round_half_up(_mean_of(members, dim.key), 2)
                    for role, members in by_role.items()
                },
            )
            for dim in DIMENSIONS
        ]

    if not filtered:
        return []
    return [
        RadarPoint(
            key=dim.key,
            subject=dim.name,
            value=round_half_up(_mean_of(filtered, dim.key), 2),
        )
        for dim in DIMENSIONS
    ]


def compute_satisfaction_detail(
    respondents: Sequence[Respondent],
    labels: Sequence[str] = SATISFACTION_LABELS,
) -> SatisfactionDetail:
    bars = []
    for index, label in enumerate(labels):
        value = round_half_up(_item_mean(respondents, index), 2)
        bars.append(
            SatisfactionBar(index=index, label=label, value=value, band=severity_band(value))
        )
    if not bars:
        return SatisfactionDetail()

    ranked = sorted(bars, key=lambda bar: bar.value, reverse=True)
    return SatisfactionDetail(bars=bars, highest=ranked[0], lowest=ranked[-1])


def compute_role_comparison(
    everyone: Sequence[Respondent], roles: Sequence[str] = ROLES
) -> List[RoleComparisonRow]:
    """Per-role satisfaction, design sub-score and learning effectiveness."""

    if not everyone:
        return []
    rows = []
    for role in roles:
        members = filter_by_role(everyone, role)
        rows.append(
            RoleComparisonRow(
                role=role,
                count=len(members),
                satisfaction=round_half_up(_mean_of(members, "satisfaction_overall"), 2),
                design=round_half_up(_mean_of(members, "satisfaction_design"), 2),
                learning_effectiveness=round_half_up(
                    _mean_of(members, "learning_effectiveness"), 2
                ),
            )
        )
    return rows


def _cell(members: Sequence[Respondent], mean: float) -> Cell:
    return round_half_up(mean, 2) if members else EMPTY_CELL


def compute_role_table(
    everyone: Sequence[Respondent],
    roles: Sequence[str] = ROLES,
    labels: Sequence[str] = SATISFACTION_LABELS,
) -> List[RoleRow]:
    """Heat-matrix rows; cells read ``"-"`` for roles without respondents."""

    rows = []
    for role in roles:
        members = filter_by_role(everyone, role)
        dimensions: Dict[str, Cell] = {
            dim.key: _cell(members, _mean_of(members, dim.key)) for dim in DIMENSIONS
        }
        satisfaction = _cell(members, _mean_of(members, "satisfaction_overall"))
        items = [_cell(members, _item_mean(members, i)) for i in range(len(labels))]

        bands = {
            key: severity_band(value) if isinstance(value, Decimal) else None
            for key, value in {**dimensions, "satisfaction_overall": satisfaction}.items()
        }
        rows.append(
            RoleRow(
                role=role,
                count=len(members),
                dimensions=dimensions,
                satisfaction=satisfaction,
                items=items,
                bands=bands,
            )
        )
    return rows


def _instructor_stats(instructor_type: str, members: Sequence[Respondent]) -> InstructorStats:
    return InstructorStats(
        instructor_type=instructor_type,
        count=len(members),
        nps=compute_nps(members),
        satisfaction=round_half_up(_mean_of(members, "satisfaction_overall"), 2),
        learning_effectiveness=round_half_up(
            _mean_of(members, "learning_effectiveness"), 2
        ),
        self_efficacy=round_half_up(_mean_of(members, "self_efficacy"), 2),
        difficulty_fit=round_half_up(_item_mean(members, DIFFICULTY_ITEM_INDEX), 2),
    )


def compute_instructor_comparison(everyone: Sequence[Respondent]) -> InstructorComparison:
    """Side-by-side stats for IT-led versus Admin-led sessions."""

    it_led = [r for r in everyone if r.instructor_type == IT_LED]
    admin_led = [r for r in everyone if r.instructor_type != IT_LED]
    return InstructorComparison(
        it=_instructor_stats(IT_LED, it_led),
        admin=_instructor_stats(ADMIN_LED, admin_led),
    )


def recent_feedback(
    respondents: Sequence[Respondent], limit: int = 6
) -> List[FeedbackCard]:
    """First *limit* respondents as feedback cards (suggestion, else harvest)."""

    cards = []
    for r in respondents[: max(limit, 0)]:
        text = r.feedback.suggestion or r.feedback.harvest or NO_FEEDBACK_TEXT
        stars = int(round_half_up(r.satisfaction_overall, 0))
        cards.append(FeedbackCard(id=r.id, role=r.role, stars=stars, text=text))
    return cards


def response_rate(count: int, total_expected: int) -> Decimal:
    """Share of expected participants who responded, in percent (1 dp)."""
    if total_expected <= 0:
        return round_half_up(0, 1)
    return round_half_up(count / total_expected * 100, 1)
