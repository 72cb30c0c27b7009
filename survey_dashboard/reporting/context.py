"""Context dataclass for rendering the dashboard digest.

``ReportContext`` holds plain, already-formatted values for the Jinja2
template in ``survey_dashboard/reporting/templates/report.md.j2``. Keeping
context building apart from rendering lets the formatting rules be tested
without touching template strings.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from datetime import datetime as _dt
from datetime import timezone as _tz
from decimal import Decimal
from typing import Any, Dict, List, Optional

from survey_dashboard.models import DIMENSIONS, AggregateView, Cell
from survey_dashboard.reporting import config

__all__ = [
    "KpiLine",
    "ReportContext",
    "build_report_context",
]

FALLBACK_BANNER = "⚠️ 目前顯示的是備援示範資料，非即時問卷結果。"


@dataclass(slots=True)
class KpiLine:
    """Headline numbers, formatted for display."""

    count: int
    response_rate: str
    avg_satisfaction: str
    avg_learning_effectiveness: str
    nps: int

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` representation suitable for Jinja."""
        return asdict(self)


@dataclass(slots=True)
class ReportContext:
    """Container with all fields used by the report template."""

    # Header & meta
    date: str
    role_filter: str
    view_mode: str
    banner: Optional[str]
    kpi: KpiLine

    # Tables, each row a dict of display strings
    radar: List[Dict[str, str]] = field(default_factory=list)
    radar_columns: List[str] = field(default_factory=list)
    satisfaction: List[Dict[str, str]] = field(default_factory=list)
    highest: Optional[str] = None
    lowest: Optional[str] = None
    role_rows: List[Dict[str, str]] = field(default_factory=list)
    instructors: List[Dict[str, str]] = field(default_factory=list)

    # Qualitative panels
    top_reasons: List[str] = field(default_factory=list)
    top_improvements: List[str] = field(default_factory=list)
    quotes_harvest: List[str] = field(default_factory=list)
    quotes_suggestion: List[str] = field(default_factory=list)
    quotes_application: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    recent: List[str] = field(default_factory=list)

    version: str = "1"

    def to_dict(self) -> Dict[str, Any]:  # noqa: D401 – simple helper
        """Return a *plain* ``dict`` (recursively) for Jinja rendering."""
        return asdict(self)

    __call__ = to_dict


def _fmt(value: Cell) -> str:
    return str(value)


def _bar(value: Decimal, width: int) -> str:
    filled = int(round(float(value) / 5 * width))
    return "█" * filled + "░" * (width - filled)


def build_report_context(view: AggregateView) -> ReportContext:
    """Flatten an :class:`AggregateView` into display strings."""

    kpi = KpiLine(
        count=view.kpi.count,
        response_rate=f"{view.response_rate}%",
        avg_satisfaction=_fmt(view.kpi.avg_satisfaction),
        avg_learning_effectiveness=_fmt(view.kpi.avg_learning_effectiveness),
        nps=view.kpi.nps,
    )

    if view.radar and view.radar[0].series:
        radar = [
            {"subject": p.subject, **{role: _fmt(v) for role, v in p.series.items()}}
            for p in view.radar
        ]
    else:
        radar = [{"subject": p.subject, "value": _fmt(p.value)} for p in view.radar]
    radar_columns = [key for key in radar[0] if key != "subject"] if radar else []

    satisfaction = [
        {
            "label": bar.label,
            "value": _fmt(bar.value),
            "band": bar.band,
            "bar": _bar(bar.value, config.BAR_WIDTH),
        }
        for bar in view.satisfaction.bars
    ]

    role_rows = [
        {
            "role": row.role,
            "count": str(row.count),
            **{dim.key: _fmt(row.dimensions[dim.key]) for dim in DIMENSIONS},
            "satisfaction": _fmt(row.satisfaction),
        }
        for row in view.role_table
    ]

    instructors = [
        {
            "type": stats.instructor_type,
            "count": str(stats.count),
            "nps": str(stats.nps),
            "satisfaction": _fmt(stats.satisfaction),
            "learning_effectiveness": _fmt(stats.learning_effectiveness),
            "self_efficacy": _fmt(stats.self_efficacy),
            "difficulty_fit": _fmt(stats.difficulty_fit),
        }
        for stats in (view.instructor_comparison.it, view.instructor_comparison.admin)
    ]

    q = view.qualitative
    return ReportContext(
        date=_dt.now(tz=_tz.utc).strftime("%Y-%m-%d"),
        role_filter=view.role_filter,
        view_mode=view.view_mode,
        banner=FALLBACK_BANNER if view.is_fallback else None,
        kpi=kpi,
        radar=radar,
        radar_columns=radar_columns,
        satisfaction=satisfaction,
        highest=view.satisfaction.highest.label if view.satisfaction.highest else None,
        lowest=view.satisfaction.lowest.label if view.satisfaction.lowest else None,
        role_rows=role_rows,
        instructors=instructors,
        top_reasons=[
            f"{t.description} ({t.count})" for t in q.top_reasons[: config.MAX_THEMES]
        ],
        top_improvements=[
            f"{t.description} ({t.count})"
            for t in q.top_improvements[: config.MAX_THEMES]
        ],
        quotes_harvest=[f"[{e.role}] {e.text}" for e in q.harvest[: config.MAX_QUOTES]],
        quotes_suggestion=[
            f"[{e.role}] {e.text}" for e in q.suggestion[: config.MAX_QUOTES]
        ],
        quotes_application=[
            f"[{e.role}] {e.text}" for e in q.application[: config.MAX_QUOTES]
        ],
        links=[f"[{e.role}] {e.url}" for e in q.links[: config.MAX_LINKS]],
        recent=[
            f"[{c.role}] {'★' * c.stars} {c.text}" for c in view.recent_feedback
        ],
        version=os.getenv("REPORT_VERSION", "0.1"),
    )
