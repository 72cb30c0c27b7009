"""Turn raw survey records into :class:`Respondent` objects."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from survey_dashboard.config import OTHER_ROLE
from survey_dashboard.instructor import InstructorClassifier
from survey_dashboard.models import ADMIN_LED, DIMENSIONS, Feedback, Respondent

logger = logging.getLogger(__name__)

MAX_SCORE = 5.0
SATISFACTION_ITEM_COUNT = 8
DESIGN_ITEM_COUNT = 4

# Source keys for each feedback field, highest priority first. Survey
# revisions renamed the open questions several times.
FEEDBACK_KEYS = {
    "harvest": ("harvest", "q1"),
    "suggestion": ("suggestion", "q3", "q2"),
    "application": ("application", "plan", "q2"),
    "link": ("link", "open_4", "q4"),
}


def average(values: Sequence[float]) -> float:
    """Arithmetic mean of *values*; ``0.0`` for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def coerce_score(value: Any) -> float:
    """Return *value* as a score in [0, 5]; anything non-numeric becomes 0."""

    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            number = 0.0
    else:
        number = 0.0

    if not math.isfinite(number):
        return 0.0
    return min(max(number, 0.0), MAX_SCORE)


def _scores(raw: Mapping[str, Any], key: str) -> List[float]:
    values = raw.get(key)
    if not isinstance(values, (list, tuple)):
        return []
    return [coerce_score(v) for v in values]


def _first_text(source: Mapping[str, Any], keys: Tuple[str, ...]) -> str:
    for key in keys:
        value = source.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def extract_feedback(value: Any) -> Feedback:
    """Resolve the free-text answers from a string or a keyed mapping."""

    if isinstance(value, str):
        return Feedback(harvest=value.strip())
    if not isinstance(value, Mapping):
        return Feedback()
    return Feedback(
        **{name: _first_text(value, keys) for name, keys in FEEDBACK_KEYS.items()}
    )


def resolve_role(value: Any) -> str:
    """Raw role verbatim when truthy, otherwise ``"其他"``. Unknown roles pass through."""
    if isinstance(value, str) and value:
        return value
    if value and not isinstance(value, str):
        return str(value)
    return OTHER_ROLE


def normalize(
    raw: Any, index: int, *, classifier: Optional[InstructorClassifier] = None
) -> Respondent:
    """Convert one raw record into a :class:`Respondent`.

    Total over arbitrary input: missing arrays count as empty and
    non-numeric scores as 0, so a malformed record never raises.
    """

    record: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
    if not isinstance(raw, Mapping):
        logger.debug("Record %d is not an object; normalizing as empty", index)

    posts = _scores(record, "post_scores")
    items = tuple(_scores(record, "sat_scores")[:SATISFACTION_ITEM_COUNT])

    dimensions = {dim.key: average(posts[dim.start : dim.stop]) for dim in DIMENSIONS}

    instructor_type = (
        classifier.classify(raw, index) if classifier is not None else ADMIN_LED
    )

    return Respondent(
        id=index,
        role=resolve_role(record.get("role")),
        satisfaction_items=items,
        satisfaction_overall=average(items),
        satisfaction_design=average(items[:DESIGN_ITEM_COUNT]),
        feedback=extract_feedback(record.get("feedback")),
        instructor_type=instructor_type,
        **dimensions,
    )


def normalize_all(
    records: Iterable[Any], *, classifier: Optional[InstructorClassifier] = None
) -> List[Respondent]:
    """Normalize *records* in order; ``id`` is the position in the source."""
    return [
        normalize(raw, index, classifier=classifier)
        for index, raw in enumerate(records)
    ]
