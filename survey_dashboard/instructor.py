"""Instructor-type classification for survey records.

The survey export carries no reliable session identifier, so historically
records were tagged by their position in the array. That positional rule is
kept here behind a small adapter so it can be swapped for a field- or
manifest-based rule without touching aggregation code.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol

from survey_dashboard.models import ADMIN_LED, IT_LED

_FIELD_ALIASES = {
    "it": IT_LED,
    "admin": ADMIN_LED,
}


class InstructorClassifier(Protocol):
    def classify(self, raw: Any, index: int) -> str:
        """Return ``"IT"`` or ``"Admin"`` for the record at *index*."""


class PositionalInstructorClassifier:
    """Tag records whose array index is in *it_indices* as IT-led."""

    def __init__(self, it_indices: Iterable[int]) -> None:
        self._it_indices = frozenset(it_indices)

    def classify(self, raw: Any, index: int) -> str:
        return IT_LED if index in self._it_indices else ADMIN_LED


class FieldInstructorClassifier:
    """Read the instructor type from an explicit record field.

    Records without a recognised value in *field* are handed to *fallback*
    (Admin-led when no fallback is given).
    """

    def __init__(
        self,
        field: str = "instructor_type",
        fallback: Optional[InstructorClassifier] = None,
    ) -> None:
        self.field = field
        self._fallback = fallback

    def classify(self, raw: Any, index: int) -> str:
        if isinstance(raw, Mapping):
            value = raw.get(self.field)
            if isinstance(value, str):
                resolved = _FIELD_ALIASES.get(value.strip().lower())
                if resolved is not None:
                    return resolved
        if self._fallback is not None:
            return self._fallback.classify(raw, index)
        return ADMIN_LED
