"""Unit tests for instructor-type classifiers."""
from __future__ import annotations

from survey_dashboard.instructor import (
    FieldInstructorClassifier,
    PositionalInstructorClassifier,
)


def test_positional_classifier():
    clf = PositionalInstructorClassifier([0, 2])
    assert clf.classify({}, 0) == "IT"
    assert clf.classify({}, 1) == "Admin"
    assert clf.classify({"instructor_type": "IT"}, 1) == "Admin"


def test_field_classifier_prefers_explicit_value():
    clf = FieldInstructorClassifier(fallback=PositionalInstructorClassifier([0]))
    assert clf.classify({"instructor_type": "admin"}, 0) == "Admin"
    assert clf.classify({"instructor_type": " IT "}, 5) == "IT"


def test_field_classifier_delegates_when_missing_or_unknown():
    clf = FieldInstructorClassifier(fallback=PositionalInstructorClassifier([3]))
    assert clf.classify({}, 3) == "IT"
    assert clf.classify({"instructor_type": "guest"}, 3) == "IT"
    assert clf.classify("not-a-record", 4) == "Admin"


def test_field_classifier_without_fallback():
    clf = FieldInstructorClassifier(field="session_kind")
    assert clf.classify({"session_kind": "it"}, 0) == "IT"
    assert clf.classify({}, 0) == "Admin"
