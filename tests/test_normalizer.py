"""Unit tests for the raw-record normalizer."""
from __future__ import annotations

import math

import pytest

from survey_dashboard.instructor import PositionalInstructorClassifier
from survey_dashboard.models import Feedback
from survey_dashboard.normalizer import (
    average,
    coerce_score,
    extract_feedback,
    normalize,
    normalize_all,
)


def test_average_empty_is_zero():
    assert average([]) == 0.0


def test_average_mean():
    assert average([1.0, 2.0, 4.5]) == pytest.approx(2.5)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (4, 4.0),
        ("3", 3.0),
        (" 2.5 ", 2.5),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        ([], 0.0),
        (float("nan"), 0.0),
        (True, 1.0),
        (7, 5.0),
        (-1, 0.0),
    ],
)
def test_coerce_score(raw, expected):
    assert coerce_score(raw) == expected


def test_all_fives_round_trip():
    r = normalize({"post_scores": [5] * 9, "sat_scores": [5] * 8}, 0)

    assert r.learning_effectiveness == 5.0
    assert r.self_efficacy == 5.0
    assert r.transformative_learning == 5.0
    assert r.behavioral_intention == 5.0
    assert r.satisfaction_overall == 5.0


def test_doctor_scenario():
    raw = {
        "role": "醫師",
        "post_scores": [4, 4, 4, 3, 3, 5, 5, 4, 4],
        "sat_scores": [4, 4, 4, 4, 4, 4, 4, 4],
    }
    r = normalize(raw, 3)

    assert r.id == 3
    assert r.role == "醫師"
    assert r.learning_effectiveness == pytest.approx(4.0)
    assert r.self_efficacy == pytest.approx(3.0)
    assert r.transformative_learning == pytest.approx(5.0)
    assert r.behavioral_intention == pytest.approx(4.0)
    assert r.satisfaction_overall == pytest.approx(4.0)
    assert r.satisfaction_items == (4.0,) * 8


def test_missing_fields_default_to_zero_and_other_role():
    r = normalize({}, 0)

    assert r.role == "其他"
    assert r.learning_effectiveness == 0.0
    assert r.behavioral_intention == 0.0
    assert r.satisfaction_items == ()
    assert r.satisfaction_overall == 0.0
    assert r.feedback == Feedback()
    assert not math.isnan(r.satisfaction_design)


def test_non_mapping_record_is_neutralized():
    r = normalize("garbage", 5)
    assert r.id == 5
    assert r.role == "其他"
    assert r.satisfaction_overall == 0.0


def test_short_arrays_average_present_values_only():
    r = normalize({"post_scores": [5, "x", None, 4], "sat_scores": [3, 5]}, 0)

    # slice 0:3 holds 5, 0, 0
    assert r.learning_effectiveness == pytest.approx(5 / 3)
    # slice 3:5 holds only 4
    assert r.self_efficacy == pytest.approx(4.0)
    assert r.transformative_learning == 0.0
    assert r.satisfaction_overall == pytest.approx(4.0)


def test_extra_satisfaction_items_are_ignored():
    r = normalize({"sat_scores": [5] * 8 + [1, 1]}, 0)
    assert len(r.satisfaction_items) == 8
    assert r.satisfaction_overall == 5.0


def test_design_subscore_uses_first_four_items():
    r = normalize({"sat_scores": [5, 5, 5, 5, 1, 1, 1, 1]}, 0)
    assert r.satisfaction_design == 5.0
    assert r.satisfaction_overall == 3.0


def test_unknown_role_passes_through():
    assert normalize({"role": "志工"}, 0).role == "志工"
    assert normalize({"role": ""}, 0).role == "其他"


def test_feedback_string_goes_to_harvest():
    fb = extract_feedback("學到很多")
    assert fb == Feedback(harvest="學到很多")


def test_feedback_keys_are_prioritised():
    fb = extract_feedback(
        {
            "q1": "舊版收穫",
            "harvest": "新版收穫",
            "q2": "第二題",
            "plan": "",
            "open_4": "https://example.org/x",
        }
    )

    assert fb.harvest == "新版收穫"
    assert fb.suggestion == "第二題"
    # plan is empty so q2 is the next candidate
    assert fb.application == "第二題"
    assert fb.link == "https://example.org/x"


def test_feedback_of_unexpected_type_is_empty():
    assert extract_feedback(42) == Feedback()
    assert extract_feedback(None) == Feedback()


def test_normalize_all_tags_instructor_by_position():
    classifier = PositionalInstructorClassifier({1})
    respondents = normalize_all([{}, {}, {}], classifier=classifier)

    assert [r.id for r in respondents] == [0, 1, 2]
    assert [r.instructor_type for r in respondents] == ["Admin", "IT", "Admin"]


def test_role_is_kept_verbatim():
    assert normalize({"role": " 醫師 "}, 0).role == " 醫師 "
    assert normalize({"role": None}, 0).role == "其他"
