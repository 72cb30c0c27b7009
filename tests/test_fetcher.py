"""Tests for the survey fetcher and its fallback behaviour."""
from __future__ import annotations

import logging

import httpx
import pytest

from survey_dashboard.config import DashboardConfig
from survey_dashboard.exceptions import DataUnavailableError
from survey_dashboard.fallback import generate_fallback_records
from survey_dashboard.fetcher import fetch_records, load_records

URL = "https://script.example.org/macros/s/abc/exec"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_fetch_records_returns_array():
    payload = [{"role": "醫師", "post_scores": [5] * 9}]
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=payload)

    with _client(handler) as client:
        assert fetch_records(URL, client=client) == payload

    assert len(seen) == 1
    assert seen[0].method == "GET"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json=[]),
        httpx.Response(404, text="missing"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"error": "quota"}),
    ],
)
def test_fetch_records_unusable_responses(response):
    with _client(lambda request: response) as client:
        with pytest.raises(DataUnavailableError):
            fetch_records(URL, client=client)


def test_fetch_records_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with _client(handler) as client:
        with pytest.raises(DataUnavailableError, match="unreachable"):
            fetch_records(URL, client=client)


def test_fetch_records_requires_url():
    with pytest.raises(DataUnavailableError):
        fetch_records("")


def test_load_records_live():
    with _client(lambda request: httpx.Response(200, json=[{}, {}])) as client:
        result = load_records(DashboardConfig(endpoint_url=URL), client=client)

    assert result.records == [{}, {}]
    assert result.is_fallback is False
    assert result.reason is None


def test_load_records_falls_back(caplog):
    config = DashboardConfig(endpoint_url=URL, fallback_size=12, fallback_seed=7)

    with caplog.at_level(logging.WARNING, logger="survey_dashboard.fetcher"):
        with _client(lambda request: httpx.Response(503)) as client:
            result = load_records(config, client=client)

    assert result.is_fallback is True
    assert "503" in result.reason
    assert result.records == generate_fallback_records(12, seed=7)
    assert "fallback" in caplog.text


def test_empty_live_array_is_not_a_failure():
    with _client(lambda request: httpx.Response(200, json=[])) as client:
        result = load_records(DashboardConfig(endpoint_url=URL), client=client)

    assert result.records == []
    assert result.is_fallback is False


def test_fallback_records_shape_and_determinism():
    records = generate_fallback_records(25, seed=1)

    assert records == generate_fallback_records(25, seed=1)
    assert len(records) == 25
    for rec in records:
        assert len(rec["post_scores"]) == 9
        assert len(rec["sat_scores"]) == 8
        assert all(1 <= s <= 5 for s in rec["post_scores"] + rec["sat_scores"])
        assert set(rec["feedback"]) == {"harvest", "suggestion", "application", "link"}

    assert generate_fallback_records(0) == []


def test_configured_timeout_reaches_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.extensions["timeout"])
        return httpx.Response(200, json=[])

    with _client(handler) as client:
        load_records(DashboardConfig(endpoint_url=URL, fetch_timeout=3.5), client=client)

    assert seen == {"connect": 3.5, "read": 3.5, "write": 3.5, "pool": 3.5}
