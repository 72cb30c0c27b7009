"""Retrieve raw survey records from the spreadsheet-backed endpoint.

A single GET is issued per session. Every way the endpoint can let us down
(transport error, non-2xx status, body that is not a JSON array) collapses
into :class:`DataUnavailableError`, which :func:`load_records` answers with
a generated fallback dataset so the dashboard is always populated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from survey_dashboard.config import DashboardConfig
from survey_dashboard.exceptions import DataUnavailableError
from survey_dashboard.fallback import generate_fallback_records

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchResult:
    """Raw records plus whether they came from the fallback generator."""

    records: List[Any]
    is_fallback: bool = False
    reason: Optional[str] = None


def fetch_records(
    url: str,
    *,
    timeout: float = 10.0,
    client: Optional[httpx.Client] = None,
) -> List[Any]:
    """GET *url* and return the decoded JSON array.

    Raises
    ------
    DataUnavailableError
        On transport failure, non-success status or a non-array body.
    """

    if not url:
        raise DataUnavailableError("No survey endpoint URL configured")

    try:
        if client is not None:
            response = client.get(url, timeout=timeout)
        else:
            # Apps Script web apps answer with a redirect to the content host
            with httpx.Client(timeout=timeout, follow_redirects=True) as owned:
                response = owned.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DataUnavailableError(
            f"Survey endpoint returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise DataUnavailableError(f"Survey endpoint unreachable: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise DataUnavailableError("Survey endpoint returned invalid JSON") from exc

    if not isinstance(payload, list):
        raise DataUnavailableError(
            f"Expected a JSON array, got {type(payload).__name__}"
        )
    return payload


def load_records(
    config: DashboardConfig, *, client: Optional[httpx.Client] = None
) -> FetchResult:
    """Fetch live records, substituting generated ones if unavailable."""

    try:
        records = fetch_records(
            config.endpoint_url, timeout=config.fetch_timeout, client=client
        )
    except DataUnavailableError as exc:
        logger.warning("Survey data unavailable (%s); using fallback dataset", exc)
        records = generate_fallback_records(
            config.fallback_size, seed=config.fallback_seed, roles=config.roles
        )
        return FetchResult(records=records, is_fallback=True, reason=str(exc))

    logger.info("Fetched %d survey records", len(records))
    return FetchResult(records=records)
