"""Configuration for the survey dashboard pipeline.

Every tunable (endpoint, expected headcount, fixed role and label lists,
keyword tables) lives on :class:`DashboardConfig`, which is handed to the
pipeline at construction time. ``DashboardConfig.from_env`` builds one from
``SURVEY_*`` environment variables; call ``load_dotenv()`` first if a ``.env``
file should be honoured.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

logger = logging.getLogger(__name__)

OTHER_ROLE = "其他"

ROLES: Tuple[str, ...] = (
    "醫師",
    "護理人員",
    "醫事人員",
    "行政人員",
    "資訊與研究",
    "學生",
    OTHER_ROLE,
)

SATISFACTION_LABELS: Tuple[str, ...] = (
    "內容實用性",
    "難易適中",
    "講師表達",
    "互動性",
    "時間安排",
    "教材品質",
    "行政安排",
    "整體推薦",
)

# Index of the difficulty-fit item inside SATISFACTION_LABELS
DIFFICULTY_ITEM_INDEX = 1

# Session positions delivered by IT instructors. Positional shim only; see
# survey_dashboard.instructor for the adapter that isolates it.
IT_SESSION_INDICES: FrozenSet[int] = frozenset(
    {0, 1, 2, 3, 4, 5, 12, 13, 14, 15, 16, 17, 24, 25, 26, 27}
)

# (term, description) pairs searched in "what did you gain" answers
HARVEST_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("實作", "動手實作體驗"),
    ("案例", "臨床案例貼近實務"),
    ("工具", "認識實用 AI 工具"),
    ("趨勢", "掌握 AI 醫療趨勢"),
    ("啟發", "獲得新觀點與啟發"),
    ("應用", "清楚的應用情境"),
    ("講師", "講師講解清楚"),
)

# (term, description) pairs searched in suggestions
SUGGESTION_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("跟不上", "實作時間不足"),
    ("太快", "課程節奏過快"),
    ("時間", "課程時間安排"),
    ("網路", "網路連線不穩"),
    ("帳號", "帳號登入問題"),
    ("進階", "希望有進階課程"),
    ("講義", "希望提供講義"),
)

GENERAL_FEEDBACK_LABEL = "綜合回饋"

DEFAULT_ENDPOINT_URL = ""
DEFAULT_TOTAL_EXPECTED = 120
DEFAULT_FETCH_TIMEOUT = 10.0
DEFAULT_FALLBACK_SIZE = 40
DEFAULT_FALLBACK_SEED = 42
DEFAULT_RECENT_FEEDBACK_LIMIT = 6


def _int_from_env(name: str, default: int) -> int:
    raw_val = os.getenv(name)
    if not raw_val:
        return default
    try:
        return int(raw_val)
    except ValueError:
        logger.warning("Invalid %s value '%s'; using %s.", name, raw_val, default)
        return default


def _float_from_env(name: str, default: float) -> float:
    raw_val = os.getenv(name)
    if not raw_val:
        return default
    try:
        parsed = float(raw_val)
    except ValueError:
        logger.warning("Invalid %s value '%s'; using %s.", name, raw_val, default)
        return default
    if parsed <= 0:
        logger.warning("Ignoring %s=%s (must be positive)", name, raw_val)
        return default
    return parsed


def _indices_from_env(name: str, default: FrozenSet[int]) -> FrozenSet[int]:
    raw_val = os.getenv(name)
    if raw_val is None:
        return default
    try:
        return frozenset(int(p) for p in raw_val.split(",") if p.strip())
    except ValueError:
        logger.warning("Invalid %s value '%s'; using defaults.", name, raw_val)
        return default


@dataclass(frozen=True)
class DashboardConfig:
    """Externally tunable parameters for one dashboard session."""

    endpoint_url: str = DEFAULT_ENDPOINT_URL
    total_expected: int = DEFAULT_TOTAL_EXPECTED
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    fallback_size: int = DEFAULT_FALLBACK_SIZE
    fallback_seed: Optional[int] = DEFAULT_FALLBACK_SEED
    recent_feedback_limit: int = DEFAULT_RECENT_FEEDBACK_LIMIT
    theme_ranker: str = "keyword"

    roles: Tuple[str, ...] = ROLES
    satisfaction_labels: Tuple[str, ...] = SATISFACTION_LABELS
    it_session_indices: FrozenSet[int] = field(default=IT_SESSION_INDICES)
    harvest_keywords: Tuple[Tuple[str, str], ...] = HARVEST_KEYWORDS
    suggestion_keywords: Tuple[Tuple[str, str], ...] = SUGGESTION_KEYWORDS
    general_feedback_label: str = GENERAL_FEEDBACK_LABEL

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """Build a config from ``SURVEY_*`` environment variables."""

        seed_raw = os.getenv("SURVEY_FALLBACK_SEED")
        if seed_raw is not None and seed_raw.lower() in ("", "none", "random"):
            seed: Optional[int] = None
        else:
            seed = _int_from_env("SURVEY_FALLBACK_SEED", DEFAULT_FALLBACK_SEED)

        return cls(
            endpoint_url=os.getenv("SURVEY_ENDPOINT_URL", DEFAULT_ENDPOINT_URL).strip(),
            total_expected=_int_from_env(
                "SURVEY_TOTAL_EXPECTED", DEFAULT_TOTAL_EXPECTED
            ),
            fetch_timeout=_float_from_env(
                "SURVEY_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT
            ),
            fallback_size=_int_from_env("SURVEY_FALLBACK_SIZE", DEFAULT_FALLBACK_SIZE),
            fallback_seed=seed,
            recent_feedback_limit=_int_from_env(
                "SURVEY_RECENT_FEEDBACK_LIMIT", DEFAULT_RECENT_FEEDBACK_LIMIT
            ),
            theme_ranker=os.getenv("SURVEY_THEME_RANKER", "keyword").strip().lower(),
            it_session_indices=_indices_from_env(
                "SURVEY_IT_SESSION_INDICES", IT_SESSION_INDICES
            ),
        )
