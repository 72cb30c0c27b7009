"""Synthetic survey records used when the live endpoint is unavailable."""
from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Sequence

from survey_dashboard.config import ROLES

_HARVESTS = (
    "實作練習讓我第一次真正用 AI 工具整理病歷摘要",
    "講師分享的臨床案例很有啟發",
    "了解國家健康藍圖與 AI 醫療趨勢",
    "學到可以馬上應用的提示詞技巧",
    "",
)
_SUGGESTIONS = (
    "太快了，跟不上",
    "希望實作時間可以再長一點",
    "網路不太穩定",
    "希望有進階課程",
    "沒有其他意見",
    "",
)
_APPLICATIONS = (
    "用來整理交班紀錄",
    "協助撰寫衛教單張",
    "在單位內分享給同事",
    "",
)
_LINKS = (
    "https://example.org/workshop/gallery/1",
    "https://example.org/workshop/gallery/2",
    "",
    "",
)


def _scores(rng: random.Random, n: int, low: int) -> List[int]:
    return [rng.randint(low, 5) for _ in range(n)]


def generate_fallback_records(
    count: int,
    *,
    seed: Optional[int] = None,
    roles: Sequence[str] = ROLES,
) -> List[Dict[str, Any]]:
    """Return *count* raw records shaped like the live endpoint's payload.

    The same *seed* always yields the same records.
    """

    rng = random.Random(seed)
    records = []
    for _ in range(max(count, 0)):
        # Skew each respondent towards positive or lukewarm answers
        low = rng.choice((2, 3, 3, 4, 4))
        records.append(
            {
                "role": rng.choice(list(roles)),
                "post_scores": _scores(rng, 9, low),
                "sat_scores": _scores(rng, 8, low),
                "feedback": {
                    "harvest": rng.choice(_HARVESTS),
                    "suggestion": rng.choice(_SUGGESTIONS),
                    "application": rng.choice(_APPLICATIONS),
                    "link": rng.choice(_LINKS),
                },
            }
        )
    return records
