"""Unit tests for the keyword theme ranker."""
from __future__ import annotations

from survey_dashboard.analysis.keywords import KeywordThemeRanker
from survey_dashboard.models import RankedTheme


def test_single_match_has_no_general_entry():
    ranker = KeywordThemeRanker([("跟不上", "實作時間不足")])
    themes = ranker.summarize(["太快了，跟不上", "沒有其他意見"])

    assert themes == [RankedTheme(term="跟不上", description="實作時間不足", count=1)]


def test_sorted_by_count_with_stable_ties():
    ranker = KeywordThemeRanker(
        [("時間", "時間安排"), ("網路", "網路不穩"), ("講義", "提供講義"), ("帳號", "帳號")]
    )
    texts = ["網路斷線，網路很慢", "時間太短", "希望有講義", "無"]

    themes = ranker.summarize(texts)

    assert [(t.term, t.count) for t in themes] == [("網路", 2), ("時間", 1), ("講義", 1)]


def test_matching_is_case_sensitive():
    ranker = KeywordThemeRanker([("AI", "AI 工具")])
    themes = ranker.summarize(["學會用 ai 寫摘要"])

    assert len(themes) == 1
    assert themes[0].term == "綜合回饋"
    assert themes[0].count == 1


def test_fallback_covers_whole_bucket():
    ranker = KeywordThemeRanker([("跟不上", "x")], fallback_label="general feedback")
    themes = ranker.summarize(["很好", "不錯", "謝謝"])

    assert themes == [
        RankedTheme(term="general feedback", description="general feedback", count=3)
    ]


def test_empty_bucket_yields_nothing():
    assert KeywordThemeRanker([("跟不上", "x")]).summarize([]) == []
