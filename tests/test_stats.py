from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone

from dater.core.models import DailyStats, Decision, RecommendationRecord
from dater.core.stats import StatsService, compute_daily_stats

DAY = date(2024, 5, 1)
ON_DAY = datetime(2024, 5, 1, 9, tzinfo=timezone.utc)


def _records() -> list[RecommendationRecord]:
    return [
        RecommendationRecord(channel="tinder", channel_id="1", decision=Decision.LIKE, decision_date=ON_DAY, match=True),
        RecommendationRecord(channel="tinder", channel_id="2", decision=Decision.PASS, decision_date=ON_DAY),
        RecommendationRecord(
            channel="happn",
            channel_id="3",
            decision=Decision.LIKE,
            decision_date=ON_DAY,
            is_human_decision=True,
        ),
        RecommendationRecord(
            channel="tinder",
            channel_id="4",
            decision=Decision.LIKE,
            decision_date=datetime(2024, 4, 30, 9, tzinfo=timezone.utc),
        ),
        RecommendationRecord(channel="tinder", channel_id="5"),
    ]


def test_compute_daily_stats_counts_decisions_of_the_day() -> None:
    stats = compute_daily_stats(_records(), DAY)

    assert stats == DailyStats(
        date="2024-05-01",
        total=3,
        likes=2,
        passes=1,
        matches=1,
        human_decisions=1,
        automated_decisions=2,
    )


class FakeStore:
    def __init__(self) -> None:
        self.saved: list[DailyStats] = []

    def find_all_recommendations(self) -> list[RecommendationRecord]:
        return _records()

    def save_stats(self, stats: DailyStats) -> None:
        self.saved.append(stats)


def test_update_persists_stats() -> None:
    store = FakeStore()

    stats = asyncio.run(StatsService(store, store).update(DAY))

    assert store.saved == [stats]
    assert stats.total == 3
