"""Aggregate reporting over stored recommendations."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from dater.core.models import DailyStats, Decision, RecommendationRecord
from dater.core.ports import RecommendationStorePort, StatsStorePort

LOGGER = logging.getLogger(__name__)


def compute_daily_stats(records: Iterable[RecommendationRecord], day: date) -> DailyStats:
    """Summarize records whose decision was taken on ``day``."""

    total = likes = passes = matches = human = automated = 0
    for record in records:
        if record.decision_date is None or record.decision_date.date() != day:
            continue
        total += 1
        if record.decision is Decision.LIKE:
            likes += 1
        elif record.decision is Decision.PASS:
            passes += 1
        if record.match:
            matches += 1
        if record.is_human_decision:
            human += 1
        else:
            automated += 1

    return DailyStats(
        date=day.isoformat(),
        total=total,
        likes=likes,
        passes=passes,
        matches=matches,
        human_decisions=human,
        automated_decisions=automated,
    )


class StatsService:
    """Recomputes today's stats; errors propagate to the caller."""

    def __init__(self, records: RecommendationStorePort, stats: StatsStorePort) -> None:
        self._records = records
        self._stats = stats

    async def update(self, day: Optional[date] = None) -> DailyStats:
        day = day or datetime.now(timezone.utc).date()
        stats = compute_daily_stats(self._records.find_all_recommendations(), day)
        self._stats.save_stats(stats)
        LOGGER.debug("Stats for %s: %s", stats.date, stats)
        return stats
