"""Recommendation checkout and decision application.

Checkout turns a raw candidate into a ``RecommendationRecord`` and decides
whether it should be liked, passed or left alone. Applying the decision is
a separate step so the orchestrator controls error handling and persistence.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from dater.core.config import DecisionConfig
from dater.core.errors import AlreadyCheckedOutEarlierError
from dater.core.models import Checkout, Decision, RecommendationRecord
from dater.core.ports import ChannelPort, RecommendationStorePort, TastePort

LOGGER = logging.getLogger(__name__)


class RecommendationService:
    """Decides on candidates and applies likes and passes to a channel."""

    def __init__(
        self,
        store: RecommendationStorePort,
        taste: TastePort,
        decision_config: DecisionConfig,
    ) -> None:
        self._store = store
        self._taste = taste
        self._config = decision_config

    def decide(self, score: float) -> Decision:
        """Map a taste score onto a decision using the configured thresholds."""

        if score >= self._config.like_threshold:
            return Decision.LIKE
        if score < self._config.pass_threshold:
            return Decision.PASS
        return Decision.NONE

    async def check_out(self, channel: ChannelPort, channel_id: str, payload: dict[str, Any]) -> Checkout:
        """Build or reuse the record for a candidate and pick a decision.

        Raises ``AlreadyCheckedOutEarlierError`` carrying the stored record when
        the candidate already has a decision from an earlier run.
        """

        now = datetime.now(timezone.utc)
        record = self._store.find(channel.name, channel_id)
        if record is None:
            record = RecommendationRecord(
                channel=channel.name,
                channel_id=channel_id,
                name=payload.get("name"),
            )

        record.checked_out_times += 1
        record.last_checked_out_date = now
        if record.decision is not Decision.NONE:
            raise AlreadyCheckedOutEarlierError(record)

        record.data = dict(payload)
        if payload.get("name"):
            record.name = payload["name"]

        # Matches created outside of triage need no further decision.
        if record.match:
            return Checkout(recommendation=record, decision=Decision.NONE)

        score = await self._taste.score(payload)
        record.photos_similarity_mean = score
        decision = self.decide(score)
        LOGGER.debug("Checked out %s from %s (score=%s, decision=%s)", channel_id, channel.name, score, decision.value)
        return Checkout(recommendation=record, decision=decision)

    async def like(self, channel: ChannelPort, record: RecommendationRecord) -> RecommendationRecord:
        matched = await channel.like(record.channel_id)
        record.decision = Decision.LIKE
        record.match = record.match or bool(matched)
        return record

    async def pass_(self, channel: ChannelPort, record: RecommendationRecord) -> RecommendationRecord:
        await channel.pass_(record.channel_id)
        record.decision = Decision.PASS
        return record
