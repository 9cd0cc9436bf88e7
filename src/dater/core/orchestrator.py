"""Multi-channel triage orchestration.

The orchestrator enforces a strict order:
1) Bootstrap channels and the taste service (the only concurrent step)
2) For every enabled channel, in stored order:
   a) triage recommendations: checkout -> like/pass -> persist, one at a time
   b) check matches for news, one at a time
3) Update stats once

Items are never processed concurrently: "out of likes" must be observed at
the exact candidate where it happens, and a candidate is fully persisted
before the next checkout starts. Item errors are counted and logged, phase
errors are logged, and neither escapes a channel's pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

from dater.core.errors import AlreadyCheckedOutEarlierError, NotAuthorizedError, OutOfLikesError
from dater.core.models import Checkout, MatchUpdate, RecommendationRecord, RecommendationRun, UpdateRun
from dater.core.ports import (
    ChannelConfigStorePort,
    ChannelPort,
    ChannelRegistryPort,
    DecisionPort,
    MatchUpdatePort,
    RecommendationStorePort,
    StatsPort,
    TastePort,
)

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class DateFinder:
    """Runs the triage and update phases for every enabled channel."""

    def __init__(
        self,
        channel_configs: ChannelConfigStorePort,
        channels: ChannelRegistryPort,
        taste: TastePort,
        recommendations: DecisionPort,
        matches: MatchUpdatePort,
        store: RecommendationStorePort,
        stats: StatsPort,
    ) -> None:
        self._channel_configs = channel_configs
        self._channels = channels
        self._taste = taste
        self._recommendations = recommendations
        self._matches = matches
        self._store = store
        self._stats = stats

    async def run(self) -> None:
        """Bootstrap, process all enabled channels, then update stats."""

        await self.bootstrap()
        await self.find()

    async def bootstrap(self) -> None:
        await asyncio.gather(self._channels.bootstrap(), self._taste.bootstrap())

    async def find(self) -> None:
        for config in self._channel_configs.find_all():
            if not config.is_enabled:
                continue

            channel = self._channels.get_by_name(config.name)
            LOGGER.info("Started finding dates in %s channel", config.name.capitalize())
            try:
                await self.find_by_channel(channel)
            finally:
                LOGGER.info("Finished finding dates in %s channel", config.name.capitalize())

        LOGGER.info("Started updating stats")
        try:
            await self._stats.update()
        finally:
            LOGGER.info("Finished updating stats")

    async def find_by_channel(self, channel: ChannelPort) -> None:
        # Triage first: it can create matches the update phase must see.
        label = channel.name.capitalize()

        LOGGER.info("Started checking recommendations from %s channel", label)
        run = await self.check_recommendations(channel)
        LOGGER.info(
            "Finished checking recommendations from %s channel (received = %s, skipped = %s, failed = %s)",
            label,
            run.received,
            run.skipped,
            run.failed,
        )

        LOGGER.info("Started checking updates from %s channel", label)
        update = await self.check_updates(channel)
        LOGGER.info(
            "Finished checking updates from %s channel (matches = %s, messages = %s)",
            label,
            update.matches,
            update.messages,
        )

    async def check_recommendations(self, channel: ChannelPort) -> RecommendationRun:
        """Triage every pending candidate of a channel; never raises."""

        runs: list[RecommendationRun] = []

        async def _attempt() -> RecommendationRun:
            run = RecommendationRun()
            runs.append(run)
            await self._triage(channel, run)
            return run

        try:
            return await self._with_reauthorization(channel, _attempt)
        except Exception:
            LOGGER.exception("Checking recommendations from %s channel failed", channel.name.capitalize())
            return runs[-1] if runs else RecommendationRun()

    async def _triage(self, channel: ChannelPort, run: RecommendationRun) -> None:
        candidates = await channel.get_recommendations()
        run.received = len(candidates)
        LOGGER.debug("Got %s recommendations from %s", run.received, channel.name.capitalize())

        for candidate in candidates:
            try:
                await self._triage_candidate(channel, candidate, run)
            except Exception as error:
                run.failed += 1
                LOGGER.warning("Failed to check out recommendation from %s: %s", channel.name, error)

    async def _triage_candidate(self, channel: ChannelPort, candidate: dict[str, Any], run: RecommendationRun) -> None:
        if candidate.get("channel_id") is None:
            raise ValueError(f"Recommendation from {channel.name} has no channel id")
        channel_id = str(candidate["channel_id"])
        try:
            checkout = await self._recommendations.check_out(channel, channel_id, candidate)
        except AlreadyCheckedOutEarlierError as error:
            run.skipped += 1
            self._store.save(error.recommendation)
            return

        try:
            record = await self._apply_decision(channel, checkout)
        except OutOfLikesError:
            run.skipped += 1
            record = checkout.recommendation

        record = self._store.save(record)
        if record.match:
            LOGGER.info("%s is a match (photos = %s%%)", record.name, record.photos_similarity_mean)
        else:
            LOGGER.info(
                "%s got a %s (photos = %s%%)",
                record.name,
                "like" if record.like else "pass",
                record.photos_similarity_mean,
            )

    async def _apply_decision(self, channel: ChannelPort, checkout: Checkout) -> RecommendationRecord:
        if checkout.like:
            record = await self._recommendations.like(channel, checkout.recommendation)
        elif checkout.pass_:
            record = await self._recommendations.pass_(channel, checkout.recommendation)
        else:
            return checkout.recommendation

        record.is_human_decision = False
        record.decision_date = datetime.now(timezone.utc)
        return record

    async def check_updates(self, channel: ChannelPort) -> UpdateRun:
        """Check every match of a channel for news; never raises."""

        try:
            return await self._with_reauthorization(channel, lambda: self._check_matches(channel))
        except Exception:
            LOGGER.exception("Checking updates from %s channel failed", channel.name.capitalize())
            return UpdateRun()

    async def _check_matches(self, channel: ChannelPort) -> UpdateRun:
        total = MatchUpdate()
        for match in await channel.get_updates():
            try:
                update = await self._matches.check_latest_news(channel, match)
            except Exception as error:
                LOGGER.warning("Failed to check match %s from %s: %s", match.get("match_id"), channel.name, error)
                update = MatchUpdate()
            total += update
        return UpdateRun(matches=total.matches, messages=total.messages)

    async def _with_reauthorization(self, channel: ChannelPort, phase: Callable[[], Awaitable[T]]) -> T:
        # A single re-authorization per phase; a second NotAuthorizedError
        # propagates to the caller's catch-all.
        try:
            return await phase()
        except NotAuthorizedError:
            LOGGER.info("Re-authorizing %s channel", channel.name.capitalize())
            await channel.authorize()
        return await phase()
