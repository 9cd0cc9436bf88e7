"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for channels, stores, scoring and
notification adapters so that the core can be reused with different
backends.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from dater.core.models import (
    ChannelConfig,
    Checkout,
    DailyStats,
    MatchUpdate,
    RecommendationRecord,
)


class ChannelPort(Protocol):
    """A live connection to one dating platform."""

    name: str

    async def get_recommendations(self) -> list[dict[str, Any]]:
        ...

    async def get_updates(self) -> list[dict[str, Any]]:
        ...

    async def authorize(self) -> None:
        ...

    async def like(self, channel_id: str) -> bool:
        """Like a candidate and return whether it produced a match."""
        ...

    async def pass_(self, channel_id: str) -> None:
        ...


class ChannelRegistryPort(Protocol):
    """Owns channel connections and resolves them by name."""

    async def bootstrap(self) -> None:
        ...

    def get_by_name(self, name: str) -> ChannelPort:
        ...


class ChannelConfigStorePort(Protocol):
    def find_all(self) -> list[ChannelConfig]:
        ...


class RecommendationStorePort(Protocol):
    """Recommendation persistence; ``save`` upserts on (channel, channel_id)."""

    def find(self, channel: str, channel_id: str) -> Optional[RecommendationRecord]:
        ...

    def save(self, record: RecommendationRecord) -> RecommendationRecord:
        ...

    def find_all_recommendations(self) -> list[RecommendationRecord]:
        ...


class StatsStorePort(Protocol):
    def save_stats(self, stats: DailyStats) -> None:
        ...


class TastePort(Protocol):
    """External taste service that scores candidate photos."""

    async def bootstrap(self) -> None:
        ...

    async def score(self, payload: dict[str, Any]) -> float:
        ...


class DecisionPort(Protocol):
    async def check_out(self, channel: ChannelPort, channel_id: str, payload: dict[str, Any]) -> Checkout:
        ...

    async def like(self, channel: ChannelPort, record: RecommendationRecord) -> RecommendationRecord:
        ...

    async def pass_(self, channel: ChannelPort, record: RecommendationRecord) -> RecommendationRecord:
        ...


class MatchUpdatePort(Protocol):
    async def check_latest_news(self, channel: ChannelPort, match: dict[str, Any]) -> MatchUpdate:
        ...


class StatsPort(Protocol):
    async def update(self) -> None:
        ...


class NotifierPort(Protocol):
    """Notification operations required by the core pipeline."""

    async def send(self, text: str) -> None:
        ...
