"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any platform-specific payloads.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class ChannelConfig:
    """Stored channel entry; only enabled entries are processed."""

    name: str
    is_enabled: bool


class Decision(str, enum.Enum):
    """Outcome of a checkout: which mutation (if any) to apply."""

    LIKE = "like"
    PASS = "pass"
    NONE = "none"


@dataclass
class RecommendationRecord:
    """Triage outcome for one candidate, keyed by (channel, channel_id)."""

    channel: str
    channel_id: str
    name: Optional[str] = None
    decision: Decision = Decision.NONE
    is_human_decision: bool = False
    decision_date: Optional[datetime] = None
    match: bool = False
    match_id: Optional[str] = None
    photos_similarity_mean: Optional[float] = None
    checked_out_times: int = 0
    last_checked_out_date: Optional[datetime] = None
    last_message_date: Optional[datetime] = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def like(self) -> bool:
        return self.decision is Decision.LIKE

    @property
    def key(self) -> tuple[str, str]:
        return self.channel, self.channel_id


@dataclass(frozen=True)
class Checkout:
    """Result of checking out a candidate: the record plus the decision to apply."""

    recommendation: RecommendationRecord
    decision: Decision

    @property
    def like(self) -> bool:
        return self.decision is Decision.LIKE

    @property
    def pass_(self) -> bool:
        return self.decision is Decision.PASS


@dataclass(frozen=True)
class MatchUpdate:
    """News found while checking a single match."""

    matches: int = 0
    messages: int = 0

    def __add__(self, other: "MatchUpdate") -> "MatchUpdate":
        return MatchUpdate(
            matches=self.matches + other.matches,
            messages=self.messages + other.messages,
        )


@dataclass
class RecommendationRun:
    """Counters for one triage phase invocation."""

    received: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class UpdateRun:
    """Counters for one update phase invocation."""

    matches: int = 0
    messages: int = 0


@dataclass(frozen=True)
class DailyStats:
    """Aggregate triage figures for a single day."""

    date: str
    total: int
    likes: int
    passes: int
    matches: int
    human_decisions: int
    automated_decisions: int
