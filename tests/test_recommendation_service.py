from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest

from dater.core.config import DecisionConfig
from dater.core.errors import AlreadyCheckedOutEarlierError
from dater.core.models import Decision, RecommendationRecord
from dater.core.recommendation import RecommendationService


class FakeStore:
    def __init__(self, records: Optional[list[RecommendationRecord]] = None) -> None:
        self.records = {record.key: record for record in records or []}

    def find(self, channel: str, channel_id: str) -> Optional[RecommendationRecord]:
        return self.records.get((channel, channel_id))

    def save(self, record: RecommendationRecord) -> RecommendationRecord:
        self.records[record.key] = record
        return record

    def find_all_recommendations(self) -> list[RecommendationRecord]:
        return list(self.records.values())


class FakeTaste:
    def __init__(self, score: float) -> None:
        self._score = score
        self.scored: list[dict[str, Any]] = []

    async def bootstrap(self) -> None:
        return None

    async def score(self, payload: dict[str, Any]) -> float:
        self.scored.append(payload)
        return self._score


class FakeChannel:
    name = "tinder"

    def __init__(self, match: bool = False) -> None:
        self._match = match
        self.liked: list[str] = []
        self.passed: list[str] = []

    async def like(self, channel_id: str) -> bool:
        self.liked.append(channel_id)
        return self._match

    async def pass_(self, channel_id: str) -> None:
        self.passed.append(channel_id)


def _service(score: float, store: Optional[FakeStore] = None) -> tuple[RecommendationService, FakeTaste]:
    taste = FakeTaste(score)
    service = RecommendationService(
        store or FakeStore(),
        taste,
        DecisionConfig(like_threshold=70, pass_threshold=40),
    )
    return service, taste


@pytest.mark.parametrize(
    ("score", "decision"),
    [(90, Decision.LIKE), (70, Decision.LIKE), (55, Decision.NONE), (40, Decision.NONE), (12, Decision.PASS)],
)
def test_decide_uses_thresholds(score: float, decision: Decision) -> None:
    service, _ = _service(score)
    assert service.decide(score) is decision


def test_check_out_builds_scored_record() -> None:
    service, taste = _service(85)
    payload = {"channel_id": "7", "name": "Ana", "photos": ["a.jpg"]}

    checkout = asyncio.run(service.check_out(FakeChannel(), "7", payload))

    assert checkout.like and not checkout.pass_
    record = checkout.recommendation
    assert record.channel == "tinder"
    assert record.name == "Ana"
    assert record.photos_similarity_mean == 85
    assert record.checked_out_times == 1
    assert record.decision is Decision.NONE
    assert taste.scored == [payload]


def test_check_out_rejects_decided_record() -> None:
    existing = RecommendationRecord(channel="tinder", channel_id="7", decision=Decision.PASS, checked_out_times=1)
    service, taste = _service(85, FakeStore([existing]))

    with pytest.raises(AlreadyCheckedOutEarlierError) as excinfo:
        asyncio.run(service.check_out(FakeChannel(), "7", {"channel_id": "7"}))

    assert excinfo.value.recommendation is existing
    assert existing.checked_out_times == 2
    assert existing.last_checked_out_date is not None
    assert taste.scored == []


def test_check_out_of_known_match_needs_no_decision() -> None:
    existing = RecommendationRecord(channel="tinder", channel_id="7", match=True)
    service, taste = _service(85, FakeStore([existing]))

    checkout = asyncio.run(service.check_out(FakeChannel(), "7", {"channel_id": "7"}))

    assert checkout.decision is Decision.NONE
    assert taste.scored == []


def test_like_and_pass_mutate_channel_and_record() -> None:
    service, _ = _service(0)
    channel = FakeChannel(match=True)

    liked = asyncio.run(service.like(channel, RecommendationRecord(channel="tinder", channel_id="1")))
    passed = asyncio.run(service.pass_(channel, RecommendationRecord(channel="tinder", channel_id="2")))

    assert channel.liked == ["1"] and channel.passed == ["2"]
    assert liked.decision is Decision.LIKE and liked.match
    assert passed.decision is Decision.PASS and not passed.match
