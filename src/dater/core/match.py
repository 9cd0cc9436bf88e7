"""Match news checks.

A match payload coming from a channel looks like::

    {"match_id": "...", "recommendation_id": "...", "name": "...",
     "messages": [{"sent_date": "2024-01-01T10:00:00+00:00", "text": "..."}]}
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from dater.core.models import MatchUpdate, RecommendationRecord
from dater.core.ports import ChannelPort, NotifierPort, RecommendationStorePort

LOGGER = logging.getLogger(__name__)


def _parse_date(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def new_message_dates(messages: Iterable[dict[str, Any]], since: Optional[datetime]) -> list[datetime]:
    """Return the sent dates of messages newer than ``since``, oldest first."""

    dates = [_parse_date(message.get("sent_date")) for message in messages]
    dates = sorted(date for date in dates if date is not None)
    if since is None:
        return dates
    return [date for date in dates if date > since]


class MatchService:
    """Checks matches for news, persisting and announcing what changed."""

    def __init__(self, store: RecommendationStorePort, notifier: NotifierPort) -> None:
        self._store = store
        self._notifier = notifier

    async def check_latest_news(self, channel: ChannelPort, match: dict[str, Any]) -> MatchUpdate:
        match_id = match.get("match_id")
        channel_id = match.get("recommendation_id")
        if not match_id or not channel_id:
            raise ValueError(f"Match {match_id} from {channel.name} has no match or recommendation id")

        record = self._store.find(channel.name, str(channel_id))
        if record is None:
            record = RecommendationRecord(channel=channel.name, channel_id=str(channel_id))
        if match.get("name"):
            record.name = match["name"]
        label = record.name or record.channel_id

        # Likes in the triage phase flag the match before any match id is known.
        matches = 0
        if record.match_id is None:
            record.match = True
            matches = 1
            await self._notifier.send(f"{label} is a match in {channel.name.capitalize()}")
        record.match_id = match_id

        dates = new_message_dates(match.get("messages") or [], record.last_message_date)
        if dates:
            record.last_message_date = dates[-1]
            await self._notifier.send(f"{label} sent {len(dates)} new message(s) in {channel.name.capitalize()}")

        self._store.save(record)
        return MatchUpdate(matches=matches, messages=len(dates))
