"""SQLite storage adapter.

Implements the channel config, recommendation and stats store ports using a
simple SQLite database.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from typing import Iterable, Optional

from dater.core.models import ChannelConfig, DailyStats, Decision, RecommendationRecord


def _to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the store ports."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - channels: configured channels, in processing order
        - recommendations: one row per (channel, channel_id), upserted
        - stats: one aggregate row per day
        """

        with self._connect() as conn:
            # Fields:
            # - name: channel name used to resolve the connection (PRIMARY KEY)
            # - is_enabled: disabled channels are skipped entirely
            # - position: processing order
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS channels (
                    name TEXT PRIMARY KEY,
                    is_enabled INTEGER NOT NULL,
                    position INTEGER NOT NULL
                )
                """
            )
            # The composite key makes re-saving a record overwrite it.
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS recommendations (
                    channel TEXT NOT NULL,
                    channel_id TEXT NOT NULL,
                    name TEXT,
                    decision TEXT NOT NULL,
                    is_human_decision INTEGER NOT NULL,
                    decision_date TIMESTAMP,
                    is_match INTEGER NOT NULL,
                    match_id TEXT,
                    photos_similarity_mean REAL,
                    checked_out_times INTEGER NOT NULL,
                    last_checked_out_date TIMESTAMP,
                    last_message_date TIMESTAMP,
                    data TEXT,
                    PRIMARY KEY (channel, channel_id)
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS stats (
                    date TEXT PRIMARY KEY,
                    total INTEGER NOT NULL,
                    likes INTEGER NOT NULL,
                    passes INTEGER NOT NULL,
                    matches INTEGER NOT NULL,
                    human_decisions INTEGER NOT NULL,
                    automated_decisions INTEGER NOT NULL
                )
                """
            )

    def sync_channels(self, channels: Iterable[ChannelConfig]) -> None:
        """Replace the stored channel list, keeping the given order."""

        with self._connect() as conn:
            conn.execute("DELETE FROM channels")
            conn.executemany(
                "INSERT INTO channels (name, is_enabled, position) VALUES (?, ?, ?)",
                [(channel.name, int(channel.is_enabled), index) for index, channel in enumerate(channels)],
            )

    def find_all(self) -> list[ChannelConfig]:
        """Return channel configs in stored order."""

        with self._connect() as conn:
            rows = conn.execute("SELECT name, is_enabled FROM channels ORDER BY position").fetchall()
        return [ChannelConfig(name=row["name"], is_enabled=bool(row["is_enabled"])) for row in rows]

    def find(self, channel: str, channel_id: str) -> Optional[RecommendationRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM recommendations WHERE channel = ? AND channel_id = ?",
                (channel, channel_id),
            ).fetchone()
        return self._to_record(row) if row else None

    def save(self, record: RecommendationRecord) -> RecommendationRecord:
        """Upsert a recommendation keyed by (channel, channel_id)."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO recommendations (
                    channel,
                    channel_id,
                    name,
                    decision,
                    is_human_decision,
                    decision_date,
                    is_match,
                    match_id,
                    photos_similarity_mean,
                    checked_out_times,
                    last_checked_out_date,
                    last_message_date,
                    data
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(channel, channel_id) DO UPDATE SET
                    name = excluded.name,
                    decision = excluded.decision,
                    is_human_decision = excluded.is_human_decision,
                    decision_date = excluded.decision_date,
                    is_match = excluded.is_match,
                    match_id = excluded.match_id,
                    photos_similarity_mean = excluded.photos_similarity_mean,
                    checked_out_times = excluded.checked_out_times,
                    last_checked_out_date = excluded.last_checked_out_date,
                    last_message_date = excluded.last_message_date,
                    data = excluded.data
                """,
                (
                    record.channel,
                    record.channel_id,
                    record.name,
                    record.decision.value,
                    int(record.is_human_decision),
                    _to_iso(record.decision_date),
                    int(record.match),
                    record.match_id,
                    record.photos_similarity_mean,
                    record.checked_out_times,
                    _to_iso(record.last_checked_out_date),
                    _to_iso(record.last_message_date),
                    json.dumps(record.data),
                ),
            )
        return record

    def find_all_recommendations(self) -> list[RecommendationRecord]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM recommendations").fetchall()
        return [self._to_record(row) for row in rows]

    def save_stats(self, stats: DailyStats) -> None:
        """Upsert the aggregate row for ``stats.date``."""

        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO stats (date, total, likes, passes, matches, human_decisions, automated_decisions)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(date) DO UPDATE SET
                    total = excluded.total,
                    likes = excluded.likes,
                    passes = excluded.passes,
                    matches = excluded.matches,
                    human_decisions = excluded.human_decisions,
                    automated_decisions = excluded.automated_decisions
                """,
                (
                    stats.date,
                    stats.total,
                    stats.likes,
                    stats.passes,
                    stats.matches,
                    stats.human_decisions,
                    stats.automated_decisions,
                ),
            )

    def list_stats(self) -> list[DailyStats]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM stats ORDER BY date").fetchall()
        return [DailyStats(**dict(row)) for row in rows]

    @staticmethod
    def _to_record(row: sqlite3.Row) -> RecommendationRecord:
        return RecommendationRecord(
            channel=row["channel"],
            channel_id=row["channel_id"],
            name=row["name"],
            decision=Decision(row["decision"]),
            is_human_decision=bool(row["is_human_decision"]),
            decision_date=_from_iso(row["decision_date"]),
            match=bool(row["is_match"]),
            match_id=row["match_id"],
            photos_similarity_mean=row["photos_similarity_mean"],
            checked_out_times=row["checked_out_times"],
            last_checked_out_date=_from_iso(row["last_checked_out_date"]),
            last_message_date=_from_iso(row["last_message_date"]),
            data=json.loads(row["data"]) if row["data"] else {},
        )
