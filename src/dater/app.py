"""Application entry point for dater."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

from dater import settings
from dater.adapters.http_channel import HttpChannelRegistry
from dater.adapters.http_taste import HttpTaste
from dater.adapters.log_notifier import LogNotifier
from dater.adapters.sqlite_storage import SQLiteStorage
from dater.adapters.telegram_bot_notifier import TelegramBotNotifier
from dater.adapters.telegram_notifier import TelegramSavedMessagesNotifier
from dater.client import authorize, build_client
from dater.core.config import DecisionConfig
from dater.core.match import MatchService
from dater.core.models import ChannelConfig
from dater.core.orchestrator import DateFinder
from dater.core.recommendation import RecommendationService
from dater.core.stats import StatsService

NAME = "DATER"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    values = [token for token in settings.CHANNEL_TOKENS.values() if token]
    if redact_cfg.get("enabled", False):
        for name in redact_cfg.get("patterns", []):
            value = os.getenv(name)
            if value:
                values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", True):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/dater.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_storage() -> SQLiteStorage:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    storage.sync_channels(
        ChannelConfig(name=channel["name"], is_enabled=channel["enabled"]) for channel in settings.CHANNELS
    )
    return storage


async def _build_notifier():
    if not settings.NOTIFICATIONS_ENABLED:
        return LogNotifier(), None

    if settings.NOTIFICATION_METHOD == "bot":
        bot_token = os.getenv("BOT_API")
        if not bot_token:
            raise RuntimeError("BOT_API is required when notification_method=bot")
        if not settings.BOT_CHAT_ID:
            raise RuntimeError("notifications.bot_chat_id is required for bot notifications")
        return TelegramBotNotifier(bot_token=bot_token, chat_id=str(settings.BOT_CHAT_ID)), None

    if settings.NOTIFICATION_METHOD == "saved_messages":
        client = build_client()
        await client.connect()
        await authorize(client)
        return TelegramSavedMessagesNotifier(client), client

    raise RuntimeError("notification_method must be 'saved_messages' or 'bot'")


def build_date_finder(storage: SQLiteStorage, notifier) -> DateFinder:
    taste = HttpTaste(settings.TASTE_URL, timeout=settings.TASTE_TIMEOUT_SECONDS)
    decision_config = DecisionConfig(
        like_threshold=settings.LIKE_THRESHOLD,
        pass_threshold=settings.PASS_THRESHOLD,
    )
    return DateFinder(
        channel_configs=storage,
        channels=HttpChannelRegistry(settings.CHANNELS, settings.CHANNEL_TOKENS),
        taste=taste,
        recommendations=RecommendationService(storage, taste, decision_config),
        matches=MatchService(storage, notifier),
        store=storage,
        stats=StatsService(storage, storage),
    )


async def _run(loop_forever: bool) -> None:
    storage = _build_storage()
    notifier, client = await _build_notifier()
    LOGGER.info("Selected notifier - %s", type(notifier).__name__)

    try:
        finder = build_date_finder(storage, notifier)
        await finder.bootstrap()
        while True:
            await finder.find()
            if not loop_forever:
                break
            LOGGER.info("Next run in %s minutes", settings.INTERVAL_MINUTES)
            await asyncio.sleep(settings.INTERVAL_MINUTES * 60)
    finally:
        if client is not None:
            await client.disconnect()


def _print_stats() -> None:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    rows = storage.list_stats()
    if not rows:
        print("No stats recorded yet.")
        return
    for row in rows:
        print(
            f"{row.date} | total={row.total} likes={row.likes} passes={row.passes} "
            f"matches={row.matches} automated={row.automated_decisions} human={row.human_decisions}"
        )


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="dater")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Triage recommendations and check matches")
    run_parser.add_argument("--loop", action="store_true", help="Repeat every schedule.interval_minutes")
    subparsers.add_parser("stats", help="Print the stored daily stats")

    args = parser.parse_args(argv)
    if args.command == "stats":
        _print_stats()
        return

    _print_banner()
    _configure_logging()
    LOGGER.info("Starting dater")
    try:
        asyncio.run(_run(loop_forever=getattr(args, "loop", False)))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")
    except Exception:
        LOGGER.exception("dater run failed")
        raise


if __name__ == "__main__":
    main()
