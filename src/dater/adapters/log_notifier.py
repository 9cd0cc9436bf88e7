"""Notifier used when Telegram notifications are disabled."""

from __future__ import annotations

import logging

LOGGER = logging.getLogger(__name__)


class LogNotifier:
    async def send(self, text: str) -> None:
        LOGGER.info("%s", text)
