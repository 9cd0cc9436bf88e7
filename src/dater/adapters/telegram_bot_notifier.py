"""Telegram Bot API notification adapter.

Uses the Bot API for delivery so notifications can be routed via a bot chat.
"""

from __future__ import annotations

import urllib.error
from datetime import datetime, timezone

from dater.adapters.http_client import HttpStatusError, request_json
from dater.adapters.notification_formatting import format_notification


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id

    def _endpoint(self) -> str:
        return f"https://api.telegram.org/bot{self._bot_token}/sendMessage"

    async def send(self, text: str) -> None:
        payload = {
            "chat_id": self._chat_id,
            "text": format_notification(text, datetime.now(timezone.utc), mode="html"),
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        try:
            await request_json("POST", self._endpoint(), payload, timeout=10)
        except HttpStatusError as e:
            raise RuntimeError(f"Bot API error {e.status}: {e.body}") from e
        except urllib.error.URLError as e:
            raise RuntimeError(f"Bot API is unreachable: {e.reason}") from e
