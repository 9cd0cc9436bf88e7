"""Telegram notification adapter for Saved Messages."""

from __future__ import annotations

from datetime import datetime, timezone

from dater.adapters.notification_formatting import format_notification


class TelegramSavedMessagesNotifier:
    """Notifier adapter that sends messages to the user's Saved Messages."""

    def __init__(self, client) -> None:
        self._client = client

    async def send(self, text: str) -> None:
        message = format_notification(text, datetime.now(timezone.utc), mode="markdown")
        await self._client.send_message("me", message, parse_mode="Markdown")
