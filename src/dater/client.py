"""Telegram client factory for dater notifications."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from telethon import TelegramClient, errors


def build_client() -> TelegramClient:
    """Create a Telethon client from environment variables.

    API_ID/API_HASH are read via python-dotenv to keep secrets out of the repo.
    The session name defaults to "dater" to create a local .session file.
    """

    load_dotenv()

    api_id = os.getenv("API_ID")
    api_hash = os.getenv("API_HASH")
    session_name = os.getenv("SESSION_NAME", "dater")

    if not api_id or not api_hash:
        raise RuntimeError("Missing API_ID or API_HASH in environment")

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(session_name, int(api_id), api_hash)


async def authorize(client: TelegramClient) -> None:
    """Log the client in with a phone code unless the session is still valid."""

    if await client.is_user_authorized():
        return

    phone = os.getenv("PHONE") or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    code = input("Login code: ").strip()
    try:
        await client.sign_in(phone=phone, code=code)
    except errors.SessionPasswordNeededError:
        password = os.getenv("2FA") or input("2FA password: ")
        await client.sign_in(password=password)
