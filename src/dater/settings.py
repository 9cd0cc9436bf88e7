"""Static configuration for dater.

All user-editable settings (channels, taste thresholds, notifications,
schedule, logging) live in a single JSON file for quick edits without
touching Python. Secrets stay in the environment (.env).
"""

import json
import os

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

# config.json at the project root unless DATER_CONFIG points elsewhere.
CONFIG_PATH = os.getenv("DATER_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _normalize_channels(raw_channels: list[dict]) -> list[dict]:
    """Drop unnamed entries and lower-case names; file order is kept."""

    channels: list[dict] = []
    seen: set[str] = set()
    for entry in raw_channels:
        name = (entry.get("name") or "").strip().lower()
        if not name or name in seen:
            continue
        seen.add(name)
        channels.append({**entry, "name": name, "enabled": bool(entry.get("enabled", True))})
    return channels


_CONFIG = _load_json_config()

CONFIG = _CONFIG

# Where to store the SQLite database.
DB_PATH = _CONFIG.get("db_path") or os.path.join(PROJECT_ROOT, "dater.db")
if not os.path.isabs(DB_PATH):
    DB_PATH = os.path.join(PROJECT_ROOT, DB_PATH)

# Channels are seeded into the database in this order on every start.
CHANNELS = _normalize_channels(_CONFIG.get("channels", []))

# API tokens are read from the env variable named by each channel's token_env.
CHANNEL_TOKENS = {
    channel["name"]: os.getenv(channel.get("token_env") or f"{channel['name'].upper()}_TOKEN")
    for channel in CHANNELS
}

# Taste service and decision thresholds (photo similarity, 0-100).
_taste = _CONFIG.get("taste", {})
TASTE_URL = _taste.get("base_url", "http://localhost:8080")
TASTE_TIMEOUT_SECONDS = float(_taste.get("timeout_seconds", 30))
LIKE_THRESHOLD = float(_taste.get("like_threshold", 70))
PASS_THRESHOLD = float(_taste.get("pass_threshold", 70))

# Notification method switches adapters without changing core logic.
_notifications = _CONFIG.get("notifications", {})
NOTIFICATIONS_ENABLED = bool(_notifications.get("enabled", False))
NOTIFICATION_METHOD = _notifications.get("notification_method", "saved_messages")
# Bot chat id is only required when notification_method=bot.
BOT_CHAT_ID = _notifications.get("bot_chat_id")

# Minutes between runs for `dater run --loop`.
_schedule = _CONFIG.get("schedule", {})
INTERVAL_MINUTES = float(_schedule.get("interval_minutes", 60))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
