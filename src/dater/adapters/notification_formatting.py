"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent regardless of delivery channel.
"""

from __future__ import annotations

import html
from datetime import datetime

DIVIDER = "──────────────"


def _escape_md(value: str) -> str:
    for ch in r"*[`_":
        value = value.replace(ch, f"\\{ch}")
    return value


def format_notification(text: str, date: datetime, mode: str) -> str:
    """Return the notification formatted for the requested mode."""

    timestamp = date.astimezone().strftime("%H:%M:%S %d-%m-%Y").strip()
    if mode == "markdown":
        lines = [f"[{timestamp}]", "**dater**", DIVIDER, _escape_md(text)]
    elif mode == "html":
        lines = [f"[{html.escape(timestamp)}]", "<b>dater</b>", DIVIDER, html.escape(text)]
    elif mode == "plain":
        lines = [f"[{timestamp}] {text}"]
    else:
        raise ValueError(f"Unsupported notification format: {mode}")
    return "\n".join(lines)
