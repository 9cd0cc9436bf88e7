from __future__ import annotations

from datetime import datetime, timezone

import pytest

from dater.adapters.notification_formatting import format_notification

DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_markdown_escapes_special_characters() -> None:
    message = format_notification("*Ana_B* is a match", DATE, mode="markdown")
    assert "\\*Ana\\_B\\* is a match" in message
    assert message.splitlines()[1] == "**dater**"


def test_html_escapes_markup() -> None:
    message = format_notification("<Ana> & co", DATE, mode="html")
    assert "&lt;Ana&gt; &amp; co" in message


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        format_notification("hi", DATE, mode="rtf")
