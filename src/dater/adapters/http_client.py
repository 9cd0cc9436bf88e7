"""Small JSON-over-HTTP helper shared by the platform and taste adapters.

Requests use ``urllib`` and run in a worker thread so a slow platform only
suspends the current coroutine.
"""

from __future__ import annotations

import asyncio
import json
import urllib.error
import urllib.request
from typing import Any, Optional

DEFAULT_TIMEOUT = 30


class HttpStatusError(Exception):
    """Non-2xx answer from a remote service."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"HTTP {status}: {body}")
        self.status = status
        self.body = body


def _request(
    method: str,
    url: str,
    payload: Optional[dict[str, Any]],
    headers: dict[str, str],
    timeout: float,
) -> Any:
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    request = urllib.request.Request(url, data=data, method=method)
    request.add_header("Accept", "application/json")
    if data is not None:
        request.add_header("Content-Type", "application/json")
    for key, value in headers.items():
        request.add_header(key, value)

    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            body = response.read().decode("utf-8")
    except urllib.error.HTTPError as e:
        raise HttpStatusError(e.code, e.read().decode("utf-8", errors="replace")) from e

    return json.loads(body) if body else None


async def request_json(
    method: str,
    url: str,
    payload: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Send a JSON request and return the decoded JSON body (or None)."""

    return await asyncio.to_thread(_request, method, url, payload, headers or {}, timeout)
