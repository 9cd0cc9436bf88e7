"""HTTP taste service adapter."""

from __future__ import annotations

import logging
import urllib.error
from typing import Any

from dater.adapters.http_client import HttpStatusError, request_json
from dater.core.errors import TasteError

LOGGER = logging.getLogger(__name__)


class HttpTaste:
    """TastePort implementation; scores candidates by photo similarity (0-100)."""

    def __init__(self, base_url: str, timeout: float = 30) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def _call(self, method: str, path: str, payload: Any = None) -> Any:
        try:
            return await request_json(method, f"{self._base_url}{path}", payload, timeout=self._timeout)
        except HttpStatusError as e:
            raise TasteError(f"Taste service answered {e.status} on {path}: {e.body}") from e
        except urllib.error.URLError as e:
            raise TasteError(f"Taste service is unreachable: {e.reason}") from e

    async def bootstrap(self) -> None:
        await self._call("GET", "/health")
        LOGGER.info("Taste service is ready")

    async def score(self, payload: dict[str, Any]) -> float:
        response = await self._call("POST", "/score", {"photos": payload.get("photos") or []})
        try:
            return float(response["photos_similarity_mean"])
        except (KeyError, TypeError, ValueError) as e:
            raise TasteError(f"Taste service returned an invalid score: {response!r}") from e
