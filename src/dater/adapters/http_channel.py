"""HTTP dating-platform adapter.

Talks to a platform gateway exposing a small JSON API:

- ``POST /auth``             -> ``{"session": "..."}``
- ``GET  /recommendations``  -> ``{"results": [{"id": ..., "name": ..., "photos": [...]}]}``
- ``GET  /updates``          -> ``{"matches": [{"id": ..., "person_id": ..., "messages": [...]}]}``
- ``POST /like/<id>``        -> ``{"match": bool}``; HTTP 429 when out of likes
- ``POST /pass/<id>``

HTTP 401 on any call means the session expired.
"""

from __future__ import annotations

import logging
import urllib.error
from typing import Any, Iterable, Optional

from dater.adapters.http_client import HttpStatusError, request_json
from dater.core.errors import ChannelError, NotAuthorizedError, OutOfLikesError

LOGGER = logging.getLogger(__name__)


def _optional_id(value: Any) -> Optional[str]:
    # Entries without an id are passed through so only that item fails downstream.
    return None if value is None else str(value)


class HttpChannel:
    """ChannelPort implementation backed by a platform HTTP gateway."""

    def __init__(self, name: str, base_url: str, api_token: Optional[str], timeout: float = 30) -> None:
        self.name = name
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._timeout = timeout
        self._session: Optional[str] = None

    @property
    def is_authorized(self) -> bool:
        return self._session is not None

    async def _call(
        self,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
        quota_limited: bool = False,
    ) -> Any:
        if self._session is None:
            raise NotAuthorizedError(self.name)

        headers = {"Authorization": f"Bearer {self._session}"}
        try:
            return await request_json(method, f"{self._base_url}{path}", payload, headers, self._timeout)
        except HttpStatusError as e:
            if e.status == 401:
                self._session = None
                raise NotAuthorizedError(self.name) from e
            if e.status == 429 and quota_limited:
                raise OutOfLikesError(self.name) from e
            raise ChannelError(f"{self.name} answered {e.status} on {path}: {e.body}") from e
        except urllib.error.URLError as e:
            raise ChannelError(f"{self.name} is unreachable: {e.reason}") from e

    async def authorize(self) -> None:
        """Exchange the API token for a fresh session; safe to call repeatedly."""

        if not self._api_token:
            raise ChannelError(f"No API token configured for {self.name} channel")
        try:
            response = await request_json(
                "POST",
                f"{self._base_url}/auth",
                {"token": self._api_token},
                timeout=self._timeout,
            )
        except HttpStatusError as e:
            raise ChannelError(f"{self.name} rejected the credentials ({e.status})") from e
        except urllib.error.URLError as e:
            raise ChannelError(f"{self.name} is unreachable: {e.reason}") from e

        session = (response or {}).get("session")
        if not session:
            raise ChannelError(f"{self.name} returned no session")
        self._session = session
        LOGGER.info("Authorized in %s channel", self.name.capitalize())

    async def get_recommendations(self) -> list[dict[str, Any]]:
        response = await self._call("GET", "/recommendations")
        results = (response or {}).get("results") or []
        return [{**result, "channel_id": _optional_id(result.get("id"))} for result in results]

    async def get_updates(self) -> list[dict[str, Any]]:
        response = await self._call("GET", "/updates")
        matches = (response or {}).get("matches") or []
        return [
            {
                "match_id": _optional_id(match.get("id")),
                "recommendation_id": _optional_id(match.get("person_id")),
                "name": match.get("name"),
                "messages": match.get("messages") or [],
            }
            for match in matches
        ]

    async def like(self, channel_id: str) -> bool:
        response = await self._call("POST", f"/like/{channel_id}", quota_limited=True)
        return bool((response or {}).get("match", False))

    async def pass_(self, channel_id: str) -> None:
        await self._call("POST", f"/pass/{channel_id}")


class HttpChannelRegistry:
    """Builds one HttpChannel per configured channel and resolves them by name."""

    def __init__(self, channel_settings: Iterable[dict[str, Any]], tokens: dict[str, Optional[str]]) -> None:
        self._settings = list(channel_settings)
        self._tokens = tokens
        self._channels: dict[str, HttpChannel] = {}

    async def bootstrap(self) -> None:
        # Sessions are established lazily through the re-authorization path.
        for entry in self._settings:
            name = entry["name"]
            base_url = entry.get("base_url")
            if not base_url:
                raise RuntimeError(f"channels[{name}].base_url is required")
            self._channels[name] = HttpChannel(
                name=name,
                base_url=base_url,
                api_token=self._tokens.get(name),
                timeout=float(entry.get("timeout_seconds", 30)),
            )
        LOGGER.info("%s channels are loaded", len(self._channels))

    def get_by_name(self, name: str) -> HttpChannel:
        try:
            return self._channels[name]
        except KeyError:
            raise ChannelError(f"Unknown channel: {name}") from None
