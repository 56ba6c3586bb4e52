"""
Bencher API client.

Thin JSON-only wrapper over httpx.AsyncClient. Transport and HTTP failures
are translated into the console's error taxonomy here, so callers only ever
see FetchFailedError / MalformedResponseError on reads and
SubmitFailedError on writes. No retries.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from console.core.config import Settings
from console.core.errors import FetchFailedError, MalformedResponseError, SubmitFailedError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class BencherApiClient:
    """HTTP client for the Bencher API."""

    def __init__(
        self,
        timeout: float = 30.0,
        token: Optional[str] = None,
        attach_auth: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Seconds before a request is abandoned
            token: Bearer token for the Authorization header
            attach_auth: Send the token; off unless the API allows it via CORS
            transport: Custom transport (tests pass httpx.MockTransport)
        """
        headers = dict(JSON_HEADERS)
        if attach_auth and token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "BencherApiClient":
        return cls(
            timeout=settings.API_TIMEOUT,
            token=settings.API_TOKEN,
            attach_auth=settings.ATTACH_AUTH_HEADER,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_json(self, url: str) -> Any:
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"GET {url} returned {e.response.status_code}")
            raise FetchFailedError(
                url=url, reason=f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"GET {url} failed: {e}")
            raise FetchFailedError(url=url, reason=str(e) or type(e).__name__) from e

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"GET {url} returned a body that is not JSON")
            raise MalformedResponseError(url=url) from e

    async def post_json(self, url: str, payload: dict[str, Any]) -> Any:
        try:
            response = await self._http.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"POST {url} returned {e.response.status_code}")
            raise SubmitFailedError(
                url=url, reason=f"HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"POST {url} failed: {e}")
            raise SubmitFailedError(url=url, reason=str(e) or type(e).__name__) from e

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            # The entity was created; an unreadable echo does not undo that
            logger.warning(f"POST {url} succeeded with a body that is not JSON")
            return None
