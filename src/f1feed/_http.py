"""HTTP transport layer for the OpenF1 API, built on httpx."""

from __future__ import annotations

from typing import Any

import httpx

from f1feed.exceptions import (
    OpenF1APIError,
    OpenF1ConnectionError,
    OpenF1RateLimitError,
    OpenF1TimeoutError,
)

DEFAULT_BASE_URL = "https://api.openf1.org/v1"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "f1-live-dashboard/0.1"


def _client_options(base_url: str, timeout: float) -> dict[str, Any]:
    return {
        "base_url": base_url,
        "timeout": timeout,
        "headers": {"Accept": "application/json", "User-Agent": USER_AGENT},
    }


def _handle_response(response: httpx.Response, endpoint: str) -> list[dict[str, Any]]:
    """Map error statuses to exceptions and return the decoded JSON list."""
    if response.status_code == 404 and "No results found" in response.text:
        return []
    if response.status_code == 429:
        raise OpenF1RateLimitError(429, response.text, endpoint)
    if response.status_code >= 400:
        raise OpenF1APIError(response.status_code, response.text, endpoint)
    payload = response.json()
    # unmatched filters may come back as a {"detail": ...} object
    if isinstance(payload, dict):
        return []
    return payload  # type: ignore[no-any-return]


class SyncTransport:
    """Blocking transport using httpx.Client."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.Client(**_client_options(base_url, timeout))

    def get(self, endpoint: str, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        """GET an endpoint and return its records."""
        try:
            response = self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise OpenF1ConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise OpenF1TimeoutError(str(exc)) from exc
        return _handle_response(response, endpoint)

    def close(self) -> None:
        self._client.close()


class AsyncTransport:
    """Non-blocking transport using httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.AsyncClient(**_client_options(base_url, timeout))

    async def get(self, endpoint: str, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        """GET an endpoint and return its records."""
        try:
            response = await self._client.get(endpoint, params=params)
        except httpx.ConnectError as exc:
            raise OpenF1ConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise OpenF1TimeoutError(str(exc)) from exc
        return _handle_response(response, endpoint)

    async def close(self) -> None:
        await self._client.aclose()
