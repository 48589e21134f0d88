"""Shared plumbing for the remote API adapters (auth headers, client reuse, body parsing)."""

from typing import Any

import httpx


class RemoteApiClient:
    """Base class for adapters talking to the console's REST API.

    An injected ``httpx.AsyncClient`` is reused across calls and left open;
    without one, every call opens and closes its own client.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str = "",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._timeout = timeout
        self._http_client = http_client

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _get_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_client()
        should_close = self._http_client is None
        try:
            return await client.request(method, self._url(path), headers=self._get_headers(), **kwargs)
        finally:
            if should_close:
                await client.aclose()


def read_json(response: httpx.Response) -> Any:
    """Body as JSON, or None when it is empty or not JSON."""
    try:
        return response.json()
    except ValueError:
        return None


def error_message(response: httpx.Response, fallback: str) -> str:
    """Pick a human-readable message out of an error response."""
    data = read_json(response)
    if isinstance(data, dict):
        for key in ("message", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return fallback


def unwrap(data: Any) -> Any:
    """Strip the API's optional ``{"data": ...}`` envelope."""
    if isinstance(data, dict) and "data" in data:
        return data["data"]
    return data
