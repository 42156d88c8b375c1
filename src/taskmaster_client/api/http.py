# src/taskmaster_client/api/http.py

from __future__ import annotations

import logging
import time
from collections.abc import Generator
from typing import Any

import httpx

from ..core.ports import TokenStorage
from .errors import ApiError, AuthError, NetworkError

logger = logging.getLogger(__name__)

_AUTH_STATUSES = {401, 403}


class BearerTokenAuth(httpx.Auth):
    """
    Attach the stored access token to every request, if there is one.

    The token is looked up per request, so login/logout take effect
    without rebuilding the client.
    """

    def __init__(self, storage: TokenStorage) -> None:
        self._storage = storage

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        tokens = self._storage.load()
        if tokens is not None and tokens.access_token:
            request.headers["Authorization"] = f"Bearer {tokens.access_token}"
        yield request


def make_timeout(seconds: float) -> httpx.Timeout:
    # Connect budget is capped; read uses the full value.
    return httpx.Timeout(seconds, connect=min(5.0, seconds))


def _error_message_from(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    return None


class ApiTransport:
    """
    Thin JSON-over-HTTP layer for the TaskMaster API.

    Every call returns the decoded JSON object or raises:
    - NetworkError on transport failures,
    - AuthError on 401/403,
    - ApiError on any other non-2xx status or a malformed body.

    No retries here: a failed call surfaces immediately to the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_storage: TokenStorage,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=BearerTokenAuth(token_storage),
            timeout=make_timeout(timeout_seconds),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        t0 = time.monotonic()
        try:
            response = await self._client.request(method, path, json=json, params=params or None)
        except httpx.HTTPError as e:
            logger.info("%s %s failed: %s", method, path, e.__class__.__name__)
            raise NetworkError(f"{method} {path}: {e.__class__.__name__}") from e

        logger.debug(
            "%s %s -> %s (%.0fms)",
            method,
            path,
            response.status_code,
            (time.monotonic() - t0) * 1000.0,
        )

        if response.status_code >= 400:
            server_message = _error_message_from(response)
            exc_cls = AuthError if response.status_code in _AUTH_STATUSES else ApiError
            raise exc_cls(
                f"{method} {path}: HTTP {response.status_code}",
                status_code=response.status_code,
                server_message=server_message,
            )

        if not response.content:
            return {}

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(f"{method} {path}: response is not JSON") from e

        if not isinstance(body, dict):
            raise ApiError(f"{method} {path}: expected a JSON object")
        return body

    async def get(self, path: str, *, params: dict[str, str] | None = None) -> dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> dict[str, Any]:
        return await self.request("DELETE", path)
