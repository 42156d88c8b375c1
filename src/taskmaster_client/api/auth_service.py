# src/taskmaster_client/api/auth_service.py

from __future__ import annotations

from typing import Any

from ..session.session_models import AuthResult, User
from .errors import ApiError
from .http import ApiTransport


def _parse_user(body: dict[str, Any], where: str) -> User:
    raw = body.get("user")
    if not isinstance(raw, dict):
        raise ApiError(f"{where}: response has no user")
    try:
        return User.from_api(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise ApiError(f"{where}: malformed user record") from e


def _parse_auth(body: dict[str, Any], where: str) -> AuthResult:
    user = _parse_user(body, where)
    tokens = body.get("tokens")
    if not isinstance(tokens, dict):
        raise ApiError(f"{where}: response has no tokens")
    access = tokens.get("accessToken")
    refresh = tokens.get("refreshToken")
    if not isinstance(access, str) or not access:
        raise ApiError(f"{where}: missing access token")
    return AuthResult(
        user=user,
        access_token=access,
        refresh_token=str(refresh or ""),
        message=(str(body["message"]) if body.get("message") else None),
    )


class HttpAuthApi:
    """/auth/* endpoints. Implements core.ports.AuthApi."""

    def __init__(self, transport: ApiTransport) -> None:
        self._http = transport

    async def login(self, email: str, password: str) -> AuthResult:
        body = await self._http.post("/auth/login", {"email": email, "password": password})
        return _parse_auth(body, "login")

    async def register(self, email: str, password: str, name: str | None = None) -> AuthResult:
        payload: dict[str, Any] = {"email": email, "password": password}
        if name:
            payload["name"] = name
        body = await self._http.post("/auth/register", payload)
        return _parse_auth(body, "register")

    async def logout(self) -> None:
        await self._http.post("/auth/logout")

    async def current_user(self) -> User:
        body = await self._http.get("/auth/me")
        return _parse_user(body, "me")
