# src/taskmaster_client/session/token_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from .session_models import StoredTokens

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


def _load_json(path: Path) -> dict[str, Any]:
    raw = path.read_text("utf-8")
    val = json.loads(raw)
    if isinstance(val, dict):
        return val
    raise ValueError("Expected JSON object")


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    with contextlib.suppress(OSError):
        # Tokens are credentials: keep the file private on disk.
        os.chmod(path, 0o600)


class FileTokenStore:
    """
    Token pair persisted as a small JSON file (the browser's localStorage).

    The file is read once, on first load(); after that the in-memory copy is
    authoritative and every save()/clear() writes through. The file is
    deleted (not emptied) when the session ends.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._loaded = False
        self._tokens: StoredTokens | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StoredTokens | None:
        if self._loaded:
            return self._tokens
        self._loaded = True

        if not self._path.exists():
            return None
        try:
            data = _load_json(self._path)
        except (OSError, ValueError):
            logger.warning("Unreadable session file %s; ignoring it.", self._path)
            return None

        access = data.get(ACCESS_TOKEN_KEY)
        if not isinstance(access, str) or not access:
            return None
        refresh = data.get(REFRESH_TOKEN_KEY)
        self._tokens = StoredTokens(
            access_token=access,
            refresh_token=refresh if isinstance(refresh, str) and refresh else None,
        )
        return self._tokens

    def save(self, tokens: StoredTokens) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {ACCESS_TOKEN_KEY: tokens.access_token}
        if tokens.refresh_token:
            data[REFRESH_TOKEN_KEY] = tokens.refresh_token
        _atomic_write_json(self._path, data)
        self._tokens = tokens
        self._loaded = True
        logger.debug("Session tokens saved to %s", self._path)

    def clear(self) -> None:
        self._tokens = None
        self._loaded = True
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        logger.debug("Session tokens removed from %s", self._path)
