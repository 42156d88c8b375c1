# src/taskmaster_client/api/errors.py

from __future__ import annotations


class TaskMasterError(Exception):
    """Base class for every error the client raises on purpose."""


class ApiError(TaskMasterError):
    """
    The server answered, but not with what we asked for.

    - status_code is None when the body could not be decoded or had the wrong shape.
    - server_message is the JSON "message" field of an error body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class AuthError(ApiError):
    """401/403: invalid credentials or an expired/invalid token."""


class NetworkError(TaskMasterError):
    """Transport-level failure (DNS, connect, read timeout, ...)."""


class ValidationError(TaskMasterError):
    """Input rejected before any request was sent. errors maps field -> message."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


def friendly_error_message(err: BaseException, fallback: str) -> str:
    """
    Pick the text to show the user.

    Server-provided messages win (they are already user-facing); everything
    else collapses to the caller's fallback.
    """
    if isinstance(err, ValidationError):
        return str(err)
    if isinstance(err, ApiError):
        msg = (err.server_message or "").strip()
        if msg:
            return msg
    return fallback
