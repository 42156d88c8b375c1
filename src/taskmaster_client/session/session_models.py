# src/taskmaster_client/session/session_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class SessionPhase(str, Enum):
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class GuardDecision(str, Enum):
    """What a view should do after observing the session."""

    WAIT = "wait"  # session not settled yet: render nothing
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(slots=True, frozen=True)
class User:
    id: int
    email: str
    name: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.email

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> User:
        return cls(
            id=int(data["id"]),
            email=str(data["email"]),
            name=(str(data["name"]) if data.get("name") else None),
        )


@dataclass(slots=True, frozen=True)
class StoredTokens:
    access_token: str
    refresh_token: str | None = None


@dataclass(slots=True, frozen=True)
class AuthResult:
    """Successful login/register exchange."""

    user: User
    access_token: str
    refresh_token: str
    message: str | None = None
