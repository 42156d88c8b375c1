# src/taskmaster_client/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The session manager and the task controller depend on Protocols instead of
concrete implementations. This keeps the HTTP transport, the token file and
the console front end swappable and makes testing easier.
"""

from typing import Any, Awaitable, Protocol

from ..session.session_models import AuthResult, StoredTokens, User
from ..tasks.task_models import Task, TaskFilters, TaskPage


class TokenStorage(Protocol):
    """Durable access/refresh token pair. Absent when unauthenticated."""

    def load(self) -> StoredTokens | None: ...
    def save(self, tokens: StoredTokens) -> None: ...
    def clear(self) -> None: ...


class AuthApi(Protocol):
    def login(self, email: str, password: str) -> Awaitable[AuthResult]: ...
    def register(self, email: str, password: str, name: str | None = None) -> Awaitable[AuthResult]: ...
    def logout(self) -> Awaitable[None]: ...
    def current_user(self) -> Awaitable[User]: ...


class TasksApi(Protocol):
    def list_tasks(self, filters: TaskFilters) -> Awaitable[TaskPage]: ...
    def create_task(self, data: dict[str, Any]) -> Awaitable[Task]: ...
    def update_task(self, task_id: int, data: dict[str, Any]) -> Awaitable[Task]: ...
    def delete_task(self, task_id: int) -> Awaitable[str | None]: ...
    def toggle_task_status(self, task_id: int) -> Awaitable[Task]: ...


class Notifier(Protocol):
    """Transient user-facing notifications (toasts in a browser, lines in a console)."""

    def success(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...


class Navigator(Protocol):
    """
    Front-end side port: where the user should be looking.

    Paths are logical views ("/login", "/dashboard"); the front end decides
    what that means for its own rendering.
    """

    def navigate(self, path: str) -> None: ...


class Confirmer(Protocol):
    """Ask the user a yes/no question before a destructive action."""

    def confirm(self, prompt: str) -> Awaitable[bool]: ...
