# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from taskmaster_client.api.errors import ApiError, AuthError, NetworkError
from taskmaster_client.session.session_models import AuthResult, StoredTokens, User
from taskmaster_client.tasks.task_models import Pagination, Task, TaskFilters, TaskPage, TaskStatus

# Server-side advancement rule; lives only in the fake server.
_NEXT_STATUS = {
    TaskStatus.PENDING: TaskStatus.IN_PROGRESS,
    TaskStatus.IN_PROGRESS: TaskStatus.COMPLETED,
    TaskStatus.COMPLETED: TaskStatus.PENDING,
}


def make_task(task_id: int, title: str, status: TaskStatus = TaskStatus.PENDING, **kw: Any) -> Task:
    now = datetime(2026, 1, 1, tzinfo=UTC)
    return Task(
        id=task_id,
        title=title,
        status=status,
        user_id=kw.pop("user_id", 1),
        created_at=kw.pop("created_at", now),
        updated_at=kw.pop("updated_at", now),
        description=kw.pop("description", None),
    )


class FakeTokenStore:
    """In-memory TokenStorage."""

    def __init__(self, tokens: StoredTokens | None = None) -> None:
        self.tokens = tokens

    def load(self) -> StoredTokens | None:
        return self.tokens

    def save(self, tokens: StoredTokens) -> None:
        self.tokens = tokens

    def clear(self) -> None:
        self.tokens = None


@dataclass(slots=True)
class FakeNotifier:
    successes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def success(self, text: str) -> None:
        self.successes.append(text)

    def error(self, text: str) -> None:
        self.errors.append(text)


@dataclass(slots=True)
class FakeNavigator:
    history: list[str] = field(default_factory=list)

    @property
    def current(self) -> str | None:
        return self.history[-1] if self.history else None

    def navigate(self, path: str) -> None:
        self.history.append(path)


@dataclass(slots=True)
class FakeConfirmer:
    answer: bool = True
    prompts: list[str] = field(default_factory=list)

    async def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


class FakeAuthApi:
    """
    Deterministic AuthApi.

    - `users` maps email -> (password, User)
    - `me` is what /auth/me returns; set `me_error` to make it fail
    - `me_gate` (asyncio.Event) holds /auth/me until set
    """

    def __init__(self) -> None:
        self.users: dict[str, tuple[str, User]] = {}
        self.me: User | None = None
        self.me_error: Exception | None = None
        self.me_gate: asyncio.Event | None = None
        self.logout_error: Exception | None = None
        self.register_error: Exception | None = None
        self.calls: list[str] = []
        self._next_id = 100

    def add_user(self, email: str, password: str, name: str | None = None) -> User:
        self._next_id += 1
        user = User(id=self._next_id, email=email, name=name)
        self.users[email] = (password, user)
        return user

    def _tokens(self, user: User) -> AuthResult:
        return AuthResult(user=user, access_token=f"access-{user.id}", refresh_token=f"refresh-{user.id}")

    async def login(self, email: str, password: str) -> AuthResult:
        self.calls.append("login")
        entry = self.users.get(email)
        if entry is None or entry[0] != password:
            raise AuthError("POST /auth/login: HTTP 401", status_code=401, server_message="Invalid credentials")
        return self._tokens(entry[1])

    async def register(self, email: str, password: str, name: str | None = None) -> AuthResult:
        self.calls.append("register")
        if self.register_error is not None:
            raise self.register_error
        if email in self.users:
            raise ApiError("POST /auth/register: HTTP 409", status_code=409, server_message="User already exists")
        return self._tokens(self.add_user(email, password, name))

    async def logout(self) -> None:
        self.calls.append("logout")
        if self.logout_error is not None:
            raise self.logout_error

    async def current_user(self) -> User:
        self.calls.append("me")
        if self.me_gate is not None:
            await self.me_gate.wait()
        if self.me_error is not None:
            raise self.me_error
        if self.me is None:
            raise AuthError("GET /auth/me: HTTP 401", status_code=401)
        return self.me


class FakeTasksApi:
    """
    In-memory TasksApi that behaves like the real server.

    - `fail` names operations that raise NetworkError ("list", "create", ...)
    - `list_gates` maps a search string to an Event the list call waits on,
      which lets tests control response ordering
    - `calls` records (operation, argument) pairs
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[int, Task] = {t.id: t for t in tasks or []}
        self.fail: set[str] = set()
        self.auth_fail: set[str] = set()
        self.list_gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, Any]] = []
        self.last_toggled: Task | None = None
        self._next_id = max(self.tasks, default=0) + 1

    def _maybe_fail(self, op: str) -> None:
        if op in self.auth_fail:
            raise AuthError(f"{op}: HTTP 401", status_code=401, server_message="Token expired")
        if op in self.fail:
            raise NetworkError(f"{op}: ConnectError")

    async def list_tasks(self, filters: TaskFilters) -> TaskPage:
        self.calls.append(("list", filters))
        gate = self.list_gates.get(filters.search)
        if gate is not None:
            await gate.wait()
        self._maybe_fail("list")

        out = list(self.tasks.values())
        if filters.status is not None:
            out = [t for t in out if t.status is filters.status]
        if filters.search:
            q = filters.search.lower()
            out = [t for t in out if q in t.title.lower() or q in (t.description or "").lower()]

        total = len(out)
        page = filters.page or 1
        if filters.limit:
            out = out[(page - 1) * filters.limit : page * filters.limit]
            total_pages = max(1, -(-total // filters.limit))
        else:
            total_pages = 1
        return TaskPage(
            tasks=out,
            pagination=Pagination(page=page, limit=filters.limit, total=total, total_pages=total_pages),
        )

    async def create_task(self, data: dict[str, Any]) -> Task:
        self.calls.append(("create", data))
        self._maybe_fail("create")
        task = make_task(
            self._next_id,
            data["title"],
            TaskStatus(data.get("status") or TaskStatus.PENDING),
            description=data.get("description"),
        )
        self._next_id += 1
        self.tasks[task.id] = task
        return task

    async def update_task(self, task_id: int, data: dict[str, Any]) -> Task:
        self.calls.append(("update", (task_id, data)))
        self._maybe_fail("update")
        old = self.tasks[task_id]
        task = make_task(
            task_id,
            data.get("title", old.title),
            TaskStatus(data.get("status", old.status)),
            description=data.get("description", old.description),
        )
        self.tasks[task_id] = task
        return task

    async def delete_task(self, task_id: int) -> str | None:
        self.calls.append(("delete", task_id))
        self._maybe_fail("delete")
        self.tasks.pop(task_id, None)
        return "Task deleted"

    async def toggle_task_status(self, task_id: int) -> Task:
        self.calls.append(("toggle", task_id))
        self._maybe_fail("toggle")
        old = self.tasks[task_id]
        task = make_task(task_id, old.title, _NEXT_STATUS[old.status], description=old.description)
        self.tasks[task_id] = task
        self.last_toggled = task
        return task

    def ops(self) -> list[str]:
        return [op for op, _ in self.calls]
