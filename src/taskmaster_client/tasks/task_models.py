# src/taskmaster_client/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task lifecycle status as the API spells it.

    The advancement order used by the toggle endpoint is owned by the server;
    the client only reads these values.
    """

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"

    @classmethod
    def parse(cls, raw: Any) -> TaskStatus:
        """Strict parse: accepts enum members and case-insensitive strings."""
        if isinstance(raw, cls):
            return raw
        s = str(raw or "").strip().upper().replace(" ", "_")
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"Unknown task status: {raw!r}") from None

    @property
    def label(self) -> str:
        # "IN_PROGRESS" -> "in progress"
        return self.value.replace("_", " ").lower()


def _parse_ts(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    status: TaskStatus
    user_id: int
    created_at: datetime | None
    updated_at: datetime | None
    description: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            status=TaskStatus.parse(data.get("status")),
            user_id=int(data["userId"]),
            created_at=_parse_ts(data.get("createdAt")),
            updated_at=_parse_ts(data.get("updatedAt")),
            description=(str(data["description"]) if data.get("description") else None),
        )


@dataclass(slots=True, frozen=True)
class Pagination:
    page: int = 1
    limit: int | None = None
    total: int | None = None
    total_pages: int | None = None

    @classmethod
    def from_api(cls, data: Any) -> Pagination:
        if not isinstance(data, dict):
            return cls()

        def _int(key: str) -> int | None:
            v = data.get(key)
            try:
                return int(v) if v is not None else None
            except (TypeError, ValueError):
                return None

        return cls(
            page=_int("page") or 1,
            limit=_int("limit"),
            total=_int("total"),
            total_pages=_int("totalPages"),
        )


@dataclass(slots=True, frozen=True)
class TaskPage:
    tasks: list[Task]
    pagination: Pagination = field(default_factory=Pagination)


@dataclass(slots=True, frozen=True)
class TaskFilters:
    """
    Query filters for GET /tasks.

    status=None means "any status"; empty search means "no search".
    """

    search: str = ""
    status: TaskStatus | None = None
    page: int | None = None
    limit: int | None = None

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.page:
            params["page"] = str(self.page)
        if self.limit:
            params["limit"] = str(self.limit)
        if self.status:
            params["status"] = self.status.value
        if self.search:
            params["search"] = self.search
        return params
