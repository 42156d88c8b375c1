# src/taskmaster_client/api/task_service.py

from __future__ import annotations

from typing import Any

from ..tasks.task_models import Pagination, Task, TaskFilters, TaskPage
from .errors import ApiError
from .http import ApiTransport


def _parse_task(raw: Any, where: str) -> Task:
    if not isinstance(raw, dict):
        raise ApiError(f"{where}: expected a task object")
    try:
        return Task.from_api(raw)
    except (KeyError, TypeError, ValueError) as e:
        raise ApiError(f"{where}: malformed task record") from e


class HttpTasksApi:
    """/tasks endpoints. Implements core.ports.TasksApi."""

    def __init__(self, transport: ApiTransport) -> None:
        self._http = transport

    async def list_tasks(self, filters: TaskFilters) -> TaskPage:
        body = await self._http.get("/tasks", params=filters.to_params())
        raw_tasks = body.get("tasks")
        if not isinstance(raw_tasks, list):
            raise ApiError("list: response has no tasks array")
        tasks = [_parse_task(t, "list") for t in raw_tasks]
        return TaskPage(tasks=tasks, pagination=Pagination.from_api(body.get("pagination")))

    async def create_task(self, data: dict[str, Any]) -> Task:
        body = await self._http.post("/tasks", data)
        return _parse_task(body.get("task"), "create")

    async def update_task(self, task_id: int, data: dict[str, Any]) -> Task:
        body = await self._http.put(f"/tasks/{int(task_id)}", data)
        return _parse_task(body.get("task"), "update")

    async def delete_task(self, task_id: int) -> str | None:
        body = await self._http.delete(f"/tasks/{int(task_id)}")
        msg = body.get("message")
        return str(msg) if msg else None

    async def toggle_task_status(self, task_id: int) -> Task:
        body = await self._http.post(f"/tasks/{int(task_id)}/toggle")
        return _parse_task(body.get("task"), "toggle")
