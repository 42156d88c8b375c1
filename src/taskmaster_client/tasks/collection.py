# src/taskmaster_client/tasks/collection.py

from __future__ import annotations

"""
Task collection controller (the dashboard's state).

Owns:
- the tasks currently on display and their pagination,
- the active filter (committed search, status, page, limit),
- create/update/delete/toggle operations and their effect on the list.

Ordering:
- every list() takes a ticket from a monotonically increasing counter;
  a response (or error) is applied only if its ticket is still the latest,
  so a slow older query can never overwrite a newer one;
- mutations are "request, then on success re-list" (create/update) or a
  local edit of a server-confirmed record (delete/toggle);
- detach() invalidates everything in flight; late results and late errors
  are dropped without telling the user.

The server owns status transitions: toggle_status() never computes the next
status, it adopts whatever record the server returns.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from dataclasses import replace
from typing import Any

from ..api.errors import AuthError, TaskMasterError, ValidationError
from ..core.ports import Confirmer, Notifier, TasksApi
from ..core.validation import validate_task_input
from .debounce import Debouncer
from .task_models import Pagination, Task, TaskFilters, TaskStatus

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this task?"


class TaskCollectionController:
    def __init__(
        self,
        *,
        tasks_api: TasksApi,
        notifier: Notifier,
        confirmer: Confirmer,
        search_debounce_seconds: float = 0.5,
        page_size: int | None = None,
        on_auth_lost: Callable[[], None] | None = None,
    ) -> None:
        self._api = tasks_api
        self._notifier = notifier
        self._confirmer = confirmer
        self._on_auth_lost = on_auth_lost

        self._tasks: list[Task] = []
        self._pagination = Pagination()
        self._filters = TaskFilters(limit=page_size)
        self._search_text = ""
        self._loading = False

        # Latest issued list() ticket; only its response may land.
        self._ticket = 0
        # Bumped by detach(); mutations started under an older epoch don't touch state.
        self._epoch = 0

        self._debouncer: Debouncer[str] = Debouncer(search_debounce_seconds, self._commit_search)
        self._background: set[asyncio.Task[Any]] = set()

    # ---- observation ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def pagination(self) -> Pagination:
        return self._pagination

    @property
    def filters(self) -> TaskFilters:
        return self._filters

    @property
    def search_text(self) -> str:
        """Raw (uncommitted) search box content."""
        return self._search_text

    @property
    def loading(self) -> bool:
        return self._loading

    def get(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- helpers ----

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _report_failure(self, err: TaskMasterError, text: str) -> None:
        if isinstance(err, AuthError) and self._on_auth_lost is not None:
            # Session expired: the session layer redirects; no toast.
            logger.warning("%s: session rejected by server", text)
            self._on_auth_lost()
            return
        self._notifier.error(text)

    def _pagination_after_removal(self) -> Pagination:
        p = self._pagination
        if p.total is None:
            return p
        total = max(0, p.total - 1)
        total_pages = p.total_pages
        if p.limit:
            total_pages = max(1, -(-total // p.limit))
        return replace(p, total=total, total_pages=total_pages)

    # ---- list ----

    async def list(self, filters: TaskFilters | None = None) -> bool:
        """
        Fetch one page with the given (or current) filters and replace the collection.

        Returns True if this response was applied.
        """
        if filters is not None:
            self._filters = filters
        self._ticket += 1
        ticket = self._ticket
        query = self._filters
        self._loading = True

        try:
            page = await self._api.list_tasks(query)
        except TaskMasterError as e:
            if ticket != self._ticket:
                logger.debug("Dropping stale list error ticket=%s: %s", ticket, e)
                return False
            logger.exception("Failed to fetch tasks")
            self._report_failure(e, "Failed to load tasks")
            return False
        finally:
            if ticket == self._ticket:
                self._loading = False

        if ticket != self._ticket:
            logger.debug("Dropping stale list response ticket=%s latest=%s", ticket, self._ticket)
            return False

        self._tasks = list(page.tasks)
        self._pagination = page.pagination
        logger.debug("Loaded %d tasks (filters=%s)", len(self._tasks), query.to_params())
        return True

    async def refresh(self) -> bool:
        return await self.list()

    # ---- filters ----

    def set_search(self, text: str) -> None:
        """Raw search input. Only the debounced value triggers a fetch."""
        self._search_text = text
        self._debouncer.push(text)

    def flush_search(self) -> bool:
        """Commit the pending search immediately (e.g. Enter pressed)."""
        return self._debouncer.flush()

    def _commit_search(self, text: str) -> None:
        if text == self._filters.search:
            return
        self._filters = replace(self._filters, search=text, page=None)
        self._spawn(self.list())

    async def set_status(self, status: TaskStatus | str | None) -> bool:
        """Status filter applies immediately. None/""/"all" means any status."""
        if status is None or (isinstance(status, str) and status.strip().lower() in ("", "all")):
            parsed = None
        else:
            parsed = TaskStatus.parse(status)
        self._filters = replace(self._filters, status=parsed, page=None)
        return await self.list()

    async def set_page(self, page: int) -> bool:
        self._filters = replace(self._filters, page=max(1, int(page)))
        return await self.list()

    async def settle(self) -> None:
        """Wait until no debounce timer or background fetch is outstanding."""
        while True:
            pending: set[asyncio.Task[Any]] = set(self._background)
            timer = self._debouncer.task
            if timer is not None:
                pending.add(timer)
            if not pending:
                return
            await asyncio.wait(pending)

    # ---- mutations ----

    async def create(self, data: dict[str, Any]) -> bool:
        """
        Create a task, then re-list with the current filter.

        ValidationError propagates (nothing sent). On API failure the
        collection is untouched and False is returned so the form stays open.
        """
        payload = validate_task_input(data)
        epoch = self._epoch
        try:
            task = await self._api.create_task(payload)
        except TaskMasterError as e:
            if epoch != self._epoch:
                return False
            logger.exception("Create task failed")
            self._report_failure(e, "Failed to create task")
            return False

        if epoch != self._epoch:
            return True
        logger.info("Task created id=%s", task.id)
        self._notifier.success("Task created successfully")
        await self.list()
        return True

    async def update(self, task_id: int, data: dict[str, Any]) -> bool:
        """Update a task, then re-list (the server may change fields we didn't send)."""
        payload = validate_task_input(data, partial=True)
        if not payload:
            raise ValidationError({"form": "Nothing to update"})

        epoch = self._epoch
        try:
            task = await self._api.update_task(task_id, payload)
        except TaskMasterError as e:
            if epoch != self._epoch:
                return False
            logger.exception("Update task failed id=%s", task_id)
            self._report_failure(e, "Failed to update task")
            return False

        if epoch != self._epoch:
            return True
        logger.info("Task updated id=%s", task.id)
        self._notifier.success("Task updated successfully")
        await self.list()
        return True

    async def delete(self, task_id: int) -> bool:
        """
        Ask for confirmation, delete on the server, then drop the task locally.

        Declining sends nothing and changes nothing. The local removal only
        happens after the server acknowledged it.
        """
        if not await self._confirmer.confirm(DELETE_PROMPT):
            logger.debug("Delete declined id=%s", task_id)
            return False

        epoch = self._epoch
        try:
            await self._api.delete_task(task_id)
        except TaskMasterError as e:
            if epoch != self._epoch:
                return False
            logger.exception("Delete task failed id=%s", task_id)
            self._report_failure(e, "Failed to delete task")
            return False

        if epoch != self._epoch:
            return True
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) != len(self._tasks):
            self._pagination = self._pagination_after_removal()
        self._tasks = remaining
        logger.info("Task deleted id=%s", task_id)
        self._notifier.success("Task deleted successfully")
        return True

    async def toggle_status(self, task_id: int) -> bool:
        """Advance status server-side; swap in the returned record by id."""
        epoch = self._epoch
        try:
            updated = await self._api.toggle_task_status(task_id)
        except TaskMasterError as e:
            if epoch != self._epoch:
                return False
            logger.exception("Toggle status failed id=%s", task_id)
            self._report_failure(e, "Failed to update status")
            return False

        if epoch != self._epoch:
            return True
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]
        logger.info("Task %s -> %s", updated.id, updated.status.value)
        self._notifier.success(f"Task marked as {updated.status.label}")
        return True

    # ---- teardown ----

    def detach(self) -> None:
        """
        Leave the dashboard (logout / navigation away).

        Outstanding requests keep running but their outcome is ignored.
        """
        self._epoch += 1
        self._ticket += 1
        self._debouncer.cancel()
        self._loading = False
        self._tasks = []
        self._pagination = Pagination()
