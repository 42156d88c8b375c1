# src/taskmaster_client/tasks/debounce.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Coalesce a burst of values into one commit after a quiet period.

    push() restarts the timer; only the last value of a burst reaches
    on_commit. on_commit runs synchronously on the event loop once the timer
    fires and should only schedule work: the timer task is already detached
    by then, so a later push() can't cancel whatever it started.

    Must be used from inside a running event loop.
    """

    def __init__(self, delay_seconds: float, on_commit: Callable[[T], None]) -> None:
        self._delay = max(0.0, float(delay_seconds))
        self._on_commit = on_commit
        self._task: asyncio.Task[None] | None = None
        self._value: T | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task if self.pending else None

    def push(self, value: T) -> None:
        self.cancel()
        self._value = value
        self._task = asyncio.get_running_loop().create_task(self._fire_later(value))

    async def _fire_later(self, value: T) -> None:
        await asyncio.sleep(self._delay)
        self._task = None
        self._commit(value)

    def _commit(self, value: T) -> None:
        try:
            self._on_commit(value)
        except Exception:
            logger.exception("Debounced commit failed")

    def flush(self) -> bool:
        """Commit the pending value right now. Returns False if nothing was pending."""
        if not self.pending:
            return False
        value = self._value
        self.cancel()
        self._commit(value)  # type: ignore[arg-type]
        return True

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
