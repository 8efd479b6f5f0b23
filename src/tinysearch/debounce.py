from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

from .config import DEBOUNCE_MS

log = logging.getLogger(__name__)


class Debouncer:
    """
    Cancel-and-replace scheduling on the running event loop.

    Each call drops whatever call is still waiting and schedules a new one
    `wait_ms` later, so only the last call of a burst fires. Coroutine
    callbacks are started as tasks once the wait is over; the most recent
    one is kept in `last_task`. Tasks are held until they finish and a
    failure is logged instead of being dropped.
    """

    def __init__(self, fn: Callable[..., Any], wait_ms: int = DEBOUNCE_MS) -> None:
        self._fn = fn
        self.wait_ms = wait_ms
        self._handle: Optional[asyncio.TimerHandle] = None
        self.last_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    def __call__(self, *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait_ms / 1000.0, self._fire, args)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, args: tuple) -> None:
        self._handle = None
        result = self._fn(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)
            self.last_task = task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("Debounced call failed", exc_info=exc)
