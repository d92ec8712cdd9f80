"""Trailing-edge debouncing on the running asyncio loop."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NOTHING = object()


class Debouncer(Generic[T]):
    """
    Collapse bursts of values into one callback call with the last value.

    Every ``push`` restarts the window; the callback fires ``delay`` seconds
    after the most recent push. Coroutine callbacks are scheduled as a task,
    which ``wait()`` can await.
    """

    def __init__(
        self,
        callback: Callable[[T], Union[Awaitable[Any], Any]],
        delay: float = 0.5,
    ):
        self.callback = callback
        self.delay = delay
        self._pending: Any = _NOTHING
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not _NOTHING

    def push(self, value: T) -> None:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._pending = value
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending value without firing."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = _NOTHING

    async def flush(self) -> None:
        """Fire the pending value now (if any) and wait for the callback."""
        if self.pending:
            if self._handle is not None:
                self._handle.cancel()
            self._fire()
        await self.wait()

    async def wait(self) -> None:
        """Wait for the most recently fired callback to finish."""
        if self._task is not None:
            await self._task

    def _fire(self) -> None:
        self._handle = None
        value, self._pending = self._pending, _NOTHING
        if value is _NOTHING:
            return
        result = self.callback(value)
        if inspect.isawaitable(result):
            self._task = asyncio.ensure_future(result)
            self._task.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("Debounced callback failed", exc_info=task.exception())
