"""Cancellable delayed tasks for the table adapter."""

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

TimerCallback = Callable[[], Awaitable[None]]


class RestartTimer:
    """
    One pending delayed callback at a time.

    Scheduling again supersedes the pending callback, and cancel() makes sure
    a callback already past its sleep never runs. A fired timer runs its
    callback exactly once.
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._task: asyncio.Task | None = None
        self._deadline: float | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """Check if a callback is waiting to fire."""
        return self._task is not None and not self._task.done()

    @property
    def remaining(self) -> float | None:
        """Seconds until the pending callback fires, or None."""
        if not self.pending or self._deadline is None:
            return None
        loop = asyncio.get_running_loop()
        return max(0.0, self._deadline - loop.time())

    def schedule(self, callback: TimerCallback) -> bool:
        """
        Run callback after the delay, replacing any pending one.

        Returns:
            False if the timer is disabled (delay <= 0)
        """
        self.cancel()
        if self.delay <= 0:
            return False

        loop = asyncio.get_running_loop()
        self._generation += 1
        self._deadline = loop.time() + self.delay
        self._task = loop.create_task(self._fire(self._generation, callback))
        return True

    def cancel(self) -> bool:
        """
        Cancel the pending callback.

        Returns:
            True if a callback was pending
        """
        self._generation += 1
        self._deadline = None
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        return True

    async def _fire(self, generation: int, callback: TimerCallback) -> None:
        await asyncio.sleep(self.delay)
        if generation != self._generation:
            return
        self._task = None
        self._deadline = None
        try:
            await callback()
        except Exception:
            logger.exception("Scheduled callback failed")
