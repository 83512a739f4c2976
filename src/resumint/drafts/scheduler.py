"""Debounced asyncio task with explicit start/reset/cancel."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class DebouncedTask:
    """Runs an async callback once the timer has been quiet for ``delay`` seconds.

    The timer and the callback are separate tasks: resetting or cancelling the
    timer never interrupts a callback that has already started.
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], delay: float):
        self.callback = callback
        self.delay = delay
        self._timer: asyncio.Task | None = None
        self._running: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        """True while the timer is counting down."""
        return self._timer is not None and not self._timer.done()

    @property
    def running(self) -> bool:
        return self._running is not None and not self._running.done()

    def start(self, delay: float | None = None) -> None:
        """Start the timer unless it is already pending."""
        if not self.pending:
            self._timer = asyncio.get_running_loop().create_task(
                self._countdown(self.delay if delay is None else delay)
            )

    def reset(self, delay: float | None = None) -> None:
        """Restart the countdown from now."""
        self.cancel()
        self.start(delay)

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def wait(self) -> None:
        """Wait for an in-flight callback to finish."""
        if self._running is not None:
            await asyncio.shield(self._running)

    async def _countdown(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._timer = None
        self._running = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        try:
            await self.callback()
        except Exception:
            logger.error("Scheduled task failed", exc_info=True)
