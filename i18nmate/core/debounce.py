"""
Debounced callbacks on the running event loop.

Scheduling a new callback replaces the pending one. Once the delay has
elapsed the callback is detached from the debouncer: cancelling or
rescheduling after that point never interrupts work already in flight.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable


Callback = Callable[[], Awaitable[object]]


class Debouncer:
    """Run at most one callback after a quiet period."""

    def __init__(self, delay: float):
        self.delay = delay
        self._timer: asyncio.Task | None = None
        self._running: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while a callback is waiting for its delay to elapse."""
        return self._timer is not None and not self._timer.done()

    def schedule(self, callback: Callback) -> None:
        """Replace any pending callback with ``callback``."""
        self.cancel()
        self._timer = asyncio.create_task(self._wait_then_run(callback))

    def cancel(self) -> bool:
        """Drop the pending callback. Returns True if one was pending."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return False
        timer.cancel()
        return True

    async def _wait_then_run(self, callback: Callback) -> None:
        await asyncio.sleep(self.delay)

        # Past the quiet period; detach so a new keystroke can't cancel us
        task = asyncio.current_task()
        if self._timer is task:
            self._timer = None
        if task is not None:
            self._running.add(task)
        try:
            await callback()
        finally:
            if task is not None:
                self._running.discard(task)

    async def drain(self) -> None:
        """Wait for the pending callback and any in-flight ones to finish."""
        while self.pending or self._running:
            tasks = [t for t in (self._timer, *self._running) if t is not None]
            await asyncio.gather(*tasks, return_exceptions=True)
