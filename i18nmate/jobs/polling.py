"""
Active translation job polling.

Polls for the project's active job with a backoff schedule until the job
finishes, there is no active job, or the attempt limit is reached.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from i18nmate.config import get_settings
from i18nmate.core.models import TranslationJob

logger = logging.getLogger(__name__)

FetchActiveJob = Callable[[], Awaitable[TranslationJob | None]]
OnUpdate = Callable[[TranslationJob | None], None]


class JobPoller:
    """
    Poll an active job.

    Intervals are in seconds; past the end of the schedule the last
    interval repeats.
    """

    def __init__(
        self,
        fetch: FetchActiveJob,
        on_update: OnUpdate | None = None,
        intervals: list[float] | None = None,
        max_attempts: int | None = None,
    ):
        settings = get_settings()
        self.fetch = fetch
        self.on_update = on_update
        self.intervals = intervals or [ms / 1000 for ms in settings.job_poll_intervals_ms]
        self.max_attempts = max_attempts or settings.job_poll_max_attempts

        self.attempts = 0
        self.job: TranslationJob | None = None
        self._task: asyncio.Task | None = None

    def interval_for(self, attempt: int) -> float:
        return self.intervals[min(attempt, len(self.intervals) - 1)]

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Start polling in the background (no-op if already running)."""
        if not self.is_running:
            self.attempts = 0
            self._task = asyncio.create_task(self.run())
        return self._task

    def stop(self) -> None:
        if self.is_running:
            self._task.cancel()
        self._task = None

    async def run(self) -> TranslationJob | None:
        """Poll until done; returns the last job seen."""
        while True:
            self.job = await self.fetch()
            self.attempts += 1
            if self.on_update:
                self.on_update(self.job)

            if self.job is None or self.job.status.is_finished:
                return self.job
            if self.attempts >= self.max_attempts:
                logger.warning(
                    f"Stopped polling job {self.job.id} after {self.attempts} attempts"
                )
                return self.job

            await asyncio.sleep(self.interval_for(self.attempts - 1))
