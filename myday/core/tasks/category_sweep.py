"""Periodic re-normalisation of stored task categories.

:func:`sweep_categories` rewrites any stored category that is not one of the
canonical labels.  :class:`CategorySweepTimer` runs it on a fixed interval
as a background asyncio task.  Running the sweep twice in a row changes
nothing the second time.
"""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass
from datetime import datetime

from myday.core.interpreter.categories import normalize_category
from myday.core.tasks.models import utcnow
from myday.core.tasks.repository import TaskRepository
from myday.utils.exceptions import TaskNotFoundError, ValidationError
from myday.utils.logging import get_logger

logger = get_logger("tasks.category_sweep")

DEFAULT_INTERVAL_MS = 30_000
MIN_INTERVAL_MS = 1_000


@dataclass
class SweepReport:
    total: int
    updated: int
    unchanged: int
    skipped: int = 0


async def sweep_categories(repository: TaskRepository) -> SweepReport:
    """Normalise the category of every stored task."""
    tasks = await repository.all_tasks()
    updated = skipped = 0
    for task in tasks:
        canonical = normalize_category(task.category)
        if canonical != task.category:
            try:
                await repository.set_category(task.id, canonical)
            except TaskNotFoundError:
                # deleted since the snapshot was taken
                logger.info("category_sweep_task_vanished", task_id=task.id)
                skipped += 1
                continue
            logger.info(
                "category_normalised",
                task_id=task.id,
                before=task.category,
                after=canonical,
            )
            updated += 1

    report = SweepReport(
        total=len(tasks),
        updated=updated,
        unchanged=len(tasks) - updated - skipped,
        skipped=skipped,
    )
    logger.info("category_sweep_finished", **asdict(report))
    return report


@dataclass
class TimerStatus:
    is_running: bool
    last_run_time: datetime | None
    run_count: int
    interval_ms: int


class CategorySweepTimer:
    """Runs :func:`sweep_categories` every ``interval_ms`` milliseconds.

    ``start`` sweeps once immediately and then on every tick.  A failing
    sweep is logged and the timer keeps going.
    """

    def __init__(self, repository: TaskRepository, interval_ms: int = DEFAULT_INTERVAL_MS):
        self.repository = repository
        self.interval_ms = interval_ms
        self.last_run_time: datetime | None = None
        self.run_count = 0
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Start the background loop.  Returns ``False`` if already running."""
        if self.is_running:
            logger.info("category_timer_already_running")
            return False
        logger.info("category_timer_started", interval_ms=self.interval_ms)
        self._task = asyncio.create_task(self._run_forever())
        return True

    async def stop(self) -> bool:
        """Cancel the background loop.  Returns ``False`` if it was not running."""
        if not self.is_running:
            logger.info("category_timer_not_running")
            return False
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("category_timer_stopped")
        return True

    async def trigger(self) -> SweepReport | None:
        """Run one sweep now, outside the schedule."""
        logger.info("category_sweep_triggered")
        return await self._execute()

    async def set_interval(self, interval_ms: int) -> None:
        """Change the interval, restarting the loop if it is running."""
        if interval_ms < MIN_INTERVAL_MS:
            raise ValidationError("intervalMs", f"must be at least {MIN_INTERVAL_MS}")
        was_running = self.is_running
        if was_running:
            await self.stop()
        self.interval_ms = interval_ms
        if was_running:
            self.start()
        logger.info("category_timer_interval_updated", interval_ms=interval_ms)

    def status(self) -> TimerStatus:
        return TimerStatus(
            is_running=self.is_running,
            last_run_time=self.last_run_time,
            run_count=self.run_count,
            interval_ms=self.interval_ms,
        )

    async def _run_forever(self) -> None:
        while True:
            await self._execute()
            await asyncio.sleep(self.interval_ms / 1000)

    async def _execute(self) -> SweepReport | None:
        self.run_count += 1
        try:
            report = await sweep_categories(self.repository)
        except Exception as exc:
            logger.error(
                "category_sweep_failed",
                run=self.run_count,
                error=str(exc),
                exc_info=True,
            )
            return None
        finally:
            self.last_run_time = utcnow()
        return report
