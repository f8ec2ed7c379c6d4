"""
Task scheduler for periodic quota checks.

Uses APScheduler for lightweight async scheduling.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Coroutine

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)

USAGE_MONITOR_JOB_ID = "deepl_usage_monitor"


class TaskScheduler:
    """
    Async task scheduler wrapper.

    Provides simple interface for scheduling periodic tasks.
    """

    def __init__(self) -> None:
        self._scheduler = AsyncIOScheduler()
        self._started = False

    def add_job(
        self,
        func: Callable[..., Coroutine[Any, Any, Any]],
        job_id: str,
        interval_minutes: int,
        run_immediately: bool = False,
        **kwargs: Any,
    ) -> None:
        """
        Add a periodic job, replacing any job with the same id.

        Args:
            func: Async function to run
            job_id: Unique job identifier
            interval_minutes: Run every N minutes
            run_immediately: Also fire once as soon as the scheduler starts
            **kwargs: Additional arguments passed to func
        """
        if interval_minutes < 1:
            raise ValueError("interval_minutes must be at least 1")

        job_options: dict[str, Any] = {}
        if run_immediately:
            job_options["next_run_time"] = datetime.now(timezone.utc)

        self._scheduler.add_job(
            func,
            trigger=IntervalTrigger(minutes=interval_minutes),
            id=job_id,
            kwargs=kwargs,
            replace_existing=True,
            max_instances=1,  # Prevent overlapping
            coalesce=True,  # Skip missed runs
            **job_options,
        )
        logger.info(f"Scheduled job '{job_id}' every {interval_minutes} minutes")

    def remove_job(self, job_id: str) -> bool:
        """
        Remove a job.

        Returns:
            True if removed, False if not found
        """
        job = self._scheduler.get_job(job_id)
        if job:
            self._scheduler.remove_job(job_id)
            logger.info(f"Removed job '{job_id}'")
            return True
        return False

    def get_job(self, job_id: str) -> Any:
        """Get job by ID."""
        return self._scheduler.get_job(job_id)

    def start(self) -> None:
        """Start the scheduler."""
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("Scheduler started")

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: Wait for running jobs to complete
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("Scheduler shutdown")

    @property
    def running(self) -> bool:
        """Check if scheduler is running."""
        return self._started and self._scheduler.running


# Global scheduler instance
_scheduler: TaskScheduler | None = None


def get_scheduler() -> TaskScheduler:
    """Get the global scheduler instance."""
    global _scheduler
    if _scheduler is None:
        _scheduler = TaskScheduler()
    return _scheduler


def shutdown_scheduler(wait: bool = True) -> None:
    """Shutdown the global scheduler."""
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=wait)
        _scheduler = None
