"""
Meeting scheduler using APScheduler.
Turns a future timestamp into a deferred "join now" call.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.base import JobLookupError
from apscheduler.events import (
    EVENT_JOB_EXECUTED,
    EVENT_JOB_ERROR,
    EVENT_JOB_MISSED,
    JobExecutionEvent,
)
from dateutil import tz

from meeting_bot.config import settings, get_logger
from meeting_bot.config.settings import SchedulerSettings
from meeting_bot.core.exceptions import SchedulerError
from meeting_bot.models import ScheduledJoin

logger = get_logger("scheduler")

JoinCallback = Callable[[ScheduledJoin], Awaitable[None]]


class SchedulerAdapter(ABC):
    """Runs a callback for a ScheduledJoin at its scheduled time."""

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...

    @abstractmethod
    def schedule(self, job: ScheduledJoin, callback: JoinCallback) -> datetime:
        """Register a job; returns the time it will actually run."""

    @abstractmethod
    def cancel(self, job_id: str) -> bool:
        ...

    @abstractmethod
    def scheduled(self) -> List[ScheduledJoin]:
        ...


class MeetingScheduler(SchedulerAdapter):
    """
    In-memory scheduler for deferred joins.
    Jobs do not survive a process restart.
    """

    def __init__(self, scheduler_settings: Optional[SchedulerSettings] = None):
        """Initialize the meeting scheduler."""
        self._settings = scheduler_settings or settings.scheduler
        self._is_running: bool = False

        self._scheduler = AsyncIOScheduler(
            jobstores={'default': MemoryJobStore()},
            timezone=ZoneInfo("UTC")
        )

        # job_id -> pending join
        self._jobs: Dict[str, ScheduledJoin] = {}
        self._callbacks: Dict[str, JoinCallback] = {}

        self._scheduler.add_listener(
            self._on_job_event,
            EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED
        )

    def start(self) -> None:
        """Start the scheduler (requires a running event loop)."""
        if not self._is_running:
            self._scheduler.start()
            self._is_running = True
            logger.info("Meeting scheduler started")

    def stop(self) -> None:
        """Stop the scheduler and forget pending joins."""
        if not self._is_running:
            return

        try:
            # Avoid calling into a closed event loop (e.g. during test teardown)
            loop = getattr(self._scheduler, "_eventloop", None)
            if self._scheduler.running and not (loop and loop.is_closed()):
                self._scheduler.shutdown(wait=False)
            logger.info("Meeting scheduler stopped")
        finally:
            self._is_running = False
            self._jobs.clear()
            self._callbacks.clear()

    def resolve_run_time(self, scheduled_time: datetime) -> datetime:
        """
        Normalize a requested time: naive values are read in the configured
        timezone, and times already past run shortly from now.
        """
        if scheduled_time.tzinfo is None:
            scheduled_time = scheduled_time.replace(tzinfo=settings.tz_info)

        now = datetime.now(tz.UTC)
        if scheduled_time <= now:
            return now + timedelta(seconds=self._settings.immediate_delay_seconds)
        return scheduled_time

    def schedule(self, job: ScheduledJoin, callback: JoinCallback) -> datetime:
        """
        Schedule a deferred join.

        Args:
            job: Join to run.
            callback: Coroutine function called with the job at fire time.

        Returns:
            The time the join will run.

        Raises:
            SchedulerError: if the job id is already scheduled or APScheduler rejects it.
        """
        if job.job_id in self._jobs:
            raise SchedulerError(f"Job already scheduled: {job.job_id}", {"job_id": job.job_id})

        run_at = self.resolve_run_time(job.scheduled_time)
        try:
            self._scheduler.add_job(
                self._run_job,
                trigger=DateTrigger(run_date=run_at, timezone=ZoneInfo("UTC")),
                args=[job.job_id],
                id=job.job_id,
                name=f"Join: {job.meeting_url}",
                misfire_grace_time=self._settings.misfire_grace_seconds,
            )
        except Exception as e:
            raise SchedulerError(f"Failed to schedule join {job.job_id}: {e}", {"job_id": job.job_id}) from e

        self._jobs[job.job_id] = job
        self._callbacks[job.job_id] = callback
        logger.info(
            f"Scheduled {job.platform.value} join for {job.meeting_url} "
            f"at {run_at.isoformat()} (job {job.job_id})"
        )
        return run_at

    async def _run_job(self, job_id: str) -> None:
        """Fire a scheduled join. Errors are logged, never raised."""
        job = self._jobs.pop(job_id, None)
        callback = self._callbacks.pop(job_id, None)
        if job is None or callback is None:
            logger.debug(f"Scheduled join {job_id} no longer pending")
            return

        logger.info(f"Time to join meeting: {job.meeting_url}")
        try:
            await callback(job)
        except Exception as e:
            logger.error(f"Scheduled join {job_id} failed: {e}")

    def cancel(self, job_id: str) -> bool:
        """
        Cancel a scheduled join.

        Returns:
            True if a pending join was cancelled.
        """
        if job_id not in self._jobs:
            return False

        del self._jobs[job_id]
        self._callbacks.pop(job_id, None)
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug(f"Job {job_id} already gone from scheduler")

        logger.info(f"Cancelled scheduled join: {job_id}")
        return True

    def scheduled(self) -> List[ScheduledJoin]:
        """Pending joins, earliest first."""
        return sorted(self._jobs.values(), key=lambda j: self.resolve_run_time(j.scheduled_time))

    def _on_job_event(self, event: JobExecutionEvent) -> None:
        """Log scheduler job events."""
        if event.code == EVENT_JOB_MISSED:
            logger.warning(f"Scheduled join {event.job_id} missed its run time")
            self._jobs.pop(event.job_id, None)
            self._callbacks.pop(event.job_id, None)
        elif event.exception:
            logger.error(f"Job {event.job_id} failed: {event.exception}")

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._is_running

    @property
    def scheduled_count(self) -> int:
        """Get count of pending joins."""
        return len(self._jobs)
