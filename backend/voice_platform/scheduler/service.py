"""
Background job scheduler using APScheduler with an in-memory job store.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class SchedulerService:
    """
    Runs periodic maintenance jobs (e.g. the streaming session sweep)
    on the application's event loop.
    """

    def __init__(self):
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._initialized = False

    async def initialize(self):
        """Create and start the scheduler on the running event loop."""
        if self._initialized:
            logger.warning("Scheduler already initialized")
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.start()
        self._initialized = True
        logger.info("Scheduler initialized successfully")

    async def shutdown(self):
        """Stop the scheduler without waiting for running jobs."""
        if self.scheduler and self._initialized:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shut down")
        self._initialized = False

    @property
    def is_running(self) -> bool:
        return self._initialized

    def schedule_interval(
        self,
        func: Callable[[], Awaitable[Any]],
        seconds: float,
        job_id: str,
        name: Optional[str] = None,
    ) -> Job:
        """
        Run ``func`` every ``seconds`` seconds, replacing any job with the same id.

        Coroutine functions run on the event loop, so they may touch
        in-memory state owned by the application without locking.

        Raises:
            ValueError: If the scheduler is not initialized
        """
        if not self._initialized:
            raise ValueError("Scheduler not initialized. Call initialize() first.")

        job = self.scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(seconds=seconds),
            id=job_id,
            name=name or job_id,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        logger.info(f"Scheduled job {job_id} every {seconds}s")
        return job

    def list_jobs(self) -> List[Dict[str, Any]]:
        """Return id, name and next run time of every scheduled job."""
        if not self._initialized:
            return []

        return [
            {
                "job_id": job.id,
                "name": job.name,
                "next_run_time": job.next_run_time,
            }
            for job in self.scheduler.get_jobs()
        ]

    def cancel_job(self, job_id: str) -> bool:
        """
        Cancel a scheduled job.

        Returns:
            True if job was cancelled, False if not found
        """
        if not self._initialized or self.scheduler.get_job(job_id) is None:
            return False

        self.scheduler.remove_job(job_id)
        logger.info(f"Cancelled job: {job_id}")
        return True
