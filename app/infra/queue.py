"""
Job queue infrastructure

Thin wrapper over Redis Queue (RQ). RQ needs a synchronous Redis connection.
"""

from typing import Any, Callable, Optional

from redis import Redis
from rq import Queue
from rq.job import Job

from app.core.logging import get_logger

logger = get_logger(__name__)


class JobQueue:
    def __init__(self, queue: Queue):
        self.queue = queue

    @property
    def name(self) -> str:
        return self.queue.name

    def enqueue(self, func: Callable | str, *args: Any, job_timeout: int = 600, **kwargs: Any) -> Job:
        job = self.queue.enqueue(func, *args, job_timeout=job_timeout, **kwargs)
        logger.info(f"Enqueued job {job.id} on '{self.queue.name}'")
        return job

    def fetch(self, job_id: str) -> Optional[Job]:
        return self.queue.fetch_job(job_id)


class QueueFactory:
    @staticmethod
    def get_queue(connection: Redis, name: str = "default") -> JobQueue:
        # Queues are bound to the connection they were created with
        return JobQueue(Queue(name, connection=connection))
