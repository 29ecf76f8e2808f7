"""
Worker Entry Point

Starts the Redis Queue (RQ) worker.
Run with: python -m app.workers.worker
"""

from redis import Redis
from rq import Queue, Worker

from app.core.config import settings
from app.core.logging import get_logger, setup_logging

logger = get_logger(__name__)

listen = settings.worker_queues


def main():
    setup_logging()

    conn = Redis.from_url(settings.redis_url)
    queues = [Queue(name, connection=conn) for name in listen]

    worker = Worker(queues, connection=conn)
    logger.info(f"Worker started. Listening on: {listen}")
    worker.work()


if __name__ == "__main__":
    main()
