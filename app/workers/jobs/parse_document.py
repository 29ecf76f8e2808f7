"""
Document Parsing Job
"""

import asyncio

from app.core.logging import get_logger
from app.infra.db import engine
from app.services.documents.parsing_service import process_parsing_job

logger = get_logger(__name__)


async def _run(job_id: str):
    try:
        await process_parsing_job(job_id)
    finally:
        # Each asyncio.run gets a fresh loop; pooled connections cannot cross loops
        await engine.dispose()


def parse_document(job_id: str):
    """
    RQ Job entry point (Sync wrapper)
    """
    logger.info(f"Parsing job {job_id} picked up by worker")
    asyncio.run(_run(job_id))
    return {"job_id": job_id}
