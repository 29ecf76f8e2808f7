"""
Knowledge Index Job

Rebuilds the Qdrant collection behind smart search.
"""

import asyncio

from sqlalchemy import select

from app.core.logging import get_logger
from app.infra.db import engine, get_db_context
from app.infra import qdrant
from app.models.knowledge import KnowledgeEntry
from app.services.rag_service import KnowledgeIndex

logger = get_logger(__name__)


async def _rebuild_index() -> int:
    await qdrant.init_qdrant_client()
    try:
        async with get_db_context() as session:
            result = await session.execute(select(KnowledgeEntry))
            entries = list(result.scalars().all())
        return await KnowledgeIndex(qdrant.client).rebuild(entries)
    finally:
        await qdrant.close_qdrant_client()
        await engine.dispose()


def index_knowledge():
    """
    RQ Job entry point (Sync wrapper)
    """
    logger.info("Rebuilding knowledge index")
    count = asyncio.run(_rebuild_index())
    return {"indexed": count}
