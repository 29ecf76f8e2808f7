"""
Qdrant infrastructure configuration

Vector store client for the knowledge-entry index used by smart search.
"""

from typing import AsyncGenerator, Optional

from qdrant_client import AsyncQdrantClient, models

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Global client
client: Optional[AsyncQdrantClient] = None


async def init_qdrant_client():
    """Initialize Qdrant client"""
    global client
    client = AsyncQdrantClient(
        url=settings.qdrant_url,
        api_key=settings.qdrant_api_key or None,
        timeout=10,
    )


async def close_qdrant_client():
    """Close Qdrant client"""
    global client
    if client:
        await client.close()
        client = None


async def get_qdrant() -> AsyncGenerator[AsyncQdrantClient, None]:
    """Dependency for getting Qdrant client"""
    if client is None:
        await init_qdrant_client()

    yield client


async def ensure_knowledge_collection(qdrant: Optional[AsyncQdrantClient] = None):
    """Create the knowledge-entry collection if it does not exist"""
    qdrant = qdrant or client
    if qdrant is None:
        await init_qdrant_client()
        qdrant = client

    if await qdrant.collection_exists(settings.knowledge_collection):
        return

    logger.info(f"Creating collection: {settings.knowledge_collection}")
    await qdrant.create_collection(
        collection_name=settings.knowledge_collection,
        vectors_config=models.VectorParams(
            size=settings.embedding_dimension,
            distance=models.Distance.COSINE,
        ),
    )
