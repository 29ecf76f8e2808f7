"""
RAG Service

Maintains the Qdrant index of knowledge entries and retrieves the entries
closest to a smart-search question.
"""

import hashlib
from typing import Iterable, List, Optional

import numpy as np
from qdrant_client import AsyncQdrantClient, models

from app.core.config import settings
from app.core.logging import get_logger
from app.infra.qdrant import ensure_knowledge_collection
from app.models.knowledge import KnowledgeEntry
from app.services.llm_clients.openai_client import OpenAIClient

logger = get_logger(__name__)


def entry_text(entry: KnowledgeEntry) -> str:
    """Text embedded for an entry"""
    parts = [entry.title, entry.category.value]
    for value in (entry.description, entry.client, entry.field, entry.domain, entry.industry,
                  entry.winning_strategy, entry.loss_reasons):
        if value:
            parts.append(value)
    for values in (entry.tags, entry.deliverables, entry.learnings, entry.use_cases):
        if values:
            parts.append(", ".join(values))
    return "\n".join(parts)


def mock_embedding(text: str, dimension: int) -> List[float]:
    """Deterministic unit vector seeded from the text hash"""
    seed = int(hashlib.md5(text.encode()).hexdigest(), 16) % (2**32)
    rng = np.random.default_rng(seed)
    vector = rng.random(dimension).astype(np.float32)
    norm = np.linalg.norm(vector)
    if norm > 0:
        vector = vector / norm
    return vector.tolist()


class KnowledgeIndex:
    def __init__(self, qdrant: AsyncQdrantClient):
        self.qdrant = qdrant
        self._openai = None

    def _client(self) -> OpenAIClient:
        if self._openai is None:
            self._openai = OpenAIClient()
        return self._openai

    async def _get_embeddings(self, texts: List[str]) -> List[List[float]]:
        if settings.use_mock_embedding:
            return [mock_embedding(text, settings.embedding_dimension) for text in texts]
        return await self._client().get_embeddings(texts)

    async def _get_embedding(self, text: str) -> List[float]:
        return (await self._get_embeddings([text]))[0]

    async def rebuild(self, entries: Iterable[KnowledgeEntry]) -> int:
        """Drop and repopulate the collection; returns the number of points written"""
        collection = settings.knowledge_collection
        if await self.qdrant.collection_exists(collection):
            await self.qdrant.delete_collection(collection)
        await ensure_knowledge_collection(self.qdrant)

        entries = list(entries)
        vectors = await self._get_embeddings([entry_text(e) for e in entries]) if entries else []
        points = [
            models.PointStruct(
                id=entry.id,
                vector=vector,
                payload={"title": entry.title, "category": entry.category.value},
            )
            for entry, vector in zip(entries, vectors)
        ]

        if points:
            await self.qdrant.upsert(collection_name=collection, points=points)
        logger.info(f"Indexed {len(points)} knowledge entries into '{collection}'")
        return len(points)

    async def search(self, query: str, top_k: Optional[int] = None) -> List[str]:
        """IDs of the entries closest to the query, best first"""
        vector = await self._get_embedding(query)
        response = await self.qdrant.query_points(
            collection_name=settings.knowledge_collection,
            query=vector,
            limit=top_k or settings.vector_search_top_k,
        )
        return [str(point.id) for point in response.points]
