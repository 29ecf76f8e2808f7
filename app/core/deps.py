"""
Dependency Injection

FastAPI dependencies for routes.
"""

from typing import Annotated, AsyncGenerator, Optional

import redis
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AuthenticationError
from app.core.security import verify_token
from app.infra.db import get_db
from app.infra.qdrant import get_qdrant
from app.infra.queue import JobQueue, QueueFactory
from app.services.llm_service import LLMService, get_llm_service
from app.services.rag_service import KnowledgeIndex

bearer_scheme = HTTPBearer(auto_error=False)

# Type aliases for common dependencies
SessionDep = Annotated[AsyncSession, Depends(get_db)]
LLMDep = Annotated[LLMService, Depends(get_llm_service)]


async def get_current_user_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> str:
    """
    Validate the bearer token and return the user ID.
    Does not fetch the user row to save a DB call.
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    user_id = verify_token(credentials.credentials)
    if not user_id:
        raise AuthenticationError("Could not validate credentials")
    return user_id


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]


def get_queue_factory(name: str):
    async def get_queue() -> AsyncGenerator[JobQueue, None]:
        # RQ needs a synchronous Redis client
        conn = redis.Redis.from_url(settings.redis_url)
        try:
            yield QueueFactory.get_queue(conn, name)
        finally:
            conn.close()

    return get_queue


DefaultQueueDep = Annotated[JobQueue, Depends(get_queue_factory("default"))]
DocumentsQueueDep = Annotated[JobQueue, Depends(get_queue_factory("documents"))]


async def get_knowledge_index() -> AsyncGenerator[Optional[KnowledgeIndex], None]:
    """Vector index for smart search, or None when vector search is off"""
    if not settings.enable_vector_search:
        yield None
        return

    async for qdrant in get_qdrant():
        yield KnowledgeIndex(qdrant)


KnowledgeIndexDep = Annotated[Optional[KnowledgeIndex], Depends(get_knowledge_index)]
