"""
Smart search endpoints
"""

from fastapi import APIRouter, status

from app.core.config import settings
from app.core.deps import DefaultQueueDep, KnowledgeIndexDep, LLMDep, SessionDep
from app.core.errors import ConflictError
from app.schemas.search import AskRequest, AskResponse, ReindexResponse
from app.services.search_service import SearchService

router = APIRouter()


@router.post("/ask", response_model=AskResponse)
async def ask(body: AskRequest, db: SessionDep, llm: LLMDep, index: KnowledgeIndexDep):
    """Answer a question from the knowledge base with cited entries"""
    return await SearchService(db, llm=llm, index=index).ask(body.question)


@router.post("/reindex", response_model=ReindexResponse, status_code=status.HTTP_202_ACCEPTED)
async def reindex(queue: DefaultQueueDep):
    """Queue a rebuild of the vector index"""
    if not settings.enable_vector_search:
        raise ConflictError("Vector search is not enabled")
    job = queue.enqueue("app.workers.jobs.index_knowledge.index_knowledge")
    return ReindexResponse(job_id=job.id, queue=queue.name)
