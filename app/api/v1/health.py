from fastapi import APIRouter
from sqlalchemy import text

from app.core.config import settings
from app.core.deps import SessionDep
from app.core.logging import get_logger

router = APIRouter()

logger = get_logger(__name__)


@router.get("/health")
async def health_check(db: SessionDep):
    """Liveness plus a database round trip"""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        database = "error"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "env": settings.env,
        "database": database,
        "llm_provider": settings.llm_provider,
        "vector_search": settings.enable_vector_search,
    }
