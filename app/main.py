"""
FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.errors import (
    AppError,
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logging import RequestIDMiddleware, get_logger, setup_logging
from app.infra.db import close_db_connection
from app.infra.qdrant import close_qdrant_client, ensure_knowledge_collection, init_qdrant_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info(f"Starting Knowledge Hub API ({settings.env}, LLM provider {settings.llm_provider})")

    if settings.enable_vector_search:
        await init_qdrant_client()
        try:
            await ensure_knowledge_collection()
        except Exception as e:
            # Smart search falls back to the full table while Qdrant is down
            logger.warning(f"Failed to initialize Qdrant collection: {e}")

    yield

    # Shutdown
    if settings.enable_vector_search:
        await close_qdrant_client()
    await close_db_connection()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Knowledge Hub Backend",
        description="Knowledge base, AI summarization and Content Studio for a design consultancy",
        version="0.1.0",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods,
        allow_headers=settings.cors_headers,
    )

    # Routes
    app.include_router(api_router, prefix=settings.api_prefix)

    # Exception Handlers
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app


app = create_app()
