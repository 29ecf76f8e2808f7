"""
API Router configuration
"""

from fastapi import APIRouter, Depends

from app.api.v1 import health
from app.api.v1.ai import analysis, search
from app.api.v1.auth import google
from app.api.v1.content_studio import drafts, style_guides, templates, tender
from app.api.v1.documents import main as documents
from app.api.v1.knowledge import entries, links
from app.core.deps import get_current_user_id

api_router = APIRouter()

# Public routes
api_router.include_router(health.router, tags=["health"])
api_router.include_router(google.router, prefix="/auth", tags=["auth"])

# Routes that need a signed-in user
authenticated = [Depends(get_current_user_id)]

api_router.include_router(entries.router, prefix="/knowledge", tags=["knowledge"], dependencies=authenticated)
api_router.include_router(links.router, prefix="/links", tags=["links"], dependencies=authenticated)
api_router.include_router(analysis.router, prefix="/ai", tags=["ai"], dependencies=authenticated)
api_router.include_router(search.router, prefix="/search", tags=["search"], dependencies=authenticated)
api_router.include_router(tender.router, prefix="/content-studio", tags=["content-studio"], dependencies=authenticated)
api_router.include_router(drafts.router, prefix="/drafts", tags=["drafts"], dependencies=authenticated)
api_router.include_router(templates.router, prefix="/templates", tags=["templates"], dependencies=authenticated)
api_router.include_router(style_guides.router, prefix="/style-guides", tags=["style-guides"], dependencies=authenticated)
api_router.include_router(documents.router, prefix="/documents", tags=["documents"], dependencies=authenticated)
