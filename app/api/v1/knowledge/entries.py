"""
Knowledge entry endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from app.core.deps import SessionDep
from app.models.knowledge import KnowledgeCategory
from app.schemas.knowledge import (
    EntryCreate,
    EntryFilters,
    EntryListResponse,
    EntryResponse,
    EntryUpdate,
    KnowledgeStats,
    TagList,
)
from app.schemas.links import LinkedEntities, SetLinksRequest, SetLinksResult
from app.services.knowledge_service import KnowledgeService
from app.services.link_service import LinkService

router = APIRouter()


@router.get("", response_model=EntryListResponse)
async def list_entries(
    db: SessionDep,
    search: Optional[str] = None,
    category: List[KnowledgeCategory] = Query(default=[]),
    tag: List[str] = Query(default=[]),
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    filters = EntryFilters(
        search=search,
        categories=category,
        tags=tag,
        status=status_filter,
        limit=limit,
        offset=offset,
    )
    entries, total = await KnowledgeService(db).list_entries(filters)
    return EntryListResponse(
        items=[EntryResponse.model_validate(e) for e in entries],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=EntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(entry_in: EntryCreate, db: SessionDep):
    return await KnowledgeService(db).create_entry(entry_in)


@router.get("/stats", response_model=KnowledgeStats)
async def get_stats(db: SessionDep, category: Optional[KnowledgeCategory] = None):
    return await KnowledgeService(db).stats(category)


@router.get("/tags", response_model=TagList)
async def list_tags(db: SessionDep):
    return TagList(tags=await KnowledgeService(db).list_tags())


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(entry_id: str, db: SessionDep):
    return await KnowledgeService(db).get_entry(entry_id)


@router.patch("/{entry_id}", response_model=EntryResponse)
async def update_entry(entry_id: str, entry_in: EntryUpdate, db: SessionDep):
    return await KnowledgeService(db).update_entry(entry_id, entry_in)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: str, db: SessionDep):
    """Delete the entry together with every link that touches it"""
    await KnowledgeService(db).delete_entry(entry_id)


@router.get("/{entry_id}/links", response_model=LinkedEntities)
async def get_linked_entities(entry_id: str, db: SessionDep):
    return await LinkService(db).get_linked(entry_id)


@router.put("/{entry_id}/links/{target_category}", response_model=SetLinksResult)
async def set_linked_entities(
    entry_id: str,
    target_category: KnowledgeCategory,
    body: SetLinksRequest,
    db: SessionDep,
):
    """Replace the entry's links to one category with the given IDs"""
    return await LinkService(db).set_links(entry_id, target_category, body.target_ids)
