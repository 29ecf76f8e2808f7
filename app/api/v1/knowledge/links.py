"""
Entity link endpoints
"""

from fastapi import APIRouter

from app.core.deps import SessionDep
from app.schemas.links import (
    ClientLookupRequest,
    ClientLookupResponse,
    LinkRequest,
    LinkResult,
    UnlinkResult,
)
from app.services.link_service import LinkService

router = APIRouter()


@router.post("", response_model=LinkResult)
async def create_link(body: LinkRequest, db: SessionDep):
    link_type, created = await LinkService(db).link(body.source_id, body.target_id)
    return LinkResult(link_type=link_type.name, created=created)


@router.delete("", response_model=UnlinkResult)
async def delete_link(body: LinkRequest, db: SessionDep):
    link_type, removed = await LinkService(db).unlink(body.source_id, body.target_id)
    return UnlinkResult(link_type=link_type.name, removed=removed)


@router.post("/clients", response_model=ClientLookupResponse)
async def lookup_clients(body: ClientLookupRequest, db: SessionDep):
    """First linked client for each project or offer ID"""
    return ClientLookupResponse(clients=await LinkService(db).linked_clients_for_entries(body.entry_ids))
