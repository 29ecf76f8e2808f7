"""
Draft endpoints: CRUD, version history, publishing and the editing lock
"""

from typing import List

from fastapi import APIRouter, status

from app.core.deps import CurrentUserDep, LLMDep, SessionDep
from app.schemas.content import (
    CreateDraftRequest,
    DraftResponse,
    DraftStatusUpdate,
    DraftSummary,
    DraftUpdate,
    LockStatus,
    PublishRequest,
    PublishResult,
    VersionResponse,
    VersionSummary,
)
from app.services.content_studio.draft_service import DraftService

router = APIRouter()


@router.get("", response_model=List[DraftSummary])
async def list_drafts(db: SessionDep):
    return await DraftService(db).list_drafts()


@router.post("", response_model=DraftResponse, status_code=status.HTTP_201_CREATED)
async def create_draft(body: CreateDraftRequest, db: SessionDep, llm: LLMDep, user_id: CurrentUserDep):
    """Generate an offer draft from an analyzed tender and save it as version 1"""
    return await DraftService(db, llm).create_draft(body, editor=user_id)


@router.get("/{draft_id}", response_model=DraftResponse)
async def get_draft(draft_id: str, db: SessionDep):
    return await DraftService(db).get_draft(draft_id)


@router.patch("/{draft_id}", response_model=DraftResponse)
async def save_draft(draft_id: str, body: DraftUpdate, db: SessionDep, user_id: CurrentUserDep):
    """Save edits as a new version. Saving is never blocked by the editing lock."""
    return await DraftService(db).save_draft(draft_id, body, editor=user_id)


@router.delete("/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_draft(draft_id: str, db: SessionDep):
    await DraftService(db).delete_draft(draft_id)


@router.put("/{draft_id}/status", response_model=DraftResponse)
async def set_draft_status(draft_id: str, body: DraftStatusUpdate, db: SessionDep):
    return await DraftService(db).set_status(draft_id, body.status)


@router.get("/{draft_id}/versions", response_model=List[VersionSummary])
async def list_versions(draft_id: str, db: SessionDep):
    return await DraftService(db).list_versions(draft_id)


@router.get("/{draft_id}/versions/{version_number}", response_model=VersionResponse)
async def get_version(draft_id: str, version_number: int, db: SessionDep):
    return await DraftService(db).get_version(draft_id, version_number)


@router.post("/{draft_id}/versions/{version_number}/restore", response_model=DraftResponse)
async def restore_version(draft_id: str, version_number: int, db: SessionDep, user_id: CurrentUserDep):
    return await DraftService(db).restore_version(draft_id, version_number, editor=user_id)


@router.post("/{draft_id}/publish", response_model=PublishResult)
async def publish_draft(draft_id: str, body: PublishRequest, db: SessionDep, user_id: CurrentUserDep):
    """Create a pending offer entry from the draft and link its referenced methods"""
    draft, offer, linked = await DraftService(db).publish_draft(draft_id, body, editor=user_id)
    return PublishResult(draft=DraftResponse.model_validate(draft), offer_id=offer.id, linked_methods=linked)


@router.get("/{draft_id}/lock", response_model=LockStatus)
async def get_lock(draft_id: str, db: SessionDep, user_id: CurrentUserDep):
    return await DraftService(db).lock_status(draft_id, user_id)


@router.post("/{draft_id}/lock", response_model=LockStatus)
async def claim_lock(draft_id: str, db: SessionDep, user_id: CurrentUserDep):
    """Claim the advisory lock; `previous_editor` is set when someone else was editing"""
    return await DraftService(db).claim_lock(draft_id, user_id)


@router.post("/{draft_id}/lock/refresh", response_model=LockStatus)
async def refresh_lock(draft_id: str, db: SessionDep, user_id: CurrentUserDep):
    return await DraftService(db).refresh_lock(draft_id, user_id)


@router.delete("/{draft_id}/lock", response_model=LockStatus)
async def release_lock(draft_id: str, db: SessionDep, user_id: CurrentUserDep):
    return await DraftService(db).release_lock(draft_id, user_id)
