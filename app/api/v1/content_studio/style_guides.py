from typing import List

from fastapi import APIRouter, status

from app.core.deps import SessionDep
from app.schemas.templates import StyleGuideCreate, StyleGuideResponse, StyleGuideUpdate
from app.services.content_studio.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=List[StyleGuideResponse])
async def list_style_guides(db: SessionDep):
    return await TemplateService(db).list_style_guides()


@router.post("", response_model=StyleGuideResponse, status_code=status.HTTP_201_CREATED)
async def create_style_guide(body: StyleGuideCreate, db: SessionDep):
    return await TemplateService(db).create_style_guide(body)


@router.get("/{guide_id}", response_model=StyleGuideResponse)
async def get_style_guide(guide_id: str, db: SessionDep):
    return await TemplateService(db).get_style_guide(guide_id)


@router.patch("/{guide_id}", response_model=StyleGuideResponse)
async def update_style_guide(guide_id: str, body: StyleGuideUpdate, db: SessionDep):
    return await TemplateService(db).update_style_guide(guide_id, body)


@router.delete("/{guide_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_style_guide(guide_id: str, db: SessionDep):
    await TemplateService(db).delete_style_guide(guide_id)
