"""
Offer template endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, File, Form, UploadFile, status

from app.core.deps import SessionDep
from app.schemas.templates import ParsedTemplate, TemplateResponse
from app.services.content_studio.template_service import TemplateService
from app.services.documents.template_parser import parse_template

router = APIRouter()


@router.get("", response_model=List[TemplateResponse])
async def list_templates(db: SessionDep):
    return await TemplateService(db).list_templates()


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    db: SessionDep,
    file: UploadFile = File(...),
    name: str = Form(...),
    description: Optional[str] = Form(None),
):
    """Upload a DOCX template; placeholders and section structure are extracted"""
    data = await file.read()
    return await TemplateService(db).create_template(data, file.filename or "template.docx", name, description)


@router.post("/parse", response_model=ParsedTemplate)
async def parse_template_file(file: UploadFile = File(...)):
    """Parse a DOCX template without saving it"""
    return parse_template(await file.read(), file.filename or "")


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: str, db: SessionDep):
    return await TemplateService(db).get_template(template_id)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(template_id: str, db: SessionDep):
    await TemplateService(db).delete_template(template_id)
