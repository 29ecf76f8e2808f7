"""
Template Service

Offer templates (uploaded DOCX files) and writing style guides.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.infra.storage import delete_upload, save_upload
from app.models.content import ContentDraft, OfferTemplate, StyleGuide
from app.schemas.templates import StyleGuideCreate, StyleGuideUpdate
from app.services.documents.template_parser import parse_template

logger = get_logger(__name__)

TEMPLATE_FOLDER = "templates"


class TemplateService:
    def __init__(self, session: AsyncSession):
        self.session = session

    # Offer templates -------------------------------------------------------

    async def create_template(
        self, data: bytes, file_name: str, name: str, description: Optional[str] = None
    ) -> OfferTemplate:
        if not name or not name.strip():
            raise ValidationError("Template name is required")
        if len(data) > settings.max_upload_size:
            raise ValidationError(f"File exceeds the {settings.max_upload_size_mb} MB limit")

        parsed = parse_template(data, file_name)
        path = save_upload(TEMPLATE_FOLDER, file_name, data)

        template = OfferTemplate(
            name=name.strip(),
            description=description,
            file_name=file_name,
            file_url=str(path),
            placeholders=parsed.placeholders,
            extracted_structure=parsed.structure.model_dump(),
        )
        self.session.add(template)
        await self.session.commit()
        await self.session.refresh(template)
        logger.info(
            f"Created template {template.id} with {len(parsed.placeholders)} placeholders "
            f"and {parsed.structure.section_count} sections"
        )
        return template

    async def list_templates(self) -> List[OfferTemplate]:
        result = await self.session.execute(select(OfferTemplate).order_by(OfferTemplate.created_at.desc()))
        return list(result.scalars().all())

    async def get_template(self, template_id: str) -> OfferTemplate:
        template = await self.session.get(OfferTemplate, template_id)
        if template is None:
            raise NotFoundError("Template not found", details={"id": template_id})
        return template

    async def delete_template(self, template_id: str) -> None:
        template = await self.get_template(template_id)
        await self.session.execute(
            update(ContentDraft)
            .where(ContentDraft.selected_template_id == template_id)
            .values(selected_template_id=None, updated_at=ContentDraft.updated_at)
            .execution_options(synchronize_session=False)
        )
        file_url = template.file_url
        await self.session.delete(template)
        await self.session.commit()
        delete_upload(file_url)

    # Style guides ----------------------------------------------------------

    async def list_style_guides(self) -> List[StyleGuide]:
        result = await self.session.execute(select(StyleGuide).order_by(StyleGuide.created_at.desc()))
        return list(result.scalars().all())

    async def get_style_guide(self, guide_id: str) -> StyleGuide:
        guide = await self.session.get(StyleGuide, guide_id)
        if guide is None:
            raise NotFoundError("Style guide not found", details={"id": guide_id})
        return guide

    async def create_style_guide(self, guide_in: StyleGuideCreate) -> StyleGuide:
        guide = StyleGuide(**guide_in.model_dump())
        guide.name = guide.name.strip()
        if not guide.name:
            raise ValidationError("Style guide name is required")
        self.session.add(guide)
        await self.session.commit()
        await self.session.refresh(guide)
        return guide

    async def update_style_guide(self, guide_id: str, guide_in: StyleGuideUpdate) -> StyleGuide:
        guide = await self.get_style_guide(guide_id)
        for key, value in guide_in.model_dump(exclude_unset=True).items():
            if key == "name" and (value is None or not value.strip()):
                raise ValidationError("Style guide name is required")
            setattr(guide, key, value.strip() if key == "name" else value)
        await self.session.commit()
        await self.session.refresh(guide)
        return guide

    async def delete_style_guide(self, guide_id: str) -> None:
        guide = await self.get_style_guide(guide_id)
        await self.session.execute(
            update(ContentDraft)
            .where(ContentDraft.selected_style_guide_id == guide_id)
            .values(selected_style_guide_id=None, updated_at=ContentDraft.updated_at)
            .execution_options(synchronize_session=False)
        )
        file_url = guide.file_url
        await self.session.delete(guide)
        await self.session.commit()
        delete_upload(file_url)
