"""
Import Service

Persists reviewed AI summaries as knowledge entries, creating and linking
the clients and methods they name.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.knowledge import KnowledgeCategory, KnowledgeEntry, OfferWorkStatus
from app.schemas.ai import EntrySummary, ImportProjectRequest, ImportResult
from app.schemas.knowledge import EntryCreate, EntryResponse
from app.schemas.links import LinkedEntity
from app.services.knowledge_service import KnowledgeService
from app.services.link_service import LinkService

logger = get_logger(__name__)


def _linked(entry: KnowledgeEntry) -> LinkedEntity:
    return LinkedEntity(id=entry.id, title=entry.title, category=entry.category)


def _entry_fields(summary: EntrySummary) -> dict:
    fields = {
        "title": summary.title,
        "category": summary.category,
        "description": summary.description or None,
        "tags": summary.tags,
        "learnings": summary.learnings,
    }
    if summary.category == KnowledgeCategory.PROJECT:
        fields.update(
            client=summary.client,
            project_status=summary.project_status,
            deliverables=summary.deliverables,
        )
    elif summary.category == KnowledgeCategory.OFFER:
        fields.update(
            offer_status=summary.offer_status,
            offer_work_status=OfferWorkStatus.UNDER_DEVELOPMENT,
            deliverables=summary.deliverables,
            win_factors=summary.win_factors,
            loss_factors=summary.loss_factors,
        )
    elif summary.category == KnowledgeCategory.METHOD:
        fields.update(use_cases=summary.use_cases, steps=summary.steps)
    return fields


class ImportService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.knowledge = KnowledgeService(session)
        self.links = LinkService(session)

    async def import_entry(self, summary: EntrySummary) -> ImportResult:
        entry = await self.knowledge.create_entry(EntryCreate(**_entry_fields(summary)), commit=False)
        return await self._attach_and_commit(entry, summary.client, summary.methods)

    async def import_project(self, summary: ImportProjectRequest) -> ImportResult:
        entry_in = EntryCreate(
            title=summary.title,
            category=KnowledgeCategory.PROJECT,
            description=summary.description or None,
            full_description=summary.full_description or None,
            client=summary.client,
            deliverables=summary.deliverables,
            tags=summary.tags,
            learnings=summary.learnings,
            source_drive_link=summary.source_drive_link,
            source_miro_link=summary.source_miro_link,
        )
        entry = await self.knowledge.create_entry(entry_in, commit=False)
        return await self._attach_and_commit(entry, summary.client, summary.methods)

    async def _attach_and_commit(
        self, entry: KnowledgeEntry, client_name: Optional[str], method_names: List[str]
    ) -> ImportResult:
        created: List[LinkedEntity] = []
        client_ref: Optional[LinkedEntity] = None
        method_refs: List[LinkedEntity] = []

        # Clients and methods only attach to projects and offers
        if entry.category in (KnowledgeCategory.PROJECT, KnowledgeCategory.OFFER):
            if client_name and client_name.strip():
                client, was_created = await self.knowledge.get_or_create(
                    KnowledgeCategory.CLIENT,
                    client_name.strip(),
                    {"description": f"Client created from project: {entry.title}"},
                )
                await self.links.link_entries(entry, client, commit=False)
                client_ref = _linked(client)
                if was_created:
                    created.append(client_ref)

            seen = set()
            for name in method_names:
                name = name.strip()
                if not name or name.lower() in seen:
                    continue
                seen.add(name.lower())
                method, was_created = await self.knowledge.get_or_create(
                    KnowledgeCategory.METHOD,
                    name,
                    {
                        "description": f"Method identified from project: {entry.title}",
                        "use_cases": [f"Used in: {entry.title}"],
                    },
                )
                await self.links.link_entries(entry, method, commit=False)
                method_refs.append(_linked(method))
                if was_created:
                    created.append(method_refs[-1])

        await self.session.commit()
        await self.session.refresh(entry)
        logger.info(
            f"Imported {entry.category.value} {entry.id} "
            f"({len(method_refs)} method(s), {len(created)} new entr{'y' if len(created) == 1 else 'ies'})"
        )
        return ImportResult(
            entry=EntryResponse.model_validate(entry),
            client=client_ref,
            methods=method_refs,
            created_entities=created,
        )
