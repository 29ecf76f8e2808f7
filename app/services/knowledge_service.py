"""
Knowledge Service

CRUD, filtering and aggregate views over knowledge entries.
"""

from typing import Any, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError, jsonable_errors
from app.core.logging import get_logger
from app.models.knowledge import KnowledgeCategory, KnowledgeEntry, OfferStatus, ProjectStatus
from app.schemas.knowledge import EntryCreate, EntryFilters, EntryUpdate, KnowledgeStats
from app.services.link_service import LinkService

logger = get_logger(__name__)


def _matches_search(entry: KnowledgeEntry, needle: str) -> bool:
    haystack = [entry.title, entry.description, entry.client, *(entry.tags or [])]
    return any(needle in value.lower() for value in haystack if value)


def _status_condition(status: str):
    """SQL condition matching project or offer status; None when no status has that value"""
    conditions = []
    if status in {s.value for s in ProjectStatus}:
        conditions.append(KnowledgeEntry.project_status == ProjectStatus(status))
    if status in {s.value for s in OfferStatus}:
        conditions.append(KnowledgeEntry.offer_status == OfferStatus(status))
    if not conditions:
        return None
    return or_(*conditions)


class KnowledgeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_entry(self, entry_in: EntryCreate, commit: bool = True) -> KnowledgeEntry:
        entry = KnowledgeEntry(**entry_in.model_dump(exclude_none=True))
        self.session.add(entry)
        if commit:
            await self.session.commit()
            await self.session.refresh(entry)
            logger.info(f"Created {entry.category.value} entry {entry.id}")
        else:
            await self.session.flush()
        return entry

    async def get_entry(self, entry_id: str) -> KnowledgeEntry:
        entry = await self.session.get(KnowledgeEntry, entry_id)
        if entry is None:
            raise NotFoundError("Knowledge entry not found", details={"id": entry_id})
        return entry

    async def get_entries(self, entry_ids: List[str]) -> List[KnowledgeEntry]:
        if not entry_ids:
            return []
        result = await self.session.execute(
            select(KnowledgeEntry).where(KnowledgeEntry.id.in_(entry_ids))
        )
        return list(result.scalars().all())

    async def update_entry(self, entry_id: str, entry_in: EntryUpdate) -> KnowledgeEntry:
        entry = await self.get_entry(entry_id)
        changes = entry_in.model_dump(exclude_unset=True)
        if "title" in changes and changes["title"] is None:
            raise ValidationError("Title must not be blank")
        if "category" in changes and changes["category"] is None:
            changes.pop("category")
        if changes.get("category") not in (None, entry.category):
            # Link tables are fixed per category pair
            linked = await LinkService(self.session).count_links_for_entry(entry)
            if linked:
                raise ValidationError(
                    "Remove the entry's links before changing its category",
                    details={"category": entry.category.value, "links": linked},
                )

        for key, value in changes.items():
            setattr(entry, key, value)

        await self.session.commit()
        await self.session.refresh(entry)
        return entry

    async def delete_entry(self, entry_id: str) -> None:
        entry = await self.get_entry(entry_id)
        removed = await LinkService(self.session).delete_links_for_entry(entry_id)
        await self.session.delete(entry)
        await self.session.commit()
        logger.info(f"Deleted entry {entry_id} and {removed} link(s)")

    async def list_entries(self, filters: EntryFilters) -> Tuple[List[KnowledgeEntry], int]:
        """
        Filter entries and return (page, total).

        Category and status narrow the query in SQL; the search text and tag
        filters look inside JSON lists, so they run over the loaded rows.
        """
        stmt = select(KnowledgeEntry).order_by(KnowledgeEntry.updated_at.desc())

        if filters.categories:
            stmt = stmt.where(KnowledgeEntry.category.in_(filters.categories))

        if filters.status:
            condition = _status_condition(filters.status)
            if condition is None:
                return [], 0
            stmt = stmt.where(condition)

        result = await self.session.execute(stmt)
        entries = list(result.scalars().all())

        if filters.search and filters.search.strip():
            needle = filters.search.strip().lower()
            entries = [e for e in entries if _matches_search(e, needle)]

        if filters.tags:
            wanted = set(filters.tags)
            entries = [e for e in entries if wanted.intersection(e.tags or [])]

        total = len(entries)
        return entries[filters.offset:filters.offset + filters.limit], total

    async def stats(self, category: Optional[KnowledgeCategory] = None) -> KnowledgeStats:
        result = await self.session.execute(
            select(KnowledgeEntry.category, func.count()).group_by(KnowledgeEntry.category)
        )
        by_category = {row[0]: row[1] for row in result.all()}

        result = await self.session.execute(
            select(KnowledgeEntry.offer_status, func.count())
            .where(KnowledgeEntry.category == KnowledgeCategory.OFFER)
            .group_by(KnowledgeEntry.offer_status)
        )
        by_offer_status = {row[0]: row[1] for row in result.all()}

        total = by_category.get(category, 0) if category else sum(by_category.values())
        return KnowledgeStats(
            total=total,
            projects=by_category.get(KnowledgeCategory.PROJECT, 0),
            offers=by_category.get(KnowledgeCategory.OFFER, 0),
            methods=by_category.get(KnowledgeCategory.METHOD, 0),
            clients=by_category.get(KnowledgeCategory.CLIENT, 0),
            people=by_category.get(KnowledgeCategory.PERSON, 0),
            won_offers=by_offer_status.get(OfferStatus.WON, 0),
            lost_offers=by_offer_status.get(OfferStatus.LOST, 0),
        )

    async def list_tags(self) -> List[str]:
        result = await self.session.execute(select(KnowledgeEntry.tags))
        tags = set()
        for (row_tags,) in result.all():
            tags.update(t for t in (row_tags or []) if t)
        return sorted(tags, key=str.lower)

    async def find_by_title(self, category: KnowledgeCategory, title: str) -> Optional[KnowledgeEntry]:
        """Case-insensitive exact title match within a category"""
        stmt = (
            select(KnowledgeEntry)
            .where(
                KnowledgeEntry.category == category,
                func.lower(KnowledgeEntry.title) == title.strip().lower(),
            )
            .order_by(KnowledgeEntry.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_or_create(
        self,
        category: KnowledgeCategory,
        title: str,
        defaults: Optional[dict[str, Any]] = None,
    ) -> Tuple[KnowledgeEntry, bool]:
        """
        Return (entry, created). New entries are flushed, not committed,
        so callers can group them with the links they add.
        """
        existing = await self.find_by_title(category, title)
        if existing is not None:
            return existing, False

        try:
            entry_in = EntryCreate(title=title, category=category, **(defaults or {}))
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid {category.value} name", details={"errors": jsonable_errors(exc.errors())}
            ) from exc
        entry = await self.create_entry(entry_in, commit=False)
        logger.info(f"Created {category.value} '{entry.title}' during import")
        return entry, True
