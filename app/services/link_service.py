"""
Link Service

Many-to-many links between knowledge entries. The link table for a pair of
entries is picked from their categories, so callers never name tables.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models.knowledge import KnowledgeCategory, KnowledgeEntry
from app.models.links import LINK_TYPES, LinkType, link_type_for, link_types_for
from app.schemas.links import LinkedEntities, LinkedEntity, SetLinksResult

logger = get_logger(__name__)

GROUP_FOR_CATEGORY = {
    KnowledgeCategory.CLIENT: "clients",
    KnowledgeCategory.PROJECT: "projects",
    KnowledgeCategory.OFFER: "offers",
    KnowledgeCategory.METHOD: "methods",
    KnowledgeCategory.PERSON: "people",
}


def _as_linked(entry: KnowledgeEntry) -> LinkedEntity:
    return LinkedEntity(id=entry.id, title=entry.title, category=entry.category)


def _pair_ids(link_type: LinkType, a: KnowledgeEntry, b: KnowledgeEntry) -> Dict[str, str]:
    """Column values for the link row, whichever order the entries came in"""
    if a.category == link_type.left_category:
        return {link_type.left_column: a.id, link_type.right_column: b.id}
    return {link_type.left_column: b.id, link_type.right_column: a.id}


class LinkService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _entry(self, entry_id: str) -> KnowledgeEntry:
        entry = await self.session.get(KnowledgeEntry, entry_id)
        if entry is None:
            raise NotFoundError("Knowledge entry not found", details={"id": entry_id})
        return entry

    def _link_type(self, a: KnowledgeEntry, b: KnowledgeEntry) -> LinkType:
        link_type = link_type_for(a.category, b.category)
        if link_type is None:
            raise ValidationError(
                f"Cannot link a {a.category.value} to a {b.category.value}",
                details={"source_category": a.category.value, "target_category": b.category.value},
            )
        return link_type

    async def _find(self, link_type: LinkType, ids: Dict[str, str]):
        model = link_type.model
        stmt = select(model).where(*(getattr(model, col) == value for col, value in ids.items()))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def link(self, a_id: str, b_id: str, commit: bool = True) -> Tuple[LinkType, bool]:
        """Link two entries; returns (link type, created). Linking twice is a no-op."""
        a = await self._entry(a_id)
        b = await self._entry(b_id)
        return await self.link_entries(a, b, commit=commit)

    async def link_entries(
        self, a: KnowledgeEntry, b: KnowledgeEntry, commit: bool = True
    ) -> Tuple[LinkType, bool]:
        link_type = self._link_type(a, b)
        ids = _pair_ids(link_type, a, b)

        if await self._find(link_type, ids) is not None:
            return link_type, False

        self.session.add(link_type.model(**ids))
        if commit:
            await self.session.commit()
        else:
            await self.session.flush()
        logger.info(f"Linked {link_type.name}: {ids}")
        return link_type, True

    async def unlink(self, a_id: str, b_id: str) -> Tuple[LinkType, bool]:
        a = await self._entry(a_id)
        b = await self._entry(b_id)
        link_type = self._link_type(a, b)
        ids = _pair_ids(link_type, a, b)

        existing = await self._find(link_type, ids)
        if existing is None:
            return link_type, False

        await self.session.delete(existing)
        await self.session.commit()
        return link_type, True

    async def _linked_entries(
        self, entry_id: str, link_type: LinkType, category: KnowledgeCategory
    ) -> List[KnowledgeEntry]:
        own_col, other_col = link_type.side_for(category)
        model = link_type.model
        stmt = (
            select(KnowledgeEntry)
            .join(model, KnowledgeEntry.id == getattr(model, other_col))
            .where(getattr(model, own_col) == entry_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_linked(self, entry_id: str) -> LinkedEntities:
        entry = await self._entry(entry_id)
        groups: Dict[str, List[LinkedEntity]] = defaultdict(list)

        for link_type in link_types_for(entry.category):
            for other in await self._linked_entries(entry.id, link_type, entry.category):
                groups[GROUP_FOR_CATEGORY[other.category]].append(_as_linked(other))

        return LinkedEntities(
            **{name: sorted(items, key=lambda e: e.title.lower()) for name, items in groups.items()}
        )

    async def set_links(
        self, entry_id: str, target_category: KnowledgeCategory, target_ids: List[str]
    ) -> SetLinksResult:
        """Make the entry's links to `target_category` exactly `target_ids`"""
        entry = await self._entry(entry_id)
        link_type = link_type_for(entry.category, target_category)
        if link_type is None:
            raise ValidationError(
                f"Cannot link a {entry.category.value} to a {target_category.value}"
            )

        wanted_ids = list(dict.fromkeys(target_ids))
        result = await self.session.execute(
            select(KnowledgeEntry).where(KnowledgeEntry.id.in_(wanted_ids))
        )
        targets = {t.id: t for t in result.scalars().all()}

        missing = [tid for tid in wanted_ids if tid not in targets]
        if missing:
            raise NotFoundError("Knowledge entry not found", details={"ids": missing})
        wrong = [t.id for t in targets.values() if t.category != target_category]
        if wrong:
            raise ValidationError(
                f"Entries are not of category {target_category.value}", details={"ids": wrong}
            )

        own_col, other_col = link_type.side_for(entry.category)
        model = link_type.model
        current = await self._linked_entries(entry.id, link_type, entry.category)
        current_ids = {e.id for e in current}

        to_add = [tid for tid in wanted_ids if tid not in current_ids]
        to_remove = [cid for cid in current_ids if cid not in targets]

        for tid in to_add:
            self.session.add(model(**{own_col: entry.id, other_col: tid}))
        if to_remove:
            await self.session.execute(
                delete(model).where(
                    getattr(model, own_col) == entry.id,
                    getattr(model, other_col).in_(to_remove),
                )
            )
        await self.session.commit()

        linked = sorted((_as_linked(t) for t in targets.values()), key=lambda e: e.title.lower())
        return SetLinksResult(added=len(to_add), removed=len(to_remove), linked=linked)

    async def linked_clients_for_entries(self, entry_ids: List[str]) -> Dict[str, Optional[LinkedEntity]]:
        """First linked client of each project/offer, for table views"""
        clients: Dict[str, Optional[LinkedEntity]] = {eid: None for eid in entry_ids}
        if not entry_ids:
            return clients

        for name, owner_col in (("project_client", "project_id"), ("offer_client", "offer_id")):
            model = LINK_TYPES[name].model
            stmt = (
                select(getattr(model, owner_col), KnowledgeEntry)
                .join(KnowledgeEntry, KnowledgeEntry.id == model.client_id)
                .where(getattr(model, owner_col).in_(entry_ids))
                .order_by(model.created_at, KnowledgeEntry.title)
            )
            result = await self.session.execute(stmt)
            for owner_id, client in result.all():
                if clients.get(owner_id) is None:
                    clients[owner_id] = _as_linked(client)

        return clients

    async def count_links_for_entry(self, entry: KnowledgeEntry) -> int:
        total = 0
        for link_type in link_types_for(entry.category):
            own_column, _ = link_type.side_for(entry.category)
            model = link_type.model
            result = await self.session.execute(
                select(func.count()).select_from(model).where(getattr(model, own_column) == entry.id)
            )
            total += result.scalar_one()
        return total

    async def delete_links_for_entry(self, entry_id: str) -> int:
        """Remove every link touching the entry; commit is left to the caller"""
        removed = 0
        for link_type in LINK_TYPES.values():
            model = link_type.model
            result = await self.session.execute(
                delete(model).where(
                    (getattr(model, link_type.left_column) == entry_id)
                    | (getattr(model, link_type.right_column) == entry_id)
                )
            )
            removed += result.rowcount or 0
        return removed
