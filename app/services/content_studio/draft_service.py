"""
Draft Service

Stores generated offer drafts with their version history, publishes them as
offer entries, and manages the advisory editing lock.

Version numbers are assigned here, inside the saving transaction, as
max(existing) + 1. The unique (draft_id, version_number) constraint turns a
concurrent save into an IntegrityError, and the save is retried with a fresh
number.
"""

from datetime import timedelta
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.time import ensure_utc, is_recent, utcnow
from app.models.content import ContentDraft, ContentDraftVersion, DraftStatus, OfferTemplate, StyleGuide
from app.models.knowledge import (
    KnowledgeCategory,
    KnowledgeEntry,
    OfferStatus,
    OfferWorkStatus,
)
from app.schemas.content import (
    CreateDraftRequest,
    DraftUpdate,
    GenerateDraftRequest,
    LockStatus,
    PublishRequest,
)
from app.services.content_studio.tender_service import TenderService
from app.services.link_service import LinkService
from app.services.llm_service import LLMService

logger = get_logger(__name__)

INITIAL_VERSION_SUMMARY = "Initial AI-generated draft"


def lock_timeout() -> timedelta:
    return timedelta(minutes=settings.editing_lock_timeout_minutes)


def lock_state(draft: ContentDraft, editor: Optional[str]) -> LockStatus:
    active = bool(draft.currently_editing_by) and is_recent(
        draft.currently_editing_since, lock_timeout()
    )
    return LockStatus(
        editor=draft.currently_editing_by,
        since=ensure_utc(draft.currently_editing_since),
        active=active,
        held_by_other=active and draft.currently_editing_by != editor,
    )


class DraftService:
    def __init__(self, session: AsyncSession, llm: Optional[LLMService] = None):
        self.session = session
        self.llm = llm

    # Drafts ---------------------------------------------------------------

    async def list_drafts(self) -> List[ContentDraft]:
        result = await self.session.execute(
            select(ContentDraft).order_by(ContentDraft.updated_at.desc())
        )
        return list(result.scalars().all())

    async def get_draft(self, draft_id: str) -> ContentDraft:
        draft = await self.session.get(ContentDraft, draft_id)
        if draft is None:
            raise NotFoundError("Draft not found", details={"id": draft_id})
        return draft

    async def _existing_id(self, model, object_id: Optional[str]) -> Optional[str]:
        if not object_id:
            return None
        return object_id if await self.session.get(model, object_id) is not None else None

    async def create_draft(self, request: CreateDraftRequest, editor: str) -> ContentDraft:
        """Generate an offer from the analysis and strategy, then store it as version 1"""
        title = request.title.strip()
        strategy = request.winning_strategy.strip()
        if not title:
            raise ValidationError("Title is required")
        if not strategy:
            raise ValidationError("Winning strategy is required")

        analysis = request.analysis
        content = await TenderService(self.session, self.llm).generate_offer_draft(
            GenerateDraftRequest(
                tender_summary=analysis.summary,
                challenges=analysis.challenges,
                deliverables=analysis.deliverables,
                requirements=analysis.requirements,
                winning_strategy=strategy,
                template_id=request.template_id,
                style_guide_id=request.style_guide_id,
                referenced_methods=analysis.referenced_methods,
            )
        )

        draft = ContentDraft(
            title=title,
            status=DraftStatus.DRAFT.value,
            tender_summary=analysis.summary,
            challenges=analysis.challenges,
            deliverables=analysis.deliverables,
            requirements=analysis.requirements,
            winning_strategy=strategy,
            referenced_offers=analysis.referenced_offers,
            referenced_methods=analysis.referenced_methods,
            draft_content=content,
            selected_template_id=await self._existing_id(OfferTemplate, request.template_id),
            selected_style_guide_id=await self._existing_id(StyleGuide, request.style_guide_id),
            created_by=editor,
        )
        self.session.add(draft)
        await self.session.flush()

        self.session.add(
            ContentDraftVersion(
                draft_id=draft.id,
                version_number=1,
                content=content,
                change_summary=INITIAL_VERSION_SUMMARY,
                changed_by=editor,
            )
        )
        await self.session.commit()
        await self.session.refresh(draft)
        logger.info(f"Created draft {draft.id} '{draft.title}'")
        return draft

    async def delete_draft(self, draft_id: str) -> None:
        draft = await self.get_draft(draft_id)
        await self.session.execute(
            delete(ContentDraftVersion).where(ContentDraftVersion.draft_id == draft_id)
        )
        await self.session.delete(draft)
        await self.session.commit()
        logger.info(f"Deleted draft {draft_id}")

    async def _next_version_number(self, draft_id: str) -> int:
        result = await self.session.execute(
            select(func.max(ContentDraftVersion.version_number)).where(
                ContentDraftVersion.draft_id == draft_id
            )
        )
        current = result.scalar()
        return (current or 0) + 1

    async def save_draft(self, draft_id: str, update_in: DraftUpdate, editor: str) -> ContentDraft:
        """Apply edits and record the resulting content as the next version"""
        draft = await self.get_draft(draft_id)
        if draft.status == DraftStatus.PUBLISHED.value:
            raise ConflictError("Published drafts cannot be edited")
        if update_in.title is not None and not update_in.title.strip():
            raise ValidationError("Title must not be blank")

        for attempt in range(1, settings.version_save_retries + 1):
            version_number = await self._next_version_number(draft_id)
            content = update_in.content if update_in.content is not None else (draft.draft_content or "")

            self.session.add(
                ContentDraftVersion(
                    draft_id=draft_id,
                    version_number=version_number,
                    content=content,
                    change_summary=update_in.change_summary or f"Version {version_number} saved",
                    changed_by=editor,
                )
            )
            if update_in.title is not None:
                draft.title = update_in.title.strip()
            if update_in.content is not None:
                draft.draft_content = update_in.content
            if update_in.winning_strategy is not None:
                draft.winning_strategy = update_in.winning_strategy

            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                logger.warning(
                    f"Version {version_number} of draft {draft_id} taken by a concurrent save "
                    f"(attempt {attempt})"
                )
                await self.session.refresh(draft)
                continue

            await self.session.refresh(draft)
            logger.info(f"Saved draft {draft_id} as version {version_number}")
            return draft

        raise ConflictError("Could not save draft version, please retry")

    async def set_status(self, draft_id: str, status: str) -> ContentDraft:
        draft = await self.get_draft(draft_id)
        if status == DraftStatus.PUBLISHED.value:
            raise ValidationError("Use publish to publish a draft")
        if draft.status == DraftStatus.PUBLISHED.value:
            raise ConflictError("Draft is already published")

        draft.status = DraftStatus(status).value
        await self.session.commit()
        await self.session.refresh(draft)
        return draft

    # Versions -------------------------------------------------------------

    async def list_versions(self, draft_id: str) -> List[ContentDraftVersion]:
        await self.get_draft(draft_id)
        result = await self.session.execute(
            select(ContentDraftVersion)
            .where(ContentDraftVersion.draft_id == draft_id)
            .order_by(ContentDraftVersion.version_number.desc())
        )
        return list(result.scalars().all())

    async def get_version(self, draft_id: str, version_number: int) -> ContentDraftVersion:
        result = await self.session.execute(
            select(ContentDraftVersion).where(
                ContentDraftVersion.draft_id == draft_id,
                ContentDraftVersion.version_number == version_number,
            )
        )
        version = result.scalars().first()
        if version is None:
            raise NotFoundError(
                "Draft version not found",
                details={"draft_id": draft_id, "version_number": version_number},
            )
        return version

    async def restore_version(self, draft_id: str, version_number: int, editor: str) -> ContentDraft:
        version = await self.get_version(draft_id, version_number)
        return await self.save_draft(
            draft_id,
            DraftUpdate(
                content=version.content,
                change_summary=f"Restored from version {version_number}",
            ),
            editor,
        )

    # Publishing -----------------------------------------------------------

    async def publish_draft(
        self, draft_id: str, request: PublishRequest, editor: str
    ) -> tuple[ContentDraft, KnowledgeEntry, int]:
        """Create an offer entry from the draft; returns (draft, offer, linked method count)"""
        draft = await self.get_draft(draft_id)
        if draft.status == DraftStatus.PUBLISHED.value or draft.published_offer_id:
            raise ConflictError(
                "Draft is already published", details={"offer_id": draft.published_offer_id}
            )

        title = (request.title or draft.title).strip()
        content = request.content if request.content is not None else (draft.draft_content or "")
        if not title:
            raise ValidationError("Title is required")

        offer = KnowledgeEntry(
            title=title,
            category=KnowledgeCategory.OFFER,
            description=content[:500],
            full_description=content,
            offer_status=OfferStatus.PENDING,
            offer_work_status=OfferWorkStatus.UNDER_DEVELOPMENT,
            winning_strategy=draft.winning_strategy,
            deliverables=list(draft.deliverables or []),
        )
        self.session.add(offer)
        await self.session.flush()

        links = LinkService(self.session)
        linked = 0
        if draft.referenced_methods:
            result = await self.session.execute(
                select(KnowledgeEntry).where(
                    KnowledgeEntry.id.in_(draft.referenced_methods),
                    KnowledgeEntry.category == KnowledgeCategory.METHOD,
                )
            )
            for method in result.scalars().all():
                _, created = await links.link_entries(offer, method, commit=False)
                linked += int(created)

        if content != (draft.draft_content or ""):
            self.session.add(
                ContentDraftVersion(
                    draft_id=draft_id,
                    version_number=await self._next_version_number(draft_id),
                    content=content,
                    change_summary="Published",
                    changed_by=editor,
                )
            )

        draft.title = title
        draft.draft_content = content
        draft.status = DraftStatus.PUBLISHED.value
        draft.published_offer_id = offer.id

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise ConflictError("Draft changed while publishing, please retry")
        await self.session.refresh(draft)
        await self.session.refresh(offer)
        logger.info(f"Published draft {draft_id} as offer {offer.id} by {editor} ({linked} method link(s))")
        return draft, offer, linked

    # Editing lock ---------------------------------------------------------

    async def _write_lock(self, draft: ContentDraft, editor: Optional[str], since) -> None:
        # Lock heartbeats must not bump updated_at
        await self.session.execute(
            update(ContentDraft)
            .where(ContentDraft.id == draft.id)
            .values(
                currently_editing_by=editor,
                currently_editing_since=since,
                updated_at=ContentDraft.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        await self.session.refresh(draft)

    async def lock_status(self, draft_id: str, editor: str) -> LockStatus:
        draft = await self.get_draft(draft_id)
        return lock_state(draft, editor)

    async def claim_lock(self, draft_id: str, editor: str) -> LockStatus:
        """
        Record `editor` as the current editor. Last write wins; when another
        editor held an active lock the result names them so the client can warn.
        """
        draft = await self.get_draft(draft_id)
        previous = lock_state(draft, editor)

        await self._write_lock(draft, editor, utcnow())

        status = lock_state(draft, editor)
        if previous.held_by_other:
            status.previous_editor = previous.editor
            logger.info(f"Draft {draft_id}: {editor} took over editing from {previous.editor}")
        return status

    async def refresh_lock(self, draft_id: str, editor: str) -> LockStatus:
        draft = await self.get_draft(draft_id)
        if draft.currently_editing_by != editor:
            raise ConflictError(
                "Editing lock is not held by you",
                details={"editor": draft.currently_editing_by},
            )
        await self._write_lock(draft, editor, utcnow())
        return lock_state(draft, editor)

    async def release_lock(self, draft_id: str, editor: str) -> LockStatus:
        """Clear the lock if the caller holds it or it has gone stale"""
        draft = await self.get_draft(draft_id)
        state = lock_state(draft, editor)
        if draft.currently_editing_by and (draft.currently_editing_by == editor or not state.active):
            await self._write_lock(draft, None, None)
        return lock_state(draft, editor)
