"""
Tender Service

Analyzes a tender/RFP against the organization's won offers and methods,
and generates Markdown offer drafts from the resulting strategy.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.logging import get_logger
from app.models.content import OfferTemplate, StyleGuide
from app.models.knowledge import KnowledgeCategory, KnowledgeEntry, OfferStatus
from app.schemas.content import GenerateDraftRequest, TenderAnalysis
from app.services.llm_service import LLMService, as_str_list, extract_json_object, get_llm_service

logger = get_logger(__name__)

ANALYSIS_PROMPT = """You are a senior design consultant and business developer reviewing a tender.

Knowledge base context:

## WON OFFERS
{won_offers}

## METHODS AND TOOLS
{methods}

Extract the tender's challenges, deliverables and requirements, propose a winning strategy
informed by the similar won offers, and recommend methods from the list above.

Reply with a single JSON object:
{{
  "summary": 2-3 sentence summary,
  "challenges": [string],
  "deliverables": [string],
  "requirements": [string],
  "winning_strategy": 2-3 paragraphs,
  "referenced_offers": [IDs of won offers that informed the strategy],
  "referenced_methods": [IDs of recommended methods]
}}
Only use IDs that appear in the context."""

DRAFT_PROMPT = """You are an expert proposal writer for a design consultancy. Write a persuasive
offer that addresses every challenge and requirement, lays out the deliverables, carries the
winning strategy, and draws on the listed methods.
{template}{style}{methods}
Follow the template structure when one is given and match the style guide's tone of voice.
Format the offer in Markdown with clear sections and headers."""


def _bullets(items: List[str], empty: str) -> str:
    return "\n".join(f"- {item}" for item in items) if items else empty


def format_won_offer(entry: KnowledgeEntry) -> str:
    deliverables = ", ".join(entry.deliverables or []) or "N/A"
    return (
        f"[ID: {entry.id}] {entry.title}: {entry.description or ''} | "
        f"Winning strategy: {entry.winning_strategy or 'N/A'} | Deliverables: {deliverables}"
    )


def format_method(entry: KnowledgeEntry) -> str:
    return (
        f"[ID: {entry.id}] {entry.title}: {entry.description or ''} | "
        f"Field: {entry.field or 'N/A'} | Domain: {entry.domain or 'N/A'}"
    )


def fallback_analysis(content: str) -> TenderAnalysis:
    return TenderAnalysis(summary=content[:500], winning_strategy=content)


class TenderService:
    def __init__(self, session: AsyncSession, llm: Optional[LLMService] = None):
        self.session = session
        self.llm = llm or get_llm_service()

    async def _won_offers(self) -> List[KnowledgeEntry]:
        stmt = (
            select(KnowledgeEntry)
            .where(
                KnowledgeEntry.category == KnowledgeCategory.OFFER,
                KnowledgeEntry.offer_status == OfferStatus.WON,
            )
            .order_by(KnowledgeEntry.updated_at.desc())
            .limit(settings.won_offers_context_limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _methods(self) -> List[KnowledgeEntry]:
        stmt = (
            select(KnowledgeEntry)
            .where(KnowledgeEntry.category == KnowledgeCategory.METHOD)
            .order_by(KnowledgeEntry.title)
            .limit(settings.methods_context_limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def analyze_tender(self, tender_content: str) -> TenderAnalysis:
        if not tender_content or not tender_content.strip():
            raise ValidationError("Tender content is required")

        won_offers = await self._won_offers()
        methods = await self._methods()
        logger.info(
            f"Analyzing tender ({len(tender_content)} chars) with "
            f"{len(won_offers)} won offers and {len(methods)} methods"
        )

        system = ANALYSIS_PROMPT.format(
            won_offers="\n".join(format_won_offer(o) for o in won_offers) or "No won offers available",
            methods="\n".join(format_method(m) for m in methods) or "No methods available",
        )
        answer = await self.llm.complete(
            system, f"Analyze this tender document:\n\n{tender_content}", json_mode=True
        )

        data = extract_json_object(answer)
        if data is None:
            logger.warning("Tender analysis returned no JSON object; falling back to raw text")
            return fallback_analysis(answer or tender_content)

        offer_ids = {o.id for o in won_offers}
        method_ids = {m.id for m in methods}
        return TenderAnalysis(
            summary=str(data.get("summary") or ""),
            challenges=as_str_list(data.get("challenges")),
            deliverables=as_str_list(data.get("deliverables")),
            requirements=as_str_list(data.get("requirements")),
            winning_strategy=str(data.get("winning_strategy") or ""),
            referenced_offers=[i for i in dict.fromkeys(as_str_list(data.get("referenced_offers"))) if i in offer_ids],
            referenced_methods=[i for i in dict.fromkeys(as_str_list(data.get("referenced_methods"))) if i in method_ids],
        )

    async def _template_context(self, template_id: Optional[str]) -> str:
        if not template_id:
            return ""
        template = await self.session.get(OfferTemplate, template_id)
        if template is None:
            logger.warning(f"Template {template_id} not found; generating without it")
            return ""

        lines = ["", "## TEMPLATE STRUCTURE TO FOLLOW", f"Name: {template.name}"]
        headings = (template.extracted_structure or {}).get("headings") or []
        if headings:
            lines.append(f"Sections: {', '.join(headings)}")
        if template.placeholders:
            lines.append(f"Placeholders to fill: {', '.join(template.placeholders)}")
        return "\n".join(lines) + "\n"

    async def _style_context(self, style_guide_id: Optional[str]) -> str:
        if not style_guide_id:
            return ""
        guide = await self.session.get(StyleGuide, style_guide_id)
        if guide is None:
            logger.warning(f"Style guide {style_guide_id} not found; generating without it")
            return ""

        return (
            "\n## WRITING STYLE GUIDELINES\n"
            f"Name: {guide.name}\n"
            f"Tone of Voice: {guide.tone_of_voice or 'Professional and engaging'}\n"
            f"Writing Guidelines: {guide.writing_guidelines or 'Clear, concise, and compelling'}\n"
        )

    async def _methods_context(self, method_ids: List[str]) -> str:
        if not method_ids:
            return ""
        result = await self.session.execute(
            select(KnowledgeEntry).where(
                KnowledgeEntry.id.in_(method_ids),
                KnowledgeEntry.category == KnowledgeCategory.METHOD,
            )
        )
        methods = list(result.scalars().all())
        if not methods:
            return ""
        lines = "\n".join(f"- {m.title}: {m.description or ''}" for m in methods)
        return f"\n## METHODS TO INCORPORATE\n{lines}\n"

    async def generate_offer_draft(self, request: GenerateDraftRequest) -> str:
        """Markdown offer text for an analyzed tender"""
        system = DRAFT_PROMPT.format(
            template=await self._template_context(request.template_id),
            style=await self._style_context(request.style_guide_id),
            methods=await self._methods_context(request.referenced_methods),
        )
        user = (
            "Write an offer proposal from this context.\n\n"
            f"## TENDER SUMMARY\n{request.tender_summary or 'No summary provided'}\n\n"
            f"## CLIENT CHALLENGES\n{_bullets(request.challenges, 'No challenges specified')}\n\n"
            f"## REQUIRED DELIVERABLES\n{_bullets(request.deliverables, 'No deliverables specified')}\n\n"
            f"## REQUIREMENTS\n{_bullets(request.requirements, 'No requirements specified')}\n\n"
            f"## WINNING STRATEGY\n{request.winning_strategy or 'No strategy provided'}"
        )

        logger.info("Generating offer draft")
        draft = await self.llm.complete(system, user)
        logger.info(f"Offer draft generated ({len(draft)} chars)")
        return draft
