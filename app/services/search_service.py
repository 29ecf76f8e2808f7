"""
Smart Search Service

Answers free-text questions from the knowledge base and resolves the
[REF:<id>] citations in the answer.
"""

import re
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.logging import get_logger
from app.models.knowledge import KnowledgeEntry
from app.schemas.links import LinkedEntity
from app.schemas.search import AskResponse
from app.services.llm_service import LLMService, get_llm_service
from app.services.rag_service import KnowledgeIndex

logger = get_logger(__name__)

EMPTY_KNOWLEDGE_BASE_ANSWER = "The knowledge base is currently empty. Please add some entries first."

CITATION_PATTERN = re.compile(r"\[REF:([a-f0-9-]+)\]", re.IGNORECASE)

SYSTEM_PROMPT = """You are a senior design consultant answering a colleague's question from the
company knowledge base of projects, offers (won and lost), methods, clients and people.

Every claim drawn from the knowledge base must cite its entry as [REF:<entry id>], using
the exact ID shown in the context. Be concise, connect related entries where useful, and
say so plainly when the knowledge base does not cover the question."""


def format_entry_for_context(entry: KnowledgeEntry) -> str:
    parts = [f"[ID:{entry.id}] {entry.title} ({entry.category.value})"]
    if entry.description:
        parts.append(f"Description: {entry.description}")
    if entry.full_description:
        parts.append(f"Details: {entry.full_description[:500]}...")
    labelled = (
        ("Client", entry.client),
        ("Field", entry.field),
        ("Domain", entry.domain),
        ("Project Status", entry.project_status.value if entry.project_status else None),
        ("Offer Status", entry.offer_status.value if entry.offer_status else None),
        ("Position", entry.position),
        ("Studio", entry.studio),
        ("Industry", entry.industry),
    )
    parts.extend(f"{label}: {value}" for label, value in labelled if value)
    if entry.deliverables:
        parts.append(f"Deliverables: {', '.join(entry.deliverables)}")
    if entry.learnings:
        parts.append(f"Learnings: {'; '.join(entry.learnings)}")
    if entry.win_factors:
        parts.append(f"Win Factors: {', '.join(entry.win_factors)}")
    if entry.loss_factors:
        parts.append(f"Loss Factors: {', '.join(entry.loss_factors)}")
    if entry.winning_strategy:
        parts.append(f"Winning Strategy: {entry.winning_strategy}")
    if entry.loss_reasons:
        parts.append(f"Loss Reasons: {entry.loss_reasons}")
    return "\n".join(parts)


def extract_citation_ids(answer: str) -> List[str]:
    """Cited IDs in order of first appearance"""
    return list(dict.fromkeys(m.lower() for m in CITATION_PATTERN.findall(answer)))


class SearchService:
    def __init__(
        self,
        session: AsyncSession,
        llm: Optional[LLMService] = None,
        index: Optional[KnowledgeIndex] = None,
    ):
        self.session = session
        self.llm = llm or get_llm_service()
        self.index = index

    async def _context_entries(self, question: str) -> List[KnowledgeEntry]:
        if settings.enable_vector_search and self.index is not None:
            try:
                ids = await self.index.search(question)
            except Exception as e:
                logger.warning(f"Vector search failed, using full knowledge base: {e}")
            else:
                if ids:
                    result = await self.session.execute(
                        select(KnowledgeEntry).where(KnowledgeEntry.id.in_(ids))
                    )
                    by_id = {e.id: e for e in result.scalars().all()}
                    entries = [by_id[i] for i in ids if i in by_id]
                    if entries:
                        return entries

        result = await self.session.execute(select(KnowledgeEntry))
        return list(result.scalars().all())

    async def ask(self, question: str) -> AskResponse:
        if not question or not question.strip():
            raise ValidationError("Question is required")
        question = question.strip()

        entries = await self._context_entries(question)
        if not entries:
            return AskResponse(answer=EMPTY_KNOWLEDGE_BASE_ANSWER, citations=[], confidence="low")

        logger.info(f"Smart search over {len(entries)} entries")
        context = "\n\n---\n\n".join(format_entry_for_context(e) for e in entries)
        user_prompt = (
            f"KNOWLEDGE BASE:\n{context}\n\n---\n\n"
            f"QUESTION: {question}\n\n"
            "Answer from the knowledge base above, citing sources as [REF:entry_id]."
        )

        answer = await self.llm.complete(SYSTEM_PROMPT, user_prompt)
        answer = answer or "No response generated"

        by_id = {e.id.lower(): e for e in entries}
        citations = [
            LinkedEntity(id=by_id[cid].id, title=by_id[cid].title, category=by_id[cid].category)
            for cid in extract_citation_ids(answer)
            if cid in by_id
        ]
        logger.info(f"Smart search answer cites {len(citations)} entries")

        return AskResponse(
            answer=answer,
            citations=citations,
            confidence="high" if citations else "medium",
        )
