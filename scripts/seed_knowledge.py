"""
Script to seed sample knowledge entries.
Run with: python scripts/seed_knowledge.py
"""

import asyncio
import os
import sys
from datetime import date

# Add project root to path
sys.path.append(os.getcwd())

from app.core.logging import get_logger, setup_logging
from app.infra.db import close_db_connection, get_db_context
from app.models.knowledge import KnowledgeCategory, OfferStatus, OfferWorkStatus, ProjectStatus
from app.schemas.knowledge import EntryCreate
from app.services.knowledge_service import KnowledgeService
from app.services.link_service import LinkService

logger = get_logger(__name__)

P, O, M = KnowledgeCategory.PROJECT, KnowledgeCategory.OFFER, KnowledgeCategory.METHOD

SAMPLE_ENTRIES = [
    EntryCreate(
        title="Brand Identity Redesign - TechCorp",
        category=P,
        description="Complete brand identity overhaul including logo, visual system, and brand guidelines for a B2B technology company.",
        tags=["branding", "visual identity", "B2B", "technology"],
        client="TechCorp Inc.",
        project_status=ProjectStatus.COMPLETED,
        start_date=date(2024, 1, 15),
        end_date=date(2024, 3, 20),
        learnings=[
            "Early stakeholder alignment saves significant revision time",
            "B2B tech clients respond well to data-driven design rationale",
            "Brand guidelines should include digital-first applications",
        ],
    ),
    EntryCreate(
        title="Digital Banking Experience - FinServ",
        category=P,
        description="UX/UI design for a mobile banking application, including user research, prototyping, and design system creation.",
        tags=["UX design", "mobile app", "fintech", "design system"],
        client="FinServ Bank",
        project_status=ProjectStatus.COMPLETED,
        start_date=date(2023, 9, 1),
        end_date=date(2024, 2, 28),
        learnings=[
            "Accessibility compliance should be built into the design process from day one",
            "Frequent user testing with real customers reduces late-stage pivots",
            "Design tokens enable faster handoff to development",
        ],
    ),
    EntryCreate(
        title="Sustainability Platform Proposal",
        category=O,
        description="Proposal for designing a sustainability reporting platform for a Fortune 500 company.",
        tags=["sustainability", "enterprise", "platform design", "proposal"],
        client="GreenCorp Industries",
        offer_status=OfferStatus.WON,
        offer_work_status=OfferWorkStatus.DELIVERED,
        date_delivered=date(2024, 6, 10),
        winning_strategy="Strong case studies in sustainability sector. Competitive pricing with clear deliverables. Team expertise highlighted in presentation.",
    ),
    EntryCreate(
        title="E-commerce Redesign Tender",
        category=O,
        description="Response to RFP for redesigning a major retail e-commerce platform.",
        tags=["e-commerce", "retail", "redesign", "RFP"],
        client="RetailMax",
        offer_status=OfferStatus.LOST,
        offer_work_status=OfferWorkStatus.DELIVERED,
        date_delivered=date(2024, 4, 25),
        loss_reasons="Competitor offered lower price. Client preferred agency with more retail-specific portfolio. Timeline proposed was longer than client expected.",
    ),
    EntryCreate(
        title="Healthcare Portal Bid",
        category=O,
        description="Proposal for patient portal redesign for a regional hospital network.",
        tags=["healthcare", "patient portal", "accessibility", "UX"],
        client="Regional Health Network",
        offer_status=OfferStatus.PENDING,
        offer_work_status=OfferWorkStatus.UNDER_DEVELOPMENT,
    ),
    EntryCreate(
        title="Design Sprint Framework",
        category=M,
        description="Our adapted 4-day design sprint methodology for rapid prototyping and validation.",
        tags=["workshop", "rapid prototyping", "methodology", "innovation"],
        use_cases=["Use when client needs quick validation of product concepts or when exploring new directions."],
        steps=[
            "Day 1: Understand & Define - Stakeholder interviews, problem mapping",
            "Day 2: Ideate & Decide - Sketching, voting, concept selection",
            "Day 3: Prototype - High-fidelity prototype creation",
            "Day 4: Test & Learn - User testing and synthesis",
        ],
    ),
    EntryCreate(
        title="Stakeholder Interview Template",
        category=M,
        description="Structured interview guide for gathering requirements and understanding client context.",
        tags=["research", "interviews", "discovery", "template"],
        use_cases=["Apply during project kickoff and discovery phases to align on business goals and constraints."],
        steps=[
            "Prepare context questions based on industry research",
            "Cover business goals, success metrics, constraints",
            "Explore competitor landscape and differentiation",
            "Document and synthesize findings within 24 hours",
        ],
    ),
    EntryCreate(
        title="Service Blueprint Workshop",
        category=M,
        description="Collaborative workshop format for mapping end-to-end service experiences.",
        tags=["service design", "workshop", "mapping", "collaboration"],
        use_cases=["Best for complex service offerings with multiple touchpoints and stakeholders."],
        steps=[
            "Pre-workshop: Gather existing journey maps and data",
            "Session 1: Map customer actions and frontstage interactions",
            "Session 2: Map backstage processes and support systems",
            "Session 3: Identify pain points and opportunities",
            "Post-workshop: Synthesize and present recommendations",
        ],
    ),
]


async def main():
    setup_logging()
    created = 0

    async with get_db_context() as session:
        knowledge = KnowledgeService(session)
        links = LinkService(session)

        for entry_in in SAMPLE_ENTRIES:
            defaults = entry_in.model_dump(exclude={"title", "category"}, exclude_none=True)
            entry, was_created = await knowledge.get_or_create(entry_in.category, entry_in.title, defaults)
            created += int(was_created)

            if entry_in.client:
                client, client_created = await knowledge.get_or_create(
                    KnowledgeCategory.CLIENT,
                    entry_in.client,
                    {"description": f"Client of {entry.title}"},
                )
                created += int(client_created)
                await links.link_entries(entry, client, commit=False)

        await session.commit()

    await close_db_connection()
    logger.info(f"Seeded {created} new knowledge entries")


if __name__ == "__main__":
    asyncio.run(main())
