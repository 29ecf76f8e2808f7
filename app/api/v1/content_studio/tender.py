"""
Content Studio workflow endpoints: tender analysis and draft generation
"""

from fastapi import APIRouter

from app.core.deps import LLMDep, SessionDep
from app.schemas.content import AnalyzeTenderRequest, GenerateDraftRequest, GeneratedDraft, TenderAnalysis
from app.services.content_studio.tender_service import TenderService

router = APIRouter()


@router.post("/analyze-tender", response_model=TenderAnalysis)
async def analyze_tender(body: AnalyzeTenderRequest, db: SessionDep, llm: LLMDep):
    return await TenderService(db, llm).analyze_tender(body.tender_content)


@router.post("/generate", response_model=GeneratedDraft)
async def generate_draft(body: GenerateDraftRequest, db: SessionDep, llm: LLMDep):
    """Generate offer text without saving it"""
    return GeneratedDraft(draft=await TenderService(db, llm).generate_offer_draft(body))
