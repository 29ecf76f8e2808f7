"""
AI summarization and import endpoints
"""

from fastapi import APIRouter, status

from app.core.deps import LLMDep, SessionDep
from app.schemas.ai import (
    AnalyzeEntryRequest,
    EntrySummary,
    ImportProjectRequest,
    ImportResult,
    ProjectSummary,
    SummarizeProjectRequest,
)
from app.services.analysis_service import AnalysisService
from app.services.import_service import ImportService

router = APIRouter()


@router.post("/analyze-entry", response_model=EntrySummary)
async def analyze_entry(body: AnalyzeEntryRequest, llm: LLMDep):
    """Classify and summarize pasted text, file contents and links"""
    return await AnalysisService(llm).analyze_entry(body)


@router.post("/summarize-project", response_model=ProjectSummary)
async def summarize_project(body: SummarizeProjectRequest, llm: LLMDep):
    return await AnalysisService(llm).summarize_project(body)


@router.post("/import-entry", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_entry(summary: EntrySummary, db: SessionDep):
    """Save a reviewed entry summary, creating and linking its client and methods"""
    return await ImportService(db).import_entry(summary)


@router.post("/import-project", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_project(summary: ImportProjectRequest, db: SessionDep):
    return await ImportService(db).import_project(summary)
