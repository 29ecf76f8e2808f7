"""
Document ingestion endpoints
"""

from fastapi import APIRouter, BackgroundTasks, File, UploadFile, status
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.deps import DocumentsQueueDep, SessionDep
from app.core.logging import get_logger
from app.schemas.documents import (
    FetchUrlRequest,
    FetchUrlResponse,
    GoogleDriveFile,
    GoogleDriveRequest,
    ParsedDocument,
    ParsingJobResponse,
)
from app.services.documents.fetcher import fetch_url_content
from app.services.documents.google_drive import fetch_google_drive
from app.services.documents.parser import parse_document
from app.services.documents.parsing_service import ParsingJobService, process_parsing_job

router = APIRouter()

logger = get_logger(__name__)


@router.post("/parse", response_model=ParsedDocument)
async def parse_upload(file: UploadFile = File(...)):
    """Extract text from an uploaded document synchronously"""
    data = await file.read()
    return await run_in_threadpool(parse_document, data, file.filename or "document", file.content_type)


@router.post("/jobs", response_model=ParsingJobResponse, status_code=status.HTTP_202_ACCEPTED)
async def create_parsing_job(
    db: SessionDep,
    background_tasks: BackgroundTasks,
    queue: DocumentsQueueDep,
    file: UploadFile = File(...),
):
    """Store the upload and parse it outside the request; poll the job for the result"""
    data = await file.read()
    job = await ParsingJobService(db).create_job(file.filename or "document", file.content_type, data)

    if settings.parse_in_background:
        queue.enqueue("app.workers.jobs.parse_document.parse_document", job.id)
    else:
        background_tasks.add_task(process_parsing_job, job.id)

    return job


@router.get("/jobs/{job_id}", response_model=ParsingJobResponse)
async def get_parsing_job(job_id: str, db: SessionDep):
    return await ParsingJobService(db).get_job(job_id)


@router.post("/fetch-url", response_model=FetchUrlResponse)
async def fetch_url(body: FetchUrlRequest):
    return await fetch_url_content(str(body.url))


@router.post("/google-drive", response_model=GoogleDriveFile)
async def fetch_drive_file(body: GoogleDriveRequest):
    """Download or export a Drive file with the caller's Google access token"""
    return await fetch_google_drive(body.url, body.access_token)
