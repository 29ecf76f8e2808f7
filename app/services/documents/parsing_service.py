"""
Parsing Job Service

Uploads are stored, recorded as pending jobs, and parsed outside the
request (FastAPI BackgroundTasks or the RQ worker).
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import AppError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.infra.db import get_db_context
from app.infra.storage import read_upload, save_upload
from app.models.document import DocumentParsingJob, ParsingJobStatus
from app.services.documents.parser import detect_type, parse_document

logger = get_logger(__name__)

UPLOAD_FOLDER = "documents"


class ParsingJobService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_job(self, file_name: str, mime_type: Optional[str], data: bytes) -> DocumentParsingJob:
        if not data:
            raise ValidationError("Uploaded file is empty")
        if len(data) > settings.max_upload_size:
            raise ValidationError(f"File exceeds the {settings.max_upload_size_mb} MB limit")

        path = save_upload(UPLOAD_FOLDER, file_name, data)
        job = DocumentParsingJob(
            file_name=file_name,
            mime_type=detect_type(file_name, mime_type),
            file_path=str(path),
            status=ParsingJobStatus.PENDING,
        )
        self.session.add(job)
        await self.session.commit()
        await self.session.refresh(job)
        logger.info(f"Created parsing job {job.id} for {file_name}")
        return job

    async def get_job(self, job_id: str) -> DocumentParsingJob:
        job = await self.session.get(DocumentParsingJob, job_id)
        if job is None:
            raise NotFoundError("Parsing job not found", details={"id": job_id})
        return job

    async def run_job(self, job_id: str) -> DocumentParsingJob:
        """Parse the stored upload and record the outcome on the job"""
        job = await self.get_job(job_id)
        job.status = ParsingJobStatus.PROCESSING
        await self.session.commit()

        try:
            parsed = parse_document(read_upload(job.file_path), job.file_name, job.mime_type)
        except AppError as e:
            job.status = ParsingJobStatus.FAILED
            job.error = e.message
        except Exception as e:
            logger.exception(f"Parsing job {job_id} crashed")
            job.status = ParsingJobStatus.FAILED
            job.error = str(e) or e.__class__.__name__
        else:
            job.status = ParsingJobStatus.COMPLETED
            job.content = parsed.content
            job.job_metadata = parsed.metadata.model_dump()

        await self.session.commit()
        await self.session.refresh(job)
        logger.info(f"Parsing job {job_id} finished: {job.status.value}")
        return job


async def process_parsing_job(job_id: str) -> None:
    """Entry point for BackgroundTasks and the RQ job; opens its own session"""
    async with get_db_context() as session:
        await ParsingJobService(session).run_job(job_id)
