"""
Document Ingestion Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl

from app.models.document import ParsingJobStatus


class DocumentMetadata(BaseModel):
    filename: str
    filetype: str
    page_count: Optional[int] = None
    element_count: int = 0


class ParsedDocument(BaseModel):
    content: str
    metadata: DocumentMetadata


class ParsingJobResponse(BaseModel):
    id: str
    file_name: str
    mime_type: Optional[str] = None
    status: ParsingJobStatus
    content: Optional[str] = None
    error: Optional[str] = None
    metadata: Optional[DocumentMetadata] = Field(None, validation_alias="job_metadata")
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class FetchUrlRequest(BaseModel):
    url: HttpUrl


class FetchUrlResponse(BaseModel):
    url: str
    title: Optional[str] = None
    content: str
    content_type: Optional[str] = None
    truncated: bool = False


class GoogleDriveRequest(BaseModel):
    url: str
    access_token: str


class GoogleDriveFile(BaseModel):
    file_id: str
    name: str
    mime_type: str
    original_mime_type: str
    content: Optional[str] = None
    # Base64 payload for binary exports
    data: Optional[str] = None
    is_binary: bool = False
