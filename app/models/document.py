"""
Document Parsing Job Model
"""

import enum
from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, str_enum


class ParsingJobStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class DocumentParsingJob(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "document_parsing_jobs"

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    file_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    status: Mapped[ParsingJobStatus] = mapped_column(
        str_enum(ParsingJobStatus, "parsing_job_status"),
        default=ParsingJobStatus.PENDING,
        nullable=False,
        index=True,
    )
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    job_metadata: Mapped[Optional[dict]] = mapped_column("metadata", JSON, nullable=True)
