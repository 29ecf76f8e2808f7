"""
Knowledge Entry Model

One table for every knowledge category; category-specific columns are nullable.
"""

import enum
from datetime import date
from typing import Optional

from sqlalchemy import JSON, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin, str_enum


class KnowledgeCategory(str, enum.Enum):
    PROJECT = "project"
    OFFER = "offer"
    METHOD = "method"
    CLIENT = "client"
    PERSON = "person"


class OfferStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    WON = "won"
    LOST = "lost"


class OfferWorkStatus(str, enum.Enum):
    UNDER_DEVELOPMENT = "under_development"
    DELIVERED = "delivered"


class ProjectStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class KnowledgeEntry(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "knowledge_entries"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    category: Mapped[KnowledgeCategory] = mapped_column(
        str_enum(KnowledgeCategory, "knowledge_category"), nullable=False, index=True
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    full_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[Optional[list]] = mapped_column(JSON, default=list)

    # Project
    client: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    project_status: Mapped[Optional[ProjectStatus]] = mapped_column(
        str_enum(ProjectStatus, "project_status"), nullable=True
    )
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    date_delivered: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    learnings: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    learnings_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    deliverables: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    references_links: Mapped[Optional[list]] = mapped_column(JSON, default=list)

    # Offer
    offer_status: Mapped[Optional[OfferStatus]] = mapped_column(
        str_enum(OfferStatus, "offer_status"), nullable=True, index=True
    )
    offer_work_status: Mapped[Optional[OfferWorkStatus]] = mapped_column(
        str_enum(OfferWorkStatus, "offer_work_status"), nullable=True
    )
    winning_strategy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    loss_reasons: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    win_factors: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    loss_factors: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    source_drive_link: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    source_miro_link: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    # Method
    field: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    domain: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    use_cases: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    steps: Mapped[Optional[list]] = mapped_column(JSON, default=list)

    # Person
    studio: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    position: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Client
    industry: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    @property
    def status(self) -> Optional[str]:
        """Project or offer status, whichever applies"""
        value = self.project_status or self.offer_status
        return value.value if value is not None else None
