"""
Content Studio Models

Drafts generated from tender analyses, their version history, and the
templates / style guides that steer generation.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class DraftStatus(str, enum.Enum):
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    PUBLISHED = "published"


class ContentDraft(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "content_drafts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=DraftStatus.DRAFT.value, nullable=False)

    # Tender analysis
    tender_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    challenges: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    deliverables: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    requirements: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    winning_strategy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    referenced_offers: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    referenced_methods: Mapped[Optional[list]] = mapped_column(JSON, default=list)

    draft_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    selected_template_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("offer_templates.id", ondelete="SET NULL"), nullable=True
    )
    selected_style_guide_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("style_guides.id", ondelete="SET NULL"), nullable=True
    )

    created_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # Advisory editing lock
    currently_editing_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    currently_editing_since: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    published_offer_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("knowledge_entries.id", ondelete="SET NULL"), nullable=True
    )


class ContentDraftVersion(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "content_draft_versions"
    __table_args__ = (UniqueConstraint("draft_id", "version_number"),)

    draft_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("content_drafts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    change_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    changed_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class OfferTemplate(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "offer_templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    placeholders: Mapped[Optional[list]] = mapped_column(JSON, default=list)
    # {"headings": [...], "section_count": n, "sections": [...]}
    extracted_structure: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)


class StyleGuide(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "style_guides"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tone_of_voice: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    writing_guidelines: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    brand_colors: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    typography_rules: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    file_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
