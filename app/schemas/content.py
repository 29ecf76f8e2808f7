"""
Content Studio Schemas
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.content import DraftStatus


class AnalyzeTenderRequest(BaseModel):
    tender_content: str


class TenderAnalysis(BaseModel):
    summary: str = ""
    challenges: List[str] = []
    deliverables: List[str] = []
    requirements: List[str] = []
    winning_strategy: str = ""
    referenced_offers: List[str] = []
    referenced_methods: List[str] = []


class GenerateDraftRequest(BaseModel):
    tender_summary: Optional[str] = None
    challenges: List[str] = []
    deliverables: List[str] = []
    requirements: List[str] = []
    winning_strategy: Optional[str] = None
    template_id: Optional[str] = None
    style_guide_id: Optional[str] = None
    referenced_methods: List[str] = []


class GeneratedDraft(BaseModel):
    draft: str


class CreateDraftRequest(BaseModel):
    title: str = Field(..., max_length=255)
    analysis: TenderAnalysis
    winning_strategy: str
    template_id: Optional[str] = None
    style_guide_id: Optional[str] = None


class DraftUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    winning_strategy: Optional[str] = None
    change_summary: Optional[str] = None


class DraftStatusUpdate(BaseModel):
    status: Literal["draft", "review", "approved"]


class DraftResponse(BaseModel):
    id: str
    title: str
    status: DraftStatus
    tender_summary: Optional[str] = None
    challenges: List[str] = []
    deliverables: List[str] = []
    requirements: List[str] = []
    winning_strategy: Optional[str] = None
    draft_content: Optional[str] = None
    selected_template_id: Optional[str] = None
    selected_style_guide_id: Optional[str] = None
    referenced_offers: List[str] = []
    referenced_methods: List[str] = []
    created_by: Optional[str] = None
    currently_editing_by: Optional[str] = None
    currently_editing_since: Optional[datetime] = None
    published_offer_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator(
        "challenges", "deliverables", "requirements", "referenced_offers", "referenced_methods",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v):
        return v if v is not None else []


class DraftSummary(BaseModel):
    id: str
    title: str
    status: DraftStatus
    tender_summary: Optional[str] = None
    currently_editing_by: Optional[str] = None
    published_offer_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VersionResponse(BaseModel):
    id: str
    draft_id: str
    version_number: int
    content: str
    change_summary: Optional[str] = None
    changed_by: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class VersionSummary(BaseModel):
    version_number: int
    change_summary: Optional[str] = None
    changed_by: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class LockStatus(BaseModel):
    editor: Optional[str] = None
    since: Optional[datetime] = None
    active: bool = False
    held_by_other: bool = False
    # Set by a claim that took over another editor's active lock
    previous_editor: Optional[str] = None


class PublishRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None


class PublishResult(BaseModel):
    draft: DraftResponse
    offer_id: str
    linked_methods: int
