"""
Knowledge Entry Schemas
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.models.knowledge import KnowledgeCategory, OfferStatus, OfferWorkStatus, ProjectStatus

LIST_FIELDS = (
    "tags",
    "learnings",
    "deliverables",
    "references_links",
    "win_factors",
    "loss_factors",
    "use_cases",
    "steps",
)

TITLE_MAX_LENGTH = 255


def require_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Title must not be blank")
    return v


class EntryFields(BaseModel):
    description: Optional[str] = None
    full_description: Optional[str] = None
    tags: Optional[List[str]] = None

    # Project
    client: Optional[str] = None
    project_status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    date_delivered: Optional[date] = None
    learnings: Optional[List[str]] = None
    learnings_text: Optional[str] = None
    deliverables: Optional[List[str]] = None
    references_links: Optional[List[str]] = None

    # Offer
    offer_status: Optional[OfferStatus] = None
    offer_work_status: Optional[OfferWorkStatus] = None
    winning_strategy: Optional[str] = None
    loss_reasons: Optional[str] = None
    win_factors: Optional[List[str]] = None
    loss_factors: Optional[List[str]] = None
    source_drive_link: Optional[str] = None
    source_miro_link: Optional[str] = None

    # Method
    field: Optional[str] = None
    domain: Optional[str] = None
    use_cases: Optional[List[str]] = None
    steps: Optional[List[str]] = None

    # Person
    studio: Optional[str] = None
    position: Optional[str] = None

    # Client
    industry: Optional[str] = None


class EntryCreate(EntryFields):
    title: str = Field(..., max_length=TITLE_MAX_LENGTH)
    category: KnowledgeCategory

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return require_title(v)


class EntryUpdate(EntryFields):
    title: Optional[str] = Field(None, max_length=TITLE_MAX_LENGTH)
    category: Optional[KnowledgeCategory] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return require_title(v)


class EntryResponse(EntryFields):
    id: str
    title: str
    category: KnowledgeCategory
    status: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    tags: List[str] = []
    learnings: List[str] = []
    deliverables: List[str] = []
    references_links: List[str] = []
    win_factors: List[str] = []
    loss_factors: List[str] = []
    use_cases: List[str] = []
    steps: List[str] = []

    model_config = {"from_attributes": True}

    @field_validator(*LIST_FIELDS, mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v if v is not None else []


class EntryListResponse(BaseModel):
    items: List[EntryResponse]
    total: int
    limit: int
    offset: int


class EntryFilters(BaseModel):
    search: Optional[str] = None
    categories: List[KnowledgeCategory] = []
    tags: List[str] = []
    status: Optional[str] = None
    limit: int = Field(100, ge=1, le=500)
    offset: int = Field(0, ge=0)


class KnowledgeStats(BaseModel):
    total: int
    projects: int
    offers: int
    methods: int
    clients: int
    people: int
    won_offers: int
    lost_offers: int


class TagList(BaseModel):
    tags: List[str]
