"""
AI Summarization Schemas
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints, field_validator

from app.models.knowledge import KnowledgeCategory, OfferStatus, ProjectStatus
from app.schemas.knowledge import TITLE_MAX_LENGTH, EntryResponse, require_title
from app.schemas.links import LinkedEntity

# Clients and methods become entry titles on import
EntryName = Annotated[str, StringConstraints(max_length=TITLE_MAX_LENGTH)]


class AnalyzeEntryRequest(BaseModel):
    file_contents: List[str] = []
    pasted_content: Optional[str] = None
    links: List[str] = []
    suggested_category: Optional[KnowledgeCategory] = None


class EntrySummary(BaseModel):
    category: KnowledgeCategory = KnowledgeCategory.PROJECT
    title: str = Field("Untitled Entry", max_length=TITLE_MAX_LENGTH)
    description: str = ""
    client: Optional[EntryName] = None
    tags: List[str] = []
    learnings: List[str] = []
    deliverables: List[str] = []
    methods: List[EntryName] = []
    project_status: ProjectStatus = ProjectStatus.COMPLETED
    offer_status: OfferStatus = OfferStatus.DRAFT
    win_factors: List[str] = []
    loss_factors: List[str] = []
    use_cases: List[str] = []
    steps: List[str] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return require_title(v)


class SummarizeProjectRequest(BaseModel):
    drive_content: Optional[str] = None
    miro_content: Optional[str] = None


class ProjectSummary(BaseModel):
    title: str = Field("Untitled Project", max_length=TITLE_MAX_LENGTH)
    description: str = ""
    full_description: str = ""
    client: Optional[EntryName] = None
    deliverables: List[str] = []
    methods: List[EntryName] = []
    tags: List[str] = []
    learnings: List[str] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return require_title(v)


class ImportProjectRequest(ProjectSummary):
    source_drive_link: Optional[str] = None
    source_miro_link: Optional[str] = None


class ImportResult(BaseModel):
    entry: EntryResponse
    client: Optional[LinkedEntity] = None
    methods: List[LinkedEntity] = Field(default_factory=list)
    created_entities: List[LinkedEntity] = Field(default_factory=list)
