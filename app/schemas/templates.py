"""
Offer Template and Style Guide Schemas
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class TemplateStructure(BaseModel):
    headings: List[str] = []
    section_count: int = 0
    sections: List[str] = []


class ParsedTemplate(BaseModel):
    content: str
    placeholders: List[str] = []
    structure: TemplateStructure


class TemplateResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    file_name: str
    file_url: str
    placeholders: List[str] = []
    extracted_structure: Optional[TemplateStructure] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("placeholders", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v if v is not None else []


class StyleGuideBase(BaseModel):
    description: Optional[str] = None
    tone_of_voice: Optional[str] = None
    writing_guidelines: Optional[str] = None
    brand_colors: Optional[Any] = None
    typography_rules: Optional[Any] = None


class StyleGuideCreate(StyleGuideBase):
    name: str = Field(..., min_length=1, max_length=255)


class StyleGuideUpdate(StyleGuideBase):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class StyleGuideResponse(StyleGuideBase):
    id: str
    name: str
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
