"""
Smart Search Schemas
"""

from typing import List, Literal

from pydantic import BaseModel, Field

from app.schemas.links import LinkedEntity


class AskRequest(BaseModel):
    question: str = Field(..., max_length=4000)


class AskResponse(BaseModel):
    answer: str
    citations: List[LinkedEntity] = []
    confidence: Literal["high", "medium", "low"]


class ReindexResponse(BaseModel):
    job_id: str
    queue: str
