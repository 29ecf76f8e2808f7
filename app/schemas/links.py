"""
Entity Link Schemas
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.models.knowledge import KnowledgeCategory


class LinkRequest(BaseModel):
    source_id: str
    target_id: str


class LinkResult(BaseModel):
    link_type: str
    created: bool


class UnlinkResult(BaseModel):
    link_type: str
    removed: bool


class LinkedEntity(BaseModel):
    id: str
    title: str
    category: KnowledgeCategory

    model_config = {"from_attributes": True}


class LinkedEntities(BaseModel):
    clients: List[LinkedEntity] = []
    projects: List[LinkedEntity] = []
    offers: List[LinkedEntity] = []
    methods: List[LinkedEntity] = []
    people: List[LinkedEntity] = []


class SetLinksRequest(BaseModel):
    target_ids: List[str] = Field(default_factory=list)


class SetLinksResult(BaseModel):
    added: int
    removed: int
    linked: List[LinkedEntity]


class ClientLookupRequest(BaseModel):
    entry_ids: List[str] = Field(..., max_length=1000)


class ClientLookupResponse(BaseModel):
    clients: Dict[str, Optional[LinkedEntity]]
