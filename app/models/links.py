"""
Link Models

Many-to-many join tables between knowledge entries, plus a registry
describing which categories each table connects.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.models.base import Base, UUIDPrimaryKeyMixin
from app.models.knowledge import KnowledgeCategory

ENTRY_FK = "knowledge_entries.id"


def _entry_fk() -> Mapped[str]:
    return mapped_column(
        String(36), ForeignKey(ENTRY_FK, ondelete="CASCADE"), nullable=False, index=True
    )


class LinkMixin(UUIDPrimaryKeyMixin):
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class ProjectClientLink(LinkMixin, Base):
    __tablename__ = "project_client_links"
    __table_args__ = (UniqueConstraint("project_id", "client_id"),)

    project_id: Mapped[str] = _entry_fk()
    client_id: Mapped[str] = _entry_fk()


class ProjectMethodLink(LinkMixin, Base):
    __tablename__ = "project_method_links"
    __table_args__ = (UniqueConstraint("project_id", "method_id"),)

    project_id: Mapped[str] = _entry_fk()
    method_id: Mapped[str] = _entry_fk()


class ProjectPeopleLink(LinkMixin, Base):
    __tablename__ = "project_people_links"
    __table_args__ = (UniqueConstraint("project_id", "person_id"),)

    project_id: Mapped[str] = _entry_fk()
    person_id: Mapped[str] = _entry_fk()


class OfferClientLink(LinkMixin, Base):
    __tablename__ = "offer_client_links"
    __table_args__ = (UniqueConstraint("offer_id", "client_id"),)

    offer_id: Mapped[str] = _entry_fk()
    client_id: Mapped[str] = _entry_fk()


class OfferMethodLink(LinkMixin, Base):
    __tablename__ = "offer_method_links"
    __table_args__ = (UniqueConstraint("offer_id", "method_id"),)

    offer_id: Mapped[str] = _entry_fk()
    method_id: Mapped[str] = _entry_fk()


class OfferPeopleLink(LinkMixin, Base):
    __tablename__ = "offer_people_links"
    __table_args__ = (UniqueConstraint("offer_id", "person_id"),)

    offer_id: Mapped[str] = _entry_fk()
    person_id: Mapped[str] = _entry_fk()


class PeopleClientLink(LinkMixin, Base):
    __tablename__ = "people_client_links"
    __table_args__ = (UniqueConstraint("person_id", "client_id"),)

    person_id: Mapped[str] = _entry_fk()
    client_id: Mapped[str] = _entry_fk()


class PeopleMethodExpertise(LinkMixin, Base):
    __tablename__ = "people_method_expertise"
    __table_args__ = (UniqueConstraint("person_id", "method_id"),)

    person_id: Mapped[str] = _entry_fk()
    method_id: Mapped[str] = _entry_fk()


@dataclass(frozen=True)
class LinkType:
    name: str
    model: type
    left_column: str
    left_category: KnowledgeCategory
    right_column: str
    right_category: KnowledgeCategory

    def side_for(self, category: KnowledgeCategory) -> Optional[tuple[str, str]]:
        """(own column, other column) for an entry of `category`, if it participates"""
        if category == self.left_category:
            return self.left_column, self.right_column
        if category == self.right_category:
            return self.right_column, self.left_column
        return None

    def other_category(self, category: KnowledgeCategory) -> KnowledgeCategory:
        return self.right_category if category == self.left_category else self.left_category


_C = KnowledgeCategory

LINK_TYPES: dict[str, LinkType] = {
    lt.name: lt
    for lt in (
        LinkType("project_client", ProjectClientLink, "project_id", _C.PROJECT, "client_id", _C.CLIENT),
        LinkType("project_method", ProjectMethodLink, "project_id", _C.PROJECT, "method_id", _C.METHOD),
        LinkType("project_person", ProjectPeopleLink, "project_id", _C.PROJECT, "person_id", _C.PERSON),
        LinkType("offer_client", OfferClientLink, "offer_id", _C.OFFER, "client_id", _C.CLIENT),
        LinkType("offer_method", OfferMethodLink, "offer_id", _C.OFFER, "method_id", _C.METHOD),
        LinkType("offer_person", OfferPeopleLink, "offer_id", _C.OFFER, "person_id", _C.PERSON),
        LinkType("person_client", PeopleClientLink, "person_id", _C.PERSON, "client_id", _C.CLIENT),
        LinkType("person_method", PeopleMethodExpertise, "person_id", _C.PERSON, "method_id", _C.METHOD),
    )
}


def link_type_for(a: KnowledgeCategory, b: KnowledgeCategory) -> Optional[LinkType]:
    """Link type connecting two categories, in either order"""
    for lt in LINK_TYPES.values():
        if {lt.left_category, lt.right_category} == {a, b} and a != b:
            return lt
    return None


def link_types_for(category: KnowledgeCategory) -> list[LinkType]:
    return [lt for lt in LINK_TYPES.values() if lt.side_for(category) is not None]
