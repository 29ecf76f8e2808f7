from app.models.base import Base, TimestampMixin
from app.models.user import User
from app.models.knowledge import (
    KnowledgeCategory,
    KnowledgeEntry,
    OfferStatus,
    OfferWorkStatus,
    ProjectStatus,
)
from app.models.links import (
    LINK_TYPES,
    LinkType,
    OfferClientLink,
    OfferMethodLink,
    OfferPeopleLink,
    PeopleClientLink,
    PeopleMethodExpertise,
    ProjectClientLink,
    ProjectMethodLink,
    ProjectPeopleLink,
)
from app.models.content import (
    ContentDraft,
    ContentDraftVersion,
    DraftStatus,
    OfferTemplate,
    StyleGuide,
)
from app.models.document import DocumentParsingJob, ParsingJobStatus

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "KnowledgeCategory",
    "KnowledgeEntry",
    "OfferStatus",
    "OfferWorkStatus",
    "ProjectStatus",
    "LINK_TYPES",
    "LinkType",
    "ProjectClientLink",
    "ProjectMethodLink",
    "ProjectPeopleLink",
    "OfferClientLink",
    "OfferMethodLink",
    "OfferPeopleLink",
    "PeopleClientLink",
    "PeopleMethodExpertise",
    "ContentDraft",
    "ContentDraftVersion",
    "DraftStatus",
    "OfferTemplate",
    "StyleGuide",
    "DocumentParsingJob",
    "ParsingJobStatus",
]
