"""
Analysis Service

Turns pasted text, uploaded file contents and links into structured
summaries that the front end reviews before import.
"""

from typing import Any, List, Optional

from app.core.errors import ValidationError
from app.core.logging import get_logger
from app.models.knowledge import KnowledgeCategory, OfferStatus, ProjectStatus
from app.schemas.ai import AnalyzeEntryRequest, EntrySummary, ProjectSummary, SummarizeProjectRequest
from app.schemas.knowledge import TITLE_MAX_LENGTH
from app.services.llm_service import LLMService, as_str_list, extract_json_object, get_llm_service

logger = get_logger(__name__)

MIN_CONTENT_LENGTH = 10

ENTRY_SYSTEM_PROMPT = """You catalog documentation for a design consultancy's knowledge base.
Decide whether the material describes a "project" (client work, case study), an
"offer" (proposal, tender response, bid) or a "method" (design method, tool,
framework, process), then extract its details.

Reply with a single JSON object:
{
  "category": "project" | "offer" | "method",
  "title": string,
  "description": string (2-4 sentences),
  "client": string | null,
  "tags": [string],
  "learnings": [string],
  "deliverables": [string],
  "methods": [string],
  "projectStatus": "active" | "completed" | "archived",
  "offerStatus": "draft" | "pending" | "won" | "lost",
  "winFactors": [string],
  "lossFactors": [string],
  "useCases": [string],
  "steps": [string]
}
Use [] for lists with nothing to report."""

PROJECT_SYSTEM_PROMPT = """You summarize design consultancy project material.
Reply with a single JSON object:
{
  "title": string,
  "description": short summary, at most 3 paragraphs,
  "full_description": detailed HTML summary using <h2>, <h3>, <p>, <strong>, <em>, <ul><li>,
                      covering goals, process, methods and tools, and deliverables,
  "client": string | null,
  "deliverables": [string],
  "methods": [string],
  "tags": [string],
  "learnings": [string]
}
Use [] or null where the material says nothing."""

# Response keys may come back camelCased
_ENTRY_KEYS = {
    "project_status": ("projectStatus", "project_status"),
    "offer_status": ("offerStatus", "offer_status"),
    "win_factors": ("winFactors", "win_factors"),
    "loss_factors": ("lossFactors", "loss_factors"),
    "use_cases": ("useCases", "use_cases"),
}


def _pick(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _enum_or(enum_cls, value: Any, default):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return default


def _title(value: Any, default: str) -> str:
    text = str(value).strip() if isinstance(value, (str, int, float)) else ""
    return text[:TITLE_MAX_LENGTH] or default


def _name(value: Any) -> Optional[str]:
    """Scalar name from a model response, clipped to title length; anything else is dropped"""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value).strip()[:TITLE_MAX_LENGTH] or None


def _names(value: Any) -> List[str]:
    return [name[:TITLE_MAX_LENGTH] for name in as_str_list(value)]


def normalize_entry_summary(
    data: Optional[dict], suggested: Optional[KnowledgeCategory] = None
) -> EntrySummary:
    """Fill gaps in a model-produced entry summary"""
    fallback_category = suggested or KnowledgeCategory.PROJECT
    if data is None:
        return EntrySummary(
            category=fallback_category,
            description="Could not extract description from the provided content.",
        )

    return EntrySummary(
        category=_enum_or(KnowledgeCategory, data.get("category"), fallback_category),
        title=_title(data.get("title"), "Untitled Entry"),
        description=str(data.get("description") or ""),
        client=_name(data.get("client")),
        tags=as_str_list(data.get("tags")),
        learnings=as_str_list(data.get("learnings")),
        deliverables=as_str_list(data.get("deliverables")),
        methods=_names(data.get("methods")),
        project_status=_enum_or(
            ProjectStatus, _pick(data, *_ENTRY_KEYS["project_status"]), ProjectStatus.COMPLETED
        ),
        offer_status=_enum_or(
            OfferStatus, _pick(data, *_ENTRY_KEYS["offer_status"]), OfferStatus.DRAFT
        ),
        win_factors=as_str_list(_pick(data, *_ENTRY_KEYS["win_factors"])),
        loss_factors=as_str_list(_pick(data, *_ENTRY_KEYS["loss_factors"])),
        use_cases=as_str_list(_pick(data, *_ENTRY_KEYS["use_cases"])),
        steps=as_str_list(data.get("steps")),
    )


def normalize_project_summary(data: Optional[dict]) -> ProjectSummary:
    if data is None:
        return ProjectSummary(
            description="Could not extract description from the provided content."
        )

    return ProjectSummary(
        title=_title(data.get("title"), "Untitled Project"),
        description=str(data.get("description") or ""),
        full_description=str(data.get("full_description") or ""),
        client=_name(data.get("client")),
        deliverables=as_str_list(data.get("deliverables")),
        methods=_names(data.get("methods")),
        tags=as_str_list(data.get("tags")),
        learnings=as_str_list(data.get("learnings")),
    )


def combine_entry_content(request: AnalyzeEntryRequest) -> str:
    parts: List[str] = []
    files = [c for c in request.file_contents if c and c.strip()]
    if files:
        parts.append("File Contents:\n" + "\n\n".join(files))
    if request.pasted_content and request.pasted_content.strip():
        parts.append(f"Pasted Content:\n{request.pasted_content}")
    links = [link for link in request.links if link and link.strip()]
    if links:
        parts.append("Links provided:\n" + "\n".join(links))
    return "\n\n".join(parts).strip()


class AnalysisService:
    def __init__(self, llm: Optional[LLMService] = None):
        self.llm = llm or get_llm_service()

    async def analyze_entry(self, request: AnalyzeEntryRequest) -> EntrySummary:
        content = combine_entry_content(request)
        if len(content) < MIN_CONTENT_LENGTH:
            raise ValidationError("Insufficient content to analyze")

        logger.info(
            f"Analyzing entry content ({len(content)} chars, "
            f"suggested={request.suggested_category.value if request.suggested_category else None})"
        )

        system = ENTRY_SYSTEM_PROMPT
        if request.suggested_category:
            system += (
                f'\n\nThe user thinks this is a "{request.suggested_category.value}"; '
                "override that if the content clearly says otherwise."
            )

        answer = await self.llm.complete(
            system, f"Analyze this content:\n\n{content}", json_mode=True
        )
        data = extract_json_object(answer)
        if data is None:
            logger.warning("Entry analysis returned no JSON object; using defaults")
        summary = normalize_entry_summary(data, request.suggested_category)
        logger.info(f"Entry analyzed as {summary.category.value}: {summary.title}")
        return summary

    async def summarize_project(self, request: SummarizeProjectRequest) -> ProjectSummary:
        content = (
            f"Google Drive Content:\n{request.drive_content or 'No content provided'}\n\n"
            f"Miro Board Content:\n{request.miro_content or 'No content provided'}"
        )
        answer = await self.llm.complete(
            PROJECT_SYSTEM_PROMPT,
            f"Summarize this project documentation:\n\n{content}",
            json_mode=True,
        )
        data = extract_json_object(answer)
        if data is None:
            logger.warning("Project summary returned no JSON object; using defaults")
        return normalize_project_summary(data)
