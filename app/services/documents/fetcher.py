"""
URL content fetcher
"""

from typing import Optional

import httpx

from app.core.config import settings
from app.core.errors import ExternalServiceError, ValidationError
from app.core.logging import get_logger
from app.schemas.documents import FetchUrlResponse
from app.services.documents.html import html_to_text, strip_tags

logger = get_logger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; KnowledgeBot/1.0)"
ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
TRUNCATION_MARKER = "\n\n[Content truncated...]"


def truncate(content: str, limit: Optional[int] = None) -> tuple[str, bool]:
    limit = limit or settings.max_fetched_content_chars
    if len(content) <= limit:
        return content, False
    return content[:limit] + TRUNCATION_MARKER, True


async def fetch_url_content(url: str, client: Optional[httpx.AsyncClient] = None) -> FetchUrlResponse:
    """Fetch a page and reduce it to readable text"""
    owns_client = client is None
    client = client or httpx.AsyncClient(
        timeout=settings.url_fetch_timeout_seconds, follow_redirects=True
    )
    try:
        response = await client.get(url, headers={"User-Agent": USER_AGENT, "Accept": ACCEPT})
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ExternalServiceError(
            f"HTTP {e.response.status_code}: {e.response.reason_phrase}",
            details={"url": url},
        ) from e
    except httpx.HTTPError as e:
        raise ExternalServiceError(f"Failed to fetch URL: {e}", details={"url": url}) from e
    finally:
        if owns_client:
            await client.aclose()

    content_type = response.headers.get("content-type", "")
    title = None
    if "text/html" in content_type or "application/xhtml" in content_type:
        title, content = html_to_text(response.text)
    elif "text/plain" in content_type:
        content = response.text
    elif "application/pdf" in content_type:
        raise ValidationError(
            "PDF files should be uploaded directly, not fetched via URL",
            details={"content_type": content_type},
        )
    else:
        content = strip_tags(response.text)

    content, truncated = truncate(content)
    logger.info(f"Fetched {url} ({content_type or 'unknown type'}, {len(content)} chars)")
    return FetchUrlResponse(
        url=url,
        title=title,
        content=content,
        content_type=content_type or None,
        truncated=truncated,
    )
