"""
Google Drive fetcher

Downloads Drive files and exports Docs/Slides/Sheets using the caller's
Google OAuth access token.
"""

import base64
import re
from typing import Optional, Tuple

import httpx

from app.core.config import settings
from app.core.errors import (
    AuthenticationError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.core.logging import get_logger
from app.schemas.documents import GoogleDriveFile
from app.services.documents.parser import parse_document

logger = get_logger(__name__)

DRIVE_API = "https://www.googleapis.com/drive/v3/files"

FILE_ID_PATTERNS = [
    (re.compile(r"drive\.google\.com/file/d/([a-zA-Z0-9_-]+)"), "drive"),
    (re.compile(r"docs\.google\.com/document/d/([a-zA-Z0-9_-]+)"), "document"),
    (re.compile(r"docs\.google\.com/presentation/d/([a-zA-Z0-9_-]+)"), "presentation"),
    (re.compile(r"docs\.google\.com/spreadsheets/d/([a-zA-Z0-9_-]+)"), "spreadsheet"),
    (re.compile(r"drive\.google\.com/open\?id=([a-zA-Z0-9_-]+)"), "drive"),
]

# Google-native formats and the format they are exported as
EXPORT_TYPES = {
    "application/vnd.google-apps.document": "application/pdf",
    "application/vnd.google-apps.presentation": "application/pdf",
    "application/vnd.google-apps.spreadsheet": "text/csv",
}

STATUS_ERRORS = {
    401: (AuthenticationError, "Access token expired. Please sign in with Google again."),
    403: (PermissionDeniedError, "Access denied. Please ensure you have permission to view this file."),
    404: (NotFoundError, "File not found. Please check if you have access to this file."),
}


def extract_file_id(url: str) -> Tuple[str, str]:
    """(file id, kind) for Drive, Docs, Slides and Sheets URLs"""
    for pattern, kind in FILE_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return match.group(1), kind
    raise ValidationError(
        "Could not extract file ID from the provided URL. "
        "Please ensure it is a valid Google Drive, Docs, Slides, or Sheets URL."
    )


def _raise_for_status(response: httpx.Response, action: str) -> None:
    if response.is_success:
        return
    error_cls, message = STATUS_ERRORS.get(response.status_code, (None, None))
    if error_cls is not None:
        raise error_cls(message)
    raise ExternalServiceError(f"Failed to {action}: {response.status_code}")


def _is_text(content_type: str) -> bool:
    return any(marker in content_type for marker in ("text", "csv", "json"))


async def fetch_google_drive(
    url: str, access_token: str, client: Optional[httpx.AsyncClient] = None
) -> GoogleDriveFile:
    if not access_token:
        raise ValidationError("Google access token is required. Please sign in with Google first.")

    file_id, kind = extract_file_id(url)
    headers = {"Authorization": f"Bearer {access_token}"}

    owns_client = client is None
    client = client or httpx.AsyncClient(
        timeout=settings.url_fetch_timeout_seconds, follow_redirects=True
    )
    try:
        meta_response = await client.get(
            f"{DRIVE_API}/{file_id}", params={"fields": "name,mimeType,size"}, headers=headers
        )
        _raise_for_status(meta_response, "fetch file metadata")
        metadata = meta_response.json()

        original_type = metadata.get("mimeType", "application/octet-stream")
        export_type = EXPORT_TYPES.get(original_type)
        if export_type:
            download = await client.get(
                f"{DRIVE_API}/{file_id}/export", params={"mimeType": export_type}, headers=headers
            )
        else:
            download = await client.get(
                f"{DRIVE_API}/{file_id}", params={"alt": "media"}, headers=headers
            )
        _raise_for_status(download, "download file")
    except httpx.HTTPError as e:
        raise ExternalServiceError(f"Google Drive request failed: {e}") from e
    finally:
        if owns_client:
            await client.aclose()

    content_type = download.headers.get("content-type") or export_type or original_type
    name = metadata.get("name") or file_id
    logger.info(f"Downloaded Drive {kind} {file_id} ({content_type}, {len(download.content)} bytes)")

    if _is_text(content_type):
        return GoogleDriveFile(
            file_id=file_id,
            name=name,
            mime_type=content_type,
            original_mime_type=original_type,
            content=download.text,
        )

    # Binary files come back base64 encoded, with text when the parser knows the type
    text = None
    try:
        text = parse_document(download.content, name, content_type.split(";")[0]).content
    except ValidationError as e:
        logger.info(f"No text extracted from Drive file {file_id}: {e.message}")

    return GoogleDriveFile(
        file_id=file_id,
        name=name,
        mime_type=content_type,
        original_mime_type=original_type,
        content=text,
        data=base64.b64encode(download.content).decode("ascii"),
        is_binary=True,
    )
