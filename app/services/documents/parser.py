"""
Document parser

Text extraction for uploaded files: PDF (pypdf), DOCX (python-docx),
HTML (BeautifulSoup) and plain text formats.
"""

import io
import mimetypes
from pathlib import Path
from typing import List, Optional, Tuple
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.core.config import settings
from app.core.errors import ValidationError
from app.core.logging import get_logger
from app.schemas.documents import DocumentMetadata, ParsedDocument
from app.services.documents.html import html_to_text

logger = get_logger(__name__)

PDF = "application/pdf"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
HTML = "text/html"

TEXT_TYPES = {"text/plain", "text/markdown", "text/csv", "text/x-markdown", "application/json"}
EXTENSION_TYPES = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".html": HTML,
    ".htm": HTML,
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
}


def detect_type(file_name: str, mime_type: Optional[str] = None) -> str:
    """Resolve a usable MIME type, preferring the file extension over generic uploads"""
    ext = Path(file_name or "").suffix.lower()
    if ext in EXTENSION_TYPES:
        return EXTENSION_TYPES[ext]
    if mime_type and mime_type != "application/octet-stream":
        return mime_type.split(";")[0].strip().lower()
    guessed, _ = mimetypes.guess_type(file_name or "")
    return guessed or "application/octet-stream"


def count_elements(content: str) -> int:
    return len([block for block in content.split("\n\n") if block.strip()])


def extract_pdf_text(data: bytes) -> Tuple[str, int]:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [(page.extract_text() or "").strip() for page in reader.pages]
    except PdfReadError as e:
        raise ValidationError(f"Could not read PDF: {e}") from e
    return "\n\n".join(p for p in pages if p), len(pages)


def _heading_level(style_name: str) -> int:
    if style_name == "Title":
        return 1
    if style_name.startswith("Heading"):
        level = style_name.replace("Heading", "").strip()
        return int(level) if level.isdigit() else 1
    return 0


def extract_docx_text(data: bytes, markdown_headings: bool = True) -> str:
    """
    Paragraph text, then table rows as ' | '-joined cells.
    Heading styles become '#' markers when `markdown_headings` is set.
    """
    try:
        doc = Document(io.BytesIO(data))
    except (BadZipFile, PackageNotFoundError, KeyError) as e:
        raise ValidationError("Could not read DOCX file") from e

    blocks: List[str] = []
    for paragraph in doc.paragraphs:
        text = paragraph.text.strip()
        if not text:
            continue
        level = _heading_level(paragraph.style.name if paragraph.style is not None else "")
        if markdown_headings and level:
            text = f"{'#' * min(level, 6)} {text}"
        blocks.append(text)

    for table in doc.tables:
        rows = []
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                rows.append(" | ".join(cells))
        if rows:
            blocks.append("\n".join(rows))

    return "\n\n".join(blocks)


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace").lstrip("\ufeff")


def parse_document(data: bytes, file_name: str, mime_type: Optional[str] = None) -> ParsedDocument:
    if len(data) > settings.max_upload_size:
        raise ValidationError(
            f"File exceeds the {settings.max_upload_size_mb} MB limit",
            details={"size": len(data)},
        )

    filetype = detect_type(file_name, mime_type)
    page_count: Optional[int] = None

    if filetype == PDF:
        content, page_count = extract_pdf_text(data)
    elif filetype == DOCX:
        content = extract_docx_text(data)
    elif filetype in (HTML, "application/xhtml+xml"):
        _, content = html_to_text(decode_text(data))
    elif filetype in TEXT_TYPES or filetype.startswith("text/"):
        content = decode_text(data)
    else:
        raise ValidationError(f"Unsupported file type: {filetype}", details={"filename": file_name})

    content = content.strip()
    if not content:
        raise ValidationError("No text could be extracted from the document")

    logger.info(f"Parsed {file_name} ({filetype}, {len(content)} chars)")
    return ParsedDocument(
        content=content,
        metadata=DocumentMetadata(
            filename=file_name,
            filetype=filetype,
            page_count=page_count,
            element_count=count_elements(content),
        ),
    )
