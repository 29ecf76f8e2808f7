"""
Document Ingestion Tests
"""

import base64
import io
from unittest.mock import patch

import httpx
import pytest
from docx import Document
from httpx import AsyncClient

from app.core.errors import AppError, ExternalServiceError, NotFoundError, ValidationError
from app.services.documents.fetcher import TRUNCATION_MARKER, fetch_url_content, truncate
from app.services.documents.google_drive import extract_file_id, fetch_google_drive
from app.services.documents.html import html_to_text
from app.services.documents.parser import detect_type, parse_document
from app.services.documents.parsing_service import ParsingJobService
from app.services.documents.template_parser import detect_placeholders, extract_structure

PAGE = """
<html>
  <head><title>Case Study</title><style>body { color: red }</style></head>
  <body>
    <nav>Home | About</nav>
    <main>
      <h2>Approach</h2>
      <p>We ran a design sprint.</p>
      <ul><li>Interviews</li><li>Prototype</li></ul>
    </main>
    <footer>Copyright</footer>
    <script>track()</script>
  </body>
</html>
"""


def docx_bytes(*paragraphs, heading=None) -> bytes:
    doc = Document()
    if heading:
        doc.add_heading(heading, level=1)
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


# ============ Parsing ============

def test_detect_type_prefers_extension():
    assert detect_type("notes.md", "application/octet-stream") == "text/markdown"
    assert detect_type("scan.PDF") == "application/pdf"
    assert detect_type("blob", "text/plain; charset=utf-8") == "text/plain"


def test_parse_text_strips_bom():
    parsed = parse_document("\ufeffFirst block\n\nSecond block".encode("utf-8"), "notes.txt")
    assert parsed.content == "First block\n\nSecond block"
    assert parsed.metadata.element_count == 2
    assert parsed.metadata.filetype == "text/plain"


def test_parse_docx_marks_headings():
    parsed = parse_document(docx_bytes("Body text", heading="Overview"), "brief.docx")
    assert parsed.content.startswith("# Overview")
    assert "Body text" in parsed.content


def test_parse_html_document():
    parsed = parse_document(PAGE.encode(), "page.html")
    assert "## Approach" in parsed.content
    assert "track()" not in parsed.content


def test_parse_rejects_unsupported_and_empty():
    with pytest.raises(ValidationError):
        parse_document(b"\x00\x01", "archive.zip")
    with pytest.raises(ValidationError):
        parse_document(b"   \n ", "empty.txt")


def test_parse_rejects_broken_pdf():
    with pytest.raises(ValidationError):
        parse_document(b"not really a pdf", "broken.pdf")


def test_html_to_text_drops_chrome():
    title, text = html_to_text(PAGE)
    assert title == "Case Study"
    assert text.startswith("# Case Study")
    assert "## Approach" in text
    assert "• Interviews" in text
    assert "• Prototype" in text
    assert "Home | About" not in text
    assert "Copyright" not in text
    assert "color: red" not in text


# ============ Templates ============

def test_detect_placeholders_all_styles():
    text = "Dear {{client}}, see [[ref]] and ${amount} for <PROJECT> [PHASE_1] by __OWNER__."
    found = detect_placeholders(text)
    for expected in ("{{client}}", "client", "[[ref]]", "${amount}", "<PROJECT>", "[PHASE_1]", "__OWNER__", "OWNER"):
        assert expected in found
    assert len(found) == len(set(found))


def test_extract_structure_sections():
    text = "INTRODUCTION\nWho we are\n\n1. Scope\nWhat we deliver\nSection 2 Pricing\nCosts"
    structure = extract_structure(text)
    assert structure.headings == ["INTRODUCTION", "1. Scope", "Section 2 Pricing"]
    assert structure.section_count == 3
    assert structure.sections[0] == "INTRODUCTION\nWho we are"


def test_extract_structure_caps_sections():
    text = "\n".join(f"{i}. Part\nbody" for i in range(1, 15))
    structure = extract_structure(text)
    assert structure.section_count == 14
    assert len(structure.sections) == 10


# ============ URL fetching ============

def test_truncate():
    content, truncated = truncate("x" * 20, limit=10)
    assert truncated is True
    assert content == "x" * 10 + TRUNCATION_MARKER
    assert truncate("short", limit=10) == ("short", False)


@pytest.mark.asyncio
async def test_fetch_url_html():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "KnowledgeBot" in request.headers["user-agent"]
        return httpx.Response(200, text=PAGE, headers={"content-type": "text/html; charset=utf-8"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await fetch_url_content("https://example.com/case", client=http)

    assert result.title == "Case Study"
    assert "We ran a design sprint." in result.content
    assert result.truncated is False


@pytest.mark.asyncio
async def test_fetch_url_refuses_pdf():
    def handler(request):
        return httpx.Response(200, content=b"%PDF", headers={"content-type": "application/pdf"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        with pytest.raises(ValidationError):
            await fetch_url_content("https://example.com/file.pdf", client=http)


@pytest.mark.asyncio
async def test_fetch_url_upstream_error():
    def handler(request):
        return httpx.Response(500)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        with pytest.raises(ExternalServiceError):
            await fetch_url_content("https://example.com/down", client=http)


# ============ Google Drive ============

def test_extract_file_id_variants():
    assert extract_file_id("https://drive.google.com/file/d/abc_123/view") == ("abc_123", "drive")
    assert extract_file_id("https://docs.google.com/document/d/DOC-1/edit") == ("DOC-1", "document")
    assert extract_file_id("https://docs.google.com/spreadsheets/d/S1/edit#gid=0") == ("S1", "spreadsheet")
    assert extract_file_id("https://drive.google.com/open?id=XYZ") == ("XYZ", "drive")
    with pytest.raises(ValidationError):
        extract_file_id("https://example.com/nothing")


@pytest.mark.asyncio
async def test_drive_exports_google_sheets_as_csv():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["authorization"] == "Bearer token-1"
        if request.url.path.endswith("/export"):
            assert request.url.params["mimeType"] == "text/csv"
            return httpx.Response(200, text="a,b\n1,2", headers={"content-type": "text/csv"})
        return httpx.Response(200, json={"name": "Budget", "mimeType": "application/vnd.google-apps.spreadsheet"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await fetch_google_drive("https://docs.google.com/spreadsheets/d/S1/edit", "token-1", client=http)

    assert result.name == "Budget"
    assert result.content == "a,b\n1,2"
    assert result.is_binary is False


@pytest.mark.asyncio
async def test_drive_binary_file_is_base64():
    payload = docx_bytes("Proposal body")

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("alt") == "media":
            return httpx.Response(200, content=payload, headers={"content-type": "application/octet-stream"})
        return httpx.Response(200, json={"name": "proposal.docx", "mimeType": "application/octet-stream"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await fetch_google_drive("https://drive.google.com/file/d/F1/view", "token-1", client=http)

    assert result.is_binary is True
    assert base64.b64decode(result.data) == payload
    assert "Proposal body" in result.content


@pytest.mark.asyncio
async def test_drive_status_errors():
    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404))) as http:
        with pytest.raises(NotFoundError):
            await fetch_google_drive("https://drive.google.com/file/d/F1/view", "token-1", client=http)

    async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(401))) as http:
        with pytest.raises(AppError) as exc_info:
            await fetch_google_drive("https://drive.google.com/file/d/F1/view", "token-1", client=http)
    assert exc_info.value.status_code == 401


# ============ Endpoints ============

@pytest.mark.asyncio
async def test_parse_endpoint(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/documents/parse",
        files={"file": ("notes.md", b"# Notes\n\nKickoff went well", "text/markdown")},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["metadata"]["filename"] == "notes.md"
    assert data["metadata"]["element_count"] == 2


@pytest.mark.asyncio
async def test_parsing_job_lifecycle(client: AsyncClient, auth_headers, session_factory):
    async def run_with_test_db(job_id: str) -> None:
        async with session_factory() as session:
            await ParsingJobService(session).run_job(job_id)

    with patch("app.api.v1.documents.main.process_parsing_job", run_with_test_db):
        response = await client.post(
            "/api/v1/documents/jobs",
            files={"file": ("brief.docx", docx_bytes("Tender brief"), "application/octet-stream")},
            headers=auth_headers,
        )
    assert response.status_code == 202
    job = response.json()
    assert job["status"] == "pending"

    response = await client.get(f"/api/v1/documents/jobs/{job['id']}", headers=auth_headers)
    job = response.json()
    assert job["status"] == "completed"
    assert job["content"] == "Tender brief"
    assert job["metadata"]["filetype"].endswith("wordprocessingml.document")


@pytest.mark.asyncio
async def test_parsing_job_failure_is_recorded(client: AsyncClient, auth_headers, session_factory):
    async def run_with_test_db(job_id: str) -> None:
        async with session_factory() as session:
            await ParsingJobService(session).run_job(job_id)

    with patch("app.api.v1.documents.main.process_parsing_job", run_with_test_db):
        response = await client.post(
            "/api/v1/documents/jobs",
            files={"file": ("data.bin", b"\x00\x01\x02", "application/x-binary")},
            headers=auth_headers,
        )
    job_id = response.json()["id"]

    job = (await client.get(f"/api/v1/documents/jobs/{job_id}", headers=auth_headers)).json()
    assert job["status"] == "failed"
    assert "Unsupported file type" in job["error"]
