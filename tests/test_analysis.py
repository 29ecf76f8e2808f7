"""
AI Summarization and Import Tests
"""

import json

import pytest
from httpx import AsyncClient

from conftest import create_entry

from app.models.knowledge import KnowledgeCategory, OfferStatus, ProjectStatus
from app.core.errors import ValidationError
from app.services.analysis_service import normalize_entry_summary, normalize_project_summary
from app.services.knowledge_service import KnowledgeService
from app.services.llm_service import as_str_list, extract_json_object


def test_extract_json_object_from_chatty_answer():
    answer = 'Sure! Here it is:\n```json\n{"title": "Sprint", "tags": ["a"]}\n```'
    assert extract_json_object(answer) == {"title": "Sprint", "tags": ["a"]}
    assert extract_json_object("no json here") is None
    assert extract_json_object("{broken") is None
    assert extract_json_object(None) is None


def test_as_str_list():
    assert as_str_list(["a", None, " ", 3]) == ["a", "3"]
    assert as_str_list("not a list") == []


def test_normalize_entry_summary_defaults():
    summary = normalize_entry_summary(None, KnowledgeCategory.METHOD)
    assert summary.category == KnowledgeCategory.METHOD
    assert summary.title == "Untitled Entry"

    summary = normalize_entry_summary(
        {"category": "offer", "offerStatus": "won", "winFactors": ["Price"], "projectStatus": "bogus"}
    )
    assert summary.category == KnowledgeCategory.OFFER
    assert summary.offer_status == OfferStatus.WON
    assert summary.win_factors == ["Price"]
    assert summary.project_status == ProjectStatus.COMPLETED


@pytest.mark.asyncio
async def test_analyze_entry(client: AsyncClient, auth_headers, scripted_llm):
    llm = scripted_llm(json.dumps({
        "category": "method",
        "title": "Service Blueprint Workshop",
        "description": "Mapping end-to-end services.",
        "tags": ["service design"],
        "useCases": ["Complex services"],
        "steps": ["Map frontstage", "Map backstage"],
    }))

    response = await client.post(
        "/api/v1/ai/analyze-entry",
        json={
            "pasted_content": "Our workshop format for mapping services.",
            "links": ["https://miro.com/board/1"],
            "suggested_category": "project",
        },
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "method"
    assert data["use_cases"] == ["Complex services"]
    assert data["steps"] == ["Map frontstage", "Map backstage"]

    call = llm.calls[0]
    assert 'The user thinks this is a "project"' in call["system"]
    assert "https://miro.com/board/1" in call["user"]


@pytest.mark.asyncio
async def test_analyze_entry_needs_content(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/ai/analyze-entry", json={"pasted_content": "short"}, headers=auth_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_summarize_project_with_mock_provider(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/ai/summarize-project",
        json={"drive_content": "Kickoff notes", "miro_content": None},
        headers=auth_headers,
    )
    assert response.status_code == 200
    # The mock provider answers "{}", so every field takes its default
    assert response.json()["title"] == "Untitled Project"


@pytest.mark.asyncio
async def test_import_entry_creates_and_links(client: AsyncClient, auth_headers):
    existing = await create_entry(client, auth_headers, title="Design Sprint", category="method")

    response = await client.post(
        "/api/v1/ai/import-entry",
        json={
            "category": "project",
            "title": "Digital Banking Experience",
            "client": "FinServ Bank",
            "methods": ["design sprint", "Usability Testing", "Usability testing"],
            "deliverables": ["Design system"],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    result = response.json()
    assert result["entry"]["deliverables"] == ["Design system"]
    assert result["client"]["title"] == "FinServ Bank"
    assert [m["title"] for m in result["methods"]] == ["Design Sprint", "Usability Testing"]
    assert result["methods"][0]["id"] == existing["id"]
    assert {e["title"] for e in result["created_entities"]} == {"FinServ Bank", "Usability Testing"}

    links = (await client.get(f"/api/v1/knowledge/{result['entry']['id']}/links", headers=auth_headers)).json()
    assert [c["title"] for c in links["clients"]] == ["FinServ Bank"]
    assert len(links["methods"]) == 2

    created_method = (await client.get(
        f"/api/v1/knowledge/{result['methods'][1]['id']}", headers=auth_headers
    )).json()
    assert created_method["use_cases"] == ["Used in: Digital Banking Experience"]


@pytest.mark.asyncio
async def test_import_method_does_not_attach_client(client: AsyncClient, auth_headers):
    response = await client.post(
        "/api/v1/ai/import-entry",
        json={"category": "method", "title": "Card Sorting", "client": "Someone", "methods": ["Other"]},
        headers=auth_headers,
    )
    assert response.status_code == 201
    result = response.json()
    assert result["client"] is None
    assert result["methods"] == []


@pytest.mark.asyncio
async def test_import_project_reuses_client(client: AsyncClient, auth_headers):
    bank = await create_entry(client, auth_headers, title="FinServ Bank", category="client")

    response = await client.post(
        "/api/v1/ai/import-project",
        json={
            "title": "Mobile Bank",
            "client": "FinServ Bank",
            "source_drive_link": "https://drive.google.com/drive/folders/1",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    result = response.json()
    assert result["client"]["id"] == bank["id"]
    assert result["created_entities"] == []
    assert result["entry"]["category"] == "project"
    assert result["entry"]["source_drive_link"] == "https://drive.google.com/drive/folders/1"


def test_normalize_coerces_client_and_clips_names():
    summary = normalize_entry_summary({"title": "T", "category": "project", "client": 42})
    assert summary.client == "42"

    summary = normalize_entry_summary({"title": "   ", "client": {"name": "Bank"}, "methods": ["m" * 300]})
    assert summary.title == "Untitled Entry"
    assert summary.client is None
    assert summary.methods == ["m" * 255]

    project = normalize_project_summary({"title": "x" * 300, "client": ["a", "b"]})
    assert len(project.title) == 255
    assert project.client is None


@pytest.mark.asyncio
async def test_analyze_entry_with_numeric_client(client: AsyncClient, auth_headers, scripted_llm):
    scripted_llm(json.dumps({"title": "T", "category": "project", "client": 42}))
    response = await client.post(
        "/api/v1/ai/analyze-entry",
        json={"pasted_content": "Notes from the kickoff workshop."},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["client"] == "42"


@pytest.mark.asyncio
async def test_summarize_project_drops_structured_client(client: AsyncClient, auth_headers, scripted_llm):
    scripted_llm(json.dumps({"title": "Portal", "client": {"name": "Bank"}}))
    response = await client.post(
        "/api/v1/ai/summarize-project",
        json={"drive_content": "Kickoff notes"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["client"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, body",
    [
        ("/api/v1/ai/import-entry", {"title": "   ", "category": "project"}),
        ("/api/v1/ai/import-entry", {"title": "Portal", "category": "project", "client": "c" * 300}),
        ("/api/v1/ai/import-entry", {"title": "Portal", "category": "offer", "methods": ["m" * 300]}),
        ("/api/v1/ai/import-project", {"title": "x" * 300}),
        ("/api/v1/ai/import-project", {"title": ""}),
    ],
)
async def test_import_rejects_invalid_names(client: AsyncClient, auth_headers, path, body):
    response = await client.post(path, json=body, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"

    listing = (await client.get("/api/v1/knowledge", headers=auth_headers)).json()
    assert listing["total"] == 0


@pytest.mark.asyncio
async def test_get_or_create_rejects_overlong_name(test_session):
    service = KnowledgeService(test_session)
    with pytest.raises(ValidationError):
        await service.get_or_create(KnowledgeCategory.CLIENT, "c" * 300)
