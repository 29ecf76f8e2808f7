"""
Knowledge Entry Tests
"""

import pytest
from httpx import AsyncClient

from conftest import create_entry

API = "/api/v1/knowledge"


@pytest.mark.asyncio
async def test_create_and_get_entry(client: AsyncClient, auth_headers):
    created = await create_entry(
        client,
        auth_headers,
        title="  Brand Identity Redesign  ",
        category="project",
        client="TechCorp Inc.",
        project_status="completed",
        tags=["branding", "B2B"],
        learnings=["Align stakeholders early"],
    )
    assert created["title"] == "Brand Identity Redesign"
    assert created["status"] == "completed"
    assert created["deliverables"] == []

    response = await client.get(f"{API}/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["tags"] == ["branding", "B2B"]


@pytest.mark.asyncio
async def test_blank_title_rejected(client: AsyncClient, auth_headers):
    response = await client.post(
        API, json={"title": "   ", "category": "method"}, headers=auth_headers
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "validation_error"


@pytest.mark.asyncio
async def test_unknown_category_rejected(client: AsyncClient, auth_headers):
    response = await client.post(
        API, json={"title": "Something", "category": "vendor"}, headers=auth_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_missing_entry_is_404(client: AsyncClient, auth_headers):
    response = await client.get(f"{API}/does-not-exist", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


@pytest.mark.asyncio
async def test_update_entry(client: AsyncClient, auth_headers):
    entry = await create_entry(
        client, auth_headers, title="Healthcare Portal Bid", category="offer", offer_status="pending"
    )

    response = await client.patch(
        f"{API}/{entry['id']}",
        json={"offer_status": "won", "winning_strategy": "Accessibility expertise"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["offer_status"] == "won"
    assert data["status"] == "won"
    assert data["winning_strategy"] == "Accessibility expertise"
    assert data["title"] == "Healthcare Portal Bid"


@pytest.mark.asyncio
async def test_list_filters(client: AsyncClient, auth_headers):
    await create_entry(client, auth_headers, title="Design Sprint", category="method", tags=["workshop"])
    await create_entry(client, auth_headers, title="Service Blueprint", category="method", tags=["workshop", "mapping"])
    await create_entry(client, auth_headers, title="Retail Tender", category="offer", offer_status="lost")
    await create_entry(client, auth_headers, title="Green Platform", category="offer", offer_status="won",
                       description="Sustainability reporting platform")

    response = await client.get(API, params={"category": "method"}, headers=auth_headers)
    assert response.json()["total"] == 2

    response = await client.get(API, params={"tag": "workshop"}, headers=auth_headers)
    titles = {e["title"] for e in response.json()["items"]}
    assert titles == {"Design Sprint", "Service Blueprint"}

    response = await client.get(API, params={"status": "won"}, headers=auth_headers)
    assert [e["title"] for e in response.json()["items"]] == ["Green Platform"]

    response = await client.get(API, params={"search": "sustainability"}, headers=auth_headers)
    assert [e["title"] for e in response.json()["items"]] == ["Green Platform"]

    response = await client.get(API, params={"limit": 1}, headers=auth_headers)
    data = response.json()
    assert len(data["items"]) == 1
    assert data["total"] == 4


@pytest.mark.asyncio
async def test_stats_and_tags(client: AsyncClient, auth_headers):
    await create_entry(client, auth_headers, title="Won Offer", category="offer", offer_status="won", tags=["b", "A"])
    await create_entry(client, auth_headers, title="Lost Offer", category="offer", offer_status="lost", tags=["a"])
    await create_entry(client, auth_headers, title="Project", category="project", tags=["c"])

    response = await client.get(f"{API}/stats", headers=auth_headers)
    assert response.status_code == 200
    stats = response.json()
    assert stats["total"] == 3
    assert stats["offers"] == 2
    assert stats["won_offers"] == 1
    assert stats["lost_offers"] == 1
    assert stats["projects"] == 1

    response = await client.get(f"{API}/tags", headers=auth_headers)
    tags = response.json()["tags"]
    assert [t.lower() for t in tags] == sorted(t.lower() for t in tags)
    assert "c" in tags


@pytest.mark.asyncio
async def test_delete_entry_removes_links(client: AsyncClient, auth_headers):
    project = await create_entry(client, auth_headers, title="Banking App", category="project")
    bank = await create_entry(client, auth_headers, title="FinServ Bank", category="client")
    response = await client.post(
        "/api/v1/links", json={"source_id": project["id"], "target_id": bank["id"]}, headers=auth_headers
    )
    assert response.status_code == 200

    response = await client.delete(f"{API}/{project['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get(f"{API}/{project['id']}", headers=auth_headers)
    assert response.status_code == 404

    response = await client.get(f"{API}/{bank['id']}/links", headers=auth_headers)
    assert response.json()["projects"] == []


@pytest.mark.asyncio
async def test_category_change_blocked_while_linked(client: AsyncClient, auth_headers):
    project = await create_entry(client, auth_headers, title="Portal", category="project")
    method = await create_entry(client, auth_headers, title="Design Sprint", category="method")
    await client.post(
        "/api/v1/links", json={"source_id": project["id"], "target_id": method["id"]}, headers=auth_headers
    )

    response = await client.patch(f"{API}/{project['id']}", json={"category": "client"}, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["error"]["details"]["links"] == 1

    links = (await client.get(f"{API}/{method['id']}/links", headers=auth_headers)).json()
    assert [p["id"] for p in links["projects"]] == [project["id"]]
    assert links["clients"] == []

    # Same category and unlinked entries may still be patched
    response = await client.patch(f"{API}/{project['id']}", json={"category": "project"}, headers=auth_headers)
    assert response.status_code == 200
    await client.request(
        "DELETE", "/api/v1/links", json={"source_id": project["id"], "target_id": method["id"]}, headers=auth_headers
    )
    response = await client.patch(f"{API}/{project['id']}", json={"category": "client"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["category"] == "client"
