"""
Content Studio Draft Tests

Version history, publishing and the advisory editing lock.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from conftest import TEST_USER_ID, create_entry, headers_for

from app.core.time import utcnow
from app.models.content import ContentDraft
from app.services.content_studio.draft_service import DraftService

API = "/api/v1/drafts"


async def make_draft(client: AsyncClient, headers: dict, **analysis) -> dict:
    body = {
        "title": "Healthcare Portal Offer",
        "winning_strategy": "Lead with accessibility expertise",
        "analysis": {
            "summary": "Patient portal redesign",
            "challenges": ["Legacy systems"],
            "deliverables": ["UX research", "Prototype"],
            **analysis,
        },
    }
    response = await client.post(API, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_draft_records_first_version(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    assert draft["status"] == "draft"
    assert draft["created_by"] == TEST_USER_ID
    assert draft["draft_content"].startswith("[MOCK]")
    assert draft["selected_template_id"] is None

    response = await client.get(f"{API}/{draft['id']}/versions", headers=auth_headers)
    versions = response.json()
    assert len(versions) == 1
    assert versions[0]["version_number"] == 1
    assert versions[0]["change_summary"] == "Initial AI-generated draft"


@pytest.mark.asyncio
async def test_create_draft_ignores_unknown_template(client: AsyncClient, auth_headers):
    response = await client.post(
        API,
        json={
            "title": "Offer",
            "winning_strategy": "Strategy",
            "analysis": {"summary": "Tender"},
            "template_id": "no-such-template",
            "style_guide_id": "no-such-guide",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["selected_template_id"] is None
    assert data["selected_style_guide_id"] is None


@pytest.mark.asyncio
async def test_create_draft_requires_strategy(client: AsyncClient, auth_headers):
    response = await client.post(
        API,
        json={"title": "Offer", "winning_strategy": "  ", "analysis": {}},
        headers=auth_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_saves_create_sequential_versions(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}"

    response = await client.patch(url, json={"content": "Second"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["draft_content"] == "Second"

    response = await client.patch(
        url, json={"content": "Third", "change_summary": "Tightened intro"}, headers=auth_headers
    )
    assert response.status_code == 200

    response = await client.get(f"{url}/versions", headers=auth_headers)
    versions = response.json()
    assert [v["version_number"] for v in versions] == [3, 2, 1]
    assert versions[0]["change_summary"] == "Tightened intro"
    assert versions[1]["change_summary"] == "Version 2 saved"

    response = await client.get(f"{url}/versions/2", headers=auth_headers)
    assert response.json()["content"] == "Second"

    response = await client.get(f"{url}/versions/9", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_restore_version(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}"
    original = draft["draft_content"]

    await client.patch(url, json={"content": "Rewritten"}, headers=auth_headers)
    response = await client.post(f"{url}/versions/1/restore", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["draft_content"] == original

    versions = (await client.get(f"{url}/versions", headers=auth_headers)).json()
    assert versions[0]["version_number"] == 3
    assert versions[0]["change_summary"] == "Restored from version 1"


@pytest.mark.asyncio
async def test_status_transitions(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}/status"

    response = await client.put(url, json={"status": "review"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "review"

    response = await client.put(url, json={"status": "published"}, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_publish_creates_offer_and_links_methods(client: AsyncClient, auth_headers):
    method = await create_entry(client, auth_headers, title="Design Sprint", category="method")
    draft = await make_draft(client, auth_headers, referenced_methods=[method["id"]])
    url = f"{API}/{draft['id']}"

    response = await client.post(f"{url}/publish", json={"title": "Final Offer"}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["linked_methods"] == 1
    assert data["draft"]["status"] == "published"
    assert data["draft"]["published_offer_id"] == data["offer_id"]

    offer = (await client.get(f"/api/v1/knowledge/{data['offer_id']}", headers=auth_headers)).json()
    assert offer["title"] == "Final Offer"
    assert offer["category"] == "offer"
    assert offer["offer_status"] == "pending"
    assert offer["offer_work_status"] == "under_development"
    assert offer["winning_strategy"] == "Lead with accessibility expertise"

    links = (await client.get(f"/api/v1/knowledge/{data['offer_id']}/links", headers=auth_headers)).json()
    assert [m["id"] for m in links["methods"]] == [method["id"]]

    # Published drafts are frozen
    response = await client.post(f"{url}/publish", json={}, headers=auth_headers)
    assert response.status_code == 409
    response = await client.patch(url, json={"content": "Late edit"}, headers=auth_headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_save_retries_taken_version_number(client: AsyncClient, auth_headers, monkeypatch):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}"
    next_number = DraftService._next_version_number
    calls = []

    async def stale_once(self, draft_id):
        calls.append(draft_id)
        if len(calls) == 1:
            return 1
        return await next_number(self, draft_id)

    monkeypatch.setattr(DraftService, "_next_version_number", stale_once)
    response = await client.patch(url, json={"content": "Second"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["draft_content"] == "Second"
    assert len(calls) == 2

    versions = (await client.get(f"{url}/versions", headers=auth_headers)).json()
    assert [v["version_number"] for v in versions] == [2, 1]
    assert versions[0]["change_summary"] == "Version 2 saved"


@pytest.mark.asyncio
async def test_save_gives_up_after_repeated_collisions(client: AsyncClient, auth_headers, monkeypatch):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}"

    async def always_taken(self, draft_id):
        return 1

    monkeypatch.setattr(DraftService, "_next_version_number", always_taken)
    response = await client.patch(url, json={"content": "Lost edit"}, headers=auth_headers)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "conflict"

    monkeypatch.undo()
    current = (await client.get(url, headers=auth_headers)).json()
    assert current["draft_content"] == draft["draft_content"]
    versions = (await client.get(f"{url}/versions", headers=auth_headers)).json()
    assert [v["version_number"] for v in versions] == [1]


@pytest.mark.asyncio
async def test_publish_with_new_content_records_version(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}"

    response = await client.post(f"{url}/publish", json={"content": "Final text"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["draft"]["draft_content"] == "Final text"

    versions = (await client.get(f"{url}/versions", headers=auth_headers)).json()
    assert [v["version_number"] for v in versions] == [2, 1]
    assert versions[0]["change_summary"] == "Published"
    version = (await client.get(f"{url}/versions/2", headers=auth_headers)).json()
    assert version["content"] == "Final text"


@pytest.mark.asyncio
async def test_delete_draft(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    response = await client.delete(f"{API}/{draft['id']}", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get(f"{API}/{draft['id']}", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_lock_claim_and_takeover(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}/lock"
    other = headers_for("google-user-2")

    response = await client.post(url, headers=auth_headers)
    assert response.status_code == 200
    status = response.json()
    assert status["editor"] == TEST_USER_ID
    assert status["active"] is True
    assert status["held_by_other"] is False
    assert status["previous_editor"] is None

    response = await client.get(url, headers=other)
    assert response.json()["held_by_other"] is True

    # Refreshing someone else's lock is refused
    response = await client.post(f"{url}/refresh", headers=other)
    assert response.status_code == 409

    response = await client.post(url, headers=other)
    status = response.json()
    assert status["editor"] == "google-user-2"
    assert status["previous_editor"] == TEST_USER_ID

    # Saving is never blocked by the lock
    response = await client.patch(f"{API}/{draft['id']}", json={"content": "Mine"}, headers=auth_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_lock_does_not_touch_updated_at(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)

    await client.post(f"{API}/{draft['id']}/lock", headers=auth_headers)
    await client.post(f"{API}/{draft['id']}/lock/refresh", headers=auth_headers)

    after = (await client.get(f"{API}/{draft['id']}", headers=auth_headers)).json()
    assert after["updated_at"] == draft["updated_at"]
    assert after["currently_editing_by"] == TEST_USER_ID


@pytest.mark.asyncio
async def test_release_lock(client: AsyncClient, auth_headers):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}/lock"
    other = headers_for("google-user-2")

    await client.post(url, headers=auth_headers)

    # Another editor cannot release an active lock
    response = await client.delete(url, headers=other)
    assert response.json()["editor"] == TEST_USER_ID

    response = await client.delete(url, headers=auth_headers)
    status = response.json()
    assert status["editor"] is None
    assert status["active"] is False


@pytest.mark.asyncio
async def test_stale_lock_is_inactive(client: AsyncClient, auth_headers, session_factory):
    draft = await make_draft(client, auth_headers)
    url = f"{API}/{draft['id']}/lock"
    await client.post(url, headers=auth_headers)

    async with session_factory() as session:
        await session.execute(
            update(ContentDraft)
            .where(ContentDraft.id == draft["id"])
            .values(currently_editing_since=utcnow() - timedelta(minutes=30))
        )
        await session.commit()

    other = headers_for("google-user-2")
    response = await client.get(url, headers=other)
    status = response.json()
    assert status["active"] is False
    assert status["held_by_other"] is False

    # Stale locks can be cleared by anyone
    response = await client.delete(url, headers=other)
    assert response.json()["editor"] is None
