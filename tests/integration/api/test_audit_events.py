import pytest
from httpx import AsyncClient

from tests.utils.api_helpers import auth_headers, create_project
from tests.utils.json_compare import strip_volatile


@pytest.mark.asyncio
async def test_audit_log_records_sharing_and_access(client: AsyncClient, db_session):
    project_id = await create_project(client)
    shared = await client.post(
        f"/projects/{project_id}/invitations",
        json={"emails": ["a@x.com"], "is_private": True},
        headers=auth_headers(),
    )
    token = shared.json()["invited"][0]["token"]
    await client.delete(f"/invitations/{token}", headers=auth_headers())

    response = await client.get(
        f"/projects/{project_id}/audit-events", headers=auth_headers()
    )

    assert response.status_code == 200
    events = response.json()["events"]
    assert [e["action"] for e in events] == [
        "invitation_revoked",
        "invitation_sent",
        "project_created",
    ]
    assert strip_volatile(events[0]) == {
        "action": "invitation_revoked",
        "actor_id": "owner-1",
        "metadata": {"token_prefix": token[:8], "email": "a@x.com"},
    }
    assert response.json()["next_cursor"] is None


@pytest.mark.asyncio
async def test_audit_log_pagination(client: AsyncClient):
    project_id = await create_project(client)
    await client.post(
        f"/projects/{project_id}/invitations",
        json={"emails": ["a@x.com", "b@x.com", "c@x.com"]},
        headers=auth_headers(),
    )

    first = await client.get(
        f"/projects/{project_id}/audit-events",
        params={"limit": 2},
        headers=auth_headers(),
    )
    assert len(first.json()["events"]) == 2
    cursor = first.json()["next_cursor"]
    assert cursor is not None

    second = await client.get(
        f"/projects/{project_id}/audit-events",
        params={"limit": 2, "cursor": cursor},
        headers=auth_headers(),
    )
    assert len(second.json()["events"]) == 2
    assert second.json()["next_cursor"] is None
    assert second.json()["events"][-1]["action"] == "project_created"


@pytest.mark.asyncio
async def test_audit_log_is_owner_only(client: AsyncClient):
    project_id = await create_project(client)

    forbidden = await client.get(
        f"/projects/{project_id}/audit-events", headers=auth_headers("intruder")
    )
    bad_cursor = await client.get(
        f"/projects/{project_id}/audit-events",
        params={"cursor": "yesterday"},
        headers=auth_headers(),
    )

    assert forbidden.status_code == 403
    assert bad_cursor.status_code == 400
    assert bad_cursor.json()["error"]["code"] == "INVALID_CURSOR"
