import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import AuditEvent, OutboxMail
from tests.utils.api_helpers import auth_headers, create_project
from tests.utils.json_compare import strip_volatile


@pytest.mark.asyncio
async def test_create_project(client: AsyncClient):
    response = await client.post(
        "/projects",
        json={"name": "Spring campaign"},
        headers=auth_headers(),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Spring campaign"
    assert data["access_level"] == "public"

    access = await client.get(f"/access/projects/{data['id']}")
    assert access.status_code == 200
    assert access.json() == {"project_id": data["id"], "access_level": "public"}


@pytest.mark.asyncio
async def test_create_project_requires_jwt(client: AsyncClient):
    response = await client.post("/projects", json={"name": "X"})
    assert response.status_code in (401, 403)

    response = await client.post(
        "/projects",
        json={"name": "X"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_private_share_creates_invitation_and_mail(
    client: AsyncClient, db_session, test_data
):
    """Scenario A: Private Share

    Given a public project owned by the caller
    When the owner shares it privately with a@x.com
    Then one pending invitation without devices exists for a@x.com
    And one mail carrying the share link is queued
    And the project now requires a token
    """
    project_id = await create_project(client)

    response = await client.post(
        f"/projects/{project_id}/invitations",
        json=test_data.get("private_project_share"),
        headers=auth_headers(),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["failed"] == []
    assert len(data["invited"]) == 1
    sent = data["invited"][0]
    assert sent["email"] == "a@x.com"
    assert sent["share_url"] == (
        f"https://review.example/review/{project_id}?token={sent['token']}"
    )

    listing = await client.get(f"/projects/{project_id}/invitations", headers=auth_headers())
    assert listing.status_code == 200
    views = listing.json()
    assert len(views) == 1

    expected = test_data.get("invitation_view", project_id=project_id, resource_id=project_id)
    assert strip_volatile(views) == [expected]

    mails = (await db_session.exec(select(OutboxMail))).all()
    assert len(mails) == 1
    assert mails[0].to == "a@x.com"
    assert sent["share_url"] in mails[0].html

    access = await client.get(f"/access/projects/{project_id}")
    assert access.json()["access_level"] == "token_required"

    actions = {e.action for e in (await db_session.exec(select(AuditEvent))).all()}
    assert {"project_created", "invitation_sent"} <= actions


@pytest.mark.asyncio
async def test_file_share(client: AsyncClient, test_data):
    project_id = await create_project(client)

    response = await client.post(
        f"/projects/{project_id}/invitations",
        json=test_data.get("file_share"),
        headers=auth_headers(),
    )

    assert response.status_code == 201
    invited = response.json()["invited"]
    assert [i["email"] for i in invited] == ["b@x.com", "c@x.com"]
    assert all(f"/review/{project_id}/file/F9?token=" in i["share_url"] for i in invited)
    assert len({i["token"] for i in invited}) == 2

    resolved = await client.get(f"/access/invitations/{invited[0]['token']}")
    assert resolved.json()["resource_type"] == "file"
    assert resolved.json()["resource_id"] == "F9"

    access = await client.get(f"/access/projects/{project_id}")
    assert access.json()["access_level"] == "public"


@pytest.mark.asyncio
async def test_share_by_non_owner(client: AsyncClient, test_data):
    project_id = await create_project(client)

    response = await client.post(
        f"/projects/{project_id}/invitations",
        json=test_data.get("private_project_share"),
        headers=auth_headers("intruder"),
    )

    assert response.status_code == 403
    assert response.json()["error"] == {
        "code": "NOT_PROJECT_OWNER",
        "kind": "permission-denied",
        "message": "Only the project owner can share it",
    }


@pytest.mark.asyncio
async def test_share_unknown_project(client: AsyncClient, test_data):
    response = await client.post(
        "/projects/nope/invitations",
        json=test_data.get("private_project_share"),
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PROJECT_NOT_FOUND"
    assert response.json()["error"]["kind"] == "invalid-argument"


@pytest.mark.asyncio
async def test_share_validation(client: AsyncClient):
    project_id = await create_project(client)
    url = f"/projects/{project_id}/invitations"

    empty = await client.post(url, json={"emails": []}, headers=auth_headers())
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "NO_RECIPIENTS"

    bad_type = await client.post(
        url, json={"emails": ["a@x.com"], "resource_type": "folder"}, headers=auth_headers()
    )
    assert bad_type.status_code == 400
    assert bad_type.json()["error"]["code"] == "INVALID_RESOURCE_TYPE"

    file_without_id = await client.post(
        url, json={"emails": ["a@x.com"], "resource_type": "file"}, headers=auth_headers()
    )
    assert file_without_id.status_code == 400
    assert file_without_id.json()["error"]["code"] == "MISSING_FIELDS"

    bad_email = await client.post(url, json={"emails": ["not-an-email"]}, headers=auth_headers())
    assert bad_email.status_code == 422


@pytest.mark.asyncio
async def test_list_invitations_by_non_owner(client: AsyncClient):
    project_id = await create_project(client)

    response = await client.get(
        f"/projects/{project_id}/invitations", headers=auth_headers("intruder")
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invitation_stream_rejects_non_owner(client: AsyncClient):
    project_id = await create_project(client)

    forbidden = await client.get(
        f"/projects/{project_id}/invitations/stream", headers=auth_headers("intruder")
    )
    missing = await client.get("/projects/nope/invitations/stream", headers=auth_headers())

    assert forbidden.status_code == 403
    assert missing.status_code == 404
