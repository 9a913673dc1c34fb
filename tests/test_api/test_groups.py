"""
Tests the group endpoints end to end.
"""

import pytest

from groupdiary.core.uuid import UUID


async def create_group(client, headers, **content) -> str:
    response = await client.post("/groups", json=content, headers=headers)
    assert response.status_code == 201
    return response.json()["group_id"]


@pytest.mark.asyncio
async def test_invitation_flow(client, register):
    leader = await register("Leader", "leader@example.com")
    invitee = await register("Invitee", "invitee@example.com")

    group_id = await create_group(client, leader, name="Hikers")

    response = await client.get("/groups/mine", headers=leader)
    assert response.status_code == 200
    (group,) = response.json()
    assert group["group_id"] == group_id
    assert group["has_password"] is False
    assert "password_hash" not in group

    response = await client.post(
        f"/groups/{group_id}/invite",
        json={"user_emails": ["invitee@example.com", "unknown@example.com"]},
        headers=leader,
    )
    assert response.status_code == 200

    response = await client.get("/groups/invitations", headers=invitee)
    assert response.json() == [
        {"group_id": group_id, "group_name": "Hikers", "inviter_name": "Leader"}
    ]

    response = await client.post(f"/groups/{group_id}/accept", headers=invitee)
    assert response.status_code == 200

    response = await client.get("/groups/invitations", headers=invitee)
    assert response.json() == []

    response = await client.get(f"/groups/{group_id}/members", headers=invitee)
    assert response.status_code == 200
    assert {m["email"] for m in response.json()["members"]} == {
        "leader@example.com",
        "invitee@example.com",
    }


@pytest.mark.asyncio
async def test_reject(client, register):
    leader = await register("Leader", "leader@example.com")
    invitee = await register("Invitee", "invitee@example.com")
    group_id = await create_group(client, leader, name="Hikers")

    await client.post(
        f"/groups/{group_id}/invite",
        json={"user_emails": ["invitee@example.com"]},
        headers=leader,
    )

    for _ in range(2):
        response = await client.post(f"/groups/{group_id}/reject", headers=invitee)
        assert response.status_code == 200

    response = await client.get("/groups/invitations", headers=invitee)
    assert response.json() == []

    response = await client.post(f"/groups/{group_id}/accept", headers=invitee)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_password_gate(client, register):
    leader = await register("Leader", "leader@example.com")
    member = await register("Member", "member@example.com")
    group_id = await create_group(client, leader, name="Locked", password="abc123")

    response = await client.get("/groups/mine", headers=leader)
    assert response.json()[0]["has_password"] is True

    response = await client.post(
        f"/groups/{group_id}/verify-password", json={"password": "abc123"}, headers=member
    )
    assert response.status_code == 200

    response = await client.post(
        f"/groups/{group_id}/verify-password", json={"password": "wrong"}, headers=member
    )
    assert response.status_code == 403

    # Non-leaders cannot change it
    response = await client.put(
        f"/groups/{group_id}/password", json={"new_password": "mine"}, headers=member
    )
    assert response.status_code == 403

    response = await client.put(
        f"/groups/{group_id}/password", json={"new_password": "xyz789"}, headers=leader
    )
    assert response.status_code == 200

    response = await client.post(
        f"/groups/{group_id}/verify-password", json={"password": "abc123"}, headers=member
    )
    assert response.status_code == 403

    response = await client.post(
        f"/groups/{group_id}/verify-password", json={"password": "xyz789"}, headers=member
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_remove_member(client, register):
    leader = await register("Leader", "leader@example.com")
    member = await register("Member", "member@example.com")
    group_id = await create_group(client, leader, name="Hikers")

    await client.post(
        f"/groups/{group_id}/invite",
        json={"user_emails": ["member@example.com"]},
        headers=leader,
    )
    await client.post(f"/groups/{group_id}/accept", headers=member)

    response = await client.delete(
        f"/groups/{group_id}/members/{leader['X-User-Id']}", headers=leader
    )
    assert response.status_code == 400

    response = await client.delete(
        f"/groups/{group_id}/members/{leader['X-User-Id']}", headers=member
    )
    assert response.status_code == 403

    response = await client.delete(
        f"/groups/{group_id}/members/{member['X-User-Id']}", headers=leader
    )
    assert response.status_code == 200

    response = await client.get(f"/groups/{group_id}/members", headers=leader)
    assert [m["email"] for m in response.json()["members"]] == ["leader@example.com"]


@pytest.mark.asyncio
async def test_leave(client, register):
    leader = await register("Leader", "leader@example.com")
    member = await register("Member", "member@example.com")
    group_id = await create_group(client, leader, name="Hikers")

    await client.post(
        f"/groups/{group_id}/invite",
        json={"user_emails": ["member@example.com"]},
        headers=leader,
    )
    await client.post(f"/groups/{group_id}/accept", headers=member)

    response = await client.post(f"/groups/{group_id}/leave", headers=leader)
    assert response.status_code == 400

    response = await client.post(f"/groups/{group_id}/leave", headers=member)
    assert response.status_code == 200

    response = await client.post(f"/groups/{group_id}/leave", headers=member)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_group(client, register):
    leader = await register("Leader", "leader@example.com")
    outsider = await register("Outsider", "outsider@example.com")
    group_id = await create_group(client, leader, name="Hikers")

    for title in ("One", "Two"):
        response = await client.post(
            "/diary",
            json={"title": title, "content": "...", "group_id": group_id},
            headers=leader,
        )
        assert response.status_code == 201

    response = await client.post(
        "/diary",
        json={"title": "Sneaky", "content": "...", "group_id": group_id},
        headers=outsider,
    )
    assert response.status_code == 403

    response = await client.get(f"/diary/group/{group_id}", headers=leader)
    assert [e["title"] for e in response.json()] == ["One", "Two"]

    response = await client.delete(f"/groups/{group_id}", headers=outsider)
    assert response.status_code == 403

    response = await client.delete(f"/groups/{group_id}", headers=leader)
    assert response.status_code == 200
    assert response.json()["deleted_entries"] == 2

    response = await client.get(f"/groups/{group_id}/members", headers=leader)
    assert response.status_code == 404

    response = await client.get(f"/diary/group/{group_id}", headers=leader)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_error_statuses(client, register):
    leader = await register("Leader", "leader@example.com")
    missing = str(UUID(int=7))

    response = await client.post(f"/groups/{missing}/accept", headers=leader)
    assert response.status_code == 404
    assert "not found" in response.json()["detail"]

    response = await client.post("/groups", json={"name": "  "}, headers=leader)
    assert response.status_code == 400

    response = await client.post(
        "/groups", json={"name": "Ghosts"}, headers={"X-User-Id": missing}
    )
    assert response.status_code == 404

    response = await client.post("/groups", json={"name": "No header"})
    assert response.status_code == 422

    response = await client.post(
        "/users", json={"name": "Again", "email": "leader@example.com"}
    )
    assert response.status_code == 409
