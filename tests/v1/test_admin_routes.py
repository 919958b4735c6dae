# mypy: ignore-errors
"""Tests for the admin endpoints."""

from fastapi import status


def test_blacklist_lifecycle(client, admin_headers) -> None:
    created = client.post(
        "/api/v1/admin/blacklist", json={"keyword": "  Scam  "}, headers=admin_headers
    )
    assert created.status_code == status.HTTP_201_CREATED
    keyword = created.json()
    assert keyword["keyword"] == "scam"

    listed = client.get("/api/v1/admin/blacklist", headers=admin_headers)
    assert [k["id"] for k in listed.json()] == [keyword["id"]]

    removed = client.delete(f"/api/v1/admin/blacklist/{keyword['id']}", headers=admin_headers)
    assert removed.status_code == status.HTTP_200_OK
    assert removed.json()["is_active"] is False
    assert client.get("/api/v1/admin/blacklist", headers=admin_headers).json() == []


def test_blacklist_requires_admin(client, member_headers) -> None:
    response = client.post("/api/v1/admin/blacklist", json={"keyword": "x"}, headers=member_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_ban_then_unban(client, admin_headers, member, member_headers, discussion) -> None:
    banned = client.post(
        f"/api/v1/admin/users/{member.id}/ban",
        json={"ban": True, "reason": "spam"},
        headers=admin_headers,
    )
    assert banned.status_code == status.HTTP_200_OK
    assert banned.json()["is_banned"] is True
    assert banned.json()["ban_reason"] == "spam"

    blocked = client.post(
        f"/api/v1/discussions/{discussion.id}/comments",
        json={"content": "Let me in"},
        headers=member_headers,
    )
    assert blocked.status_code == status.HTTP_403_FORBIDDEN

    client.post(f"/api/v1/admin/users/{member.id}/ban", json={"ban": False}, headers=admin_headers)
    allowed = client.post(
        f"/api/v1/discussions/{discussion.id}/comments",
        json={"content": "Thanks"},
        headers=member_headers,
    )
    assert allowed.status_code == status.HTTP_201_CREATED


def test_ban_unknown_user(client, admin_headers) -> None:
    response = client.post(
        "/api/v1/admin/users/ghost/ban", json={"ban": True}, headers=admin_headers
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_audit_log(client, admin_headers, member) -> None:
    client.post(f"/api/v1/admin/users/{member.id}/ban", json={"ban": True}, headers=admin_headers)

    response = client.get("/api/v1/admin/audit", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    [entry] = response.json()
    assert entry["action_type"] == "ban"
    assert entry["target_id"] == member.id
    assert entry["metadata"] == {"username": member.username}


def test_user_list(client, admin_headers, member) -> None:
    response = client.get("/api/v1/admin/users", headers=admin_headers)

    assert member.id in {p["id"] for p in response.json()}
