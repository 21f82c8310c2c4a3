from fastapi.testclient import TestClient

from sitewave.core.config import settings
from sitewave.models import User

API = settings.API_V1_STR


def test_read_and_update_me(client: TestClient, user_headers: dict[str, str]) -> None:
    r = client.get(f"{API}/users/me", headers=user_headers)
    assert r.status_code == 200
    assert r.json()["data"]["email"] == "reader@example.com"

    r = client.patch(
        f"{API}/users/me", headers=user_headers, json={"full_name": "Avid Reader"}
    )
    assert r.status_code == 200
    assert r.json()["data"]["full_name"] == "Avid Reader"


def test_change_own_password(client: TestClient, user_headers: dict[str, str]) -> None:
    r = client.patch(
        f"{API}/users/me/password",
        headers=user_headers,
        json={"current_password": "password123", "new_password": "password456"},
    )
    assert r.status_code == 200

    r = client.patch(
        f"{API}/users/me/password",
        headers=user_headers,
        json={"current_password": "password123", "new_password": "password789"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Incorrect password"


def test_admin_lists_users_with_filters(
    client: TestClient, admin_headers: dict[str, str], plain_user: User, editor_user: User
) -> None:
    r = client.get(f"{API}/admin/users/", headers=admin_headers)
    assert r.status_code == 200
    page = r.json()["data"]
    assert page["total"] == 3
    assert page["current_page"] == 1
    assert page["has_next_page"] is False

    r = client.get(f"{API}/admin/users/?role=editor", headers=admin_headers)
    assert [u["email"] for u in r.json()["data"]["items"]] == ["editor@example.com"]

    r = client.get(f"{API}/admin/users/?search=reader", headers=admin_headers)
    assert r.json()["data"]["total"] == 1


def test_admin_user_list_pagination_limits(
    client: TestClient, admin_headers: dict[str, str]
) -> None:
    r = client.get(f"{API}/admin/users/?limit=101", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid limit. Must be between 1 and 100"

    r = client.get(f"{API}/admin/users/?page=0", headers=admin_headers)
    assert r.status_code == 400


def test_editor_cannot_manage_users(client: TestClient, editor_headers: dict[str, str]) -> None:
    r = client.get(f"{API}/admin/users/", headers=editor_headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Admin access required"


def test_admin_creates_and_updates_user(
    client: TestClient, admin_headers: dict[str, str]
) -> None:
    r = client.post(
        f"{API}/admin/users/",
        headers=admin_headers,
        json={"email": "writer@example.com", "password": "password123", "role": "editor"},
    )
    assert r.status_code == 201
    user_id = r.json()["data"]["id"]

    r = client.patch(
        f"{API}/admin/users/{user_id}",
        headers=admin_headers,
        json={"role": "viewer", "is_active": False},
    )
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "viewer"
    assert r.json()["data"]["is_active"] is False

    for body in ({"email": None}, {"password": None}, {"role": None}):
        r = client.patch(f"{API}/admin/users/{user_id}", headers=admin_headers, json=body)
        assert r.status_code == 400
        assert r.json()["error"] == "Validation failed"


def test_admin_cannot_demote_or_delete_self(
    client: TestClient, admin_headers: dict[str, str], admin_user: User
) -> None:
    r = client.patch(
        f"{API}/admin/users/{admin_user.id}", headers=admin_headers, json={"role": "user"}
    )
    assert r.status_code == 400

    r = client.delete(f"{API}/admin/users/{admin_user.id}", headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["error"] == "You cannot delete your own account"


def test_admin_deletes_other_user(
    client: TestClient, admin_headers: dict[str, str], plain_user: User
) -> None:
    r = client.delete(f"{API}/admin/users/{plain_user.id}", headers=admin_headers)
    assert r.status_code == 200
    r = client.delete(f"{API}/admin/users/{plain_user.id}", headers=admin_headers)
    assert r.status_code == 404
