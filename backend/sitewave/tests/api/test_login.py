from fastapi.testclient import TestClient

from sitewave.core.config import settings
from sitewave.models import User

API = settings.API_V1_STR


def test_login_returns_access_token(client: TestClient, admin_user: User) -> None:
    r = client.post(
        f"{API}/login/access-token",
        data={"username": admin_user.email, "password": "password123"},
    )
    assert r.status_code == 200
    tokens = r.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["access_token"]


def test_login_rejects_bad_password(client: TestClient, admin_user: User) -> None:
    r = client.post(
        f"{API}/login/access-token",
        data={"username": admin_user.email, "password": "wrong-password"},
    )
    assert r.status_code == 400
    assert r.json() == {
        "success": False,
        "data": None,
        "error": "Incorrect email or password",
    }


def test_test_token_returns_current_user(
    client: TestClient, admin_headers: dict[str, str]
) -> None:
    r = client.post(f"{API}/login/test-token", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["email"] == "admin@example.com"


def test_register_creates_plain_user(client: TestClient) -> None:
    r = client.post(
        f"{API}/auth/register",
        json={"email": "new@example.com", "password": "longenough", "full_name": "New"},
    )
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["email"] == "new@example.com"
    assert data["role"] == "user"
    assert "hashed_password" not in data


def test_register_rejects_duplicate_email(client: TestClient, plain_user: User) -> None:
    r = client.post(
        f"{API}/auth/register",
        json={"email": plain_user.email, "password": "longenough"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "A user with this email already exists"


def test_register_rejects_short_password(client: TestClient) -> None:
    r = client.post(
        f"{API}/auth/register", json={"email": "short@example.com", "password": "short"}
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_invalid_token_is_rejected(client: TestClient) -> None:
    r = client.get(f"{API}/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 403
