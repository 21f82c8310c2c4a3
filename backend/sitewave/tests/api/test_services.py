from fastapi.testclient import TestClient
from sqlmodel import Session

from sitewave import crud
from sitewave.core.config import settings
from sitewave.models import PostStatus, ServiceCreate

API = settings.API_V1_STR


def _service_payload(**overrides) -> dict:
    payload = {
        "title": "Web Development",
        "slug": "web-development",
        "short_description": "Sites that ship",
        "full_description": "We build fast websites.",
        "timeline": "4-6 weeks",
        "category": "Development",
        "features": ["Responsive design"],
        "process": [{"step": 1, "title": "Discovery", "description": "Workshops"}],
        "pricing": [
            {"name": "Starter", "price": "$999", "description": "Small sites", "popular": True}
        ],
        "faq": [{"question": "Hosting?", "answer": "Included"}],
        "testimonial": {"quote": "Great", "author": "Sam", "company": "Acme"},
    }
    payload.update(overrides)
    return payload


def _seed(session: Session, slug: str, status: PostStatus, category: str = "Design") -> None:
    crud.create_service(
        session=session,
        service_in=ServiceCreate.model_validate(
            _service_payload(slug=slug, title=slug.title(), status=status, category=category)
        ),
    )


def test_create_service_keeps_nested_sections(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    r = client.post(f"{API}/admin/services/", headers=editor_headers, json=_service_payload())
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["process"][0]["title"] == "Discovery"
    assert data["pricing"][0]["popular"] is True
    assert data["testimonial"]["company"] == "Acme"
    assert data["status"] == "published"

    r = client.post(f"{API}/admin/services/", headers=editor_headers, json=_service_payload())
    assert r.status_code == 409


def test_create_service_rejects_unknown_category(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    r = client.post(
        f"{API}/admin/services/",
        headers=editor_headers,
        json=_service_payload(category="Catering"),
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_update_and_bulk_delete_services(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    r = client.post(f"{API}/admin/services/", headers=editor_headers, json=_service_payload())
    service_id = r.json()["data"]["id"]

    r = client.put(
        f"{API}/admin/services/{service_id}",
        headers=editor_headers,
        json={"timeline": "8 weeks", "features": ["SEO", "CMS"]},
    )
    assert r.status_code == 200
    assert r.json()["data"]["timeline"] == "8 weeks"
    assert r.json()["data"]["features"] == ["SEO", "CMS"]

    r = client.request(
        "DELETE", f"{API}/admin/services/", headers=editor_headers, json={"ids": [service_id]}
    )
    assert r.json()["data"] == {"deleted_count": 1}
    r = client.get(f"{API}/admin/services/{service_id}", headers=editor_headers)
    assert r.status_code == 404


def test_update_service_rejects_null_for_required_field(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    r = client.post(f"{API}/admin/services/", headers=editor_headers, json=_service_payload())
    service_id = r.json()["data"]["id"]

    for body in ({"title": None}, {"features": None}, {"category": None}):
        r = client.put(f"{API}/admin/services/{service_id}", headers=editor_headers, json=body)
        assert r.status_code == 400

    r = client.put(
        f"{API}/admin/services/{service_id}", headers=editor_headers, json={"testimonial": None}
    )
    assert r.status_code == 200
    assert r.json()["data"]["testimonial"] is None


def test_admin_list_filters_by_status(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    _seed(session, "branding", PostStatus.published)
    _seed(session, "audit", PostStatus.draft, category="Consulting")

    r = client.get(f"{API}/admin/services/?status=draft", headers=editor_headers)
    assert [s["slug"] for s in r.json()["data"]["items"]] == ["audit"]

    r = client.get(f"{API}/admin/services/?category=Design", headers=editor_headers)
    assert [s["slug"] for s in r.json()["data"]["items"]] == ["branding"]


def test_public_services_only_show_published(client: TestClient, session: Session) -> None:
    _seed(session, "branding", PostStatus.published)
    _seed(session, "audit", PostStatus.draft)

    r = client.get(f"{API}/services/")
    assert r.status_code == 200
    assert [s["slug"] for s in r.json()["data"]["items"]] == ["branding"]

    r = client.get(f"{API}/services/branding")
    assert r.json()["data"]["title"] == "Branding"

    r = client.get(f"{API}/services/audit")
    assert r.status_code == 404
    assert r.json()["error"] == "Service not found"
