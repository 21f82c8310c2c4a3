from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from sitewave.core.config import settings
from sitewave.emails.service import SendEmailResult, get_email_service
from sitewave.main import app
from sitewave.models import ContactStatus, ContactSubmission

API = settings.API_V1_STR

VALID_SUBMISSION = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "subject": "Project enquiry",
    "message": "I would like to discuss a new website for my bakery.",
}


@pytest.fixture
def email_service():
    service = MagicMock()
    service.enabled = True
    service.send_templated_email.return_value = SendEmailResult(success=True, id="em_1")
    app.dependency_overrides[get_email_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_email_service, None)


def _seed(
    session: Session,
    name: str,
    status: ContactStatus = ContactStatus.new,
    created_at: datetime | None = None,
) -> ContactSubmission:
    submission = ContactSubmission(
        name=name,
        email=f"{name.lower()}@example.com",
        message="Hello there, this is a message.",
        status=status,
    )
    if created_at is not None:
        submission.created_at = created_at
    session.add(submission)
    session.commit()
    session.refresh(submission)
    return submission


def test_submit_contact_form_stores_submission(
    client: TestClient, session: Session, email_service: MagicMock, monkeypatch
) -> None:
    monkeypatch.setattr(settings, "ADMIN_NOTIFICATION_EMAIL", "owner@example.com")
    r = client.post(
        f"{API}/contact/",
        json=VALID_SUBMISSION,
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert r.status_code == 201
    assert r.json()["success"] is True

    stored = session.exec(select(ContactSubmission)).one()
    assert stored.ip_address == "203.0.113.7"
    assert stored.status == ContactStatus.new

    templates = [c.args[0] for c in email_service.send_templated_email.call_args_list]
    assert templates == ["contact_form_notification", "contact_form_confirmation"]


def test_submit_contact_form_validates_fields(client: TestClient) -> None:
    r = client.post(f"{API}/contact/", json={**VALID_SUBMISSION, "message": "too short"})
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"


def test_spam_is_acknowledged_but_dropped(
    client: TestClient, session: Session, email_service: MagicMock
) -> None:
    r = client.post(
        f"{API}/contact/",
        json={**VALID_SUBMISSION, "message": "You are a WINNER, click here to claim your prize"},
    )
    assert r.status_code == 201
    assert session.exec(select(ContactSubmission)).all() == []
    email_service.send_templated_email.assert_not_called()


def test_contact_form_is_rate_limited(client: TestClient, email_service: MagicMock) -> None:
    headers = {"X-Real-IP": "198.51.100.4"}
    for _ in range(5):
        assert client.post(f"{API}/contact/", json=VALID_SUBMISSION, headers=headers).status_code == 201
    r = client.post(f"{API}/contact/", json=VALID_SUBMISSION, headers=headers)
    assert r.status_code == 429

    r = client.post(
        f"{API}/contact/", json=VALID_SUBMISSION, headers={"X-Real-IP": "198.51.100.5"}
    )
    assert r.status_code == 201


def test_admin_lists_submissions_with_status_counts(
    client: TestClient, session: Session, admin_headers: dict[str, str]
) -> None:
    _seed(session, "Alice")
    _seed(session, "Bob", ContactStatus.read)
    _seed(session, "Carol", ContactStatus.responded)

    r = client.get(f"{API}/admin/contact-submissions/", headers=admin_headers)
    assert r.status_code == 200
    page = r.json()["data"]
    assert page["total"] == 3
    assert page["status_counts"] == {"new": 1, "read": 1, "responded": 1}

    r = client.get(
        f"{API}/admin/contact-submissions/?status=read&search_query=bob", headers=admin_headers
    )
    assert [s["name"] for s in r.json()["data"]["items"]] == ["Bob"]


def test_admin_filters_submissions_by_date_range(
    client: TestClient, session: Session, admin_headers: dict[str, str]
) -> None:
    _seed(session, "Early", created_at=datetime(2024, 3, 9, 23, 0, tzinfo=timezone.utc))
    _seed(session, "Evening", created_at=datetime(2024, 3, 10, 18, 30, tzinfo=timezone.utc))
    _seed(session, "Late", created_at=datetime(2024, 3, 11, 0, 5, tzinfo=timezone.utc))
    url = f"{API}/admin/contact-submissions/"

    r = client.get(f"{url}?date_to=2024-03-10", headers=admin_headers)
    assert sorted(s["name"] for s in r.json()["data"]["items"]) == ["Early", "Evening"]

    r = client.get(f"{url}?date_from=2024-03-10&date_to=2024-03-10", headers=admin_headers)
    assert [s["name"] for s in r.json()["data"]["items"]] == ["Evening"]

    r = client.get(f"{url}?date_from=2024-03-11", headers=admin_headers)
    assert [s["name"] for s in r.json()["data"]["items"]] == ["Late"]


def test_editor_cannot_read_submissions(client: TestClient, editor_headers: dict[str, str]) -> None:
    r = client.get(f"{API}/admin/contact-submissions/", headers=editor_headers)
    assert r.status_code == 403


def test_update_and_delete_submission(
    client: TestClient, session: Session, admin_headers: dict[str, str]
) -> None:
    submission = _seed(session, "Dana")
    url = f"{API}/admin/contact-submissions/{submission.id}"

    r = client.patch(url, headers=admin_headers, json={"status": "responded"})
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "responded"
    assert r.json()["message"] == "Submission status updated"

    r = client.patch(url, headers=admin_headers, json={"status": "archived"})
    assert r.status_code == 400

    r = client.delete(url, headers=admin_headers)
    assert r.json()["message"] == "Contact submission deleted successfully"
    assert client.get(url, headers=admin_headers).status_code == 404


def test_contact_analytics(
    client: TestClient, session: Session, admin_headers: dict[str, str]
) -> None:
    _seed(session, "Erin", ContactStatus.responded)
    _seed(session, "Finn")

    r = client.get(f"{API}/admin/contact-submissions/analytics?days=7", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["total"] == 2
    assert data["response_rate"] == 50.0
    assert len(data["submissions_per_day"]) == 7
    assert data["submissions_per_day"][-1]["count"] == 2

    r = client.get(f"{API}/admin/contact-submissions/analytics?days=0", headers=admin_headers)
    assert r.status_code == 400
