from unittest.mock import MagicMock, patch

import httpx
import pytest

from sitewave.emails.service import EmailService

API_URL = "https://api.resend.test/emails"


def _service() -> EmailService:
    return EmailService(
        api_key="re_test", from_email="hello@sitewave.dev", from_name="SiteWave", api_url=API_URL
    )


def _mock_http_client(response: MagicMock) -> MagicMock:
    mock_client = MagicMock()
    mock_client.__enter__.return_value = mock_client
    mock_client.post.return_value = response
    return mock_client


def test_send_email_posts_to_provider():
    response = MagicMock()
    response.json.return_value = {"id": "em_123"}
    mock_client = _mock_http_client(response)

    with patch("sitewave.emails.service.httpx.Client", return_value=mock_client):
        result = _service().send_email(
            to="jane@example.com", subject="Hi", html="<p>Hi</p>", reply_to="ops@example.com"
        )

    assert result.success is True
    assert result.id == "em_123"
    mock_client.post.assert_called_once_with(
        API_URL,
        json={
            "from": "SiteWave <hello@sitewave.dev>",
            "to": ["jane@example.com"],
            "subject": "Hi",
            "html": "<p>Hi</p>",
            "reply_to": "ops@example.com",
        },
        headers={"Authorization": "Bearer re_test"},
    )


def test_send_email_reports_provider_errors():
    request = httpx.Request("POST", API_URL)
    error_response = httpx.Response(422, request=request)
    response = MagicMock()
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "Unprocessable", request=request, response=error_response
    )

    with patch(
        "sitewave.emails.service.httpx.Client", return_value=_mock_http_client(response)
    ):
        result = _service().send_email(to="jane@example.com", subject="Hi", html="x")

    assert result.success is False
    assert result.error == "Email provider returned 422"


def test_send_email_reports_connection_errors():
    mock_client = MagicMock()
    mock_client.__enter__.return_value = mock_client
    mock_client.post.side_effect = httpx.ConnectError("refused")

    with patch("sitewave.emails.service.httpx.Client", return_value=mock_client):
        result = _service().send_email(to="jane@example.com", subject="Hi", html="x")

    assert result.error == "Failed to contact the email provider"


def test_send_email_reports_unreadable_reply():
    response = httpx.Response(
        200, content=b"<html>ok</html>", request=httpx.Request("POST", API_URL)
    )

    with patch(
        "sitewave.emails.service.httpx.Client", return_value=_mock_http_client(response)
    ):
        result = _service().send_email(to="jane@example.com", subject="Hi", html="x")

    assert result.success is False
    assert result.error == "Invalid response from the email provider"


def test_disabled_service_skips_delivery():
    service = EmailService(api_key="", from_email="")
    service.api_key = None
    with patch("sitewave.emails.service.httpx.Client") as mock_cls:
        result = service.send_email(to="jane@example.com", subject="Hi", html="x")
    assert result.success is False
    mock_cls.assert_not_called()


def test_send_templated_email_renders_and_builds_subject():
    service = _service()
    with patch.object(service, "send_email") as mock_send:
        service.send_templated_email(
            "contact_form_notification",
            {
                "name": "Jane",
                "email": "jane@example.com",
                "subject": "Quote",
                "message": "Need a site <soon>",
            },
            to="owner@example.com",
        )

    kwargs = mock_send.call_args.kwargs
    assert kwargs["subject"] == "New contact form submission: Quote"
    assert "Jane" in kwargs["html"]
    assert "&lt;soon&gt;" in kwargs["html"]


def test_unknown_template_is_rejected():
    with pytest.raises(ValueError, match="Unknown email template"):
        _service().send_templated_email("newsletter", {}, to="a@example.com")


@pytest.mark.parametrize(
    "template",
    ["contact_form_confirmation", "user_invitation", "welcome", "password_reset", "notification"],
)
def test_every_template_renders(template):
    html = _service().render(template, {"name": "Jane", "title": "News", "content": "Body"})
    assert "<html" in html.lower()
