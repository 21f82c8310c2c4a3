import logging
from pathlib import Path
from typing import Any

import httpx
from jinja2 import Environment, FileSystemLoader
from pydantic import BaseModel

from sitewave.core.config import settings

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUBJECTS = {
    "contact_form_notification": "New contact form submission: {subject}",
    "contact_form_confirmation": "We received your message",
    "user_invitation": "You've been invited to join {site_name}",
    "welcome": "Welcome to {site_name}",
    "password_reset": "Reset your {site_name} password",
    "notification": "{title}",
}


class SendEmailResult(BaseModel):
    success: bool
    id: str | None = None
    error: str | None = None


class _SafeDict(dict):
    def __missing__(self, key: str) -> str:
        return ""


class EmailService:
    """Renders jinja2 email templates and delivers them through the Resend API."""

    def __init__(
        self,
        api_key: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
        api_url: str | None = None,
    ):
        self.api_key = api_key or settings.RESEND_API_KEY
        self.from_email = from_email or settings.EMAILS_FROM_EMAIL
        self.from_name = from_name or settings.EMAILS_FROM_NAME or settings.PROJECT_NAME
        self.api_url = api_url or settings.RESEND_API_URL
        self.env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.from_email)

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        template = self.env.get_template(f"{template_name}.html")
        return template.render(
            site_name=settings.PROJECT_NAME, site_url=settings.SITE_URL, **context
        )

    def send_email(
        self, *, to: str, subject: str, html: str, reply_to: str | None = None
    ) -> SendEmailResult:
        if not self.enabled:
            logger.warning("Email delivery is not configured; skipping '%s' to %s", subject, to)
            return SendEmailResult(success=False, error="Email service is not configured")

        payload: dict[str, Any] = {
            "from": f"{self.from_name} <{self.from_email}>",
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            with httpx.Client(timeout=15.0) as client:
                response = client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Email provider returned %s for '%s' to %s",
                exc.response.status_code,
                subject,
                to,
            )
            return SendEmailResult(
                success=False, error=f"Email provider returned {exc.response.status_code}"
            )
        except httpx.HTTPError as exc:
            logger.error("Failed to send email '%s' to %s: %s", subject, to, exc)
            return SendEmailResult(success=False, error="Failed to contact the email provider")
        except ValueError:
            logger.error("Email provider sent an unreadable reply for '%s' to %s", subject, to)
            return SendEmailResult(success=False, error="Invalid response from the email provider")

        logger.info("Sent email '%s' to %s", subject, to)
        message_id = body.get("id") if isinstance(body, dict) else None
        return SendEmailResult(success=True, id=message_id)

    def send_templated_email(
        self,
        template_name: str,
        data: dict[str, Any],
        *,
        to: str,
        subject: str | None = None,
        reply_to: str | None = None,
    ) -> SendEmailResult:
        if template_name not in TEMPLATE_SUBJECTS:
            raise ValueError(f"Unknown email template: {template_name}")
        resolved_subject = subject or TEMPLATE_SUBJECTS[template_name].format_map(
            _SafeDict({"site_name": settings.PROJECT_NAME, **data})
        )
        html = self.render(template_name, data)
        return self.send_email(to=to, subject=resolved_subject, html=html, reply_to=reply_to)


def get_email_service() -> EmailService:
    return EmailService()
