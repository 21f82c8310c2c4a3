import logging
import re
from enum import Enum
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sitewave.api.deps import AdminUser
from sitewave.emails.service import EmailService, SendEmailResult, get_email_service
from sitewave.models import ApiResponse

router = APIRouter()
logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class EmailType(str, Enum):
    contact_form = "contact-form"
    user_invitation = "user-invitation"
    simple = "simple"


TEMPLATE_FOR_TYPE = {
    EmailType.contact_form: "contact_form_notification",
    EmailType.user_invitation: "user_invitation",
    EmailType.simple: "notification",
}


class SendEmailRequest(BaseModel):
    type: EmailType
    data: dict[str, Any]
    recipients: list[str]


class SendEmailSummary(BaseModel):
    results: list[SendEmailResult]
    failed_count: int
    success_count: int


@router.post("/send", response_model=ApiResponse[SendEmailSummary])
def send_email(
    *,
    current_user: AdminUser,
    email_service: Annotated[EmailService, Depends(get_email_service)],
    body: SendEmailRequest,
) -> Any:
    if not body.recipients:
        raise HTTPException(status_code=400, detail="At least one recipient is required")
    invalid = [r for r in body.recipients if not EMAIL_RE.match(r)]
    if invalid:
        raise HTTPException(
            status_code=400, detail=f"Invalid email addresses: {', '.join(invalid)}"
        )

    template = TEMPLATE_FOR_TYPE[body.type]
    data = body.data
    subject = None
    if body.type == EmailType.simple:
        subject = str(data.get("subject") or "").strip()
        if not subject:
            raise HTTPException(
                status_code=400, detail="Subject is required for simple emails"
            )
        data = {"title": subject, "content": data.get("content", "")}

    results = [
        email_service.send_templated_email(template, data, to=recipient, subject=subject)
        for recipient in body.recipients
    ]
    failed = sum(1 for r in results if not r.success)
    summary = SendEmailSummary(
        results=results, failed_count=failed, success_count=len(results) - failed
    )
    if failed:
        logger.warning("Failed to send %d of %d emails", failed, len(results))
        return JSONResponse(
            status_code=207,
            content={
                "success": False,
                "data": summary.model_dump(),
                "error": f"Failed to send {failed} out of {len(results)} emails",
            },
        )
    return ApiResponse(data=summary, message=f"Successfully sent {len(results)} email(s)")
