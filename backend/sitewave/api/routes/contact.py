import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException
from sqlmodel import Session, col, func, or_, select

from sitewave import crud
from sitewave.api.deps import AdminUser, ClientIP, PaginationDep, SessionDep
from sitewave.contact import contact_rate_limiter, is_spam
from sitewave.core.config import settings
from sitewave.emails.service import EmailService, get_email_service
from sitewave.models import (
    ApiResponse,
    ContactStatus,
    ContactSubmission,
    ContactSubmissionCreate,
    ContactSubmissionPublic,
    ContactSubmissionsPage,
    ContactSubmissionUpdate,
    get_datetime_utc,
)

router = APIRouter()
admin_router = APIRouter()
logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thank you for your message. We'll get back to you soon!"

SORT_COLUMNS = {
    "name": ContactSubmission.name,
    "email": ContactSubmission.email,
    "status": ContactSubmission.status,
    "created_at": ContactSubmission.created_at,
}


def _send_contact_emails(email_service: EmailService, submission: ContactSubmission) -> None:
    data = {
        "name": submission.name,
        "email": submission.email,
        "subject": submission.subject or "No subject",
        "message": submission.message,
        "ip_address": submission.ip_address,
        "submitted_at": submission.created_at.strftime("%Y-%m-%d %H:%M UTC")
        if submission.created_at
        else None,
        "admin_url": f"{settings.SITE_URL}/admin/contact-submissions",
    }
    if settings.ADMIN_NOTIFICATION_EMAIL:
        result = email_service.send_templated_email(
            "contact_form_notification",
            data,
            to=settings.ADMIN_NOTIFICATION_EMAIL,
            reply_to=submission.email,
        )
        if not result.success:
            logger.warning("Contact notification email failed: %s", result.error)
    result = email_service.send_templated_email(
        "contact_form_confirmation", data, to=submission.email
    )
    if not result.success:
        logger.warning("Contact confirmation email failed: %s", result.error)


@router.post("/", response_model=ApiResponse[None], status_code=201)
def submit_contact_form(
    *,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    email_service: Annotated[EmailService, Depends(get_email_service)],
    client_ip: ClientIP,
    user_agent: Annotated[str | None, Header()] = None,
    submission_in: ContactSubmissionCreate,
) -> Any:
    if not contact_rate_limiter.allow(client_ip):
        logger.warning("Contact form rate limit hit for %s", client_ip)
        raise HTTPException(
            status_code=429, detail="Too many requests. Please try again later."
        )

    if is_spam(submission_in.name, submission_in.email, submission_in.message):
        # Spam is dropped without telling the sender.
        logger.warning("Spam contact submission from %s dropped", client_ip)
        return ApiResponse(message=SUCCESS_MESSAGE)

    submission = crud.create_contact_submission(
        session=session,
        submission_in=submission_in,
        ip_address=client_ip,
        user_agent=user_agent,
    )
    logger.info("Contact submission %s stored", submission.id)
    if email_service.enabled:
        background_tasks.add_task(_send_contact_emails, email_service, submission)
    return ApiResponse(message=SUCCESS_MESSAGE)


def _status_counts(session: Session) -> dict[str, int]:
    counts = {status.value: 0 for status in ContactStatus}
    rows = session.exec(
        select(ContactSubmission.status, func.count()).group_by(ContactSubmission.status)
    ).all()
    for status, count in rows:
        counts[ContactStatus(status).value] = count
    return counts


@admin_router.get("/", response_model=ApiResponse[ContactSubmissionsPage])
def read_contact_submissions(
    session: SessionDep,
    current_user: AdminUser,
    pagination: PaginationDep,
    status: ContactStatus | None = None,
    search_query: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> Any:
    page, limit = pagination
    statement = select(ContactSubmission)
    if status:
        statement = statement.where(ContactSubmission.status == status)
    if search_query:
        pattern = f"%{search_query}%"
        statement = statement.where(
            or_(
                col(ContactSubmission.name).ilike(pattern),
                col(ContactSubmission.email).ilike(pattern),
                col(ContactSubmission.subject).ilike(pattern),
                col(ContactSubmission.message).ilike(pattern),
            )
        )
    if date_from:
        start = datetime.combine(date_from, time.min, tzinfo=timezone.utc)
        statement = statement.where(col(ContactSubmission.created_at) >= start)
    if date_to:
        # include the whole of the last day
        end = datetime.combine(date_to + timedelta(days=1), time.min, tzinfo=timezone.utc)
        statement = statement.where(col(ContactSubmission.created_at) < end)

    total = session.exec(select(func.count()).select_from(statement.subquery())).one()
    sort_column = col(SORT_COLUMNS.get(sort_by, ContactSubmission.created_at))
    order = sort_column.asc() if sort_order == "asc" else sort_column.desc()
    submissions = session.exec(
        statement.order_by(order).offset((page - 1) * limit).limit(limit)
    ).all()
    return ApiResponse(
        data=ContactSubmissionsPage.build(
            [ContactSubmissionPublic.model_validate(s) for s in submissions],
            total=total,
            page=page,
            limit=limit,
            status_counts=_status_counts(session),
        )
    )


@admin_router.get("/analytics", response_model=ApiResponse[dict])
def read_contact_analytics(
    session: SessionDep, current_user: AdminUser, days: int = 30
) -> Any:
    if days < 1 or days > 365:
        raise HTTPException(status_code=400, detail="days must be between 1 and 365")
    counts = _status_counts(session)
    total = sum(counts.values())

    today = get_datetime_utc().date()
    first_day = today - timedelta(days=days - 1)
    since = datetime.combine(first_day, time.min, tzinfo=timezone.utc)
    created = session.exec(
        select(ContactSubmission.created_at).where(
            col(ContactSubmission.created_at) >= since
        )
    ).all()
    per_day = {first_day + timedelta(days=i): 0 for i in range(days)}
    for created_at in created:
        if created_at and created_at.date() in per_day:
            per_day[created_at.date()] += 1

    response_rate = round(counts[ContactStatus.responded.value] / total * 100, 1) if total else 0.0
    return ApiResponse(
        data={
            "total": total,
            "status_counts": counts,
            "response_rate": response_rate,
            "submissions_per_day": [
                {"date": day.isoformat(), "count": count} for day, count in per_day.items()
            ],
        }
    )


def _get_submission_or_404(session: Session, submission_id: uuid.UUID) -> ContactSubmission:
    submission = session.get(ContactSubmission, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Contact submission not found")
    return submission


@admin_router.get("/{submission_id}", response_model=ApiResponse[ContactSubmissionPublic])
def read_contact_submission(
    session: SessionDep, current_user: AdminUser, submission_id: uuid.UUID
) -> Any:
    submission = _get_submission_or_404(session, submission_id)
    return ApiResponse(data=ContactSubmissionPublic.model_validate(submission))


@admin_router.patch("/{submission_id}", response_model=ApiResponse[ContactSubmissionPublic])
def update_contact_submission(
    *,
    session: SessionDep,
    current_user: AdminUser,
    submission_id: uuid.UUID,
    body: ContactSubmissionUpdate,
) -> Any:
    submission = _get_submission_or_404(session, submission_id)
    submission.status = body.status
    session.add(submission)
    session.commit()
    session.refresh(submission)
    return ApiResponse(
        data=ContactSubmissionPublic.model_validate(submission),
        message="Submission status updated",
    )


@admin_router.delete("/{submission_id}", response_model=ApiResponse[None])
def delete_contact_submission(
    session: SessionDep, current_user: AdminUser, submission_id: uuid.UUID
) -> Any:
    submission = _get_submission_or_404(session, submission_id)
    session.delete(submission)
    session.commit()
    return ApiResponse(message="Contact submission deleted successfully")
