import logging
from datetime import datetime, time, timedelta, timezone
from typing import Annotated, Any

from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse
from sqlmodel import col, select

from sitewave.api.deps import ClientIP, SessionDep
from sitewave.models import (
    ApiResponse,
    ViewTracking,
    ViewTrackingCreate,
    ViewTrackingPublic,
    get_datetime_utc,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/", response_model=ApiResponse[ViewTrackingPublic], status_code=201)
def track_view(
    *,
    session: SessionDep,
    client_ip: ClientIP,
    user_agent: Annotated[str | None, Header()] = None,
    view_in: ViewTrackingCreate,
) -> Any:
    """
    Record a page view. Repeat views of the same content from the same IP
    on the same UTC day are acknowledged but not stored.
    """
    day_start = datetime.combine(get_datetime_utc().date(), time.min, tzinfo=timezone.utc)
    existing = session.exec(
        select(ViewTracking).where(
            ViewTracking.content_type == view_in.content_type,
            ViewTracking.content_id == view_in.content_id,
            ViewTracking.ip_address == client_ip,
            col(ViewTracking.viewed_at) >= day_start,
            col(ViewTracking.viewed_at) < day_start + timedelta(days=1),
        )
    ).first()
    if existing:
        return JSONResponse(
            status_code=200,
            content=ApiResponse[None](message="View already tracked today").model_dump(),
        )

    view = ViewTracking.model_validate(
        view_in, update={"ip_address": client_ip, "user_agent": user_agent}
    )
    session.add(view)
    session.commit()
    session.refresh(view)
    logger.debug("Tracked %s view of %s", view.content_type.value, view.content_id)
    return ApiResponse(data=ViewTrackingPublic.model_validate(view), message="View tracked")
