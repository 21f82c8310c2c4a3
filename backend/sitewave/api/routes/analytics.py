import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, col, func, select

from sitewave.api.deps import AdminUser, SessionDep
from sitewave.models import (
    ApiResponse,
    BlogPost,
    ContentType,
    PostStatus,
    Service,
    ViewTracking,
    get_datetime_utc,
)

router = APIRouter()

# Number of days covered by each reporting period, today included.
PERIOD_DAYS = {
    "today": 1,
    "week": 7,
    "month": 30,
    "quarter": 90,
    "year": 365,
}


class TopContent(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    views: int


class RecentView(BaseModel):
    content_type: ContentType
    content_id: uuid.UUID
    title: str | None = None
    ip_address: str | None = None
    referer: str | None = None
    viewed_at: datetime | None = None


class ChartPoint(BaseModel):
    date: date
    views: int


class AnalyticsOverview(BaseModel):
    period: str
    total_blog_posts: int
    total_services: int
    total_views: int
    total_unique_views: int
    views_today: int
    views_this_week: int
    views_this_month: int
    top_blog_posts: list[TopContent]
    top_services: list[TopContent]
    recent_views: list[RecentView]
    chart_data: list[ChartPoint]


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _count_views(session: Session, since: datetime, *, distinct_ips: bool = False) -> int:
    counted = func.count(func.distinct(ViewTracking.ip_address)) if distinct_ips else func.count()
    return session.exec(
        select(counted).select_from(ViewTracking).where(col(ViewTracking.viewed_at) >= since)
    ).one()


def _top_content(
    session: Session, model: Any, content_type: ContentType, since: datetime, limit: int = 5
) -> list[TopContent]:
    views = func.count(col(ViewTracking.id)).label("views")
    rows = session.exec(
        select(model.id, model.title, model.slug, views)
        .join(ViewTracking, col(ViewTracking.content_id) == model.id)
        .where(
            ViewTracking.content_type == content_type,
            col(ViewTracking.viewed_at) >= since,
        )
        .group_by(model.id, model.title, model.slug)
        .order_by(views.desc())
        .limit(limit)
    ).all()
    return [
        TopContent(id=content_id, title=title, slug=slug, views=count)
        for content_id, title, slug, count in rows
    ]


def _recent_views(session: Session, limit: int = 10) -> list[RecentView]:
    views = session.exec(
        select(ViewTracking).order_by(col(ViewTracking.viewed_at).desc()).limit(limit)
    ).all()
    post_ids = [v.content_id for v in views if v.content_type == ContentType.blog_post]
    service_ids = [v.content_id for v in views if v.content_type == ContentType.service]
    titles: dict[uuid.UUID, str] = {}
    if post_ids:
        titles.update(
            session.exec(
                select(BlogPost.id, BlogPost.title).where(col(BlogPost.id).in_(post_ids))
            ).all()
        )
    if service_ids:
        titles.update(
            session.exec(
                select(Service.id, Service.title).where(col(Service.id).in_(service_ids))
            ).all()
        )
    return [
        RecentView(
            content_type=v.content_type,
            content_id=v.content_id,
            title=titles.get(v.content_id),
            ip_address=v.ip_address,
            referer=v.referer,
            viewed_at=v.viewed_at,
        )
        for v in views
    ]


def _chart_data(session: Session, first_day: date, days: int) -> list[ChartPoint]:
    per_day = {first_day + timedelta(days=i): 0 for i in range(days)}
    viewed = session.exec(
        select(ViewTracking.viewed_at).where(
            col(ViewTracking.viewed_at) >= _start_of_day(first_day)
        )
    ).all()
    for viewed_at in viewed:
        if viewed_at and viewed_at.date() in per_day:
            per_day[viewed_at.date()] += 1
    return [ChartPoint(date=day, views=count) for day, count in per_day.items()]


def build_overview(session: Session, period: str) -> AnalyticsOverview:
    days = PERIOD_DAYS[period]
    today = get_datetime_utc().date()
    first_day = today - timedelta(days=days - 1)
    since = _start_of_day(first_day)

    total_blog_posts = session.exec(
        select(func.count())
        .select_from(BlogPost)
        .where(BlogPost.status == PostStatus.published)
    ).one()
    total_services = session.exec(select(func.count()).select_from(Service)).one()

    return AnalyticsOverview(
        period=period,
        total_blog_posts=total_blog_posts,
        total_services=total_services,
        total_views=_count_views(session, since),
        total_unique_views=_count_views(session, since, distinct_ips=True),
        views_today=_count_views(session, _start_of_day(today)),
        views_this_week=_count_views(session, _start_of_day(today - timedelta(days=6))),
        views_this_month=_count_views(session, _start_of_day(today - timedelta(days=29))),
        top_blog_posts=_top_content(session, BlogPost, ContentType.blog_post, since),
        top_services=_top_content(session, Service, ContentType.service, since),
        recent_views=_recent_views(session),
        chart_data=_chart_data(session, first_day, days),
    )


@router.get("/", response_model=ApiResponse[AnalyticsOverview])
def read_analytics(session: SessionDep, current_user: AdminUser, period: str = "month") -> Any:
    if period not in PERIOD_DAYS:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid period. Must be one of: {', '.join(PERIOD_DAYS)}",
        )
    return ApiResponse(data=build_overview(session, period))
