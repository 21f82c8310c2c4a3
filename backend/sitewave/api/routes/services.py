import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import Session, col, func, or_, select

from sitewave import crud
from sitewave.api.deps import EditorUser, PaginationDep, SessionDep
from sitewave.models import (
    ApiResponse,
    IdList,
    Page,
    PostStatus,
    Service,
    ServiceCategory,
    ServiceCreate,
    ServicePublic,
    ServiceUpdate,
)

router = APIRouter()
public_router = APIRouter()

SORT_COLUMNS = {
    "title": Service.title,
    "category": Service.category,
    "timeline": Service.timeline,
    "created_at": Service.created_at,
}


def _get_service_or_404(session: Session, service_id: uuid.UUID) -> Service:
    service = session.get(Service, service_id)
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


def _list_services(
    session: Session,
    *,
    page: int,
    limit: int,
    category: ServiceCategory | None = None,
    status: PostStatus | None = None,
    search_query: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> Page[ServicePublic]:
    statement = select(Service)
    if category:
        statement = statement.where(Service.category == category)
    if status:
        statement = statement.where(Service.status == status)
    if search_query:
        pattern = f"%{search_query}%"
        statement = statement.where(
            or_(
                col(Service.title).ilike(pattern),
                col(Service.short_description).ilike(pattern),
                col(Service.full_description).ilike(pattern),
            )
        )
    total = session.exec(select(func.count()).select_from(statement.subquery())).one()
    sort_column = col(SORT_COLUMNS.get(sort_by, Service.created_at))
    order = sort_column.asc() if sort_order == "asc" else sort_column.desc()
    services = session.exec(
        statement.order_by(order).offset((page - 1) * limit).limit(limit)
    ).all()
    return Page[ServicePublic].build(
        [ServicePublic.model_validate(s) for s in services],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/", response_model=ApiResponse[Page[ServicePublic]])
def read_services(
    session: SessionDep,
    current_user: EditorUser,
    pagination: PaginationDep,
    category: ServiceCategory | None = None,
    status: PostStatus | None = None,
    search_query: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> Any:
    page, limit = pagination
    return ApiResponse(
        data=_list_services(
            session,
            page=page,
            limit=limit,
            category=category,
            status=status,
            search_query=search_query,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    )


@router.post("/", response_model=ApiResponse[ServicePublic], status_code=201)
def create_service(
    *, session: SessionDep, current_user: EditorUser, service_in: ServiceCreate
) -> Any:
    if crud.get_service_by_slug(session=session, slug=service_in.slug):
        raise HTTPException(
            status_code=409, detail="A service with this slug already exists"
        )
    service = crud.create_service(session=session, service_in=service_in)
    return ApiResponse(
        data=ServicePublic.model_validate(service), message="Service created successfully"
    )


@router.delete("/", response_model=ApiResponse[dict])
def delete_services(
    *, session: SessionDep, current_user: EditorUser, body: IdList
) -> Any:
    if not body.ids:
        raise HTTPException(status_code=400, detail="Invalid service IDs provided")
    services = session.exec(select(Service).where(col(Service.id).in_(body.ids))).all()
    for service in services:
        session.delete(service)
    session.commit()
    return ApiResponse(
        data={"deleted_count": len(services)},
        message=f"Successfully deleted {len(services)} service(s)",
    )


@router.get("/{service_id}", response_model=ApiResponse[ServicePublic])
def read_service(session: SessionDep, current_user: EditorUser, service_id: uuid.UUID) -> Any:
    service = _get_service_or_404(session, service_id)
    return ApiResponse(data=ServicePublic.model_validate(service))


@router.put("/{service_id}", response_model=ApiResponse[ServicePublic])
def update_service(
    *,
    session: SessionDep,
    current_user: EditorUser,
    service_id: uuid.UUID,
    service_in: ServiceUpdate,
) -> Any:
    service = _get_service_or_404(session, service_id)
    if service_in.slug and service_in.slug != service.slug:
        if crud.get_service_by_slug(session=session, slug=service_in.slug):
            raise HTTPException(
                status_code=409, detail="A service with this slug already exists"
            )
    service = crud.update_service(session=session, db_service=service, service_in=service_in)
    return ApiResponse(
        data=ServicePublic.model_validate(service), message="Service updated successfully"
    )


@router.delete("/{service_id}", response_model=ApiResponse[None])
def delete_service(session: SessionDep, current_user: EditorUser, service_id: uuid.UUID) -> Any:
    service = _get_service_or_404(session, service_id)
    session.delete(service)
    session.commit()
    return ApiResponse(message="Service deleted successfully")


@public_router.get("/", response_model=ApiResponse[Page[ServicePublic]])
def read_published_services(
    session: SessionDep,
    pagination: PaginationDep,
    category: ServiceCategory | None = None,
) -> Any:
    page, limit = pagination
    return ApiResponse(
        data=_list_services(
            session,
            page=page,
            limit=limit,
            category=category,
            status=PostStatus.published,
            sort_by="title",
            sort_order="asc",
        )
    )


@public_router.get("/{slug}", response_model=ApiResponse[ServicePublic])
def read_published_service(session: SessionDep, slug: str) -> Any:
    service = crud.get_service_by_slug(session=session, slug=slug)
    if not service or service.status != PostStatus.published:
        raise HTTPException(status_code=404, detail="Service not found")
    return ApiResponse(data=ServicePublic.model_validate(service))
