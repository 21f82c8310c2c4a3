import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import col, func, or_, select

from sitewave import crud
from sitewave.api.deps import EditorUser, PaginationDep, SessionDep
from sitewave.models import (
    ApiResponse,
    Page,
    Tag,
    TagCreate,
    TagPublic,
    TagUpdate,
    TagWithCount,
)

router = APIRouter()


@router.get("/", response_model=ApiResponse[Page[TagWithCount]])
def read_tags(
    session: SessionDep,
    current_user: EditorUser,
    pagination: PaginationDep,
    search_query: str | None = None,
) -> Any:
    page, limit = pagination
    statement = select(Tag)
    if search_query:
        pattern = f"%{search_query}%"
        statement = statement.where(
            or_(col(Tag.name).ilike(pattern), col(Tag.slug).ilike(pattern))
        )
    total = session.exec(select(func.count()).select_from(statement.subquery())).one()
    tags = session.exec(
        statement.order_by(col(Tag.name)).offset((page - 1) * limit).limit(limit)
    ).all()
    counts = crud.tag_post_counts(session)
    items = [
        TagWithCount.model_validate(tag, update={"posts_count": counts.get(tag.id, 0)})
        for tag in tags
    ]
    return ApiResponse(data=Page[TagWithCount].build(items, total=total, page=page, limit=limit))


@router.post("/", response_model=ApiResponse[TagPublic], status_code=201)
def create_tag(*, session: SessionDep, current_user: EditorUser, tag_in: TagCreate) -> Any:
    if crud.get_tag_by_slug(session=session, slug=tag_in.slug):
        raise HTTPException(status_code=409, detail="Tag with this slug already exists")
    tag = Tag.model_validate(tag_in)
    session.add(tag)
    session.commit()
    session.refresh(tag)
    return ApiResponse(data=tag, message="Tag created successfully")


@router.put("/{tag_id}", response_model=ApiResponse[TagPublic])
def update_tag(
    *, session: SessionDep, current_user: EditorUser, tag_id: uuid.UUID, tag_in: TagUpdate
) -> Any:
    tag = session.get(Tag, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    if tag_in.slug:
        existing = crud.get_tag_by_slug(session=session, slug=tag_in.slug)
        if existing and existing.id != tag.id:
            raise HTTPException(status_code=409, detail="Tag with this slug already exists")
    tag.sqlmodel_update(tag_in.model_dump(exclude_unset=True, exclude_none=True))
    session.add(tag)
    session.commit()
    session.refresh(tag)
    return ApiResponse(data=tag, message="Tag updated successfully")


@router.delete("/{tag_id}", response_model=ApiResponse[None])
def delete_tag(session: SessionDep, current_user: EditorUser, tag_id: uuid.UUID) -> Any:
    tag = session.get(Tag, tag_id)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    # association rows go with the tag
    session.delete(tag)
    session.commit()
    return ApiResponse(message="Tag deleted successfully")
