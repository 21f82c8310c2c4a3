import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import col, func, or_, select

from sitewave import crud
from sitewave.api.deps import EditorUser, PaginationDep, SessionDep
from sitewave.models import (
    ApiResponse,
    Author,
    AuthorCreate,
    AuthorPublic,
    AuthorUpdate,
    AuthorWithCount,
    BlogPost,
    Page,
)

router = APIRouter()


@router.get("/", response_model=ApiResponse[Page[AuthorWithCount]])
def read_authors(
    session: SessionDep,
    current_user: EditorUser,
    pagination: PaginationDep,
    search_query: str | None = None,
) -> Any:
    page, limit = pagination
    statement = select(Author)
    if search_query:
        pattern = f"%{search_query}%"
        statement = statement.where(
            or_(col(Author.name).ilike(pattern), col(Author.email).ilike(pattern))
        )
    total = session.exec(select(func.count()).select_from(statement.subquery())).one()
    authors = session.exec(
        statement.order_by(col(Author.name)).offset((page - 1) * limit).limit(limit)
    ).all()
    items = [
        AuthorWithCount.model_validate(
            author,
            update={"posts_count": crud.count_posts(session, BlogPost.author_id, author.id)},
        )
        for author in authors
    ]
    return ApiResponse(
        data=Page[AuthorWithCount].build(items, total=total, page=page, limit=limit)
    )


@router.post("/", response_model=ApiResponse[AuthorPublic], status_code=201)
def create_author(
    *, session: SessionDep, current_user: EditorUser, author_in: AuthorCreate
) -> Any:
    if crud.get_author_by_email(session=session, email=author_in.email):
        raise HTTPException(
            status_code=409, detail="Author with this email already exists"
        )
    author = crud.create_author(session=session, author_in=author_in)
    return ApiResponse(data=author, message="Author created successfully")


@router.get("/{author_id}", response_model=ApiResponse[AuthorWithCount])
def read_author(session: SessionDep, current_user: EditorUser, author_id: uuid.UUID) -> Any:
    author = session.get(Author, author_id)
    if not author:
        raise HTTPException(status_code=404, detail="Author not found")
    count = crud.count_posts(session, BlogPost.author_id, author.id)
    return ApiResponse(
        data=AuthorWithCount.model_validate(author, update={"posts_count": count})
    )


@router.put("/{author_id}", response_model=ApiResponse[AuthorPublic])
def update_author(
    *,
    session: SessionDep,
    current_user: EditorUser,
    author_id: uuid.UUID,
    author_in: AuthorUpdate,
) -> Any:
    author = session.get(Author, author_id)
    if not author:
        raise HTTPException(status_code=404, detail="Author not found")
    if author_in.email:
        existing = crud.get_author_by_email(session=session, email=author_in.email)
        if existing and existing.id != author.id:
            raise HTTPException(
                status_code=409, detail="Author with this email already exists"
            )
    author = crud.update_author(session=session, db_author=author, author_in=author_in)
    return ApiResponse(data=author, message="Author updated successfully")


@router.delete("/{author_id}", response_model=ApiResponse[None])
def delete_author(session: SessionDep, current_user: EditorUser, author_id: uuid.UUID) -> Any:
    author = session.get(Author, author_id)
    if not author:
        raise HTTPException(status_code=404, detail="Author not found")
    if crud.count_posts(session, BlogPost.author_id, author.id):
        raise HTTPException(
            status_code=400, detail="Cannot delete author that has associated blog posts"
        )
    session.delete(author)
    session.commit()
    return ApiResponse(message="Author deleted successfully")
