import logging
import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import Session, col, func, or_, select

from sitewave import crud
from sitewave.api.deps import EditorUser, PaginationDep, SessionDep
from sitewave.models import (
    ApiResponse,
    Author,
    BlogPost,
    BlogPostBulkAction,
    BlogPostCreate,
    IdList,
    BlogPostPublic,
    BlogPostTagLink,
    BlogPostUpdate,
    BulkAction,
    Category,
    Page,
    PostStatus,
    get_datetime_utc,
)

router = APIRouter()
logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "title": BlogPost.title,
    "status": BlogPost.status,
    "published_at": BlogPost.published_at,
    "created_at": BlogPost.created_at,
}

BULK_STATUS = {
    BulkAction.publish: PostStatus.published,
    BulkAction.unpublish: PostStatus.draft,
    BulkAction.archive: PostStatus.archived,
}


def _check_references(
    session: Session, author_id: uuid.UUID | None, category_id: uuid.UUID | None
) -> None:
    if author_id and not session.get(Author, author_id):
        raise HTTPException(status_code=400, detail="Author not found")
    if category_id and not session.get(Category, category_id):
        raise HTTPException(status_code=400, detail="Category not found")


def _get_post_or_404(session: Session, post_id: uuid.UUID) -> BlogPost:
    post = session.get(BlogPost, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.get("/", response_model=ApiResponse[Page[BlogPostPublic]])
def read_blog_posts(
    session: SessionDep,
    current_user: EditorUser,
    pagination: PaginationDep,
    category_id: uuid.UUID | None = None,
    tag_id: uuid.UUID | None = None,
    author_id: uuid.UUID | None = None,
    status: PostStatus | None = None,
    search_query: str | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> Any:
    page, limit = pagination
    statement = select(BlogPost)
    if category_id:
        statement = statement.where(BlogPost.category_id == category_id)
    if author_id:
        statement = statement.where(BlogPost.author_id == author_id)
    if status:
        statement = statement.where(BlogPost.status == status)
    if tag_id:
        statement = statement.join(
            BlogPostTagLink, col(BlogPostTagLink.blog_post_id) == BlogPost.id
        ).where(BlogPostTagLink.tag_id == tag_id)
    if search_query:
        pattern = f"%{search_query}%"
        statement = statement.where(
            or_(
                col(BlogPost.title).ilike(pattern),
                col(BlogPost.excerpt).ilike(pattern),
                col(BlogPost.content).ilike(pattern),
            )
        )

    total = session.exec(select(func.count()).select_from(statement.subquery())).one()

    sort_column = col(SORT_COLUMNS.get(sort_by, BlogPost.created_at))
    order = sort_column.asc() if sort_order == "asc" else sort_column.desc()
    posts = session.exec(
        statement.order_by(order).offset((page - 1) * limit).limit(limit)
    ).all()

    return ApiResponse(
        data=Page[BlogPostPublic].build(
            [crud.post_to_public(post) for post in posts],
            total=total,
            page=page,
            limit=limit,
        )
    )


@router.post("/", response_model=ApiResponse[BlogPostPublic], status_code=201)
def create_blog_post(
    *, session: SessionDep, current_user: EditorUser, post_in: BlogPostCreate
) -> Any:
    if not (post_in.title and post_in.slug and post_in.excerpt and post_in.content):
        raise HTTPException(status_code=400, detail="Missing required fields")
    if crud.get_post_by_slug(session=session, slug=post_in.slug):
        raise HTTPException(
            status_code=400, detail="A post with this slug already exists"
        )
    _check_references(session, post_in.author_id, post_in.category_id)

    tags = crud.resolve_tags(session=session, tag_ids=post_in.tag_ids)
    post = crud.create_blog_post(
        session=session,
        post_data=post_in.model_dump(exclude={"tag_ids"}),
        tags=tags,
    )
    logger.info("Blog post %s created by %s", post.slug, current_user.email)
    return ApiResponse(data=crud.post_to_public(post), message="Blog post created successfully")


@router.delete("/", response_model=ApiResponse[dict])
def delete_blog_posts(
    *, session: SessionDep, current_user: EditorUser, body: IdList
) -> Any:
    if not body.ids:
        raise HTTPException(status_code=400, detail="Invalid post IDs provided")
    posts = session.exec(select(BlogPost).where(col(BlogPost.id).in_(body.ids))).all()
    for post in posts:
        session.delete(post)
    session.commit()
    return ApiResponse(
        data={"deleted_count": len(posts)},
        message=f"Successfully deleted {len(posts)} post(s)",
    )


@router.patch("/", response_model=ApiResponse[dict])
def bulk_update_blog_posts(
    *, session: SessionDep, current_user: EditorUser, body: BlogPostBulkAction
) -> Any:
    if not body.ids:
        raise HTTPException(status_code=400, detail="Invalid post IDs provided")
    try:
        action = BulkAction(body.action)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid action")

    new_status = BULK_STATUS[action]
    posts = session.exec(select(BlogPost).where(col(BlogPost.id).in_(body.ids))).all()
    now = get_datetime_utc()
    for post in posts:
        post.status = new_status
        if action == BulkAction.publish:
            post.published_at = now
        session.add(post)
    session.commit()
    return ApiResponse(
        data={"updated_count": len(posts), "status": new_status.value},
        message=f"Successfully updated {len(posts)} post(s)",
    )


@router.get("/{post_id}", response_model=ApiResponse[BlogPostPublic])
def read_blog_post(session: SessionDep, current_user: EditorUser, post_id: uuid.UUID) -> Any:
    post = _get_post_or_404(session, post_id)
    return ApiResponse(data=crud.post_to_public(post))


@router.put("/{post_id}", response_model=ApiResponse[BlogPostPublic])
def update_blog_post(
    *,
    session: SessionDep,
    current_user: EditorUser,
    post_id: uuid.UUID,
    post_in: BlogPostUpdate,
) -> Any:
    post = _get_post_or_404(session, post_id)
    if post_in.slug and post_in.slug != post.slug:
        existing = crud.get_post_by_slug(session=session, slug=post_in.slug)
        if existing and existing.id != post.id:
            raise HTTPException(
                status_code=400, detail="A post with this slug already exists"
            )
    _check_references(session, post_in.author_id, post_in.category_id)

    tags = None
    if post_in.tag_ids is not None:
        tags = crud.resolve_tags(session=session, tag_ids=post_in.tag_ids)
    post = crud.update_blog_post(
        session=session,
        db_post=post,
        post_data=post_in.model_dump(exclude_unset=True, exclude={"tag_ids"}),
        tags=tags,
    )
    return ApiResponse(data=crud.post_to_public(post), message="Blog post updated successfully")


@router.delete("/{post_id}", response_model=ApiResponse[None])
def delete_blog_post(session: SessionDep, current_user: EditorUser, post_id: uuid.UUID) -> Any:
    post = _get_post_or_404(session, post_id)
    session.delete(post)
    session.commit()
    return ApiResponse(message="Blog post deleted successfully")
