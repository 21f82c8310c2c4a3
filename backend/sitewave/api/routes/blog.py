from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import Session, col, func, select

from sitewave import crud
from sitewave.api.deps import PaginationDep, SessionDep
from sitewave.models import (
    ApiResponse,
    BlogPost,
    BlogPostPublic,
    BlogPostTagLink,
    Category,
    CategoryWithCount,
    Page,
    PostStatus,
    Tag,
    TagWithCount,
)

router = APIRouter()


@router.get("/posts", response_model=ApiResponse[Page[BlogPostPublic]])
def read_published_posts(
    session: SessionDep,
    pagination: PaginationDep,
    category_slug: str | None = None,
    tag_slug: str | None = None,
    search_query: str | None = None,
) -> Any:
    page, limit = pagination
    statement = select(BlogPost).where(BlogPost.status == PostStatus.published)
    if category_slug:
        statement = statement.join(
            Category, col(Category.id) == BlogPost.category_id
        ).where(Category.slug == category_slug)
    if tag_slug:
        statement = (
            statement.join(BlogPostTagLink, col(BlogPostTagLink.blog_post_id) == BlogPost.id)
            .join(Tag, col(Tag.id) == BlogPostTagLink.tag_id)
            .where(Tag.slug == tag_slug)
        )
    if search_query:
        pattern = f"%{search_query}%"
        statement = statement.where(
            col(BlogPost.title).ilike(pattern) | col(BlogPost.excerpt).ilike(pattern)
        )

    total = session.exec(select(func.count()).select_from(statement.subquery())).one()
    posts = session.exec(
        statement.order_by(col(BlogPost.published_at).desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return ApiResponse(
        data=Page[BlogPostPublic].build(
            [crud.post_to_public(post) for post in posts],
            total=total,
            page=page,
            limit=limit,
        )
    )


def _get_published_post_or_404(session: Session, slug: str) -> BlogPost:
    post = crud.get_post_by_slug(session=session, slug=slug)
    if not post or post.status != PostStatus.published:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post


@router.get("/posts/{slug}", response_model=ApiResponse[BlogPostPublic])
def read_published_post(session: SessionDep, slug: str) -> Any:
    post = _get_published_post_or_404(session, slug)
    return ApiResponse(data=crud.post_to_public(post))


@router.get("/posts/{slug}/related", response_model=ApiResponse[list[BlogPostPublic]])
def read_related_posts(session: SessionDep, slug: str, limit: int = 3) -> Any:
    """
    Posts related to the given one: same category first, then posts sharing
    a tag, then the newest published posts.
    """
    if limit < 1 or limit > 10:
        raise HTTPException(status_code=400, detail="Invalid limit. Must be between 1 and 10")
    post = _get_published_post_or_404(session, slug)

    related: list[BlogPost] = []
    seen = {post.id}

    def take(statement: Any) -> None:
        remaining = limit - len(related)
        if remaining <= 0:
            return
        statement = statement.where(
            BlogPost.status == PostStatus.published, col(BlogPost.id).not_in(seen)
        )
        for candidate in session.exec(
            statement.order_by(col(BlogPost.published_at).desc()).limit(remaining)
        ).all():
            related.append(candidate)
            seen.add(candidate.id)

    if post.category_id:
        take(select(BlogPost).where(BlogPost.category_id == post.category_id))
    tag_ids = [tag.id for tag in post.tags]
    if tag_ids:
        take(
            select(BlogPost)
            .join(BlogPostTagLink, col(BlogPostTagLink.blog_post_id) == BlogPost.id)
            .where(col(BlogPostTagLink.tag_id).in_(tag_ids))
            .distinct()
        )
    take(select(BlogPost))

    return ApiResponse(data=[crud.post_to_public(p) for p in related])


@router.get("/categories", response_model=ApiResponse[list[CategoryWithCount]])
def read_public_categories(session: SessionDep) -> Any:
    posts_count = func.count(col(BlogPost.id)).label("posts_count")
    rows = session.exec(
        select(Category, posts_count)
        .outerjoin(
            BlogPost,
            (col(BlogPost.category_id) == Category.id)
            & (col(BlogPost.status) == PostStatus.published),
        )
        .group_by(col(Category.id))
        .order_by(col(Category.name))
    ).all()
    return ApiResponse(
        data=[
            CategoryWithCount.model_validate(category, update={"posts_count": count})
            for category, count in rows
        ]
    )


@router.get("/tags", response_model=ApiResponse[list[TagWithCount]])
def read_public_tags(session: SessionDep) -> Any:
    counts = crud.tag_post_counts(session)
    tags = session.exec(select(Tag).order_by(col(Tag.name))).all()
    return ApiResponse(
        data=[
            TagWithCount.model_validate(tag, update={"posts_count": counts.get(tag.id, 0)})
            for tag in tags
        ]
    )
