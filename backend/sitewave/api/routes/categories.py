import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import col, func, or_, select

from sitewave import crud
from sitewave.api.deps import EditorUser, PaginationDep, SessionDep
from sitewave.models import (
    ApiResponse,
    BlogPost,
    Category,
    CategoryCreate,
    CategoryPublic,
    CategoryUpdate,
    CategoryWithCount,
    Page,
)

router = APIRouter()


@router.get("/", response_model=ApiResponse[Page[CategoryWithCount]])
def read_categories(
    session: SessionDep,
    current_user: EditorUser,
    pagination: PaginationDep,
    search_query: str | None = None,
    sort_by: str = "name",
    sort_order: str = "asc",
) -> Any:
    page, limit = pagination
    posts_count = func.count(col(BlogPost.id)).label("posts_count")
    statement = (
        select(Category, posts_count)
        .join(BlogPost, col(BlogPost.category_id) == Category.id, isouter=True)
        .group_by(col(Category.id))
    )
    filtered = select(Category)
    if search_query:
        pattern = f"%{search_query}%"
        condition = or_(
            col(Category.name).ilike(pattern),
            col(Category.slug).ilike(pattern),
            col(Category.description).ilike(pattern),
        )
        statement = statement.where(condition)
        filtered = filtered.where(condition)

    total = session.exec(select(func.count()).select_from(filtered.subquery())).one()

    if sort_by == "posts_count":
        sort_column: Any = posts_count
    elif sort_by == "created_at":
        sort_column = col(Category.created_at)
    else:
        sort_column = col(Category.name)
    order = sort_column.desc() if sort_order == "desc" else sort_column.asc()

    rows = session.exec(
        statement.order_by(order).offset((page - 1) * limit).limit(limit)
    ).all()
    items = [
        CategoryWithCount.model_validate(category, update={"posts_count": count})
        for category, count in rows
    ]
    return ApiResponse(
        data=Page[CategoryWithCount].build(items, total=total, page=page, limit=limit)
    )


@router.post("/", response_model=ApiResponse[CategoryPublic], status_code=201)
def create_category(
    *, session: SessionDep, current_user: EditorUser, category_in: CategoryCreate
) -> Any:
    if not category_in.name or not category_in.slug:
        raise HTTPException(status_code=400, detail="Name and slug are required")
    if crud.get_conflicting_category(
        session=session, name=category_in.name, slug=category_in.slug
    ):
        raise HTTPException(
            status_code=409, detail="Category with this name or slug already exists"
        )
    category = Category.model_validate(category_in)
    session.add(category)
    session.commit()
    session.refresh(category)
    return ApiResponse(data=category, message="Category created successfully")


@router.get("/{category_id}", response_model=ApiResponse[CategoryWithCount])
def read_category(session: SessionDep, current_user: EditorUser, category_id: uuid.UUID) -> Any:
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    count = crud.count_posts(session, BlogPost.category_id, category.id)
    return ApiResponse(
        data=CategoryWithCount.model_validate(category, update={"posts_count": count})
    )


@router.put("/{category_id}", response_model=ApiResponse[CategoryPublic])
def update_category(
    *,
    session: SessionDep,
    current_user: EditorUser,
    category_id: uuid.UUID,
    category_in: CategoryUpdate,
) -> Any:
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    if crud.get_conflicting_category(
        session=session,
        name=category_in.name,
        slug=category_in.slug,
        exclude_id=category.id,
    ):
        raise HTTPException(
            status_code=409, detail="Category with this name or slug already exists"
        )
    update_data = {
        k: v for k, v in category_in.model_dump(exclude_unset=True).items() if v is not None
    }
    if update_data.get("name") == "" or update_data.get("slug") == "":
        raise HTTPException(status_code=400, detail="Name and slug are required")
    category.sqlmodel_update(update_data)
    session.add(category)
    session.commit()
    session.refresh(category)
    return ApiResponse(data=category, message="Category updated successfully")


@router.delete("/{category_id}", response_model=ApiResponse[None])
def delete_category(session: SessionDep, current_user: EditorUser, category_id: uuid.UUID) -> Any:
    category = session.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    if crud.count_posts(session, BlogPost.category_id, category.id):
        raise HTTPException(
            status_code=400,
            detail="Cannot delete category that has associated blog posts",
        )
    session.delete(category)
    session.commit()
    return ApiResponse(message="Category deleted successfully")
