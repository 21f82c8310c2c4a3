import uuid
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlmodel import col, func, or_, select

from sitewave import crud
from sitewave.api.deps import AdminUser, CurrentUser, PaginationDep, SessionDep
from sitewave.core.security import get_password_hash, verify_password
from sitewave.models import (
    ApiResponse,
    Page,
    UpdatePassword,
    User,
    UserCreate,
    UserPublic,
    UserRole,
    UserUpdate,
    UserUpdateMe,
)

router = APIRouter()
admin_router = APIRouter()


@router.get("/me", response_model=ApiResponse[UserPublic])
def read_user_me(current_user: CurrentUser) -> Any:
    return ApiResponse(data=current_user)


@router.patch("/me", response_model=ApiResponse[UserPublic])
def update_user_me(
    *, session: SessionDep, user_in: UserUpdateMe, current_user: CurrentUser
) -> Any:
    if user_in.email:
        existing_user = crud.get_user_by_email(session=session, email=user_in.email)
        if existing_user and existing_user.id != current_user.id:
            raise HTTPException(
                status_code=409, detail="User with this email already exists"
            )
    current_user.sqlmodel_update(user_in.model_dump(exclude_unset=True))
    session.add(current_user)
    session.commit()
    session.refresh(current_user)
    return ApiResponse(data=current_user)


@router.patch("/me/password", response_model=ApiResponse[None])
def update_password_me(
    *, session: SessionDep, body: UpdatePassword, current_user: CurrentUser
) -> Any:
    verified, _ = verify_password(body.current_password, current_user.hashed_password)
    if not verified:
        raise HTTPException(status_code=400, detail="Incorrect password")
    if body.current_password == body.new_password:
        raise HTTPException(
            status_code=400, detail="New password cannot be the same as the current one"
        )
    current_user.hashed_password = get_password_hash(body.new_password)
    session.add(current_user)
    session.commit()
    return ApiResponse(message="Password updated successfully")


@admin_router.get("/", response_model=ApiResponse[Page[UserPublic]])
def read_users(
    session: SessionDep,
    current_user: AdminUser,
    pagination: PaginationDep,
    search: str | None = None,
    role: UserRole | None = None,
) -> Any:
    page, limit = pagination
    statement = select(User)
    if search:
        pattern = f"%{search}%"
        statement = statement.where(
            or_(col(User.full_name).ilike(pattern), col(User.email).ilike(pattern))
        )
    if role:
        statement = statement.where(User.role == role)

    total = session.exec(select(func.count()).select_from(statement.subquery())).one()
    users = session.exec(
        statement.order_by(col(User.created_at).desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()
    return ApiResponse(
        data=Page[UserPublic].build(
            [UserPublic.model_validate(u) for u in users],
            total=total,
            page=page,
            limit=limit,
        )
    )


@admin_router.post("/", response_model=ApiResponse[UserPublic], status_code=201)
def create_user(*, session: SessionDep, current_user: AdminUser, user_in: UserCreate) -> Any:
    if crud.get_user_by_email(session=session, email=user_in.email):
        raise HTTPException(
            status_code=400, detail="A user with this email already exists"
        )
    user = crud.create_user(session=session, user_create=user_in)
    return ApiResponse(data=user, message="User created successfully")


@admin_router.patch("/{user_id}", response_model=ApiResponse[UserPublic])
def update_user(
    *,
    session: SessionDep,
    current_user: AdminUser,
    user_id: uuid.UUID,
    user_in: UserUpdate,
) -> Any:
    db_user = session.get(User, user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    if db_user.id == current_user.id and user_in.role not in (None, UserRole.admin):
        raise HTTPException(status_code=400, detail="You cannot change your own role")
    if user_in.email:
        existing_user = crud.get_user_by_email(session=session, email=user_in.email)
        if existing_user and existing_user.id != user_id:
            raise HTTPException(
                status_code=409, detail="User with this email already exists"
            )
    db_user = crud.update_user(session=session, db_user=db_user, user_in=user_in)
    return ApiResponse(data=db_user, message="User updated successfully")


@admin_router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(session: SessionDep, current_user: AdminUser, user_id: uuid.UUID) -> Any:
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    session.delete(user)
    session.commit()
    return ApiResponse(message="User deleted successfully")
