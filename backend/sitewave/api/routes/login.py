from datetime import timedelta
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from sitewave import crud
from sitewave.api.deps import CurrentUser, SessionDep
from sitewave.core import security
from sitewave.core.config import settings
from sitewave.models import ApiResponse, Token, UserPublic, UserRegister, UserCreate

router = APIRouter()


@router.post("/login/access-token")
def login_access_token(
    session: SessionDep, form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
) -> Token:
    """
    OAuth2 compatible token login, get an access token for future requests
    """
    user = crud.authenticate(
        session=session, email=form_data.username, password=form_data.password
    )
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect email or password")
    elif not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return Token(
        access_token=security.create_access_token(
            user.id, expires_delta=access_token_expires
        )
    )


@router.post("/login/test-token", response_model=ApiResponse[UserPublic])
def test_token(current_user: CurrentUser) -> Any:
    return ApiResponse(data=current_user)


@router.post("/auth/register", response_model=ApiResponse[UserPublic], status_code=201)
def register_user(session: SessionDep, user_in: UserRegister) -> Any:
    """
    Public signup. New accounts always get the ``user`` role.
    """
    if crud.get_user_by_email(session=session, email=user_in.email):
        raise HTTPException(
            status_code=400, detail="A user with this email already exists"
        )
    user_create = UserCreate.model_validate(user_in)
    user = crud.create_user(session=session, user_create=user_create)
    return ApiResponse(data=user, message="Account created successfully")
