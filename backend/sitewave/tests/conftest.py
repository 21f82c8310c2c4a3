from collections.abc import Generator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from sitewave import crud
from sitewave.api.deps import get_db
from sitewave.contact import contact_rate_limiter
from sitewave.core import security
from sitewave.main import app
from sitewave.models import User, UserCreate, UserRole

test_engine = create_engine(
    "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
)


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    SQLModel.metadata.create_all(test_engine)
    with Session(test_engine) as session:
        yield session
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    def get_db_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = get_db_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_rate_limiter() -> Generator[None, None, None]:
    contact_rate_limiter.reset()
    yield
    contact_rate_limiter.reset()


def _make_user(session: Session, email: str, role: UserRole) -> User:
    return crud.create_user(
        session=session,
        user_create=UserCreate(email=email, password="password123", role=role),
    )


def _auth_headers(user: User) -> dict[str, str]:
    token = security.create_access_token(user.id, expires_delta=timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(session: Session) -> User:
    return _make_user(session, "admin@example.com", UserRole.admin)


@pytest.fixture
def editor_user(session: Session) -> User:
    return _make_user(session, "editor@example.com", UserRole.editor)


@pytest.fixture
def plain_user(session: Session) -> User:
    return _make_user(session, "reader@example.com", UserRole.user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return _auth_headers(admin_user)


@pytest.fixture
def editor_headers(editor_user: User) -> dict[str, str]:
    return _auth_headers(editor_user)


@pytest.fixture
def user_headers(plain_user: User) -> dict[str, str]:
    return _auth_headers(plain_user)
