import logging

from sqlmodel import Session, SQLModel, create_engine, select

from sitewave import crud
from sitewave.core.config import settings
from sitewave.models import User, UserCreate, UserRole

logger = logging.getLogger(__name__)

connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def init_db(session: Session) -> None:
    # Tables are created from the SQLModel metadata; the models module must be
    # imported before this runs so every table is registered.
    SQLModel.metadata.create_all(session.get_bind())

    user = session.exec(
        select(User).where(User.email == settings.FIRST_SUPERUSER)
    ).first()
    if not user:
        user_in = UserCreate(
            email=settings.FIRST_SUPERUSER,
            password=settings.FIRST_SUPERUSER_PASSWORD,
            full_name="Administrator",
            role=UserRole.admin,
        )
        user = crud.create_user(session=session, user_create=user_in)
        logger.info("Created first admin user %s", user.email)
