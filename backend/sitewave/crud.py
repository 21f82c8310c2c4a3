import uuid
from collections.abc import Callable
from typing import Any

from sqlmodel import Session, col, func, or_, select

from sitewave.core.security import get_password_hash, verify_password
from sitewave.models import (
    Author,
    AuthorCreate,
    AuthorUpdate,
    BlogPost,
    BlogPostPublic,
    BlogPostTagLink,
    Category,
    ContactSubmission,
    ContactSubmissionCreate,
    PostStatus,
    Service,
    ServiceCreate,
    ServiceUpdate,
    Tag,
    User,
    UserCreate,
    UserUpdate,
    get_datetime_utc,
)
from sitewave.utils import calculate_reading_time, slugify


def create_user(*, session: Session, user_create: UserCreate) -> User:
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def update_user(*, session: Session, db_user: User, user_in: UserUpdate) -> Any:
    user_data = user_in.model_dump(exclude_unset=True)
    extra_data = {}
    if "password" in user_data:
        password = user_data.pop("password")
        extra_data["hashed_password"] = get_password_hash(password)
    db_user.sqlmodel_update(user_data, update=extra_data)
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    return session.exec(statement).first()


# Argon2 hash of a random password, verified when the email is unknown so
# both branches take comparable time.
DUMMY_HASH = "$argon2id$v=19$m=65536,t=3,p=4$MjQyZWE1MzBjYjJlZTI0Yw$YTU4NGM5ZTZmYjE2NzZlZjY0ZWY3ZGRkY2U2OWFjNjk"


def authenticate(*, session: Session, email: str, password: str) -> User | None:
    db_user = get_user_by_email(session=session, email=email)
    if not db_user:
        verify_password(password, DUMMY_HASH)
        return None
    verified, updated_password_hash = verify_password(password, db_user.hashed_password)
    if not verified:
        return None
    if updated_password_hash:
        db_user.hashed_password = updated_password_hash
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
    return db_user


# Authors


def get_author_by_email(*, session: Session, email: str) -> Author | None:
    return session.exec(select(Author).where(Author.email == email)).first()


def create_author(*, session: Session, author_in: AuthorCreate) -> Author:
    db_author = Author.model_validate(author_in)
    session.add(db_author)
    session.commit()
    session.refresh(db_author)
    return db_author


def update_author(*, session: Session, db_author: Author, author_in: AuthorUpdate) -> Author:
    db_author.sqlmodel_update(author_in.model_dump(exclude_unset=True))
    session.add(db_author)
    session.commit()
    session.refresh(db_author)
    return db_author


def count_posts(session: Session, column: Any, value: uuid.UUID) -> int:
    return session.exec(
        select(func.count()).select_from(BlogPost).where(column == value)
    ).one()


# Categories


def get_conflicting_category(
    *,
    session: Session,
    name: str | None,
    slug: str | None,
    exclude_id: uuid.UUID | None = None,
) -> Category | None:
    conditions = []
    if name:
        conditions.append(Category.name == name)
    if slug:
        conditions.append(Category.slug == slug)
    if not conditions:
        return None
    statement = select(Category).where(or_(*conditions))
    if exclude_id is not None:
        statement = statement.where(Category.id != exclude_id)
    return session.exec(statement).first()


def find_or_create_category(*, session: Session, name: str) -> Category:
    category = session.exec(select(Category).where(Category.name == name)).first()
    if category:
        return category
    category = Category(
        name=name,
        slug=slugify(name),
        description=f"Category for {name} related posts",
    )
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


# Tags


def get_tag_by_slug(*, session: Session, slug: str) -> Tag | None:
    return session.exec(select(Tag).where(Tag.slug == slug)).first()


def find_or_create_tags(*, session: Session, names: list[str]) -> list[Tag]:
    tags: list[Tag] = []
    for name in names:
        tag = session.exec(
            select(Tag).where(or_(Tag.name == name, Tag.slug == name))
        ).first()
        if not tag:
            tag = Tag(name=name, slug=slugify(name, max_length=100))
            session.add(tag)
            session.commit()
            session.refresh(tag)
        if tag not in tags:
            tags.append(tag)
    return tags


def resolve_tags(*, session: Session, tag_ids: list[str]) -> list[Tag]:
    """Load tags by id, skipping client-side placeholders such as ``temp-*``."""
    ids: list[uuid.UUID] = []
    for raw in tag_ids:
        if raw.startswith("temp-"):
            continue
        try:
            ids.append(uuid.UUID(raw))
        except ValueError:
            continue
    if not ids:
        return []
    return list(session.exec(select(Tag).where(col(Tag.id).in_(ids))).all())


def tag_post_counts(session: Session) -> dict[uuid.UUID, int]:
    rows = session.exec(
        select(BlogPostTagLink.tag_id, func.count()).group_by(BlogPostTagLink.tag_id)
    ).all()
    return {tag_id: count for tag_id, count in rows}


# Blog posts


def get_post_by_slug(*, session: Session, slug: str) -> BlogPost | None:
    return session.exec(select(BlogPost).where(BlogPost.slug == slug)).first()


def _unique_slug(base_slug: str, is_taken: Callable[[str], Any]) -> str:
    candidate = base_slug
    counter = 1
    while is_taken(candidate):
        candidate = f"{base_slug}-{counter}"
        counter += 1
    return candidate


def generate_unique_slug(*, session: Session, title: str, slug: str | None = None) -> str:
    return _unique_slug(
        slug or slugify(title), lambda s: get_post_by_slug(session=session, slug=s)
    )


def post_to_public(post: BlogPost) -> BlogPostPublic:
    return BlogPostPublic.model_validate(
        post, update={"reading_time": calculate_reading_time(post.content)}
    )


def create_blog_post(
    *, session: Session, post_data: dict[str, Any], tags: list[Tag]
) -> BlogPost:
    if post_data.get("status") == PostStatus.published and not post_data.get("published_at"):
        post_data["published_at"] = get_datetime_utc()
    db_post = BlogPost.model_validate(post_data)
    db_post.tags = tags
    session.add(db_post)
    session.commit()
    session.refresh(db_post)
    return db_post


def update_blog_post(
    *,
    session: Session,
    db_post: BlogPost,
    post_data: dict[str, Any],
    tags: list[Tag] | None = None,
) -> BlogPost:
    if (
        post_data.get("status") == PostStatus.published
        and db_post.published_at is None
    ):
        post_data["published_at"] = get_datetime_utc()
    db_post.sqlmodel_update(post_data)
    if tags is not None:
        db_post.tags = tags
    session.add(db_post)
    session.commit()
    session.refresh(db_post)
    return db_post


# Services


def get_service_by_slug(*, session: Session, slug: str) -> Service | None:
    return session.exec(select(Service).where(Service.slug == slug)).first()


def generate_unique_service_slug(
    *, session: Session, title: str, slug: str | None = None
) -> str:
    return _unique_slug(
        slugify(slug or title), lambda s: get_service_by_slug(session=session, slug=s)
    )


def create_service(*, session: Session, service_in: ServiceCreate) -> Service:
    db_service = Service.model_validate(service_in.model_dump())
    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


def update_service(
    *, session: Session, db_service: Service, service_in: ServiceUpdate
) -> Service:
    db_service.sqlmodel_update(service_in.model_dump(exclude_unset=True))
    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


# Contact submissions


def create_contact_submission(
    *,
    session: Session,
    submission_in: ContactSubmissionCreate,
    ip_address: str | None,
    user_agent: str | None,
) -> ContactSubmission:
    db_submission = ContactSubmission.model_validate(
        submission_in, update={"ip_address": ip_address, "user_agent": user_agent}
    )
    session.add(db_submission)
    session.commit()
    session.refresh(db_submission)
    return db_submission
