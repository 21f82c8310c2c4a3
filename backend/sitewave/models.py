import math
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, EmailStr, field_validator
from sqlalchemy import JSON, DateTime, Text
from sqlmodel import Field, Relationship, SQLModel

T = TypeVar("T")


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


def _created_at_field():
    return Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


def _updated_at_field():
    return Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"onupdate": get_datetime_utc},
    )


def check_not_null(value):
    """Update bodies may omit a NOT NULL column but never set it to null."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# Response envelope shared by every API route
class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T | None = None
    message: str | None = None


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    total_pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, items: list, *, total: int, page: int, limit: int, **extra):
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            items=items,
            total=total,
            total_pages=total_pages,
            current_page=page,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
            **extra,
        )


# JSON payload containing access token
class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"


# Contents of JWT token
class TokenPayload(SQLModel):
    sub: str | None = None


# Users


class UserRole(str, Enum):
    user = "user"
    admin = "admin"
    editor = "editor"
    viewer = "viewer"


# Shared properties
class UserBase(SQLModel):
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    is_active: bool = True
    role: UserRole = Field(default=UserRole.user)
    full_name: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, sa_type=Text)
    image: str | None = Field(default=None, max_length=500)


# Properties to receive via API on creation
class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class UserRegister(SQLModel):
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)


# Properties to receive via API on update, all are optional
class UserUpdate(SQLModel):
    email: EmailStr | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, min_length=8, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("email", "password", "role", "is_active")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)


class UserUpdateMe(SQLModel):
    full_name: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = Field(default=None, max_length=255)
    bio: str | None = None
    image: str | None = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)


class UpdatePassword(SQLModel):
    current_password: str = Field(min_length=8, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


# Database model, database table inferred from class name
class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    created_at: datetime | None = _created_at_field()


# Properties to return via API, id is always required
class UserPublic(UserBase):
    id: uuid.UUID
    created_at: datetime | None = None


# Authors


class AuthorBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    bio: str | None = Field(default=None, sa_type=Text)
    avatar_url: str | None = Field(default=None, max_length=500)


class AuthorCreate(AuthorBase):
    pass


class AuthorUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = Field(default=None, max_length=255)
    bio: str | None = None
    avatar_url: str | None = Field(default=None, max_length=500)

    @field_validator("name", "email")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)


class Author(AuthorBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = _created_at_field()
    updated_at: datetime | None = _updated_at_field()
    posts: list["BlogPost"] = Relationship(back_populates="author")


class AuthorPublic(AuthorBase):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AuthorWithCount(AuthorPublic):
    posts_count: int = 0


# Categories


class CategoryBase(SQLModel):
    name: str = Field(unique=True, max_length=100)
    slug: str = Field(unique=True, index=True, max_length=100)
    description: str | None = Field(default=None, sa_type=Text)


class CategoryCreate(SQLModel):
    name: str | None = Field(default=None, max_length=100)
    slug: str | None = Field(default=None, max_length=100)
    description: str | None = None


class CategoryUpdate(CategoryCreate):
    pass


class Category(CategoryBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = _created_at_field()
    updated_at: datetime | None = _updated_at_field()
    posts: list["BlogPost"] = Relationship(back_populates="category")


class CategoryPublic(CategoryBase):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryWithCount(CategoryPublic):
    posts_count: int = 0


# Tags


class BlogPostTagLink(SQLModel, table=True):
    blog_post_id: uuid.UUID = Field(
        foreign_key="blogpost.id", primary_key=True, ondelete="CASCADE"
    )
    tag_id: uuid.UUID = Field(foreign_key="tag.id", primary_key=True, ondelete="CASCADE")


class TagBase(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(unique=True, index=True, min_length=1, max_length=100)


class TagCreate(TagBase):
    pass


class TagUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100)


class Tag(TagBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = _created_at_field()
    posts: list["BlogPost"] = Relationship(back_populates="tags", link_model=BlogPostTagLink)


class TagPublic(TagBase):
    id: uuid.UUID
    created_at: datetime | None = None


class TagWithCount(TagPublic):
    posts_count: int = 0


# Blog posts


class PostStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class BlogPostBase(SQLModel):
    title: str = Field(max_length=255)
    slug: str = Field(unique=True, index=True, max_length=255)
    excerpt: str = Field(sa_type=Text)
    content: str = Field(sa_type=Text)
    featured_image: str | None = Field(default=None, max_length=500)
    status: PostStatus = Field(default=PostStatus.draft, index=True)
    published_at: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True)  # type: ignore
    )
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = Field(default=None, sa_type=Text)
    meta_keywords: str | None = Field(default=None, sa_type=Text)


class BlogPost(BlogPostBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    author_id: uuid.UUID | None = Field(
        default=None, foreign_key="author.id", ondelete="RESTRICT"
    )
    category_id: uuid.UUID | None = Field(
        default=None, foreign_key="category.id", ondelete="RESTRICT"
    )
    created_at: datetime | None = _created_at_field()
    updated_at: datetime | None = _updated_at_field()
    author: Author | None = Relationship(back_populates="posts")
    category: Category | None = Relationship(back_populates="posts")
    tags: list[Tag] = Relationship(back_populates="posts", link_model=BlogPostTagLink)


# Request bodies keep the required fields optional so the route can answer
# with a single "Missing required fields" error.
class BlogPostCreate(SQLModel):
    title: str | None = Field(default=None, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    excerpt: str | None = None
    content: str | None = None
    featured_image: str | None = Field(default=None, max_length=500)
    author_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    status: PostStatus = PostStatus.draft
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = None
    meta_keywords: str | None = None
    tag_ids: list[str] = Field(default_factory=list)


class BlogPostUpdate(SQLModel):
    title: str | None = Field(default=None, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    excerpt: str | None = None
    content: str | None = None
    featured_image: str | None = Field(default=None, max_length=500)
    author_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    status: PostStatus | None = None
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = None
    meta_keywords: str | None = None
    tag_ids: list[str] | None = None

    @field_validator("title", "slug", "excerpt", "content", "status")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)


class BlogPostPublic(BlogPostBase):
    id: uuid.UUID
    author_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    author: AuthorPublic | None = None
    category: CategoryPublic | None = None
    tags: list[TagPublic] = []
    reading_time: int = 1


class IdList(SQLModel):
    ids: list[uuid.UUID] = Field(default_factory=list)


class BulkAction(str, Enum):
    publish = "publish"
    unpublish = "unpublish"
    archive = "archive"


class BlogPostBulkAction(IdList):
    action: str


# Services


class ServiceCategory(str, Enum):
    development = "Development"
    design = "Design"
    consulting = "Consulting"
    marketing = "Marketing"
    support = "Support"


class ServiceProcessStep(BaseModel):
    step: int
    title: str
    description: str
    duration: str | None = None


class ServicePricingTier(BaseModel):
    name: str
    price: str
    description: str
    popular: bool = False
    features: list[str] = []


class ServiceFAQ(BaseModel):
    question: str
    answer: str


class ServiceTestimonial(BaseModel):
    quote: str
    author: str
    company: str
    avatar: str | None = None


class ServiceBase(SQLModel):
    title: str = Field(min_length=1, max_length=255)
    slug: str = Field(unique=True, index=True, min_length=1, max_length=255)
    short_description: str = Field(sa_type=Text)
    full_description: str = Field(sa_type=Text)
    timeline: str = Field(max_length=100)
    category: ServiceCategory = Field(index=True)
    status: PostStatus = Field(default=PostStatus.published, index=True)
    featured_image: str = Field(default="", max_length=500)


# Child collections are JSON columns on the service row
class Service(ServiceBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    features: list[str] = Field(default_factory=list, sa_type=JSON)
    benefits: list[str] = Field(default_factory=list, sa_type=JSON)
    technologies: list[str] = Field(default_factory=list, sa_type=JSON)
    deliverables: list[str] = Field(default_factory=list, sa_type=JSON)
    process: list[dict] = Field(default_factory=list, sa_type=JSON)
    pricing: list[dict] = Field(default_factory=list, sa_type=JSON)
    faq: list[dict] = Field(default_factory=list, sa_type=JSON)
    testimonial: dict | None = Field(default=None, sa_type=JSON)
    related_services: list[str] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime | None = _created_at_field()
    updated_at: datetime | None = _updated_at_field()


class ServiceCreate(ServiceBase):
    features: list[str] = []
    benefits: list[str] = []
    technologies: list[str] = []
    deliverables: list[str] = []
    process: list[ServiceProcessStep] = []
    pricing: list[ServicePricingTier] = []
    faq: list[ServiceFAQ] = []
    testimonial: ServiceTestimonial | None = None
    related_services: list[str] = []


class ServiceUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=255)
    short_description: str | None = None
    full_description: str | None = None
    timeline: str | None = Field(default=None, max_length=100)
    category: ServiceCategory | None = None
    status: PostStatus | None = None
    featured_image: str | None = Field(default=None, max_length=500)
    features: list[str] | None = None
    benefits: list[str] | None = None
    technologies: list[str] | None = None
    deliverables: list[str] | None = None
    process: list[ServiceProcessStep] | None = None
    pricing: list[ServicePricingTier] | None = None
    faq: list[ServiceFAQ] | None = None
    testimonial: ServiceTestimonial | None = None
    related_services: list[str] | None = None

    @field_validator(
        "title",
        "slug",
        "short_description",
        "full_description",
        "timeline",
        "category",
        "status",
        "featured_image",
        "features",
        "benefits",
        "technologies",
        "deliverables",
        "process",
        "pricing",
        "faq",
        "related_services",
    )
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)


class ServicePublic(ServiceCreate):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


# Contact form


class ContactStatus(str, Enum):
    new = "new"
    read = "read"
    responded = "responded"


class ContactSubmissionBase(SQLModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr = Field(max_length=255)
    subject: str | None = Field(default=None, max_length=200)
    message: str = Field(min_length=10, max_length=1000, sa_type=Text)


class ContactSubmissionCreate(ContactSubmissionBase):
    pass


class ContactSubmissionUpdate(SQLModel):
    status: ContactStatus


class ContactSubmission(ContactSubmissionBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    status: ContactStatus = Field(default=ContactStatus.new, index=True)
    ip_address: str | None = Field(default=None, max_length=45)
    user_agent: str | None = Field(default=None, sa_type=Text)
    created_at: datetime | None = _created_at_field()
    updated_at: datetime | None = _updated_at_field()


class ContactSubmissionPublic(ContactSubmissionBase):
    id: uuid.UUID
    status: ContactStatus
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContactSubmissionsPage(Page[ContactSubmissionPublic]):
    status_counts: dict[str, int]


# View tracking


class ContentType(str, Enum):
    blog_post = "blog_post"
    service = "service"


class ViewTrackingCreate(SQLModel):
    content_type: ContentType
    content_id: uuid.UUID
    referer: str | None = Field(default=None, max_length=500)


class ViewTracking(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    content_type: ContentType = Field(index=True)
    content_id: uuid.UUID = Field(index=True)
    ip_address: str | None = Field(default=None, max_length=45, index=True)
    user_agent: str | None = Field(default=None, sa_type=Text)
    referer: str | None = Field(default=None, max_length=500)
    viewed_at: datetime | None = _created_at_field()


class ViewTrackingPublic(SQLModel):
    id: uuid.UUID
    content_type: ContentType
    content_id: uuid.UUID
    ip_address: str | None = None
    referer: str | None = None
    viewed_at: datetime | None = None
