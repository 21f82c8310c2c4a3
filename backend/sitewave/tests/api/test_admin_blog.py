import uuid

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from sitewave.core.config import settings
from sitewave.models import Author, BlogPost, Category, PostStatus, Tag

API = settings.API_V1_STR
POSTS = f"{API}/admin/blog/"


@pytest.fixture
def author(session: Session) -> Author:
    author = Author(name="Ada Writer", email="ada@example.com")
    session.add(author)
    session.commit()
    session.refresh(author)
    return author


@pytest.fixture
def category(session: Session) -> Category:
    category = Category(name="Engineering", slug="engineering")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def _post_payload(**overrides) -> dict:
    payload = {
        "title": "Scaling FastAPI",
        "slug": "scaling-fastapi",
        "excerpt": "Notes on scaling",
        "content": "word " * 450,
    }
    payload.update(overrides)
    return payload


def _create_post(session: Session, slug: str, status: PostStatus = PostStatus.draft) -> BlogPost:
    post = BlogPost(
        title=slug.replace("-", " ").title(),
        slug=slug,
        excerpt="excerpt",
        content="content",
        status=status,
    )
    session.add(post)
    session.commit()
    session.refresh(post)
    return post


def test_create_post_with_references_and_tags(
    client: TestClient,
    session: Session,
    editor_headers: dict[str, str],
    author: Author,
    category: Category,
) -> None:
    tag = Tag(name="Python", slug="python")
    session.add(tag)
    session.commit()

    r = client.post(
        POSTS,
        headers=editor_headers,
        json=_post_payload(
            author_id=str(author.id),
            category_id=str(category.id),
            status="published",
            tag_ids=[str(tag.id), "temp-123"],
        ),
    )
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["author"]["name"] == "Ada Writer"
    assert data["category"]["slug"] == "engineering"
    assert [t["slug"] for t in data["tags"]] == ["python"]
    assert data["published_at"] is not None
    assert data["reading_time"] == 3


def test_create_post_requires_fields(client: TestClient, editor_headers: dict[str, str]) -> None:
    r = client.post(POSTS, headers=editor_headers, json=_post_payload(excerpt=""))
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required fields"


def test_create_post_rejects_duplicate_slug(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    _create_post(session, "scaling-fastapi")
    r = client.post(POSTS, headers=editor_headers, json=_post_payload())
    assert r.status_code == 400
    assert r.json()["error"] == "A post with this slug already exists"


def test_create_post_rejects_unknown_author(
    client: TestClient, editor_headers: dict[str, str]
) -> None:
    r = client.post(
        POSTS, headers=editor_headers, json=_post_payload(author_id=str(uuid.uuid4()))
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Author not found"


def test_plain_user_cannot_manage_posts(client: TestClient, user_headers: dict[str, str]) -> None:
    r = client.get(POSTS, headers=user_headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Not enough permissions"


def test_list_posts_filters_and_sorts(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    _create_post(session, "alpha-post", PostStatus.published)
    _create_post(session, "beta-post")
    _create_post(session, "gamma-post")

    r = client.get(f"{POSTS}?status=draft&sort_by=title&sort_order=asc", headers=editor_headers)
    assert r.status_code == 200
    page = r.json()["data"]
    assert page["total"] == 2
    assert [p["slug"] for p in page["items"]] == ["beta-post", "gamma-post"]

    r = client.get(f"{POSTS}?search_query=alpha", headers=editor_headers)
    assert [p["slug"] for p in r.json()["data"]["items"]] == ["alpha-post"]

    r = client.get(f"{POSTS}?limit=2", headers=editor_headers)
    page = r.json()["data"]
    assert page["total_pages"] == 2
    assert page["has_next_page"] is True


def test_update_and_delete_post(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    post = _create_post(session, "draft-post")
    r = client.put(
        f"{POSTS}{post.id}",
        headers=editor_headers,
        json={"title": "Now Published", "status": "published"},
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["title"] == "Now Published"
    assert data["status"] == "published"
    assert data["published_at"] is not None

    r = client.delete(f"{POSTS}{post.id}", headers=editor_headers)
    assert r.status_code == 200
    r = client.get(f"{POSTS}{post.id}", headers=editor_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Blog post not found"


def test_update_post_rejects_taken_slug(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    _create_post(session, "taken")
    post = _create_post(session, "mine")
    r = client.put(f"{POSTS}{post.id}", headers=editor_headers, json={"slug": "taken"})
    assert r.status_code == 400


@pytest.mark.parametrize("field", ["title", "slug", "excerpt", "content", "status"])
def test_update_post_rejects_null_for_required_field(
    client: TestClient, session: Session, editor_headers: dict[str, str], field: str
) -> None:
    post = _create_post(session, "keep-me")
    r = client.put(f"{POSTS}{post.id}", headers=editor_headers, json={field: None})
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed"

    session.refresh(post)
    assert post.title == "Keep Me"


def test_update_post_can_clear_optional_field(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    post = _create_post(session, "with-image")
    post.featured_image = "https://cdn.example.com/a.png"
    session.add(post)
    session.commit()

    r = client.put(f"{POSTS}{post.id}", headers=editor_headers, json={"featured_image": None})
    assert r.status_code == 200
    assert r.json()["data"]["featured_image"] is None


def test_bulk_publish_and_delete(
    client: TestClient, session: Session, editor_headers: dict[str, str]
) -> None:
    ids = [str(_create_post(session, f"bulk-{i}").id) for i in range(3)]

    r = client.patch(POSTS, headers=editor_headers, json={"ids": ids[:2], "action": "publish"})
    assert r.status_code == 200
    assert r.json()["data"] == {"updated_count": 2, "status": "published"}

    r = client.patch(POSTS, headers=editor_headers, json={"ids": ids, "action": "explode"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid action"

    r = client.request("DELETE", POSTS, headers=editor_headers, json={"ids": ids})
    assert r.status_code == 200
    assert r.json()["data"]["deleted_count"] == 3


def test_bulk_delete_requires_ids(client: TestClient, editor_headers: dict[str, str]) -> None:
    r = client.request("DELETE", POSTS, headers=editor_headers, json={"ids": []})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid post IDs provided"
