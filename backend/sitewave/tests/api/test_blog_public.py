from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlmodel import Session

from sitewave.core.config import settings
from sitewave.models import BlogPost, Category, PostStatus, Tag

API = settings.API_V1_STR

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _post(
    session: Session,
    slug: str,
    *,
    status: PostStatus = PostStatus.published,
    age_days: int = 0,
    category: Category | None = None,
    tags: list[Tag] | None = None,
) -> BlogPost:
    post = BlogPost(
        title=slug.replace("-", " ").title(),
        slug=slug,
        excerpt=f"About {slug}",
        content="body text",
        status=status,
        published_at=NOW - timedelta(days=age_days),
        category_id=category.id if category else None,
    )
    post.tags = tags or []
    session.add(post)
    session.commit()
    session.refresh(post)
    return post


def test_public_list_hides_drafts_and_orders_newest_first(
    client: TestClient, session: Session
) -> None:
    _post(session, "older", age_days=5)
    _post(session, "newer", age_days=1)
    _post(session, "secret", status=PostStatus.draft)

    r = client.get(f"{API}/blog/posts")
    assert r.status_code == 200
    assert [p["slug"] for p in r.json()["data"]["items"]] == ["newer", "older"]

    r = client.get(f"{API}/blog/posts/secret")
    assert r.status_code == 404


def test_public_list_filters_by_category_and_tag(client: TestClient, session: Session) -> None:
    design = Category(name="Design", slug="design")
    python = Tag(name="Python", slug="python")
    session.add(design)
    session.add(python)
    session.commit()
    _post(session, "in-design", category=design)
    _post(session, "tagged", tags=[python])
    _post(session, "plain")

    r = client.get(f"{API}/blog/posts?category_slug=design")
    assert [p["slug"] for p in r.json()["data"]["items"]] == ["in-design"]

    r = client.get(f"{API}/blog/posts?tag_slug=python")
    assert [p["slug"] for p in r.json()["data"]["items"]] == ["tagged"]


def test_related_posts_prefer_category_then_tags(client: TestClient, session: Session) -> None:
    design = Category(name="Design", slug="design")
    python = Tag(name="Python", slug="python")
    session.add(design)
    session.add(python)
    session.commit()
    _post(session, "main", category=design, tags=[python])
    _post(session, "same-category", category=design, age_days=3)
    _post(session, "same-tag", tags=[python], age_days=2)
    _post(session, "newest-unrelated", age_days=0)

    r = client.get(f"{API}/blog/posts/main/related?limit=3")
    assert r.status_code == 200
    assert [p["slug"] for p in r.json()["data"]] == [
        "same-category",
        "same-tag",
        "newest-unrelated",
    ]

    r = client.get(f"{API}/blog/posts/main/related?limit=11")
    assert r.status_code == 400


def test_public_categories_count_published_posts(client: TestClient, session: Session) -> None:
    design = Category(name="Design", slug="design")
    session.add(design)
    session.commit()
    _post(session, "live", category=design)
    _post(session, "draft", category=design, status=PostStatus.draft)

    r = client.get(f"{API}/blog/categories")
    assert r.json()["data"][0]["posts_count"] == 1
