from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from flowblog.errors import PersistenceError
from flowblog.main import create_app
from flowblog.services.comment_repository import CommentRepository
from flowblog.services.db_service import (
    get_comment_repository,
    get_local_store,
    get_post_repository,
)
from flowblog.services.post_repository import PostRepository

from tests.conftest import write_local_posts


class BrokenPostRepository:
    async def list_feed(self):
        raise PersistenceError("database unreachable")


@pytest.fixture
def app(session_factory, local_store, clock):
    app = create_app()
    app.dependency_overrides[get_post_repository] = lambda: PostRepository(session_factory, clock=clock)
    app.dependency_overrides[get_comment_repository] = lambda: CommentRepository(session_factory)
    app.dependency_overrides[get_local_store] = lambda: local_store
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def create(client, **overrides) -> dict:
    body = {"title": "Hello, World! 🎉", "author": "ada", "content": "# hi"}
    body.update(overrides)
    res = await client.post("/posts/", json=body)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_health(client) -> None:
    res = await client.get("/")
    assert res.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_create_then_view(client) -> None:
    post = await create(client)
    assert post["slug"] == "Hello-World-05-03-2024"
    assert post["display_date"] == "March 5, 2024"

    res = await client.get(f"/posts/{post['slug']}")
    assert res.status_code == 200
    assert res.json()["id"] == post["id"]


@pytest.mark.asyncio
async def test_same_title_twice_gets_distinct_slugs(client) -> None:
    first = await create(client, title="Twin")
    second = await create(client, title="Twin")
    assert first["slug"] != second["slug"]
    assert second["slug"].startswith(first["slug"] + "-")


@pytest.mark.asyncio
async def test_missing_post_is_404(client) -> None:
    res = await client.get("/posts/nothing-here")
    assert res.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "author", "content"])
async def test_blank_fields_rejected(client, field) -> None:
    body = {"title": "t", "author": "a", "content": "c", field: "   "}
    res = await client.post("/posts/", json=body)
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_feed_hides_unlisted(client) -> None:
    await create(client, title="Listed")
    await create(client, title="Unlisted", show_in_feed=False)

    res = await client.get("/posts/feed")
    assert [p["title"] for p in res.json()] == ["Listed"]

    res = await client.get("/posts/")
    assert {p["title"] for p in res.json()} == {"Listed", "Unlisted"}


@pytest.mark.asyncio
async def test_comments_flow(client) -> None:
    post = await create(client, comments_enabled=True)

    res = await client.post(f"/posts/{post['id']}/comments", json={"author_name": "bob", "content": "nice"})
    assert res.status_code == 201
    res = await client.get(f"/posts/{post['id']}/comments")
    assert [c["content"] for c in res.json()] == ["nice"]


@pytest.mark.asyncio
async def test_comment_rules(client) -> None:
    closed = await create(client, title="Closed")

    res = await client.post(f"/posts/{closed['id']}/comments", json={"author_name": "bob", "content": "hi"})
    assert res.status_code == 403
    res = await client.post("/posts/unknown/comments", json={"author_name": "bob", "content": "hi"})
    assert res.status_code == 404
    res = await client.post(f"/posts/{closed['id']}/comments", json={"author_name": " ", "content": "hi"})
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_abuse_report(client) -> None:
    post = await create(client)
    res = await client.post(f"/posts/{post['id']}/reports", json={"reporter_name": "d", "details": "spam"})
    assert res.status_code == 200
    assert res.json()["ok"] is True


@pytest.mark.asyncio
async def test_persistence_error_maps_to_503(app, client) -> None:
    app.dependency_overrides[get_post_repository] = lambda: BrokenPostRepository()
    res = await client.get("/posts/feed")
    assert res.status_code == 503


@pytest.mark.asyncio
async def test_migration_endpoint(client, local_store) -> None:
    write_local_posts(local_store, [
        {"id": "post_1", "title": "Old", "author": "a", "content": "c", "showInFeed": True,
         "createdAt": "2023-05-01T08:00:00.000Z", "slug": "Old-01-05-2023"},
    ])

    res = await client.post("/migration/run")
    assert res.json()["inserted"] == 1
    res = await client.post("/migration/run")
    assert res.json()["status"] == "skipped"

    res = await client.get("/posts/Old-01-05-2023")
    assert res.status_code == 200
