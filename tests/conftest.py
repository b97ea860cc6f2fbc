"""
Shared fixtures: a throwaway sqlite database per test, a controllable clock
and helpers for seeding rows directly.
"""
from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from flowblog.db import create_tables, make_session_factory
from flowblog.models.post import Post
from flowblog.utils.local_store import JsonFileStore


class FakeClock:
    """Returns start, start+step, start+2*step, ... on each call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(0)):
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current = self.current + self.step
        return now


class FailingSession:
    """Session stand-in whose commit always raises the given error."""

    def __init__(self, exc: Exception, added: list):
        self.exc = exc
        self.added = added

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def add(self, obj) -> None:
        self.added.append(obj)

    async def commit(self) -> None:
        raise self.exc

    async def rollback(self) -> None:
        pass


def failing_factory(exc: Exception):
    added: list = []

    def factory():
        return FailingSession(exc, added)

    return factory, added


@pytest_asyncio.fixture
async def engine(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 5, 10, 0, 0), timedelta(seconds=1))


@pytest.fixture
def add_post(session_factory):
    """Insert a Post row directly, bypassing the repository."""

    async def _add(**overrides) -> Post:
        values = dict(
            title="Seed",
            author="seed",
            content="seed body",
            slug="Seed-05-03-2024",
            show_in_feed=True,
            pinned=False,
            banned=False,
            comments_enabled=False,
            created_at=datetime(2024, 3, 5, 9, 0, 0),
        )
        values.update(overrides)
        post = Post(**values)
        async with session_factory() as session:
            session.add(post)
            await session.commit()
        return post

    return _add


@pytest.fixture
def local_store(tmp_path: Path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "local_store.json")


def write_local_posts(store: JsonFileStore, posts: list, key: str = "blog_posts") -> None:
    store.set(key, json.dumps(posts))
