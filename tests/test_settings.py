from __future__ import annotations

from flowblog.settings import Settings


def test_database_url_built_from_parts() -> None:
    s = Settings(DB_USER="blog", DB_PASSWORD="p@ss word", DB_HOST="db", DB_INTERNAL_PORT=3307, DB_NAME="flow")
    assert s.database_url_async == "mysql+aiomysql://blog:p%40ss+word@db:3307/flow?charset=utf8mb4"
    assert s.async_engine_kwargs()["pool_pre_ping"] is True


def test_database_url_override() -> None:
    s = Settings(DATABASE_URL="sqlite+aiosqlite:///blog.db")
    assert s.database_url_async == "sqlite+aiosqlite:///blog.db"
    assert "pool_recycle" not in s.async_engine_kwargs()


def test_retry_defaults() -> None:
    s = Settings()
    assert s.SLUG_MAX_ATTEMPTS == 5
    assert (s.SLUG_SUFFIX_MIN, s.SLUG_SUFFIX_MAX) == (10, 99)
