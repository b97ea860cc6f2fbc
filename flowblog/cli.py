# cli.py
from __future__ import annotations
import asyncio
from typing import Optional

import typer
from loguru import logger

from flowblog.db import create_tables, dispose_engine, get_async_session_factory
from flowblog.log_config import setup_logging
from flowblog.services.migration_service import MigrationService
from flowblog.services.post_repository import PostRepository
from flowblog.settings import settings
from flowblog.utils.local_store import JsonFileStore

app = typer.Typer(pretty_exceptions_show_locals=False)


async def _migrate(store_path: str) -> dict:
    try:
        await create_tables()
        service = MigrationService(JsonFileStore(store_path), PostRepository(get_async_session_factory()))
        return await service.migrate_if_needed()
    finally:
        await dispose_engine()


async def _feed() -> list:
    try:
        return await PostRepository(get_async_session_factory()).list_feed()
    finally:
        await dispose_engine()


async def _init_db() -> None:
    try:
        await create_tables()
    finally:
        await dispose_engine()


@app.command("init-db")
def init_db():
    """Create the posts/comments/abuse_reports tables."""
    setup_logging(settings.LOG_LEVEL)
    asyncio.run(_init_db())
    logger.info("tables created")


@app.command("migrate")
def migrate(store: Optional[str] = typer.Option(None, help="legacy local store file (JSON)")):
    """Copy legacy local posts into the database once."""
    setup_logging(settings.LOG_LEVEL)
    res = asyncio.run(_migrate(store or settings.LOCAL_STORE_PATH))
    logger.info("Done. {}", res)


@app.command("feed")
def feed():
    setup_logging(settings.LOG_LEVEL)
    for post in asyncio.run(_feed()):
        pin = "*" if post.pinned else " "
        typer.echo(f"{pin} {post.slug} | {post.title}")


if __name__ == "__main__":
    app()
