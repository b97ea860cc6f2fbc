from __future__ import annotations
from typing import Dict, Optional, Union

from loguru import logger
from pydantic import ValidationError

from flowblog.errors import PersistenceError, SlugConflictError
from flowblog.schemas.post_schema import LocalPostRecord
from flowblog.services.local_post_repository import LocalPostRepository
from flowblog.services.post_repository import PostRepository
from flowblog.settings import settings
from flowblog.utils.local_store import JsonFileStore

_TRUTHY = {"true", "1", "yes"}


class MigrationService:
    """
    One-time copy of legacy local posts into the shared database.

    The completion flag lives in the same local store as the posts. A rerun
    after a crash is safe: posts that already made it over collide on their
    slug and are skipped.
    """

    def __init__(
        self,
        local_store: JsonFileStore,
        post_repo: PostRepository,
        *,
        posts_key: Optional[str] = None,
        flag_key: Optional[str] = None,
    ):
        self.local_store = local_store
        self.local_repo = LocalPostRepository(local_store, posts_key=posts_key)
        self.post_repo = post_repo
        self.flag_key = flag_key or settings.MIGRATION_FLAG_KEY

    def has_migrated(self) -> bool:
        value = self.local_store.get(self.flag_key)
        return value is not None and value.strip().lower() in _TRUTHY

    def mark_migrated(self) -> None:
        self.local_store.set(self.flag_key, "true")

    async def migrate_if_needed(self) -> Dict[str, Union[str, int]]:
        stats: Dict[str, Union[str, int]] = {
            "status": "skipped", "inserted": 0, "duplicates": 0, "failed": 0, "total": 0,
        }
        try:
            if self.has_migrated():
                return stats
            raw_posts = self.local_repo.read_raw()
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.error("local store unreadable, migration not attempted: {}", e)
            return stats
        if not raw_posts:
            return stats

        stats["total"] = len(raw_posts)
        logger.info("migration start: {} local posts", len(raw_posts))

        inserted = duplicates = failed = 0
        for raw in raw_posts:
            if not isinstance(raw, dict):
                failed += 1
                logger.error("migration skip non-object entry: {!r}", raw)
                continue
            try:
                record = LocalPostRecord.model_validate(raw)
            except ValidationError as e:
                failed += 1
                logger.error("migration skip malformed record id={}: {}", raw.get("id"), e)
                continue
            try:
                await self.post_repo.import_post(record.to_post())
                inserted += 1
            except SlugConflictError:
                duplicates += 1
                logger.info("migration skip duplicate slug={}", record.slug)
            except PersistenceError:
                failed += 1
                logger.exception("migration failed for local id={} slug={}", record.id, record.slug)

        # set even after partial failure so the batch never runs twice
        self.mark_migrated()
        stats.update(status="done", inserted=inserted, duplicates=duplicates, failed=failed)
        logger.info("migration finished: {}", stats)
        return stats
