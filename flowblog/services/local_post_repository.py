from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from loguru import logger

from flowblog.schemas.post_schema import LocalPostRecord, PostCreate, PostOut
from flowblog.settings import settings
from flowblog.utils.dates import utc_now
from flowblog.utils.local_store import JsonFileStore
from flowblog.utils.slug import make_slug


class LocalPostRepository:
    """
    Legacy single-device storage: the whole post list lives in one store slot
    as a JSON array. Kept so old data can be read and migrated.
    No pinned/banned handling and no slug collision check.
    """

    def __init__(
        self,
        store: JsonFileStore,
        *,
        posts_key: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.posts_key = posts_key or settings.LOCAL_POSTS_KEY
        self.clock = clock

    def read_raw(self) -> List[Any]:
        blob = self.store.get(self.posts_key)
        if not blob:
            return []
        data = json.loads(blob)
        if not isinstance(data, list):
            raise ValueError(f"local slot {self.posts_key!r} does not hold a list")
        return data

    def _write(self, records: List[LocalPostRecord]) -> None:
        payload = [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records]
        self.store.set(self.posts_key, json.dumps(payload, ensure_ascii=False))

    def _records(self) -> List[LocalPostRecord]:
        records = []
        for item in self.read_raw():
            if not isinstance(item, dict):
                logger.warning("local slot {!r}: skipping non-object entry {!r}", self.posts_key, item)
                continue
            records.append(LocalPostRecord.model_validate(item))
        return records

    def list_all(self) -> List[PostOut]:
        return [r.to_post() for r in self._records()]

    def insert(self, draft: PostCreate) -> PostOut:
        created_at = self.clock()
        millis = int(created_at.replace(tzinfo=timezone.utc).timestamp() * 1000)
        record = LocalPostRecord(
            id=f"post_{millis}",
            title=draft.title,
            author=draft.author,
            content=draft.content,
            show_in_feed=draft.show_in_feed,
            created_at=created_at,
            slug=make_slug(draft.title, created_at),
        )
        # newest first, as the legacy client stored them
        self._write([record, *self._records()])
        logger.info("local post saved id={} slug={}", record.id, record.slug)
        return record.to_post()

    def get_by_slug(self, slug: str) -> Optional[PostOut]:
        for post in self.list_all():
            if post.slug == slug:
                return post
        return None

    def list_feed(self) -> List[PostOut]:
        visible = [p for p in self.list_all() if p.show_in_feed]
        return sorted(visible, key=lambda p: p.created_at, reverse=True)
