from __future__ import annotations
import random
from datetime import datetime
from typing import Callable, List, Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flowblog.errors import PersistenceError, RetryExhaustedError, SlugConflictError
from flowblog.models.post import Post, SLUG_UNIQUE_CONSTRAINT
from flowblog.schemas.post_schema import PostCreate, PostOut
from flowblog.services.feed_service import feed_query
from flowblog.settings import settings
from flowblog.utils.dates import to_naive_utc, utc_now
from flowblog.utils.sanitizer import ContentSanitizer
from flowblog.utils.slug import make_slug, with_random_suffix


def is_slug_conflict(exc: IntegrityError) -> bool:
    # mysql/postgres: message names the constraint
    # sqlite: "UNIQUE constraint failed: posts.slug"; NOT NULL on the column is not a conflict
    msg = str(exc.orig if exc.orig is not None else exc).lower()
    return SLUG_UNIQUE_CONSTRAINT in msg or "unique constraint failed: posts.slug" in msg


class PostRepository:
    """Posts in the shared database."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        sanitizer: Optional[ContentSanitizer] = None,
        *,
        max_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.sanitizer = sanitizer or ContentSanitizer()
        self.max_attempts = max_attempts if max_attempts is not None else settings.SLUG_MAX_ATTEMPTS
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.rng = rng or random.Random()
        self.clock = clock

    async def _try_insert(self, post: Post) -> PostOut:
        async with self.session_factory() as session:
            session.add(post)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if is_slug_conflict(e):
                    raise SlugConflictError(post.slug) from e
                raise PersistenceError(f"insert rejected: {e.orig}") from e
            except SQLAlchemyError as e:
                await session.rollback()
                raise PersistenceError(f"insert failed: {e}") from e
            return PostOut.model_validate(post)

    async def insert(self, draft: PostCreate) -> PostOut:
        """
        Persist a new post.

        The first attempt uses make_slug(title, now). Only a unique violation on
        the slug is retried, each retry with a fresh 2-digit suffix on the
        initial slug. Retries run one after another and stop after
        max_attempts in total (RetryExhaustedError). Any other failure is
        raised as PersistenceError without retrying.
        """
        created_at = self.clock()
        initial_slug = make_slug(draft.title, created_at)
        content = self.sanitizer.sanitize(draft.content)

        slug = initial_slug
        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                slug = with_random_suffix(
                    initial_slug, self.rng,
                    low=settings.SLUG_SUFFIX_MIN, high=settings.SLUG_SUFFIX_MAX,
                )
            post = Post(
                title=draft.title,
                author=draft.author,
                content=content,
                slug=slug,
                show_in_feed=draft.show_in_feed,
                show_header=draft.show_header,
                comments_enabled=draft.comments_enabled,
                created_at=created_at,
            )
            try:
                saved = await self._try_insert(post)
            except SlugConflictError:
                logger.warning("slug collision attempt={}/{} slug={}", attempt, self.max_attempts, slug)
                continue
            except PersistenceError:
                logger.exception("post insert failed (no retry) slug={}", slug)
                raise
            logger.info("post created id={} slug={}", saved.id, saved.slug)
            return saved

        logger.error("slug retries exhausted after {} attempts, initial={}", self.max_attempts, initial_slug)
        raise RetryExhaustedError(self.max_attempts, slug)

    async def import_post(self, record: PostOut) -> PostOut:
        """
        Insert a post carried over from the local store as-is: slug and
        created_at are kept, no suffix retry. Raises SlugConflictError when
        the slug already exists.
        """
        post = Post(
            title=record.title,
            author=record.author,
            content=self.sanitizer.sanitize(record.content),
            slug=record.slug,
            show_in_feed=record.show_in_feed,
            show_header=record.show_header,
            comments_enabled=record.comments_enabled,
            created_at=to_naive_utc(record.created_at),
        )
        return await self._try_insert(post)

    async def _fetch(self, stmt) -> List[PostOut]:
        try:
            async with self.session_factory() as session:
                rows = (await session.scalars(stmt)).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"select failed: {e}") from e
        return [PostOut.model_validate(p) for p in rows]

    async def list_feed(self) -> List[PostOut]:
        return await self._fetch(feed_query())

    async def list_all(self) -> List[PostOut]:
        return await self._fetch(select(Post).order_by(Post.created_at.desc(), Post.id.asc()))

    async def get_by_slug(self, slug: str, *, include_banned: bool = False) -> Optional[PostOut]:
        # exact, case-sensitive match
        rows = await self._fetch(select(Post).where(Post.slug == slug).limit(1))
        if not rows:
            return None
        post = rows[0]
        if post.banned and not include_banned:
            return None
        return post

    async def get_by_id(self, post_id: str) -> Optional[PostOut]:
        rows = await self._fetch(select(Post).where(Post.id == post_id).limit(1))
        return rows[0] if rows else None
