from __future__ import annotations
from datetime import datetime
from typing import Callable, List

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flowblog.errors import PersistenceError
from flowblog.models.abuse_report import AbuseReport
from flowblog.models.comment import Comment
from flowblog.models.post import Post
from flowblog.schemas.comment_schema import CommentOut
from flowblog.utils.dates import utc_now


class CommentRepository:
    """Append-only comments and abuse reports, scoped to a post."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.session_factory = session_factory
        self.clock = clock

    async def add_comment(self, post_id: str, author_name: str, content: str) -> CommentOut:
        comment = Comment(
            post_id=post_id,
            author_name=author_name,
            content=content,
            created_at=self.clock(),
        )
        async with self.session_factory() as session:
            session.add(comment)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.exception("add_comment failed post_id={}", post_id)
                raise PersistenceError(f"comment insert failed: {e}") from e
            return CommentOut.model_validate(comment)

    async def list_comments(self, post_id: str) -> List[CommentOut]:
        """Oldest first. Empty when the post is unknown or has comments disabled."""
        try:
            async with self.session_factory() as session:
                enabled = await session.scalar(
                    select(Post.comments_enabled).where(Post.id == post_id)
                )
                if not enabled:
                    return []
                rows = (
                    await session.scalars(
                        select(Comment)
                        .where(Comment.post_id == post_id)
                        .order_by(Comment.created_at.asc(), Comment.id.asc())
                    )
                ).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"comment select failed: {e}") from e
        return [CommentOut.model_validate(c) for c in rows]

    async def submit_abuse_report(self, post_id: str, reporter_name: str, details: str) -> bool:
        report = AbuseReport(
            post_id=post_id,
            reporter_name=reporter_name,
            details=details,
            created_at=self.clock(),
        )
        try:
            async with self.session_factory() as session:
                session.add(report)
                try:
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        except SQLAlchemyError as e:
            logger.warning("abuse report not saved post_id={}: {}", post_id, e)
            return False
        logger.info("abuse report saved post_id={} id={}", post_id, report.id)
        return True
