from __future__ import annotations
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text, UniqueConstraint, false, true
from sqlalchemy.orm import Mapped, mapped_column

from flowblog.db import Base

SLUG_UNIQUE_CONSTRAINT = "uq_posts_slug"


def _new_post_id() -> str:
    return str(uuid.uuid4())


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_post_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    # markdown source, sanitized before insert
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # exact match on every backend; mysql default collations fold case
    slug: Mapped[str] = mapped_column(
        String(512).with_variant(String(512, collation="utf8mb4_bin"), "mysql", "mariadb"),
        nullable=False,
    )

    show_in_feed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    banned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    show_header: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=true())
    comments_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    # naive UTC
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("slug", name=SLUG_UNIQUE_CONSTRAINT),
        Index("ix_posts_feed", "show_in_feed", "banned", "pinned", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Post id={self.id} slug={self.slug}>"
