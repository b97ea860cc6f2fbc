from __future__ import annotations
from typing import Iterable, List, Protocol
from datetime import datetime

from sqlalchemy import Select, select

from flowblog.models.post import Post


class FeedItem(Protocol):
    id: str
    show_in_feed: bool
    banned: bool
    pinned: bool
    created_at: datetime


def is_listed(post: FeedItem) -> bool:
    return bool(post.show_in_feed) and not post.banned


def select_feed(all_posts: Iterable[FeedItem]) -> List[FeedItem]:
    """
    Home feed policy:
      - only show_in_feed and not banned
      - pinned first, then newest first
      - ties broken by id ascending so repeated queries agree
    """
    listed = sorted((p for p in all_posts if is_listed(p)), key=lambda p: p.id)
    # sorts are stable (reverse=True included), so the id order survives ties
    return sorted(listed, key=lambda p: (bool(p.pinned), p.created_at), reverse=True)


def feed_query() -> Select:
    """The same policy as select_feed, pushed down to SQL."""
    return (
        select(Post)
        .where(Post.show_in_feed.is_(True), Post.banned.is_(False))
        .order_by(Post.pinned.desc(), Post.created_at.desc(), Post.id.asc())
    )
