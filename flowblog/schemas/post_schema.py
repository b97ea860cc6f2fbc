from __future__ import annotations
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer, field_validator

from flowblog.utils.dates import format_display_date, to_naive_utc


def _require_text(v: str) -> str:
    # blank check only; the value itself is kept as typed
    if not v or not v.strip():
        raise ValueError("must not be blank")
    return v


class PostCreate(BaseModel):
    title: str
    author: str
    content: str
    show_in_feed: bool = True
    show_header: bool = True
    comments_enabled: bool = False

    @field_validator("title", "author", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _require_text(v)


class PostOut(BaseModel):
    id: str
    title: str
    author: str
    content: str
    slug: str
    show_in_feed: bool
    created_at: datetime
    pinned: bool = False
    banned: bool = False
    show_header: bool = True
    comments_enabled: bool = False

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def display_date(self) -> str:
        return format_display_date(self.created_at)


class LocalPostRecord(BaseModel):
    """One entry of the legacy local JSON list (camelCase on disk)."""

    id: str
    title: str
    author: str = ""
    content: str = ""
    show_in_feed: bool = Field(True, alias="showInFeed")
    created_at: datetime = Field(alias="createdAt")
    slug: str
    pinned: Optional[bool] = None
    banned: Optional[bool] = None
    show_header: Optional[bool] = Field(None, alias="showHeader")
    comments_enabled: Optional[bool] = Field(None, alias="commentsEnabled")

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("created_at")
    def _dump_created_at(self, v: datetime) -> str:
        # legacy clients wrote JavaScript ISO strings: millis + "Z"
        return to_naive_utc(v).isoformat(timespec="milliseconds") + "Z"

    def to_post(self) -> PostOut:
        return PostOut(
            id=self.id,
            title=self.title,
            author=self.author,
            content=self.content,
            slug=self.slug,
            show_in_feed=self.show_in_feed,
            created_at=to_naive_utc(self.created_at),
            pinned=bool(self.pinned),
            banned=bool(self.banned),
            show_header=True if self.show_header is None else self.show_header,
            comments_enabled=bool(self.comments_enabled),
        )
