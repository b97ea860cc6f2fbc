from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class CommentCreate(BaseModel):
    author_name: str
    content: str

    @field_validator("author_name", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v


class CommentOut(BaseModel):
    id: int
    post_id: str
    author_name: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AbuseReportCreate(BaseModel):
    reporter_name: str
    details: str


class AbuseReportResult(BaseModel):
    ok: bool
    message: str
