from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from flowblog.schemas.comment_schema import (
    AbuseReportCreate,
    AbuseReportResult,
    CommentCreate,
    CommentOut,
)
from flowblog.services.comment_repository import CommentRepository
from flowblog.services.db_service import get_comment_repository, get_post_repository
from flowblog.services.post_repository import PostRepository

router = APIRouter()


@router.get("/{post_id}/comments", response_model=List[CommentOut])
async def get_comments(post_id: str, repo: CommentRepository = Depends(get_comment_repository)):
    return await repo.list_comments(post_id)


@router.post("/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    comment: CommentCreate,
    repo: CommentRepository = Depends(get_comment_repository),
    posts: PostRepository = Depends(get_post_repository),
):
    post = await posts.get_by_id(post_id)
    if not post or post.banned:
        raise HTTPException(status_code=404, detail="Post not found.")
    if not post.comments_enabled:
        raise HTTPException(status_code=403, detail="Comments are disabled for this post.")
    return await repo.add_comment(post_id, comment.author_name, comment.content)


# report failures come back as ok=False, never as an error status
@router.post("/{post_id}/reports", response_model=AbuseReportResult)
async def create_report(
    post_id: str,
    report: AbuseReportCreate,
    repo: CommentRepository = Depends(get_comment_repository),
):
    ok = await repo.submit_abuse_report(post_id, report.reporter_name, report.details)
    if ok:
        return AbuseReportResult(ok=True, message="Report submitted. Thank you.")
    return AbuseReportResult(ok=False, message="Could not submit the report. Please try again.")
