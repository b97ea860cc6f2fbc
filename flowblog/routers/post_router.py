from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from flowblog.schemas.post_schema import PostCreate, PostOut
from flowblog.services.db_service import get_post_repository
from flowblog.services.post_repository import PostRepository

router = APIRouter()


# home feed
@router.get("/feed", response_model=List[PostOut])
async def get_feed(repo: PostRepository = Depends(get_post_repository)):
    return await repo.list_feed()


@router.get("/", response_model=List[PostOut])
async def get_posts(repo: PostRepository = Depends(get_post_repository)):
    return await repo.list_all()


@router.post("/", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(draft: PostCreate, repo: PostRepository = Depends(get_post_repository)):
    return await repo.insert(draft)


@router.get("/{slug}", response_model=PostOut)
async def get_post(slug: str, repo: PostRepository = Depends(get_post_repository)):
    post = await repo.get_by_slug(slug)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")
    return post
