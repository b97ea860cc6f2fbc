# services/db_service.py
from fastapi import Depends

from flowblog.db import get_async_session_factory
from flowblog.services.comment_repository import CommentRepository
from flowblog.services.migration_service import MigrationService
from flowblog.services.post_repository import PostRepository
from flowblog.settings import settings
from flowblog.utils.local_store import JsonFileStore


# FastAPI Depends providers; tests swap them through app.dependency_overrides
def get_post_repository() -> PostRepository:
    return PostRepository(get_async_session_factory())


def get_comment_repository() -> CommentRepository:
    return CommentRepository(get_async_session_factory())


def get_local_store() -> JsonFileStore:
    return JsonFileStore(settings.LOCAL_STORE_PATH)


def get_migration_service(
    local_store: JsonFileStore = Depends(get_local_store),
    post_repo: PostRepository = Depends(get_post_repository),
) -> MigrationService:
    return MigrationService(local_store, post_repo)
