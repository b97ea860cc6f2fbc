from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from flowblog.db import create_tables, dispose_engine
from flowblog.errors import PersistenceError
from flowblog.log_config import setup_logging
from flowblog.routers import comment_router, migration_router, post_router
from flowblog.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("tables ready")
    yield
    await dispose_engine()


async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.warning("{} {} -> 503: {}", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Storage is unavailable right now. Please try again."},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="flowblog", lifespan=lifespan)
    app.add_exception_handler(PersistenceError, persistence_error_handler)

    app.include_router(post_router.router, prefix="/posts", tags=["Post API"])
    app.include_router(comment_router.router, prefix="/posts", tags=["Comment API"])
    app.include_router(migration_router.router, prefix="/migration", tags=["Migration API"])

    @app.get("/")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
