from __future__ import annotations
from typing import Optional, Dict, Any
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === DB connection ===
    DB_USER: str = "flowblog"
    DB_PASSWORD: str = ""
    DB_HOST: str = "database"
    DB_INTERNAL_PORT: int = 3306
    DB_NAME: str = "flowblog"
    # full SQLAlchemy async URL; wins over the DB_* parts when set
    DATABASE_URL: Optional[str] = None

    # === engine options ===
    DB_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True
    DB_POOL_RECYCLE_SEC: int = 1800

    # === slug collision retry ===
    SLUG_MAX_ATTEMPTS: int = 5
    SLUG_SUFFIX_MIN: int = 10
    SLUG_SUFFIX_MAX: int = 99

    # === legacy local store ===
    LOCAL_STORE_PATH: str = "local_store.json"
    LOCAL_POSTS_KEY: str = "blog_posts"
    MIGRATION_FLAG_KEY: str = "has_migrated"

    LOG_LEVEL: str = "INFO"
    AUTO_CREATE_TABLES: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def database_url_async(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        user = quote_plus(self.DB_USER)
        pwd = quote_plus(self.DB_PASSWORD)
        return f"mysql+aiomysql://{user}:{pwd}@{self.DB_HOST}:{self.DB_INTERNAL_PORT}/{self.DB_NAME}?charset=utf8mb4"

    def async_engine_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"echo": self.DB_ECHO}
        # sqlite has no server-side connections to recycle
        if not self.database_url_async.startswith("sqlite"):
            kwargs["pool_pre_ping"] = self.DB_POOL_PRE_PING
            kwargs["pool_recycle"] = self.DB_POOL_RECYCLE_SEC
        return kwargs


settings = Settings()
