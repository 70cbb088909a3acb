"""Application settings.

Hey future me - everything is read from the environment with the HIDDENSPINS_ prefix,
nested groups use a double underscore:

    HIDDENSPINS_LOG_LEVEL=DEBUG
    HIDDENSPINS_STORE__BACKEND=sql
    HIDDENSPINS_DATABASE__URL=sqlite+aiosqlite:///./data/hiddenspins.db
    HIDDENSPINS_IMGBB__API_KEY=...

A .env file in the working directory is picked up too.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """SQL database settings (only used when store.backend == "sql")."""

    url: str = Field(
        default="sqlite+aiosqlite:///./hiddenspins.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")
    pool_pre_ping: bool = True
    pool_size: int = 5
    max_overflow: int = 10


class StoreSettings(BaseModel):
    """Document store backend and collection names."""

    backend: Literal["memory", "sql"] = "memory"
    artists_collection: str = "artists"
    drafts_collection: str = "artistDrafts"
    images_collection: str = "images"


class ImgBBSettings(BaseModel):
    """ImgBB image host settings."""

    api_key: SecretStr | None = None
    upload_url: str = "https://api.imgbb.com/1/upload"
    timeout: float = Field(default=30.0, gt=0)

    @property
    def is_configured(self) -> bool:
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class ObservabilitySettings(BaseModel):
    """Logging output settings."""

    log_json_format: bool = Field(
        default=False, description="Emit JSON log lines (recommended in production)"
    )


class Settings(BaseSettings):
    """Root application settings."""

    model_config = SettingsConfigDict(
        env_prefix="HIDDENSPINS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "hiddenspins"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    api_prefix: str = "/api"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    imgbb: ImgBBSettings = Field(default_factory=ImgBBSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    def get_sqlite_db_path(self) -> Path | None:
        """Path of the SQLite database file, or None for other databases / in-memory."""
        url = self.database.url
        if not url.startswith("sqlite") or ":memory:" in url:
            return None
        _, _, path = url.partition(":///")
        return Path(path) if path else None


# Yo, lru_cache makes this a process-wide singleton - settings are parsed ONCE. Tests that
# need different values should construct Settings(...) directly and pass it in instead of
# poking the environment (or call get_settings.cache_clear()).
@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
