"""Application lifecycle management for startup and shutdown.

Startup builds the whole object graph ONCE and parks it on app.state:

    store (memory | sql) ─┬─> ArtistService ──> ImageService ──> ImgBBClient
                          ├─> DraftService
                          ├─> SaveToggleService
                          └─> ArtistSyncAdapter

Routes only ever see these through api/dependencies.py.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from hiddenspins.application.services import (
    ArtistService,
    ArtistSyncAdapter,
    DraftService,
    ImageService,
    SaveToggleService,
)
from hiddenspins.config import Settings, get_settings
from hiddenspins.domain.exceptions import ConfigurationError
from hiddenspins.domain.ports import IDocumentStore
from hiddenspins.infrastructure.integrations import ImgBBClient
from hiddenspins.infrastructure.observability import configure_logging
from hiddenspins.infrastructure.persistence import (
    Database,
    InMemoryDocumentStore,
    SqlDocumentStore,
)

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    """Everything the lifespan creates (and has to clean up)."""

    store: IDocumentStore
    imgbb_client: ImgBBClient
    artist_service: ArtistService
    draft_service: DraftService
    save_toggle_service: SaveToggleService
    artist_sync: ArtistSyncAdapter
    database: Database | None = None

    async def close(self) -> None:
        try:
            await self.imgbb_client.close()
        except Exception as e:
            logger.exception("Error closing ImgBB client: %s", e)
        if self.database is not None:
            try:
                await self.database.close()
                logger.info("Database connection closed")
            except Exception as e:
                logger.exception("Error closing database: %s", e)


# Hey future me - SQLite won't create missing parent directories for its file and fails with
# a cryptic "unable to open database file". Create them up front and turn OS errors into a
# ConfigurationError that says what to fix.
def _prepare_sqlite_path(settings: Settings) -> None:
    db_path = settings.get_sqlite_db_path()
    if db_path is None or str(db_path.parent) in ("", "."):
        return
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create SQLite database directory '{db_path.parent}': {exc}. "
            "Check HIDDENSPINS_DATABASE__URL or the directory permissions."
        ) from exc


async def build_services(settings: Settings) -> AppServices:
    """Create store, clients and services according to settings."""
    database: Database | None = None
    store: IDocumentStore
    if settings.store.backend == "sql":
        _prepare_sqlite_path(settings)
        database = Database(settings.database)
        await database.create_tables()
        store = SqlDocumentStore(database)
        logger.info("Using SQL document store: %s", settings.database.url)
    else:
        store = InMemoryDocumentStore()
        logger.info("Using in-memory document store (data is lost on restart)")

    if not settings.imgbb.is_configured:
        logger.warning("ImgBB API key not configured - artist image uploads are disabled")

    imgbb_client = ImgBBClient(settings.imgbb)
    image_service = ImageService(
        store, imgbb_client, collection=settings.store.images_collection
    )
    artists_collection = settings.store.artists_collection

    return AppServices(
        store=store,
        imgbb_client=imgbb_client,
        artist_service=ArtistService(store, image_service, collection=artists_collection),
        draft_service=DraftService(store, collection=settings.store.drafts_collection),
        save_toggle_service=SaveToggleService(store, collection=artists_collection),
        artist_sync=ArtistSyncAdapter(store, collection=artists_collection),
        database=database,
    )


# Listen future me - everything before `yield` is STARTUP, everything after is SHUTDOWN.
# The finally block runs even when startup blew up halfway, so only close what exists.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    services: AppServices | None = None
    try:
        services = await build_services(settings)
        app.state.store = services.store
        app.state.artist_service = services.artist_service
        app.state.draft_service = services.draft_service
        app.state.save_toggle_service = services.save_toggle_service
        app.state.artist_sync = services.artist_sync
        logger.info("Application started")

        yield

    except Exception as e:
        logger.exception("Error during application startup: %s", e)
        raise
    finally:
        logger.info("Shutting down application")
        if services is not None:
            await services.close()
