"""Artist service - CRUD for the shared artist library.

Hey future me - every write goes through normalize_artist() first, so the store only
ever sees canonical records. Image handling is best-effort everywhere: a broken
ImgBB upload or a stale image metadata record must NEVER block saving the artist
itself. The user can re-upload a photo; losing their whole submission is worse.

savedBy is owned by SaveToggleService (set-semantic array_union/array_remove). Edits
here never write it, otherwise an edit racing with someone's save would drop that save.
"""

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from hiddenspins.application.services.remote import remote_call
from hiddenspins.domain.entities import Artist, sort_artists_by_name
from hiddenspins.domain.exceptions import EntityNotFoundError
from hiddenspins.domain.ports import IDocumentStore, IImageHost, QueryFilter
from hiddenspins.domain.value_objects.artist_normalization import (
    artist_from_document,
    merge_artist_edit,
    normalize_artist,
    parse_timestamp,
)
from hiddenspins.infrastructure.observability.logger_template import log_operation

logger = logging.getLogger(__name__)

ARTISTS_COLLECTION = "artists"
_DATA_URL_PREFIX = "data:"


def _is_data_url(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(_DATA_URL_PREFIX)


class ArtistService:
    """Create, edit, delete and list artists.

    Example:
        service = ArtistService(store=store, image_host=image_service)
        artist = await service.create_artist({
            "name": "Nova",
            "genre": "Ambient",
            "streamingPlatforms": [{"url": "https://nova.bandcamp.com"}],
            "createdBy": "uid-1",
        })
    """

    def __init__(
        self,
        store: IDocumentStore,
        image_host: IImageHost | None = None,
        collection: str = ARTISTS_COLLECTION,
    ) -> None:
        self._store = store
        self._image_host = image_host
        self._collection = collection

    @property
    def collection(self) -> str:
        return self._collection

    # =========================================================================
    # Image helpers (all failures tolerated)
    # =========================================================================

    async def _try_upload(
        self, data_url: str, owner_id: str, entity_id: str | None
    ) -> tuple[str, str] | None:
        """Upload a data URL; (url, image_id) or None when the upload failed."""
        if self._image_host is None:
            logger.warning("Image upload skipped: no image host configured")
            return None
        try:
            uploaded = await self._image_host.upload_image(data_url, owner_id, entity_id)
        except Exception as e:
            logger.warning(
                "Image upload failed, saving artist without new image: %s",
                e,
                extra={"owner_id": owner_id, "entity_id": entity_id},
            )
            return None
        return uploaded.url, uploaded.id

    async def _try_delete_image(self, image_id: str) -> None:
        if self._image_host is None:
            return
        try:
            await self._image_host.delete_image(image_id)
        except Exception as e:
            logger.warning("Could not delete image metadata %s: %s", image_id, e)

    async def _try_attach_image(self, image_id: str, artist_id: str) -> None:
        if self._image_host is None:
            return
        try:
            await self._image_host.attach_to_entity(image_id, artist_id)
        except Exception as e:
            logger.warning(
                "Could not link image %s to artist %s: %s", image_id, artist_id, e
            )

    async def _load(self, artist_id: str) -> dict[str, Any]:
        with remote_call("Failed to load artist"):
            document = await self._store.get_document(self._collection, artist_id)
        if document is None:
            raise EntityNotFoundError("Artist", artist_id)
        return document

    # =========================================================================
    # Commands
    # =========================================================================

    async def create_artist(self, raw: Mapping[str, Any]) -> Artist:
        """Normalize and store a new artist.

        Raises:
            ValidationError: bad submission (nothing is uploaded or written)
            RemoteError: the artist record could not be written
        """
        artist = normalize_artist(raw)

        if _is_data_url(artist.image_url):
            uploaded = await self._try_upload(artist.image_url or "", artist.created_by, None)
            artist.image_url, artist.image_id = uploaded if uploaded else (None, None)

        now = datetime.now(UTC)
        artist.created_at = now
        artist.updated_at = now

        async with log_operation(logger, "artist.create", created_by=artist.created_by):
            with remote_call("Failed to create artist"):
                artist.id = await self._store.create_document(
                    self._collection, artist.to_document()
                )

        # The image was uploaded before the artist had an id
        if artist.image_id:
            await self._try_attach_image(artist.image_id, artist.id)

        return artist

    async def update_artist(self, artist_id: str, raw: Mapping[str, Any]) -> Artist:
        """Apply an edit to an existing artist.

        Fields missing from `raw` keep their stored values; a legacy `link` edit
        replaces the primary platform. Image rules:
        - imageUrl is a data URL: upload it, then drop the old image's metadata
        - imageUrl is None: remove the image
        - imageUrl absent or blank: keep the current image

        Raises:
            EntityNotFoundError: artist doesn't exist
            ValidationError: the edited record is invalid
            RemoteError: store failure
        """
        current = await self._load(artist_id)
        artist = normalize_artist(merge_artist_edit(current, raw))

        old_url = current.get("imageUrl")
        old_id = current.get("imageId")
        requested = raw["imageUrl"] if "imageUrl" in raw else old_url

        if _is_data_url(requested):
            uploaded = await self._try_upload(requested, artist.created_by, artist_id)
            if uploaded:
                artist.image_url, artist.image_id = uploaded
                if old_id and old_id != artist.image_id:
                    await self._try_delete_image(old_id)
            else:
                artist.image_url, artist.image_id = old_url, old_id
        elif "imageUrl" in raw and requested is None:
            if old_id:
                await self._try_delete_image(old_id)
            artist.image_url, artist.image_id = None, None
        elif not requested:
            artist.image_url, artist.image_id = old_url, old_id
        elif requested != old_url and "imageId" not in raw:
            # Plain URL pasted in - the old metadata record no longer describes it
            artist.image_id = None

        artist.id = artist_id
        artist.created_at = parse_timestamp(current.get("createdAt"))
        artist.updated_at = datetime.now(UTC)
        artist.saved_by = artist_from_document(current, artist_id).saved_by

        patch = artist.to_document()
        patch.pop("savedBy")
        patch.pop("createdAt")

        async with log_operation(logger, "artist.update", artist_id=artist_id):
            with remote_call("Failed to update artist"):
                await self._store.update_document(self._collection, artist_id, patch)

        return artist

    async def delete_artist(self, artist_id: str) -> None:
        """Delete an artist and forget its image.

        Saved-by membership lives on the record itself, so it goes with it.

        Raises:
            EntityNotFoundError: artist doesn't exist
            RemoteError: store failure
        """
        current = await self._load(artist_id)

        image_id = current.get("imageId")
        if image_id:
            await self._try_delete_image(image_id)

        async with log_operation(logger, "artist.delete", artist_id=artist_id):
            with remote_call("Failed to delete artist"):
                await self._store.delete_document(self._collection, artist_id)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_artist(self, artist_id: str) -> Artist | None:
        with remote_call("Failed to load artist"):
            document = await self._store.get_document(self._collection, artist_id)
        return artist_from_document(document, artist_id) if document is not None else None

    async def _query(self, filters: list[QueryFilter] | None, message: str) -> list[Artist]:
        with remote_call(message):
            snapshots = await self._store.query_documents(self._collection, filters)
        return sort_artists_by_name(
            artist_from_document(snapshot.data, snapshot.id) for snapshot in snapshots
        )

    async def list_artists(self) -> list[Artist]:
        """The whole library, sorted by name (case-insensitive)."""
        return await self._query(None, "Failed to load artists")

    async def list_artists_by_user(self, user_id: str) -> list[Artist]:
        """Artists a user added."""
        return await self._query(
            [QueryFilter("createdBy", "==", user_id)], "Failed to load user artists"
        )

    async def list_saved_artists(self, user_id: str) -> list[Artist]:
        """Artists a user saved."""
        return await self._query(
            [QueryFilter("savedBy", "array-contains", user_id)],
            "Failed to load saved artists",
        )
