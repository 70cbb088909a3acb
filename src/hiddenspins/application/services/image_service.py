"""Image service - uploads artist photos and keeps their metadata records.

Hey future me - this is the IImageHost the ArtistService talks to. One upload =
one ImgBB upload + one metadata document in the `images` collection. The metadata
id (NOT the ImgBB id) is what ends up as `imageId` on the artist, because that's
the thing we can actually delete later: the free ImgBB API has no delete.

Metadata document shape (camelCase like everything in the store):

    {
        "userId": "uid-1", "entityId": "artist-id" | None,
        "imgbbId": "...", "url": "...", "displayUrl": "...", "deleteUrl": "...",
        "thumbUrl": "..." | None, "mediumUrl": "..." | None,
        "createdAt": "2025-01-01T00:00:00+00:00"
    }
"""

from datetime import UTC, datetime
from typing import Any

from hiddenspins.application.services.remote import remote_call
from hiddenspins.domain.ports import IDocumentStore, UploadedImage
from hiddenspins.infrastructure.integrations.imgbb_client import ImgBBClient
from hiddenspins.infrastructure.observability.logger_template import (
    get_module_logger,
    log_operation,
)

logger = get_module_logger(__name__)

IMAGES_COLLECTION = "images"


class ImageService:
    """Upload/delete images (ImgBB + metadata documents)."""

    def __init__(
        self,
        store: IDocumentStore,
        imgbb_client: ImgBBClient,
        collection: str = IMAGES_COLLECTION,
    ) -> None:
        self._store = store
        self._imgbb = imgbb_client
        self._collection = collection

    async def upload_image(
        self,
        base64_data: str,
        owner_id: str,
        entity_id: str | None = None,
    ) -> UploadedImage:
        """Upload an image and record its metadata.

        Args:
            base64_data: data URL or raw base64 from the browser
            owner_id: user who uploaded it
            entity_id: artist the image belongs to (None while the artist doesn't exist yet)

        Returns:
            UploadedImage(id=metadata document id, url=ImgBB display URL)

        Raises:
            ConfigurationError: ImgBB not configured
            RemoteError: upload or metadata write failed
        """
        async with log_operation(logger, "image.upload", owner_id=owner_id):
            image = await self._imgbb.upload(base64_data)

            record: dict[str, Any] = {
                "userId": owner_id,
                "entityId": entity_id,
                "imgbbId": image.id,
                "url": image.url,
                "displayUrl": image.display_url,
                "deleteUrl": image.delete_url,
                "thumbUrl": image.thumb_url,
                "mediumUrl": image.medium_url,
                "createdAt": datetime.now(UTC).isoformat(),
            }
            with remote_call("Failed to store image metadata"):
                image_id = await self._store.create_document(self._collection, record)

        return UploadedImage(id=image_id, url=image.display_url)

    async def delete_image(self, image_id: str) -> None:
        """Forget an uploaded image (metadata only; ImgBB keeps the file)."""
        with remote_call("Failed to delete image metadata"):
            await self._store.delete_document(self._collection, image_id)

    async def attach_to_entity(self, image_id: str, entity_id: str) -> None:
        """Point an image's metadata at the artist it belongs to.

        Raises:
            EntityNotFoundError: metadata record is gone
            RemoteError: store failure
        """
        with remote_call("Failed to link image to entity"):
            await self._store.update_document(
                self._collection,
                image_id,
                {"entityId": entity_id, "updatedAt": datetime.now(UTC).isoformat()},
            )
