"""Application services - artist library, drafts, saves, live sync and images."""

from hiddenspins.application.services.artist_service import ArtistService
from hiddenspins.application.services.artist_sync import (
    ArtistsCallback,
    ArtistSubscription,
    ArtistSyncAdapter,
)
from hiddenspins.application.services.draft_service import DraftService, PublishFn
from hiddenspins.application.services.image_service import ImageService
from hiddenspins.application.services.remote import remote_call
from hiddenspins.application.services.save_toggle_service import SaveToggleService

__all__ = [
    "ArtistService",
    "ArtistSubscription",
    "ArtistSyncAdapter",
    "ArtistsCallback",
    "DraftService",
    "ImageService",
    "PublishFn",
    "SaveToggleService",
    "remote_call",
]
