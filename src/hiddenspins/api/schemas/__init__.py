"""Pydantic request/response models for the API."""

from hiddenspins.api.schemas.artists import (
    ArtistResponse,
    ArtistSubmission,
    CamelModel,
    DraftResponse,
    PlatformInfoResponse,
    PublishResponse,
    SaveToggleRequest,
    SaveToggleResponse,
    StreamingPlatformSchema,
)

__all__ = [
    "ArtistResponse",
    "ArtistSubmission",
    "CamelModel",
    "DraftResponse",
    "PlatformInfoResponse",
    "PublishResponse",
    "SaveToggleRequest",
    "SaveToggleResponse",
    "StreamingPlatformSchema",
]
