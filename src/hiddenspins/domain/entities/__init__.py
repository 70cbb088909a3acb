"""Domain entities."""

from collections.abc import Iterable
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any

DEFAULT_ARTIST_NAME = "Unknown Artist"
DEFAULT_DRAFT_NAME = "Untitled Artist"
DEFAULT_GENRE = "Unspecified"
DEFAULT_PLATFORM_NAME = "Other"
ANONYMOUS_USER_ID = "anonymous"
ANONYMOUS_USER_NAME = "Anonymous User"


@dataclass(frozen=True)
class StreamingPlatform:
    """One place the artist's music can be streamed."""

    name: str
    url: str

    def to_document(self) -> dict[str, str]:
        return {"name": self.name, "url": self.url}


# Hey future me - these are the social fields that exist on the stored record. Each one is
# nullable; the normalizer turns "" into None. Discord/Twitch/etc. links have no field here,
# they are classified as social but simply not stored.
@dataclass(frozen=True)
class SocialLinks:
    """Optional social links for an artist."""

    youtube: str | None = None
    instagram: str | None = None
    facebook: str | None = None
    x: str | None = None
    tiktok: str | None = None
    website: str | None = None

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    def with_link(self, field_name: str, url: str) -> "SocialLinks":
        """Return a copy with one social field replaced."""
        return replace(self, **{field_name: url})

    def to_document(self) -> dict[str, str | None]:
        return {name: getattr(self, name) for name in self.field_names()}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _legacy_link_fields(platforms: list[StreamingPlatform]) -> tuple[str, str]:
    """(link, platform) pair mirrored from the first streaming platform."""
    if not platforms:
        return "", DEFAULT_PLATFORM_NAME
    return platforms[0].url, platforms[0].name


# Yo, Artist is the canonical record that ends up in the "artists" collection. Build it through
# normalize_artist() (domain.value_objects.artist_normalization), never by hand from form input -
# the normalizer is the single place where defaults and URL validation live.
# link/platform are PROPERTIES derived from the first streaming platform, so the legacy mirror
# can never drift from the list. saved_by is a list for stable serialization but has set
# semantics (no duplicates, order irrelevant).
@dataclass
class Artist:
    """Artist entity (a shared library entry)."""

    name: str
    genre: str
    streaming_platforms: list[StreamingPlatform]
    id: str | None = None
    image_url: str | None = None
    image_id: str | None = None
    social: SocialLinks = field(default_factory=SocialLinks)
    created_by: str = ANONYMOUS_USER_ID
    creator_name: str = ANONYMOUS_USER_NAME
    is_own_music: bool = False
    saved_by: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def link(self) -> str:
        """Legacy single link (first streaming platform URL)."""
        return _legacy_link_fields(self.streaming_platforms)[0]

    @property
    def platform(self) -> str:
        """Legacy single platform name (first streaming platform name)."""
        return _legacy_link_fields(self.streaming_platforms)[1]

    def is_saved_by(self, user_id: str) -> bool:
        return user_id in self.saved_by

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored camelCase document (without the id)."""
        link, platform = _legacy_link_fields(self.streaming_platforms)
        return {
            "name": self.name,
            "genre": self.genre,
            "imageUrl": self.image_url,
            "imageId": self.image_id,
            "link": link,
            "platform": platform,
            "streamingPlatforms": [p.to_document() for p in self.streaming_platforms],
            "createdBy": self.created_by,
            "creatorName": self.creator_name,
            "isOwnMusic": self.is_own_music,
            **self.social.to_document(),
            "savedBy": list(self.saved_by),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class Draft:
    """Unpublished, user-private artist submission."""

    name: str
    genre: str
    streaming_platforms: list[StreamingPlatform] = field(default_factory=list)
    id: str | None = None
    image_url: str | None = None
    image_id: str | None = None
    social: SocialLinks = field(default_factory=SocialLinks)
    created_by: str = ANONYMOUS_USER_ID
    creator_name: str = ANONYMOUS_USER_NAME
    is_own_music: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def link(self) -> str:
        return _legacy_link_fields(self.streaming_platforms)[0]

    @property
    def platform(self) -> str:
        return _legacy_link_fields(self.streaming_platforms)[1]

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored camelCase document (without the id)."""
        link, platform = _legacy_link_fields(self.streaming_platforms)
        return {
            "name": self.name,
            "genre": self.genre,
            "imageUrl": self.image_url,
            "imageId": self.image_id,
            "link": link,
            "platform": platform,
            "streamingPlatforms": [p.to_document() for p in self.streaming_platforms],
            "createdBy": self.created_by,
            "creatorName": self.creator_name,
            "isOwnMusic": self.is_own_music,
            **self.social.to_document(),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def to_submission(self) -> dict[str, Any]:
        """Payload to feed into normalize_artist() when publishing this draft.

        Timestamps and id are left out - the published artist gets its own.
        """
        document = self.to_document()
        for key in ("createdAt", "updatedAt"):
            document.pop(key)
        return document


# Hey future me - SAVING is the transient "waiting for the store" state. While SAVING, the
# status' `saved` flag already shows the OPTIMISTIC target and `confirmed` keeps the last
# value the store acknowledged, so a failure can roll back to it.
class SaveState(str, Enum):
    """Save-toggle state for one (artist, user) pair."""

    UNSAVED = "unsaved"
    SAVING = "saving"
    SAVED = "saved"


@dataclass(frozen=True)
class SaveStatus:
    """Local view of whether a user saved an artist."""

    state: SaveState
    saved: bool
    confirmed: bool

    @classmethod
    def pending(cls, target: bool, confirmed: bool) -> "SaveStatus":
        return cls(state=SaveState.SAVING, saved=target, confirmed=confirmed)

    @property
    def is_pending(self) -> bool:
        return self.state is SaveState.SAVING


def sort_artists_by_name(artists: Iterable[Artist]) -> list[Artist]:
    """Case-insensitive name sort; equal names keep their incoming order."""
    return sorted(artists, key=lambda artist: (artist.name or "").casefold())


__all__ = [
    "ANONYMOUS_USER_ID",
    "ANONYMOUS_USER_NAME",
    "DEFAULT_ARTIST_NAME",
    "DEFAULT_DRAFT_NAME",
    "DEFAULT_GENRE",
    "DEFAULT_PLATFORM_NAME",
    "Artist",
    "Draft",
    "SaveState",
    "SaveStatus",
    "SocialLinks",
    "StreamingPlatform",
    "sort_artists_by_name",
]
