"""API schemas for artists, drafts and saves.

Hey future me - the wire format is camelCase (that's what the stored documents and the
existing frontend use), while the Python side stays snake_case. `alias_generator=to_camel`
does the mapping; `populate_by_name=True` lets tests build models with snake_case too.

Request models are LOOSE on purpose: everything optional, no URL checks. The real
validation (defaults, URL parsing, "at least one platform") lives in the domain
normalizer, so there is exactly one place that decides what a valid artist is.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from hiddenspins.domain.entities import Artist, Draft
from hiddenspins.domain.value_objects import PlatformInfo


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StreamingPlatformSchema(CamelModel):
    """One streaming link ({name, url})."""

    name: str = Field(default="", description="Platform name; detected from the URL when blank")
    url: str = Field(default="", description="Link to the artist on the platform")


class ArtistSubmission(CamelModel):
    """Create/edit payload for artists and drafts."""

    name: str | None = None
    genre: str | None = None
    custom_genre: str | None = Field(
        default=None, description='Free-text genre, used when genre == "custom"'
    )
    image_url: str | None = Field(
        default=None, description="Hosted URL, or a data: URL to upload"
    )
    image_id: str | None = None
    link: str | None = Field(default=None, description="Legacy single link")
    platform: str | None = Field(default=None, description="Legacy single platform name")
    streaming_platforms: list[StreamingPlatformSchema] | None = None
    youtube: str | None = None
    instagram: str | None = None
    facebook: str | None = None
    x: str | None = None
    tiktok: str | None = None
    website: str | None = None
    created_by: str | None = None
    creator_name: str | None = None
    is_own_music: bool | str | None = None

    def to_raw(self) -> dict[str, Any]:
        """camelCase mapping of the fields the client actually sent.

        exclude_unset keeps "imageUrl": null (remove the image) apart from
        "no imageUrl at all" (keep the current one).
        """
        return self.model_dump(by_alias=True, exclude_unset=True)


class ArtistResponse(CamelModel):
    """An artist as the frontend sees it."""

    id: str | None
    name: str
    genre: str
    image_url: str | None = None
    image_id: str | None = None
    link: str
    platform: str
    streaming_platforms: list[StreamingPlatformSchema]
    youtube: str | None = None
    instagram: str | None = None
    facebook: str | None = None
    x: str | None = None
    tiktok: str | None = None
    website: str | None = None
    created_by: str
    creator_name: str
    is_own_music: bool
    saved_by: list[str]
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_entity(cls, artist: Artist) -> "ArtistResponse":
        return cls.model_validate({"id": artist.id, **artist.to_document()})


class DraftResponse(CamelModel):
    """A draft as the frontend sees it."""

    id: str | None
    name: str
    genre: str
    image_url: str | None = None
    image_id: str | None = None
    link: str
    platform: str
    streaming_platforms: list[StreamingPlatformSchema]
    youtube: str | None = None
    instagram: str | None = None
    facebook: str | None = None
    x: str | None = None
    tiktok: str | None = None
    website: str | None = None
    created_by: str
    creator_name: str
    is_own_music: bool
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_entity(cls, draft: Draft) -> "DraftResponse":
        return cls.model_validate({"id": draft.id, **draft.to_document()})


class SaveToggleRequest(CamelModel):
    """Body of POST /artists/{id}/save."""

    user_id: str = Field(..., description="Acting user")
    currently_saved: bool = Field(..., description="What the client currently shows")


class SaveToggleResponse(CamelModel):
    saved: bool


class PublishResponse(CamelModel):
    """Result of publishing a draft.

    warning is set when the artist was published but the draft could not be removed.
    """

    artist: ArtistResponse
    warning: str | None = None
    orphan_draft_id: str | None = None


class PlatformInfoResponse(CamelModel):
    name: str
    type: str

    @classmethod
    def from_info(cls, info: PlatformInfo) -> "PlatformInfoResponse":
        return cls(name=info.name, type=info.type.value)
