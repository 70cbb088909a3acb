"""Value objects and pure domain functions."""

from hiddenspins.domain.value_objects.artist_normalization import (
    artist_from_document,
    assign_link,
    draft_from_document,
    normalize_artist,
    normalize_draft,
    title_case_genre,
)
from hiddenspins.domain.value_objects.platform import (
    PlatformInfo,
    PlatformType,
    classify,
)

__all__ = [
    "PlatformInfo",
    "PlatformType",
    "artist_from_document",
    "assign_link",
    "classify",
    "draft_from_document",
    "normalize_artist",
    "normalize_draft",
    "title_case_genre",
]
