"""Artist record normalization.

Hey future me - this is THE single entry point that turns loosely-typed submissions
(form posts, drafts being published, old documents from the store) into canonical
Artist / Draft records. Defaults, URL validation and platform dedup live HERE and
nowhere else - don't sprinkle `name or "Unknown Artist"` around the services.

Input is a camelCase mapping, same shape as the stored documents:

    {
        "name": "", "genre": "custom", "customGenre": "lo fi beats",
        "streamingPlatforms": [{"name": "Spotify", "url": "https://open.spotify.com/artist/x"}],
        "instagram": "", "createdBy": "uid-1", ...
    }

Because the output serializes back into that same shape, normalization is idempotent:
normalize_artist(normalize_artist(raw).to_document()) == normalize_artist(raw).

Everything in here is pure - no clock, no I/O. Timestamps and image uploads are the
caller's job (see ArtistService).

Examples:
    >>> artist = normalize_artist({
    ...     "genre": "custom",
    ...     "customGenre": "lo fi beats",
    ...     "streamingPlatforms": [{"url": "https://open.spotify.com/artist/x"}],
    ... })
    >>> artist.name, artist.genre, artist.platform
    ('Unknown Artist', 'Lo Fi Beats', 'Spotify')
"""

import re
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlsplit

from hiddenspins.domain.entities import (
    ANONYMOUS_USER_ID,
    ANONYMOUS_USER_NAME,
    DEFAULT_ARTIST_NAME,
    DEFAULT_DRAFT_NAME,
    DEFAULT_GENRE,
    DEFAULT_PLATFORM_NAME,
    Artist,
    Draft,
    SocialLinks,
    StreamingPlatform,
)
from hiddenspins.domain.exceptions import ValidationError, ValidationErrorKind
from hiddenspins.domain.value_objects.platform import PlatformType, classify, social_field_for

# Genre select value meaning "use the free-text customGenre field instead"
CUSTOM_GENRE_SENTINEL = "custom"

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
_HIERARCHICAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
_TRUTHY_STRINGS = frozenset({"yes", "true", "1", "on"})
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


# =============================================================================
# Small coercion helpers
# =============================================================================


def _clean_str(value: Any) -> str:
    """Stripped string, or "" for anything that isn't a string."""
    return value.strip() if isinstance(value, str) else ""


def _optional_str(value: Any) -> str | None:
    return _clean_str(value) or None


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_STRINGS
    return False


def _dedupe_ids(values: Any) -> list[str]:
    """Order-preserving dedup of user ids; blanks and non-strings are dropped."""
    if isinstance(values, (set, frozenset)):
        values = sorted(v for v in values if isinstance(v, str))
    if not isinstance(values, (list, tuple)):
        return []

    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        user_id = _clean_str(value)
        if user_id and user_id not in seen:
            seen.add(user_id)
            result.append(user_id)
    return result


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored timestamp (ISO-8601 string or datetime). Garbage -> None."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def timestamp_sort_key(value: Any) -> float:
    """Seconds since epoch for sorting; missing/unparseable timestamps count as epoch zero.

    Naive datetimes are treated as UTC so aware and naive values stay comparable.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return _EPOCH.timestamp()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


# =============================================================================
# URL / platform handling
# =============================================================================


def is_valid_url(url: str) -> bool:
    """Check that a string parses as an absolute URL.

    Needs a scheme; web-style schemes (http, https, ...) additionally need a host.
    "open.spotify.com/artist/x" (no scheme) and "not a url" are both rejected.
    """
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parts = urlsplit(url)
    except ValueError:
        # urlsplit raises on things like broken IPv6 brackets
        return False

    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return False
    if parts.scheme.lower() in _HIERARCHICAL_SCHEMES:
        return bool(parts.netloc) and bool(parts.hostname)
    return bool(parts.netloc or parts.path)


def detect_streaming_name(url: str) -> str:
    """Platform name for a streaming link; social/unknown links become "Other"."""
    info = classify(url)
    if info.type is PlatformType.STREAMING:
        return info.name
    return DEFAULT_PLATFORM_NAME


def _raw_platform_entries(raw: Mapping[str, Any]) -> list[Any]:
    entries = raw.get("streamingPlatforms")
    if isinstance(entries, (list, tuple)):
        return list(entries)
    # Hey future me - very old records only have the single link/platform pair.
    # Seed the list from it so they survive re-normalization.
    if entries is None and _clean_str(raw.get("link")):
        return [{"name": raw.get("platform"), "url": raw.get("link")}]
    return []


def _collect_platforms(raw: Mapping[str, Any]) -> list[StreamingPlatform]:
    """Platform entries with a non-blank url, in input order."""
    platforms: list[StreamingPlatform] = []
    for entry in _raw_platform_entries(raw):
        if isinstance(entry, StreamingPlatform):
            name, url = entry.name, entry.url
        elif isinstance(entry, Mapping):
            name, url = entry.get("name"), entry.get("url")
        else:
            continue

        url = _clean_str(url)
        if not url:
            continue
        platforms.append(
            StreamingPlatform(name=_clean_str(name) or detect_streaming_name(url), url=url)
        )
    return platforms


def _dedupe_platforms(platforms: Iterable[StreamingPlatform]) -> list[StreamingPlatform]:
    seen: set[str] = set()
    result: list[StreamingPlatform] = []
    for platform in platforms:
        if platform.url not in seen:
            seen.add(platform.url)
            result.append(platform)
    return result


def _validate_platforms(platforms: list[StreamingPlatform]) -> None:
    # Fail-fast on purpose: report the FIRST bad link, not all of them
    if not platforms:
        raise ValidationError(ValidationErrorKind.MISSING_PLATFORM)
    for platform in platforms:
        if not is_valid_url(platform.url):
            raise ValidationError(ValidationErrorKind.INVALID_URL, platform=platform.name)


def assign_link(
    url: str,
    platforms: list[StreamingPlatform],
    social: SocialLinks,
) -> tuple[list[StreamingPlatform], SocialLinks]:
    """Route a newly entered link to the platform list or the matching social field.

    Social links without a dedicated field (Discord, Twitch, ...) are dropped.

    Returns:
        (platforms, social) - new objects, inputs are not mutated
    """
    url = _clean_str(url)
    if not url:
        return list(platforms), social

    info = classify(url)
    if info.type is PlatformType.SOCIAL:
        field_name = social_field_for(info.name)
        if field_name is not None:
            social = social.with_link(field_name, url)
        return list(platforms), social

    return [*platforms, StreamingPlatform(name=info.name, url=url)], social


def merge_artist_edit(current: Mapping[str, Any], edit: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay an edit on a stored artist document.

    Fields missing from the edit keep their stored values. Older clients only know the
    single link/platform pair; an edit that sends `link` without `streamingPlatforms`
    replaces the primary (first) platform instead of being shadowed by the stored list.
    A social link sent that way goes to its social field.

    >>> merged = merge_artist_edit(
    ...     {"streamingPlatforms": [{"name": "Spotify", "url": "https://open.spotify.com/a"}]},
    ...     {"link": "https://nova.bandcamp.com"},
    ... )
    >>> merged["streamingPlatforms"]
    [{'name': 'Bandcamp', 'url': 'https://nova.bandcamp.com'}]
    """
    merged = {**current, **edit}
    link = _clean_str(edit.get("link"))
    if not link or "streamingPlatforms" in edit:
        return merged

    kept = _collect_platforms(current)[1:]
    platforms, social = assign_link(link, [], _social_links(merged))
    if not platforms:
        # Social link: the stored platforms stay as they are
        platforms = _collect_platforms(current)
    else:
        name = _clean_str(edit.get("platform"))
        if name:
            platforms = [StreamingPlatform(name=name, url=link)]
        platforms = [*platforms, *kept]

    merged["streamingPlatforms"] = [platform.to_document() for platform in platforms]
    merged.update(social.to_document())
    return merged


# =============================================================================
# Genre
# =============================================================================


def title_case_genre(text: str) -> str:
    """Capitalize the first letter of every word, lowercase the rest.

    >>> title_case_genre("lo fi BEATS")
    'Lo Fi Beats'
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" "))


def _resolve_genre(raw: Mapping[str, Any], default: str) -> str:
    genre = _clean_str(raw.get("genre"))
    if genre == CUSTOM_GENRE_SENTINEL:
        # Only the free-text path gets title-cased; preset genres are kept as chosen
        genre = title_case_genre(_clean_str(raw.get("customGenre"))).strip()
    return genre or default


# =============================================================================
# Public entry points
# =============================================================================


def _social_links(raw: Mapping[str, Any]) -> SocialLinks:
    return SocialLinks(**{name: _optional_str(raw.get(name)) for name in SocialLinks.field_names()})


def _build_artist(raw: Mapping[str, Any], *, validate: bool, doc_id: str | None = None) -> Artist:
    platforms = _collect_platforms(raw)
    if validate:
        _validate_platforms(platforms)

    return Artist(
        id=doc_id if doc_id is not None else _optional_str(raw.get("id")),
        name=_clean_str(raw.get("name")) or DEFAULT_ARTIST_NAME,
        genre=_resolve_genre(raw, DEFAULT_GENRE),
        streaming_platforms=_dedupe_platforms(platforms),
        image_url=_optional_str(raw.get("imageUrl")),
        image_id=_optional_str(raw.get("imageId")),
        social=_social_links(raw),
        created_by=_clean_str(raw.get("createdBy")) or ANONYMOUS_USER_ID,
        creator_name=_clean_str(raw.get("creatorName")) or ANONYMOUS_USER_NAME,
        is_own_music=_coerce_bool(raw.get("isOwnMusic")),
        saved_by=_dedupe_ids(raw.get("savedBy")),
        created_at=parse_timestamp(raw.get("createdAt")),
        updated_at=parse_timestamp(raw.get("updatedAt")),
    )


def normalize_artist(raw: Mapping[str, Any]) -> Artist:
    """Build a canonical artist record from a submission.

    Args:
        raw: camelCase mapping (form payload, draft submission or stored document)

    Returns:
        Canonical Artist (id/timestamps passed through if present)

    Raises:
        ValidationError: MISSING_PLATFORM when no platform has a url,
            INVALID_URL (with the platform name) for the first unparseable url
    """
    return _build_artist(raw, validate=True)


def normalize_draft(raw: Mapping[str, Any]) -> Draft:
    """Lenient counterpart of normalize_artist() for "save for later".

    No URL validation - drafts are allowed to be half-finished.
    """
    return Draft(
        id=_optional_str(raw.get("id")),
        name=_clean_str(raw.get("name")) or DEFAULT_DRAFT_NAME,
        genre=_resolve_genre(raw, ""),
        streaming_platforms=_dedupe_platforms(_collect_platforms(raw)),
        image_url=_optional_str(raw.get("imageUrl")),
        image_id=_optional_str(raw.get("imageId")),
        social=_social_links(raw),
        created_by=_clean_str(raw.get("createdBy")) or ANONYMOUS_USER_ID,
        creator_name=_clean_str(raw.get("creatorName")) or ANONYMOUS_USER_NAME,
        is_own_music=_coerce_bool(raw.get("isOwnMusic")),
        created_at=parse_timestamp(raw.get("createdAt")),
        updated_at=parse_timestamp(raw.get("updatedAt")),
    )


def artist_from_document(document: Mapping[str, Any], doc_id: str) -> Artist:
    """Read a stored artist document. Never raises on legacy/incomplete data."""
    return _build_artist(document, validate=False, doc_id=doc_id)


def draft_from_document(document: Mapping[str, Any], doc_id: str) -> Draft:
    """Read a stored draft document."""
    draft = normalize_draft(document)
    draft.id = doc_id
    return draft


__all__ = [
    "CUSTOM_GENRE_SENTINEL",
    "artist_from_document",
    "assign_link",
    "detect_streaming_name",
    "draft_from_document",
    "is_valid_url",
    "merge_artist_edit",
    "normalize_artist",
    "normalize_draft",
    "parse_timestamp",
    "timestamp_sort_key",
    "title_case_genre",
]
