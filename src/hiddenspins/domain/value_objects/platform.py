"""Platform detection and categorization for artist links.

Hey future me - this decides whether a pasted link is a STREAMING link (goes into the
artist's platform list) or a SOCIAL link (goes into one of the social fields).

The check is a plain substring match against an ordered table. Order matters:
streaming platforms are checked before social ones, and the first hit wins. Existing
stored records were classified with exactly this order, so don't reshuffle the table
or add patterns in the middle without thinking about what old links will turn into.

Examples:
    >>> classify("https://open.spotify.com/artist/abc")
    PlatformInfo(name='Spotify', type=<PlatformType.STREAMING: 'streaming'>)
    >>> classify("https://www.instagram.com/someband")
    PlatformInfo(name='Instagram', type=<PlatformType.SOCIAL: 'social'>)
    >>> classify("not a url")
    PlatformInfo(name='Other', type=<PlatformType.STREAMING: 'streaming'>)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PlatformType(str, Enum):
    """Whether a platform hosts music or is a social presence."""

    STREAMING = "streaming"
    SOCIAL = "social"


@dataclass(frozen=True)
class PlatformInfo:
    """Detected platform for a URL. Derived, never stored."""

    name: str
    type: PlatformType


STREAMING_PLATFORMS: tuple[str, ...] = (
    "Spotify",
    "Apple Music",
    "Bandcamp",
    "SoundCloud",
    "Amazon Music",
    "Pandora",
    "Deezer",
    "Tidal",
    "Google Play Music",
    "iHeartRadio",
    "Audiomack",
    "Mixcloud",
    "Napster",
    "Qobuz",
    "Other",
)

SOCIAL_PLATFORMS: tuple[str, ...] = (
    "YouTube",
    "Instagram",
    "Facebook",
    "X",
    "TikTok",
    "Website",
    "Discord",
    "Twitch",
    "LinkedIn",
    "Pinterest",
    "Reddit",
    "Snapchat",
    "Telegram",
    "Other",
)

# =============================================================================
# PATTERN TABLE
# (substrings, platform name, type) - checked top to bottom, first match wins.
# All substrings are lowercase; the URL is lowercased before matching.
# =============================================================================

_PLATFORM_PATTERNS: tuple[tuple[tuple[str, ...], str, PlatformType], ...] = (
    # Streaming
    (("spotify.com",), "Spotify", PlatformType.STREAMING),
    (("music.apple.com", "itunes.apple.com"), "Apple Music", PlatformType.STREAMING),
    (("bandcamp.com",), "Bandcamp", PlatformType.STREAMING),
    (("soundcloud.com",), "SoundCloud", PlatformType.STREAMING),
    (("music.amazon.com", "amazon.com/music"), "Amazon Music", PlatformType.STREAMING),
    (("pandora.com",), "Pandora", PlatformType.STREAMING),
    (("deezer.com",), "Deezer", PlatformType.STREAMING),
    (("tidal.com",), "Tidal", PlatformType.STREAMING),
    (
        ("play.google.com/music", "music.google.com"),
        "Google Play Music",
        PlatformType.STREAMING,
    ),
    (("iheart.com",), "iHeartRadio", PlatformType.STREAMING),
    (("audiomack.com",), "Audiomack", PlatformType.STREAMING),
    (("mixcloud.com",), "Mixcloud", PlatformType.STREAMING),
    (("napster.com",), "Napster", PlatformType.STREAMING),
    (("qobuz.com",), "Qobuz", PlatformType.STREAMING),
    # Social
    (("youtube.com", "youtu.be"), "YouTube", PlatformType.SOCIAL),
    (("instagram.com",), "Instagram", PlatformType.SOCIAL),
    (("facebook.com", "fb.com"), "Facebook", PlatformType.SOCIAL),
    (("twitter.com", "x.com"), "X", PlatformType.SOCIAL),
    (("tiktok.com",), "TikTok", PlatformType.SOCIAL),
    (("discord.com", "discord.gg"), "Discord", PlatformType.SOCIAL),
    (("twitch.tv",), "Twitch", PlatformType.SOCIAL),
    (("linkedin.com",), "LinkedIn", PlatformType.SOCIAL),
    (("pinterest.com",), "Pinterest", PlatformType.SOCIAL),
    (("reddit.com",), "Reddit", PlatformType.SOCIAL),
    (("snapchat.com",), "Snapchat", PlatformType.SOCIAL),
    (("t.me", "telegram.me"), "Telegram", PlatformType.SOCIAL),
)

OTHER_PLATFORM = PlatformInfo(name="Other", type=PlatformType.STREAMING)
WEBSITE_PLATFORM = PlatformInfo(name="Website", type=PlatformType.SOCIAL)

# Social platforms that have a dedicated field on the artist record
_SOCIAL_FIELDS: dict[str, str] = {
    "YouTube": "youtube",
    "Instagram": "instagram",
    "Facebook": "facebook",
    "X": "x",
    "TikTok": "tiktok",
    "Website": "website",
}


def classify(url: Any) -> PlatformInfo:
    """Detect the platform a URL points to.

    Never raises - empty, non-string or malformed input degrades to
    Other/streaming.

    Args:
        url: Link as typed by the user

    Returns:
        PlatformInfo with the platform name and its streaming/social type
    """
    if not url or not isinstance(url, str):
        return OTHER_PLATFORM

    url_lower = url.lower()
    for patterns, name, platform_type in _PLATFORM_PATTERNS:
        if any(pattern in url_lower for pattern in patterns):
            return PlatformInfo(name=name, type=platform_type)

    # Unknown host but it has a scheme separator - treat it as the artist's own website
    if "//" in url:
        return WEBSITE_PLATFORM

    return OTHER_PLATFORM


def is_streaming_platform(platform_name: str) -> bool:
    """Check if a platform name is a known streaming platform."""
    return platform_name in STREAMING_PLATFORMS


def is_social_platform(platform_name: str) -> bool:
    """Check if a platform name is a known social platform."""
    return platform_name in SOCIAL_PLATFORMS


def social_field_for(platform_name: str) -> str | None:
    """Name of the SocialLinks field a social platform fills, if any.

    Discord, Twitch & co. have no field on the artist record and return None.
    """
    return _SOCIAL_FIELDS.get(platform_name)


__all__ = [
    "OTHER_PLATFORM",
    "SOCIAL_PLATFORMS",
    "STREAMING_PLATFORMS",
    "WEBSITE_PLATFORM",
    "PlatformInfo",
    "PlatformType",
    "classify",
    "is_social_platform",
    "is_streaming_platform",
    "social_field_for",
]
