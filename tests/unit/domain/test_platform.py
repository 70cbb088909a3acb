"""Tests for platform classification."""

import pytest

from hiddenspins.domain.value_objects.platform import (
    OTHER_PLATFORM,
    WEBSITE_PLATFORM,
    PlatformInfo,
    PlatformType,
    classify,
    is_social_platform,
    is_streaming_platform,
    social_field_for,
)


class TestClassifyStreaming:
    """Streaming links."""

    @pytest.mark.parametrize(
        ("url", "name"),
        [
            ("https://open.spotify.com/artist/4Z8W4fKeB5YxbusRsdQVPb", "Spotify"),
            ("https://music.apple.com/us/artist/nova/123", "Apple Music"),
            ("https://nova.bandcamp.com", "Bandcamp"),
            ("https://soundcloud.com/nova", "SoundCloud"),
            ("https://music.amazon.com/artists/B0", "Amazon Music"),
            ("https://www.deezer.com/artist/1", "Deezer"),
            ("https://tidal.com/browse/artist/1", "Tidal"),
            ("https://www.mixcloud.com/nova/", "Mixcloud"),
            ("https://www.qobuz.com/artist/1", "Qobuz"),
        ],
    )
    def test_known_streaming_hosts(self, url: str, name: str) -> None:
        """Each streaming host maps to its platform name."""
        assert classify(url) == PlatformInfo(name=name, type=PlatformType.STREAMING)

    def test_spotify_anywhere_in_url(self) -> None:
        """Any URL containing spotify.com is Spotify, even without a scheme."""
        assert classify("spotify.com").name == "Spotify"
        assert classify("HTTPS://OPEN.SPOTIFY.COM/artist/x").name == "Spotify"
        assert classify("weird text spotify.com more text").type is PlatformType.STREAMING

    def test_streaming_checked_before_social(self) -> None:
        """First match in table order wins - streaming patterns come first."""
        info = classify("https://soundcloud.com/nova?ref=instagram.com")
        assert info.name == "SoundCloud"
        assert info.type is PlatformType.STREAMING


class TestClassifySocial:
    """Social links."""

    @pytest.mark.parametrize(
        ("url", "name"),
        [
            ("https://www.youtube.com/@nova", "YouTube"),
            ("https://youtu.be/dQw4w9WgXcQ", "YouTube"),
            ("https://instagram.com/nova", "Instagram"),
            ("https://facebook.com/nova", "Facebook"),
            ("https://twitter.com/nova", "X"),
            ("https://x.com/nova", "X"),
            ("https://www.tiktok.com/@nova", "TikTok"),
            ("https://discord.gg/abc", "Discord"),
            ("https://www.twitch.tv/nova", "Twitch"),
        ],
    )
    def test_known_social_hosts(self, url: str, name: str) -> None:
        """Each social host maps to its platform name."""
        assert classify(url) == PlatformInfo(name=name, type=PlatformType.SOCIAL)

    def test_unknown_host_with_scheme_is_website(self) -> None:
        """Unmatched URLs containing // are the artist's own website."""
        assert classify("https://nova-music.net") == WEBSITE_PLATFORM


class TestClassifyFallbacks:
    """Input that isn't a recognizable link."""

    def test_not_a_url(self) -> None:
        """Plain text degrades to Other/streaming."""
        assert classify("not a url") == OTHER_PLATFORM

    @pytest.mark.parametrize("value", ["", None, 42, ["https://spotify.com"]])
    def test_empty_or_non_string(self, value: object) -> None:
        """Never raises on garbage input."""
        assert classify(value) == OTHER_PLATFORM


class TestPlatformHelpers:
    """Name based helpers."""

    def test_is_streaming_platform(self) -> None:
        assert is_streaming_platform("Spotify") is True
        assert is_streaming_platform("Instagram") is False

    def test_is_social_platform(self) -> None:
        assert is_social_platform("TikTok") is True
        assert is_social_platform("Bandcamp") is False

    def test_social_field_for(self) -> None:
        """Only platforms with a field on the record map to one."""
        assert social_field_for("YouTube") == "youtube"
        assert social_field_for("X") == "x"
        assert social_field_for("Website") == "website"
        assert social_field_for("Discord") is None
        assert social_field_for("Spotify") is None
