"""Tests for domain entities."""

from datetime import UTC, datetime

from hiddenspins.domain.entities import (
    Artist,
    Draft,
    SaveState,
    SaveStatus,
    SocialLinks,
    StreamingPlatform,
    sort_artists_by_name,
)


def _artist(name: str) -> Artist:
    return Artist(
        name=name,
        genre="Pop",
        streaming_platforms=[StreamingPlatform(name="Spotify", url="https://open.spotify.com/a")],
    )


class TestArtist:
    """Test Artist entity."""

    def test_legacy_fields_without_platforms(self) -> None:
        artist = Artist(name="Nova", genre="Pop", streaming_platforms=[])
        assert artist.link == ""
        assert artist.platform == "Other"

    def test_to_document_shape(self) -> None:
        created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        artist = _artist("Nova")
        artist.created_at = created
        artist.saved_by = ["u1"]

        document = artist.to_document()

        assert "id" not in document
        assert document["createdAt"] == created.isoformat()
        assert document["updatedAt"] is None
        assert document["savedBy"] == ["u1"]
        assert document["streamingPlatforms"] == [
            {"name": "Spotify", "url": "https://open.spotify.com/a"}
        ]
        for field_name in SocialLinks.field_names():
            assert document[field_name] is None

    def test_is_saved_by(self) -> None:
        artist = _artist("Nova")
        artist.saved_by = ["u1"]
        assert artist.is_saved_by("u1") is True
        assert artist.is_saved_by("u2") is False


class TestDraft:
    """Test Draft entity."""

    def test_to_submission_drops_timestamps(self) -> None:
        draft = Draft(
            name="Nova",
            genre="",
            created_at=datetime(2024, 1, 1, tzinfo=UTC),
            updated_at=datetime(2024, 1, 2, tzinfo=UTC),
        )
        submission = draft.to_submission()
        assert "createdAt" not in submission
        assert "updatedAt" not in submission
        assert "savedBy" not in submission
        assert submission["name"] == "Nova"


class TestSaveStatus:
    """Test the save toggle state."""

    def test_pending_keeps_confirmed(self) -> None:
        status = SaveStatus.pending(target=True, confirmed=False)
        assert status.is_pending
        assert status.saved is True
        assert status.confirmed is False


class TestSortArtistsByName:
    """Test the library ordering."""

    def test_case_insensitive(self) -> None:
        names = [a.name for a in sort_artists_by_name([_artist("beta"), _artist("Alpha")])]
        assert names == ["Alpha", "beta"]

    def test_stable_for_equal_names(self) -> None:
        first, second = _artist("Nova"), _artist("nova")
        first.id, second.id = "1", "2"
        assert [a.id for a in sort_artists_by_name([first, second])] == ["1", "2"]
