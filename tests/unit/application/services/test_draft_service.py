"""Tests for DraftService."""

from unittest.mock import AsyncMock

import pytest

from hiddenspins.application.services.draft_service import DraftService
from hiddenspins.domain.entities import Artist, Draft, StreamingPlatform
from hiddenspins.domain.exceptions import (
    EntityNotFoundError,
    PartialFailureError,
    RemoteError,
)
from hiddenspins.infrastructure.persistence.memory_store import InMemoryDocumentStore

COLLECTION = "artistDrafts"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def service(store: InMemoryDocumentStore) -> DraftService:
    return DraftService(store)


def _published(draft: Draft) -> Artist:
    return Artist(
        id="artist-1",
        name=draft.name,
        genre=draft.genre or "Unspecified",
        streaming_platforms=list(draft.streaming_platforms),
    )


class TestSaveAndLoad:
    """Saving and resuming drafts."""

    async def test_save_draft_is_lenient(
        self, service: DraftService, store: InMemoryDocumentStore
    ) -> None:
        """Half-finished drafts with broken links are accepted."""
        draft = await service.save_draft(
            {"createdBy": "u1", "streamingPlatforms": [{"name": "Spotify", "url": "tbd"}]}
        )

        assert draft.id is not None
        assert draft.name == "Untitled Artist"
        assert draft.created_at is not None
        assert draft.updated_at == draft.created_at

        stored = await store.get_document(COLLECTION, draft.id)
        assert stored is not None
        assert stored["createdBy"] == "u1"
        assert stored["streamingPlatforms"] == [{"name": "Spotify", "url": "tbd"}]

    async def test_get_draft(self, service: DraftService) -> None:
        saved = await service.save_draft({"name": "Nova", "createdBy": "u1"})

        loaded = await service.get_draft(saved.id)  # type: ignore[arg-type]

        assert loaded is not None
        assert loaded.id == saved.id
        assert loaded.name == "Nova"

    async def test_get_missing_draft(self, service: DraftService) -> None:
        assert await service.get_draft("nope") is None

    async def test_update_draft_merges(self, service: DraftService) -> None:
        saved = await service.save_draft({"name": "Nova", "genre": "Pop", "createdBy": "u1"})

        updated = await service.update_draft(saved.id, {"name": "Nova Band"})  # type: ignore[arg-type]

        assert updated.name == "Nova Band"
        assert updated.genre == "Pop"
        assert updated.created_by == "u1"
        assert updated.created_at == saved.created_at
        assert updated.updated_at is not None
        assert updated.updated_at >= saved.updated_at  # type: ignore[operator]

    async def test_update_missing_draft(self, service: DraftService) -> None:
        with pytest.raises(EntityNotFoundError):
            await service.update_draft("nope", {"name": "x"})

    async def test_delete_draft(self, service: DraftService) -> None:
        saved = await service.save_draft({"name": "Nova"})
        await service.delete_draft(saved.id)  # type: ignore[arg-type]
        assert await service.get_draft(saved.id) is None  # type: ignore[arg-type]


class TestListDrafts:
    """Listing a user's drafts."""

    async def test_most_recent_first(
        self, service: DraftService, store: InMemoryDocumentStore
    ) -> None:
        """Inserted T-3, T-1, T-2 -> listed T-1, T-2, T-3."""
        for name, updated in [
            ("three", "2024-03-01T10:00:00+00:00"),
            ("one", "2024-03-03T10:00:00+00:00"),
            ("two", "2024-03-02T10:00:00+00:00"),
        ]:
            await store.create_document(
                COLLECTION, {"name": name, "createdBy": "u1", "updatedAt": updated}
            )
        await store.create_document(
            COLLECTION, {"name": "other", "createdBy": "u2", "updatedAt": "2024-03-04T00:00:00Z"}
        )

        drafts = await service.list_drafts("u1")

        assert [d.name for d in drafts] == ["one", "two", "three"]

    async def test_missing_timestamp_sorts_last(
        self, service: DraftService, store: InMemoryDocumentStore
    ) -> None:
        await store.create_document(COLLECTION, {"name": "undated", "createdBy": "u1"})
        await store.create_document(
            COLLECTION, {"name": "dated", "createdBy": "u1", "updatedAt": "2024-01-01T00:00:00Z"}
        )

        drafts = await service.list_drafts("u1")

        assert [d.name for d in drafts] == ["dated", "undated"]

    async def test_no_drafts(self, service: DraftService) -> None:
        assert await service.list_drafts("u1") == []


class TestPromote:
    """Publishing drafts."""

    async def test_success_deletes_draft(self, service: DraftService) -> None:
        draft = await service.save_draft(
            {
                "name": "Nova",
                "streamingPlatforms": [{"name": "Spotify", "url": "https://open.spotify.com/a"}],
            }
        )
        publish_fn = AsyncMock(side_effect=_published)

        artist = await service.promote(draft, publish_fn)

        publish_fn.assert_awaited_once_with(draft)
        assert artist.name == "Nova"
        assert artist.streaming_platforms == [
            StreamingPlatform(name="Spotify", url="https://open.spotify.com/a")
        ]
        assert await service.get_draft(draft.id) is None  # type: ignore[arg-type]

    async def test_publish_failure_keeps_draft(self, service: DraftService) -> None:
        draft = await service.save_draft({"name": "Nova"})
        publish_fn = AsyncMock(side_effect=RemoteError("store down"))

        with pytest.raises(RemoteError):
            await service.promote(draft, publish_fn)

        assert await service.get_draft(draft.id) is not None  # type: ignore[arg-type]

    async def test_delete_failure_is_partial(
        self, service: DraftService, store: InMemoryDocumentStore, mocker
    ) -> None:
        draft = await service.save_draft({"name": "Nova"})
        mocker.patch.object(
            store, "delete_document", AsyncMock(side_effect=RuntimeError("connection reset"))
        )

        with pytest.raises(PartialFailureError) as exc_info:
            await service.promote(draft, AsyncMock(side_effect=_published))

        error = exc_info.value
        assert isinstance(error.result, Artist)
        assert error.result.id == "artist-1"
        assert error.orphan_id == draft.id
        assert isinstance(error.cause, RemoteError)

    async def test_unsaved_draft_skips_delete(
        self, service: DraftService, store: InMemoryDocumentStore, mocker
    ) -> None:
        delete = mocker.patch.object(store, "delete_document", AsyncMock())

        artist = await service.promote(Draft(name="Nova", genre=""), AsyncMock(side_effect=_published))

        assert artist.id == "artist-1"
        delete.assert_not_awaited()

    async def test_publish_by_id(self, service: DraftService) -> None:
        draft = await service.save_draft({"name": "Nova"})

        artist = await service.publish(draft.id, AsyncMock(side_effect=_published))  # type: ignore[arg-type]

        assert artist.name == "Nova"
        assert await service.get_draft(draft.id) is None  # type: ignore[arg-type]

    async def test_publish_missing_draft(self, service: DraftService) -> None:
        publish_fn = AsyncMock()
        with pytest.raises(EntityNotFoundError):
            await service.publish("nope", publish_fn)
        publish_fn.assert_not_awaited()
