"""Tests for the real-time artist list sync."""

import asyncio
from unittest.mock import MagicMock

import pytest

from hiddenspins.application.services.artist_sync import ArtistSubscription, ArtistSyncAdapter
from hiddenspins.domain.entities import Artist
from hiddenspins.domain.ports import QueryFilter
from hiddenspins.infrastructure.persistence.memory_store import InMemoryDocumentStore

COLLECTION = "artists"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def adapter(store: InMemoryDocumentStore) -> ArtistSyncAdapter:
    return ArtistSyncAdapter(store)


def _names(artists: list[Artist]) -> list[str]:
    return [artist.name for artist in artists]


class TestSnapshot:
    """One-shot fetch."""

    async def test_sorted_case_insensitive(
        self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore
    ) -> None:
        for name in ["zed", "Alpha", "beta"]:
            await store.create_document(COLLECTION, {"name": name})

        assert _names(await adapter.snapshot()) == ["Alpha", "beta", "zed"]

    async def test_filters(self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore) -> None:
        await store.create_document(COLLECTION, {"name": "Mine", "savedBy": ["u1"]})
        await store.create_document(COLLECTION, {"name": "Theirs", "savedBy": ["u2"]})

        artists = await adapter.snapshot([QueryFilter("savedBy", "array-contains", "u1")])

        assert _names(artists) == ["Mine"]


class TestSubscribe:
    """Live subscriptions."""

    async def test_initial_snapshot(
        self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore
    ) -> None:
        await store.create_document(COLLECTION, {"name": "Nova"})
        received: list[list[Artist]] = []

        subscription = adapter.subscribe(received.append)
        await subscription.wait_for_pending()

        assert subscription.active
        assert [_names(artists) for artists in received] == [["Nova"]]
        subscription()

    async def test_change_triggers_sorted_refetch(
        self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore
    ) -> None:
        received: list[list[Artist]] = []
        subscription = adapter.subscribe(received.append)
        await subscription.wait_for_pending()

        await store.create_document(COLLECTION, {"name": "zed"})
        await store.create_document(COLLECTION, {"name": "Alpha"})
        await subscription.wait_for_pending()

        assert received[0] == []
        assert _names(received[-1]) == ["Alpha", "zed"]
        subscription()

    async def test_async_callback_awaited(
        self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore
    ) -> None:
        await store.create_document(COLLECTION, {"name": "Nova"})
        received: list[list[str]] = []

        async def on_artists(artists: list[Artist]) -> None:
            await asyncio.sleep(0)
            received.append(_names(artists))

        subscription = adapter.subscribe(on_artists)
        await subscription.wait_for_pending()

        assert received == [["Nova"]]
        subscription()

    async def test_failing_callback_keeps_subscription(
        self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore
    ) -> None:
        callback = MagicMock(side_effect=[ValueError("boom"), None])
        subscription = adapter.subscribe(callback)
        await subscription.wait_for_pending()

        await store.create_document(COLLECTION, {"name": "Nova"})
        await subscription.wait_for_pending()

        assert callback.call_count == 2
        assert subscription.active
        subscription()

    async def test_unsubscribe_is_idempotent(
        self, adapter: ArtistSyncAdapter, store: InMemoryDocumentStore
    ) -> None:
        received: list[list[Artist]] = []
        subscription = adapter.subscribe(received.append)
        await subscription.wait_for_pending()
        assert store.listener_count == 1

        subscription()
        subscription.unsubscribe()
        subscription()

        assert store.listener_count == 0
        assert not subscription.active

        await store.create_document(COLLECTION, {"name": "Nova"})
        await subscription.wait_for_pending()
        assert len(received) == 1

    async def test_unsubscribe_before_first_fetch_delivers_nothing(
        self, adapter: ArtistSyncAdapter
    ) -> None:
        received: list[list[Artist]] = []
        subscription = adapter.subscribe(received.append)

        subscription()
        await subscription.wait_for_pending()

        assert received == []

    async def test_setup_failure_returns_noop(self, store: InMemoryDocumentStore, mocker) -> None:
        mocker.patch.object(store, "subscribe", side_effect=RuntimeError("listener quota"))
        adapter = ArtistSyncAdapter(store)

        subscription = adapter.subscribe(MagicMock())

        assert not subscription.active
        # Calling it is still harmless
        subscription()

    def test_no_event_loop_returns_noop(self, store: InMemoryDocumentStore) -> None:
        adapter = ArtistSyncAdapter(store)

        subscription = adapter.subscribe(MagicMock())

        assert not subscription.active
        assert store.listener_count == 0


class TestGenerationGuard:
    """Out-of-order fetch results."""

    async def test_stale_result_dropped(self) -> None:
        """Generation 1 finishing after generation 2 is never delivered."""
        gates = [asyncio.Event(), asyncio.Event()]
        results = [
            [Artist(name="old", genre="", streaming_platforms=[])],
            [Artist(name="new", genre="", streaming_platforms=[])],
        ]
        calls = 0

        async def fetch() -> list[Artist]:
            nonlocal calls
            index = calls
            calls += 1
            await gates[index].wait()
            return results[index]

        received: list[list[Artist]] = []
        subscription = ArtistSubscription(fetch=fetch, callback=received.append)

        subscription.refresh()
        subscription.refresh()
        await asyncio.sleep(0)

        gates[1].set()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        gates[0].set()
        await subscription.wait_for_pending()

        assert [_names(artists) for artists in received] == [["new"]]
        assert subscription.delivered_generation == 2

    async def test_fetch_failure_is_logged_and_skipped(self) -> None:
        async def fetch() -> list[Artist]:
            raise ConnectionError("offline")

        callback = MagicMock()
        subscription = ArtistSubscription(fetch=fetch, callback=callback)

        subscription.refresh()
        await subscription.wait_for_pending()

        callback.assert_not_called()
        assert subscription.delivered_generation == 0
        assert subscription.active

    async def test_noop_refresh_does_nothing(self) -> None:
        subscription = ArtistSubscription.noop()
        subscription.refresh()
        await subscription.wait_for_pending()
        assert subscription.delivered_generation == 0
