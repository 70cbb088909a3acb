"""Shared document semantics for the store adapters.

Hey future me - both InMemoryDocumentStore and SqlDocumentStore must behave EXACTLY
like the managed store the services were written against (Firestore-style):
- patches merge top-level keys
- ArrayUnion / ArrayRemove patch values mutate list fields with set semantics
- "==" and "array-contains" filters
- listeners get a ChangeEvent after every committed write

Keep all of that here so the two adapters can't drift apart.
"""

import copy
import logging
from collections.abc import Sequence
from typing import Any

from hiddenspins.domain.ports import (
    ArrayRemove,
    ArrayUnion,
    ChangeEvent,
    ChangeListener,
    Document,
    QueryFilter,
    Unsubscribe,
)

logger = logging.getLogger(__name__)


def apply_patch(data: Document, patch: Document) -> Document:
    """Return a new document with the patch merged in."""
    result = copy.deepcopy(data)
    for key, value in patch.items():
        current = result.get(key)
        current_list = list(current) if isinstance(current, list) else []

        if isinstance(value, ArrayUnion):
            for item in value.values:
                if item not in current_list:
                    current_list.append(item)
            result[key] = current_list
        elif isinstance(value, ArrayRemove):
            result[key] = [item for item in current_list if item not in value.values]
        else:
            result[key] = copy.deepcopy(value)
    return result


def matches_filters(data: Document | None, filters: Sequence[QueryFilter] | None) -> bool:
    """True if the document satisfies every filter (no filters = everything matches)."""
    if data is None:
        return False
    for query_filter in filters or ():
        value = data.get(query_filter.field)
        if query_filter.op == "==":
            if value != query_filter.value:
                return False
        elif query_filter.op == "array-contains":
            if not isinstance(value, list) or query_filter.value not in value:
                return False
        else:
            raise ValueError(f"Unsupported filter operator: {query_filter.op}")
    return True


class ChangeFeed:
    """In-process fan-out of change events to subscribed listeners.

    Listeners are called synchronously, in subscription order, right after the
    write is committed. A listener that raises is logged and skipped - one broken
    subscriber must not stop the others from hearing about the change.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, tuple[str, tuple[QueryFilter, ...], ChangeListener]] = {}
        self._next_token = 0

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(
        self,
        collection: str,
        filters: Sequence[QueryFilter] | None,
        on_change: ChangeListener,
    ) -> Unsubscribe:
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = (collection, tuple(filters or ()), on_change)

        def unsubscribe() -> None:
            # pop() with default makes repeated calls harmless
            self._listeners.pop(token, None)

        return unsubscribe

    def publish(
        self,
        event: ChangeEvent,
        before: Document | None,
        after: Document | None,
    ) -> None:
        """Notify listeners whose query the document entered, left, or changed inside."""
        for collection, filters, on_change in list(self._listeners.values()):
            if collection != event.collection:
                continue
            if filters and not (
                matches_filters(before, filters) or matches_filters(after, filters)
            ):
                continue
            try:
                on_change(event)
            except Exception:
                logger.exception(
                    "Change listener failed for %s/%s",
                    event.collection,
                    event.document_id,
                )


def snapshot_copy(data: Any) -> Any:
    """Deep copy so callers can never mutate stored state by accident."""
    return copy.deepcopy(data)
