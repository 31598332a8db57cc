from __future__ import annotations

import pytest

from signplace.exceptions.errors import (
    GeometryError,
    InvalidPageError,
    OverlayNotFoundError,
    StoreFrozenError,
)
from signplace.logic.geometry_store import GeometryStore

from .conftest import overlay


def test_add_returns_index_and_get(store: GeometryStore) -> None:
    a = overlay(0)
    b = overlay(1)
    assert store.add(a) == 0
    assert store.add(b) == 1
    assert store.get(1) is b
    assert len(store) == 2


def test_add_rejects_page_outside_document(store: GeometryStore) -> None:
    with pytest.raises(InvalidPageError):
        store.add(overlay(3))
    with pytest.raises(InvalidPageError):
        store.add(overlay(-1))


def test_add_without_page_count_accepts_any_page() -> None:
    store = GeometryStore()
    store.add(overlay(42))
    assert len(store) == 1


def test_for_page_filters_in_insertion_order(store: GeometryStore) -> None:
    items = [overlay(p) for p in (0, 1, 0, 2, 0, 1)]
    for ov in items:
        store.add(ov)

    for k in range(3):
        assert store.for_page(k) == [ov for ov in items if ov.page_index == k]
    assert store.for_page(7) == []


def test_update_geometry_replaces_percent_fields(store: GeometryStore) -> None:
    original = overlay(0, x=1, y=2, w=3, h=4)
    store.add(original)

    updated = store.update_geometry(0, x_percent=50, height_percent=12.5)

    assert store.get(0) is updated
    assert (updated.x_percent, updated.y_percent, updated.width_percent, updated.height_percent) == (50, 2, 3, 12.5)
    assert updated.overlay_id == original.overlay_id
    assert original.x_percent == 1  # immutable


def test_update_geometry_rejects_other_fields(store: GeometryStore) -> None:
    store.add(overlay(0))
    with pytest.raises(GeometryError):
        store.update_geometry(0, page_index=1)
    with pytest.raises(GeometryError):
        store.update_geometry(0, x_px=10)


def test_unknown_index(store: GeometryStore) -> None:
    with pytest.raises(OverlayNotFoundError):
        store.remove(0)
    with pytest.raises(IndexError):
        store.update_geometry(3, x_percent=1)


def test_remove_and_remove_by_id(store: GeometryStore) -> None:
    a, b, c = overlay(0), overlay(0), overlay(1)
    for ov in (a, b, c):
        store.add(ov)

    assert store.remove(0) is a
    assert store.remove_by_id(c.overlay_id) is c
    assert list(store) == [b]
    with pytest.raises(OverlayNotFoundError):
        store.index_of(a.overlay_id)


def test_events(store: GeometryStore) -> None:
    events = []
    store.subscribe(events.append)
    ov = overlay(0)
    store.add(ov)
    store.update_geometry(0, x_percent=5)
    store.remove(0)
    store.reset()
    store.unsubscribe(events.append)
    store.add(overlay(0))

    assert [e.kind for e in events] == ["added", "updated", "removed", "reset"]
    assert events[0].overlay is ov
    assert events[2].index == 0


def test_frozen_blocks_mutation(store: GeometryStore) -> None:
    store.add(overlay(0))
    with store.frozen() as snapshot:
        assert store.is_frozen
        assert len(snapshot) == 1
        with pytest.raises(StoreFrozenError):
            store.update_geometry(0, x_percent=1)
        with pytest.raises(StoreFrozenError):
            store.add(overlay(0))
        with pytest.raises(StoreFrozenError):
            store.reset()
    assert not store.is_frozen
    store.update_geometry(0, x_percent=1)


def test_no_upper_bound_on_percentages(store: GeometryStore) -> None:
    store.add(overlay(0))
    updated = store.update_geometry(0, x_percent=250, y_percent=-30, width_percent=400)
    assert (updated.x_percent, updated.y_percent, updated.width_percent) == (250, -30, 400)
