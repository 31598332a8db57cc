"""
GeometryStore – owner of all signature overlays.

Overlays are immutable; every change replaces the entry at its index and is
announced to subscribers as a StoreEvent. ``update_geometry`` only accepts
percentage fields, so raster pixels can never become stored state.
"""
from __future__ import annotations

import dataclasses
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Tuple

from ..exceptions.errors import GeometryError, InvalidPageError, OverlayNotFoundError, StoreFrozenError
from ..models.signature_overlay import PERCENT_FIELDS, SignatureOverlay
from ..models.store_event import StoreEvent

logger = logging.getLogger(__name__)

StoreListener = Callable[[StoreEvent], None]


class GeometryStore:
    def __init__(self, page_count: int = 0) -> None:
        self._overlays: List[SignatureOverlay] = []
        self._listeners: List[StoreListener] = []
        self._frozen = 0
        self.page_count = page_count

    # ---------- read ---------------------------------------------------------
    def __len__(self) -> int:
        return len(self._overlays)

    def __iter__(self) -> Iterator[SignatureOverlay]:
        return iter(tuple(self._overlays))

    def get(self, index: int) -> SignatureOverlay:
        self._check_index(index)
        return self._overlays[index]

    def index_of(self, overlay_id: str) -> int:
        for i, ov in enumerate(self._overlays):
            if ov.overlay_id == overlay_id:
                return i
        raise OverlayNotFoundError(f"No overlay with id {overlay_id!r}")

    def for_page(self, page_index: int) -> List[SignatureOverlay]:
        """Overlays on one page, in insertion order."""
        return [ov for ov in self._overlays if ov.page_index == page_index]

    def snapshot(self) -> Tuple[SignatureOverlay, ...]:
        return tuple(self._overlays)

    @property
    def is_frozen(self) -> bool:
        return self._frozen > 0

    # ---------- write --------------------------------------------------------
    def add(self, overlay: SignatureOverlay) -> int:
        self._check_mutable()
        if overlay.page_index < 0 or (self.page_count and overlay.page_index >= self.page_count):
            raise InvalidPageError(
                f"Page index {overlay.page_index} outside document with {self.page_count} page(s)"
            )
        self._overlays.append(overlay)
        index = len(self._overlays) - 1
        logger.debug("Overlay %s added on page %d", overlay.overlay_id, overlay.page_index)
        self._emit(StoreEvent("added", index, overlay))
        return index

    def remove(self, index: int) -> SignatureOverlay:
        self._check_mutable()
        self._check_index(index)
        overlay = self._overlays.pop(index)
        logger.debug("Overlay %s removed", overlay.overlay_id)
        self._emit(StoreEvent("removed", index, overlay))
        return overlay

    def remove_by_id(self, overlay_id: str) -> SignatureOverlay:
        return self.remove(self.index_of(overlay_id))

    def update_geometry(self, index: int, **changes: float) -> SignatureOverlay:
        """Replace percentage fields of one overlay. Other fields are rejected."""
        self._check_mutable()
        self._check_index(index)
        unknown = set(changes) - set(PERCENT_FIELDS)
        if unknown:
            raise GeometryError(f"Only percentage geometry can be updated, got {sorted(unknown)}")
        updated = dataclasses.replace(self._overlays[index], **{k: float(v) for k, v in changes.items()})
        self._overlays[index] = updated
        self._emit(StoreEvent("updated", index, updated))
        return updated

    def reset(self) -> None:
        self._check_mutable()
        self._overlays = []
        self._emit(StoreEvent("reset"))

    @contextmanager
    def frozen(self) -> Iterator[Tuple[SignatureOverlay, ...]]:
        """Block mutations (e.g. while overlays are written to the output)."""
        self._frozen += 1
        try:
            yield self.snapshot()
        finally:
            self._frozen -= 1

    # ---------- observers ----------------------------------------------------
    def subscribe(self, listener: StoreListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    # ---------- helpers ------------------------------------------------------
    def _emit(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._overlays):
            raise OverlayNotFoundError(f"Overlay index {index} out of range ({len(self._overlays)} overlays)")

    def _check_mutable(self) -> None:
        if self._frozen:
            raise StoreFrozenError("Overlays cannot change while they are being committed")
