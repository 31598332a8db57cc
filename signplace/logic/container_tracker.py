"""
ContainerTracker – single source of truth for the preview container size.

Observes a ResizeSource while started and republishes ContainerDimensions
whenever the measured box changes. Page changes force a republish because a
new raster may have a different aspect ratio inside the same box.
"""
from __future__ import annotations

import logging
from typing import Callable, Hashable, List, Optional

from ..models.container_dimensions import ContainerDimensions
from .contracts import ResizeSource

logger = logging.getLogger(__name__)

DimensionsListener = Callable[[ContainerDimensions], None]


class ContainerTracker:
    def __init__(self, source: ResizeSource) -> None:
        self._source = source
        self._dimensions = ContainerDimensions()
        self._handle: Optional[Hashable] = None
        self._listeners: List[DimensionsListener] = []

    # ---------- lifecycle ----------------------------------------------------
    @property
    def is_observing(self) -> bool:
        return self._handle is not None

    def start(self) -> ContainerDimensions:
        """Measure once and begin observing. Calling start twice is a no-op."""
        if self._handle is None:
            self._handle = self._source.observe(self._on_resize)
            self._refresh(force=True)
        return self._dimensions

    def stop(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self._source.unobserve(handle)

    def __enter__(self) -> "ContainerTracker":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # ---------- state --------------------------------------------------------
    @property
    def dimensions(self) -> ContainerDimensions:
        return self._dimensions

    def subscribe(self, listener: DimensionsListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: DimensionsListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def notify_page_changed(self) -> ContainerDimensions:
        self._refresh(force=True)
        return self._dimensions

    # ---------- internals ----------------------------------------------------
    def _on_resize(self, *_args) -> None:
        self._refresh(force=False)

    def _refresh(self, *, force: bool) -> None:
        width, height = self._source.measure()
        dims = ContainerDimensions(width_px=float(max(0.0, width)), height_px=float(max(0.0, height)))
        if not force and dims == self._dimensions:
            return
        self._dimensions = dims
        logger.debug("Container dimensions: %.1fx%.1f px", dims.width_px, dims.height_px)
        for listener in list(self._listeners):
            listener(dims)
