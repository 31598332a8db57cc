"""
InteractionController – pointer-driven drag/resize state machine.

    IDLE --start_drag-->   DRAGGING(i) --move--> DRAGGING(i)
    IDLE --start_resize--> RESIZING(i) --move--> RESIZING(i)
    DRAGGING | RESIZING --release--> IDLE

Every move writes percentages straight into the GeometryStore, so release
only ends the gesture and never rolls anything back. Container dimensions
are read from the tracker on every event and never kept between events.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..exceptions.errors import OverlayNotFoundError
from ..models.container_dimensions import ContainerDimensions
from ..models.drag_state import IDLE, DragState
from ..models.interaction_enums import InteractionMode, ReleaseReason
from ..models.pointer_event import PointerEvent
from ..models.store_event import StoreEvent
from .container_tracker import ContainerTracker
from .contracts import InputCapture
from .coordinate_transform import percent_to_pixel, pixel_to_percent
from .geometry_store import GeometryStore

logger = logging.getLogger(__name__)

MIN_WIDTH_PX = 50.0
MIN_HEIGHT_PX = 25.0


class InteractionController:
    def __init__(
        self,
        store: GeometryStore,
        tracker: ContainerTracker,
        *,
        min_width_px: float = MIN_WIDTH_PX,
        min_height_px: float = MIN_HEIGHT_PX,
        capture: Optional[InputCapture] = None,
    ) -> None:
        self._store = store
        self._tracker = tracker
        self._capture = capture
        self.min_width_px = float(min_width_px)
        self.min_height_px = float(min_height_px)
        self._state: DragState = IDLE
        store.subscribe(self._on_store_event)

    # ---------- state --------------------------------------------------------
    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_active(self) -> bool:
        return not self._state.is_idle

    # ---------- transitions --------------------------------------------------
    def start_drag(self, event: PointerEvent, index: int) -> bool:
        """Begin moving overlay ``index``. Returns False if the start is ignored."""
        overlay_dims = self._begin(index)
        if overlay_dims is None:
            return False
        overlay, dims = overlay_dims
        # remember where inside the overlay it was grabbed
        origin_overlay = (
            percent_to_pixel(overlay.x_percent, dims.width_px),
            percent_to_pixel(overlay.y_percent, dims.height_px),
        )
        self._enter(DragState(
            mode=InteractionMode.DRAGGING,
            target_index=index,
            target_id=overlay.overlay_id,
            origin_pointer_px=(event.x, event.y),
            origin_overlay_px=origin_overlay,
        ))
        return True

    def start_resize(self, event: PointerEvent, index: int) -> bool:
        """Begin resizing overlay ``index`` from its bottom-right handle."""
        overlay_dims = self._begin(index)
        if overlay_dims is None:
            return False
        overlay, dims = overlay_dims
        self._enter(DragState(
            mode=InteractionMode.RESIZING,
            target_index=index,
            target_id=overlay.overlay_id,
            origin_pointer_px=(event.x, event.y),
            origin_size_px=(
                percent_to_pixel(overlay.width_percent, dims.width_px),
                percent_to_pixel(overlay.height_percent, dims.height_px),
            ),
        ))
        return True

    def move(self, event: PointerEvent) -> bool:
        """Apply the latest pointer position. Returns True if geometry changed."""
        state = self._state
        if state.is_idle:
            return False

        dims = self._tracker.dimensions
        if not dims.is_measured:
            logger.debug("Move skipped: container not measured")
            return False

        try:
            index = self._store.index_of(state.target_id or "")
        except OverlayNotFoundError:
            self.release(ReleaseReason.CANCEL)
            return False

        if state.mode == InteractionMode.DRAGGING:
            grab_dx = state.origin_pointer_px[0] - state.origin_overlay_px[0]
            grab_dy = state.origin_pointer_px[1] - state.origin_overlay_px[1]
            self._store.update_geometry(
                index,
                x_percent=pixel_to_percent(event.x - grab_dx, dims.width_px),
                y_percent=pixel_to_percent(event.y - grab_dy, dims.height_px),
            )
        else:
            dx = event.x - state.origin_pointer_px[0]
            dy = event.y - state.origin_pointer_px[1]
            new_w = max(self.min_width_px, state.origin_size_px[0] + dx)
            new_h = max(self.min_height_px, state.origin_size_px[1] + dy)
            self._store.update_geometry(
                index,
                width_percent=pixel_to_percent(new_w, dims.width_px),
                height_percent=pixel_to_percent(new_h, dims.height_px),
            )

        if index != state.target_index:
            self._state = DragState(
                mode=state.mode,
                target_index=index,
                target_id=state.target_id,
                origin_pointer_px=state.origin_pointer_px,
                origin_overlay_px=state.origin_overlay_px,
                origin_size_px=state.origin_size_px,
            )
        return True

    def release(self, reason: ReleaseReason = ReleaseReason.UP) -> None:
        """Pointer up/leave, touch end/cancel: back to IDLE, geometry stays as is."""
        if self._state.is_idle:
            return
        logger.debug("Gesture %s on overlay %s ended (%s)",
                     self._state.mode.value, self._state.target_id, ReleaseReason(reason).value)
        self._state = IDLE
        if self._capture is not None:
            self._capture.release()

    # ---------- helpers ------------------------------------------------------
    def _begin(self, index: int):
        if not self._state.is_idle:
            logger.debug("Start on overlay %d ignored: %s already running", index, self._state.mode.value)
            return None
        dims: ContainerDimensions = self._tracker.dimensions
        if not dims.is_measured:
            logger.debug("Start on overlay %d ignored: container not measured", index)
            return None
        try:
            overlay = self._store.get(index)
        except OverlayNotFoundError:
            logger.debug("Start ignored: no overlay at index %d", index)
            return None
        return overlay, dims

    def _enter(self, state: DragState) -> None:
        self._state = state
        logger.debug("Gesture %s started on overlay %s", state.mode.value, state.target_id)
        if self._capture is not None:
            self._capture.acquire(self.move, self.release)

    def _on_store_event(self, event: StoreEvent) -> None:
        if self._state.is_idle:
            return
        if event.kind == "reset":
            self.release(ReleaseReason.CANCEL)
        elif event.kind == "removed" and event.overlay is not None \
                and event.overlay.overlay_id == self._state.target_id:
            self.release(ReleaseReason.CANCEL)
