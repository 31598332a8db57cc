from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .interaction_enums import InteractionMode


@dataclass(frozen=True)
class DragState:
    """
    Snapshot of the drag/resize controller.
    Pixel values are raster space and only valid for the running gesture.
    """
    mode: InteractionMode = InteractionMode.IDLE
    target_index: int = -1
    target_id: Optional[str] = None
    origin_pointer_px: Tuple[float, float] = (0.0, 0.0)
    origin_overlay_px: Tuple[float, float] = (0.0, 0.0)
    origin_size_px: Tuple[float, float] = (0.0, 0.0)

    @property
    def is_idle(self) -> bool:
        return self.mode == InteractionMode.IDLE


IDLE = DragState()
