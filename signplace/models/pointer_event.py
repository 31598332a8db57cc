from __future__ import annotations
from dataclasses import dataclass

from .interaction_enums import PointerKind


@dataclass(frozen=True)
class PointerEvent:
    """Pointer position in pixels, relative to the top-left of the preview container."""
    x: float
    y: float
    kind: PointerKind = PointerKind.MOUSE

    @classmethod
    def from_client(cls, client_x: float, client_y: float, container_left: float, container_top: float,
                    kind: PointerKind = PointerKind.MOUSE) -> "PointerEvent":
        return cls(x=client_x - container_left, y=client_y - container_top, kind=kind)
