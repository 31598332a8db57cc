from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ContainerDimensions:
    """Pixel size of the preview container (raster space)."""
    width_px: float = 0.0
    height_px: float = 0.0

    @property
    def is_measured(self) -> bool:
        return self.width_px > 0 and self.height_px > 0
