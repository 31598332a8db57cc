from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldProjection:
    """
    Percentage-space view of a form field rectangle (origin top-left).
    Recomputed for every render; never stored with the overlays.
    """
    x_percent: float
    y_percent: float
    width_percent: float
    height_percent: float
    page_index: int
    name: str = ""
