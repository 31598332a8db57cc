from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class PageSize:
    """Physical page size in PDF points (1 pt = 1/72 inch)."""
    width: float
    height: float


@dataclass(frozen=True)
class PageRect:
    """
    Rectangle in page space: PDF points, origin bottom-left.
    (x, y) is the lower-left corner.
    """
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, x1: float, y1: float, x2: float, y2: float) -> "PageRect":
        """Normalise a PDF /Rect array (any two opposite corners)."""
        return cls(
            x=min(x1, x2),
            y=min(y1, y2),
            width=abs(x2 - x1),
            height=abs(y2 - y1),
        )
