from __future__ import annotations
import uuid
from dataclasses import dataclass, field
from typing import Union

# PNG/JPEG bytes or a "data:image/...;base64," URL; never decoded by the geometry code.
ImageBlob = Union[bytes, str]

PERCENT_FIELDS = ("x_percent", "y_percent", "width_percent", "height_percent")


def _new_overlay_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class SignatureOverlay:
    """
    Signature image placed on one page, in percentage space
    (0..100 per axis, origin top-left of the page).
    """
    image: ImageBlob = field(repr=False)
    x_percent: float
    y_percent: float
    width_percent: float
    height_percent: float
    page_index: int = 0
    overlay_id: str = field(default_factory=_new_overlay_id)
