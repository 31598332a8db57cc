from __future__ import annotations
from typing import Dict, Tuple

from PIL import Image

from ..logic.signature_image import open_image
from ..models.signature_overlay import ImageBlob


class OverlayImageCache:
    """
    Decoded signature images for the preview, one entry per overlay id.
    An entry is only reused while it was decoded from the very blob the
    overlay holds now.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[ImageBlob, Image.Image]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, overlay_id: str, blob: ImageBlob) -> Image.Image:
        """Decoded image for the overlay; raises ImageDecodeError like ``open_image``."""
        entry = self._entries.get(overlay_id)
        if entry is not None and entry[0] is blob:
            return entry[1]
        img = open_image(blob)
        self._entries[overlay_id] = (blob, img)
        return img

    def evict(self, overlay_id: str) -> None:
        self._entries.pop(overlay_id, None)

    def clear(self) -> None:
        self._entries.clear()
