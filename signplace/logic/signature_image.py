# signplace/logic/signature_image.py
"""
Signature image helpers: data-URL handling, decoding (Pillow) and turning
freehand strokes into a transparent PNG.
"""
from __future__ import annotations
import base64
import binascii
import io
from pathlib import Path
from typing import List, Sequence, Tuple

from PIL import Image, ImageDraw, UnidentifiedImageError

from ..exceptions.errors import ImageDecodeError
from ..models.signature_overlay import ImageBlob

_DATA_URL_PREFIX = "data:image/"
_MIME_BY_FORMAT = {"PNG": "image/png", "JPEG": "image/jpeg", "GIF": "image/gif"}


def blob_to_bytes(blob: ImageBlob) -> bytes:
    """Raw encoded image bytes from bytes or a ``data:image/...;base64,`` URL."""
    if isinstance(blob, (bytes, bytearray)):
        return bytes(blob)
    if not isinstance(blob, str) or not blob.startswith(_DATA_URL_PREFIX):
        raise ImageDecodeError("Invalid signature image format")
    header, _, payload = blob.partition(",")
    if ";base64" not in header or not payload:
        raise ImageDecodeError("Signature data URL is not base64 encoded")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError(f"Signature data URL payload is corrupt: {exc}") from exc


def open_image(blob: ImageBlob) -> Image.Image:
    """Decode the blob fully; raises ImageDecodeError for anything Pillow cannot read."""
    raw = blob_to_bytes(blob)
    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Cannot decode signature image: {exc}") from exc
    return img.convert("RGBA")


def to_data_url(raw: bytes) -> str:
    """Encode image bytes as a data URL (mime type taken from the decoded format)."""
    try:
        fmt = Image.open(io.BytesIO(raw)).format or "PNG"
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageDecodeError(f"Cannot decode signature image: {exc}") from exc
    mime = _MIME_BY_FORMAT.get(fmt, "image/png")
    return f"data:{mime};base64," + base64.b64encode(raw).decode("ascii")


def load_image_file(path: str | Path) -> bytes:
    """Read an uploaded signature file and make sure it decodes."""
    raw = Path(path).read_bytes()
    open_image(raw)
    return raw


def aspect_ratio(blob: ImageBlob, default: float = 0.3) -> float:
    """height / width of the image, ``default`` for empty images."""
    img = open_image(blob)
    return img.height / img.width if img.width > 0 else default


def render_png_from_strokes(strokes: Sequence[Sequence[Tuple[int, int]]],
                            size: Tuple[int, int], stroke_width: int = 2) -> bytes:
    """
    Convert freehand strokes (from the capture canvas) into a transparent PNG.
    Strokes with fewer than two points are dropped.
    """
    w, h = size
    img = Image.new("RGBA", (max(1, w), max(1, h)), (0, 0, 0, 0))
    drw = ImageDraw.Draw(img)
    for poly in strokes:
        pts: List[Tuple[int, int]] = [tuple(p) for p in poly]  # type: ignore[misc]
        if len(pts) >= 2:
            drw.line(pts, fill=(0, 0, 0, 255), width=max(1, int(stroke_width)), joint="curve")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
