from __future__ import annotations

import logging
from collections import defaultdict
from io import BytesIO
from pathlib import Path
from typing import DefaultDict, List, Tuple

from PIL import Image
from pypdf import PdfReader, PdfWriter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..models.page_geometry import PageRect
from ..models.signature_overlay import ImageBlob
from .signature_image import open_image

logger = logging.getLogger(__name__)


class PdfOverlayWriter:
    """
    Output side of the commit pass.

    The source document is cloned into ``pdf_writer`` (form dictionary
    included, so field values can be filled before writing).
    ``draw_image`` decodes immediately (so a broken image fails for that one
    overlay only) and queues the draw; ``write`` renders one reportlab
    overlay page per touched page and merges it onto the output page.
    Rectangles are page space relative to the lower-left corner of the
    cropbox, the box the preview shows.
    """

    def __init__(self, reader: PdfReader) -> None:
        self._writer = PdfWriter(clone_from=reader)
        self._draws: DefaultDict[int, List[Tuple[Image.Image, PageRect]]] = defaultdict(list)

    @property
    def pdf_writer(self) -> PdfWriter:
        return self._writer

    @property
    def pending(self) -> int:
        return sum(len(v) for v in self._draws.values())

    def draw_image(self, page_index: int, image: ImageBlob, rect: PageRect) -> None:
        self._draws[page_index].append((open_image(image), rect))

    def clear(self) -> None:
        self._draws.clear()

    @staticmethod
    def _make_overlay(page_w: float, page_h: float, left: float, bottom: float,
                      draws: List[Tuple[Image.Image, PageRect]]) -> bytes:
        """Overlay page covering the target page box, one image per draw."""
        buf = BytesIO()
        c = canvas.Canvas(buf, pagesize=(left + page_w, bottom + page_h))
        for img, rect in draws:
            c.drawImage(ImageReader(img), left + rect.x, bottom + rect.y,
                        width=rect.width, height=rect.height, mask="auto")
        c.save()
        return buf.getvalue()

    def write_bytes(self) -> bytes:
        for i, page in enumerate(self._writer.pages):
            draws = self._draws.get(i)
            if draws:
                box = page.cropbox
                overlay_pdf = self._make_overlay(
                    float(box.width), float(box.height), float(box.left), float(box.bottom), draws
                )
                overlay_reader = PdfReader(BytesIO(overlay_pdf))
                page.merge_page(overlay_reader.pages[0])
        # merged pages must not be merged twice on a second call
        self._draws.clear()
        out = BytesIO()
        self._writer.write(out)
        return out.getvalue()

    def write(self, output_path: Path) -> Path:
        output_path = Path(output_path)
        images, pages = self.pending, len(self._draws)
        data = self.write_bytes()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("wb") as f:
            f.write(data)
        logger.info("Wrote %s (%d image(s) on %d page(s))", output_path, images, pages)
        return output_path
