"""
===============================================================================
PdfDocument – read-only access to the source PDF
-------------------------------------------------------------------------------
- pypdf (MIT) for page count and page sizes (cropbox, PDF points; the box
  pypdfium2 renders, so preview and page space share one origin).
- pypdfium2 (Apache/BSD) for the raster preview, returned as PIL images.
- File checks as done before loading: exists, PDF header, size limit.
===============================================================================
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import pypdfium2 as pdfium
from PIL import Image
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ..exceptions.errors import InvalidDocumentError, PageNotFoundError
from ..models.page_geometry import PageSize

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 50 * 1024 * 1024


def validate_pdf_file(path: Path, *, max_bytes: int = DEFAULT_MAX_BYTES) -> Path:
    path = Path(path)
    if not path.is_file():
        raise InvalidDocumentError(f"File not found: {path}")
    if path.stat().st_size > max_bytes:
        raise InvalidDocumentError(
            f"File too large. Please upload a PDF smaller than {max_bytes // (1024 * 1024)}MB."
        )
    with path.open("rb") as fh:
        head = fh.read(1024)
    if b"%PDF-" not in head:
        raise InvalidDocumentError("Please upload a PDF file.")
    return path


class PdfDocument:
    """Page geometry and preview rendering for one PDF file."""

    def __init__(self, path: Path, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.path = validate_pdf_file(path, max_bytes=max_bytes).resolve()
        try:
            self._reader = PdfReader(str(self.path))
            self._sizes = [
                PageSize(float(p.cropbox.width), float(p.cropbox.height)) for p in self._reader.pages
            ]
        except (PdfReadError, ValueError, KeyError) as exc:
            raise InvalidDocumentError(f"Failed to load PDF: {exc}") from exc
        self._pdfium: Optional[pdfium.PdfDocument] = None
        self._raster_cache: Dict[tuple, Image.Image] = {}
        logger.info("Loaded %s (%d pages)", self.path.name, len(self._sizes))

    @property
    def reader(self) -> PdfReader:
        return self._reader

    # ---- DocumentSource ---- #
    def page_count(self) -> int:
        return len(self._sizes)

    def page_size(self, page_index: int) -> PageSize:
        if not 0 <= page_index < len(self._sizes):
            raise PageNotFoundError(f"Page {page_index} does not exist ({len(self._sizes)} pages)")
        return self._sizes[page_index]

    def raster_image(self, page_index: int, scale: float = 1.5) -> Image.Image:
        """Render one page with pypdfium2 (cached per page and scale)."""
        self.page_size(page_index)
        key = (page_index, round(scale, 3))
        if key not in self._raster_cache:
            if self._pdfium is None:
                self._pdfium = pdfium.PdfDocument(str(self.path))
            page = self._pdfium[page_index]
            try:
                self._raster_cache[key] = page.render(scale=scale).to_pil()
            finally:
                page.close()
        return self._raster_cache[key]

    def close(self) -> None:
        self._raster_cache.clear()
        if self._pdfium is not None:
            self._pdfium.close()
            self._pdfium = None

    def __enter__(self) -> "PdfDocument":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
