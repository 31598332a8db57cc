"""
EmbedPipeline – commits percentage-space overlays into page space.

Each overlay is resolved against its own page's size; the preview raster
scale plays no part. One failing overlay (bad image data, vanished page) is
logged and skipped, the others are still written.
"""
from __future__ import annotations

import logging
from typing import Iterable

from ..exceptions.errors import EmbedError, PageNotFoundError
from ..models.embed_report import EmbedReport
from ..models.page_geometry import PageRect, PageSize
from ..models.signature_overlay import SignatureOverlay
from .contracts import DocumentSource, OverlayOutput

logger = logging.getLogger(__name__)


def percent_to_page_rect(overlay: SignatureOverlay, page_size: PageSize) -> PageRect:
    """Inverse of the field projection: top-left percentages to a bottom-left point rect."""
    page_w, page_h = page_size.width, page_size.height
    rect_h = overlay.height_percent / 100.0 * page_h
    return PageRect(
        x=overlay.x_percent / 100.0 * page_w,
        y=page_h - (overlay.y_percent / 100.0 * page_h) - rect_h,
        width=overlay.width_percent / 100.0 * page_w,
        height=rect_h,
    )


class EmbedPipeline:
    def __init__(self, document: DocumentSource, output: OverlayOutput) -> None:
        self._document = document
        self._output = output

    def embed(self, overlays: Iterable[SignatureOverlay]) -> EmbedReport:
        report = EmbedReport()
        for overlay in overlays:
            try:
                page_size = self._document.page_size(overlay.page_index)
            except PageNotFoundError as exc:
                logger.warning("Overlay %s skipped: %s", overlay.overlay_id, exc)
                report.skipped.append((overlay.overlay_id, f"page {overlay.page_index} not found"))
                continue

            rect = percent_to_page_rect(overlay, page_size)
            try:
                self._output.draw_image(overlay.page_index, overlay.image, rect)
            except EmbedError as exc:
                logger.warning("Overlay %s skipped: %s", overlay.overlay_id, exc)
                report.skipped.append((overlay.overlay_id, str(exc)))
                continue

            logger.debug("Overlay %s drawn on page %d at %s", overlay.overlay_id, overlay.page_index, rect)
            report.embedded.append(overlay.overlay_id)

        logger.info("Embedded %d overlay(s), skipped %d", len(report.embedded), len(report.skipped))
        return report
