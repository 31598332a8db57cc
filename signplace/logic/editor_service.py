# signplace/logic/editor_service.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pypdf import PdfReader

from core.config.config_service import ConfigService, config_service
from ..exceptions.errors import FormValidationError, InvalidDocumentError, PageNotFoundError
from ..models.embed_report import EmbedReport
from ..models.field_projection import FieldProjection
from ..models.form_field import FormField
from ..models.interaction_enums import ReleaseReason
from ..models.signature_overlay import ImageBlob, SignatureOverlay
from .container_tracker import ContainerTracker
from .contracts import InputCapture, ResizeSource
from .coordinate_transform import pixel_to_percent
from .embed_pipeline import EmbedPipeline
from .field_geometry_mapper import project_fields
from .form_state import FormState
from .geometry_store import GeometryStore
from .interaction_controller import InteractionController
from .naming_strategy import CompletedPrefixStrategy, NamingContext, NamingStrategy
from .pdf_document import PdfDocument
from .pdf_form_fields import PdfFormFieldReader
from .pdf_overlay_writer import PdfOverlayWriter
from .signature_image import load_image_file, render_png_from_strokes

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


class SignatureEditor:
    """
    Application state for placing signatures on a PDF (no UI).

    Owns the geometry store, the container tracker and the drag/resize
    controller; the GUI forwards pointer events to ``controller`` and reads
    ``current_signatures()`` / ``current_field_projections()`` to render.
    """

    def __init__(
        self,
        resize_source: ResizeSource,
        *,
        config: Optional[ConfigService] = None,
        capture: Optional[InputCapture] = None,
        naming: Optional[NamingStrategy] = None,
    ) -> None:
        self._cfg = config or config_service
        self.store = GeometryStore()
        self.tracker = ContainerTracker(resize_source)
        self.controller = InteractionController(
            self.store,
            self.tracker,
            min_width_px=self._cfg.interaction.min_width_px,
            min_height_px=self._cfg.interaction.min_height_px,
            capture=capture,
        )
        self._naming = naming or CompletedPrefixStrategy(self._cfg.files.output_prefix)

        self._document: Optional[PdfDocument] = None
        self._fields: List[FormField] = []
        self.form = FormState()
        self._signature_image: Optional[ImageBlob] = None
        self.current_page = 0

    # -------- Document -------------------------------------------------------
    @property
    def document(self) -> Optional[PdfDocument]:
        return self._document

    @property
    def fields(self) -> List[FormField]:
        return list(self._fields)

    @property
    def page_count(self) -> int:
        return self._document.page_count() if self._document else 0

    def load(self, path: Path) -> PdfDocument:
        """Open a PDF, detect its form fields and drop the previous overlays."""
        doc = PdfDocument(Path(path), max_bytes=int(self._cfg.files.max_upload_mb) * _MB)

        try:
            fields = PdfFormFieldReader(doc.reader).list_fields()
        except Exception as exc:  # field detection never blocks loading
            logger.warning("Failed to detect form fields: %s", exc)
            fields = []

        self.controller.release(ReleaseReason.CANCEL)
        self.store.reset()
        if self._document is not None:
            self._document.close()
        self._document = doc
        self._fields = fields
        self.form = FormState(fields)
        self.store.page_count = doc.page_count()
        self.current_page = 0
        self.tracker.notify_page_changed()
        return doc

    def go_to_page(self, page_index: int) -> None:
        if not 0 <= page_index < self.page_count:
            raise PageNotFoundError(f"Page {page_index} does not exist ({self.page_count} pages)")
        self.controller.release(ReleaseReason.CANCEL)
        self.current_page = page_index
        self.tracker.notify_page_changed()

    def next_page(self) -> bool:
        if self.current_page + 1 >= self.page_count:
            return False
        self.go_to_page(self.current_page + 1)
        return True

    def previous_page(self) -> bool:
        if self.current_page <= 0:
            return False
        self.go_to_page(self.current_page - 1)
        return True

    def current_page_image(self, scale: Optional[float] = None):
        if self._document is None:
            return None
        return self._document.raster_image(self.current_page, scale or self._cfg.preview.render_scale)

    # -------- Signature image ------------------------------------------------
    @property
    def signature_image(self) -> Optional[ImageBlob]:
        return self._signature_image

    @property
    def can_add_signature(self) -> bool:
        return self._signature_image is not None

    def set_signature_image(self, image: Optional[ImageBlob]) -> None:
        self._signature_image = image

    def load_signature_file(self, path: Path) -> bytes:
        raw = load_image_file(path)
        self._signature_image = raw
        return raw

    def set_drawn_signature(self, strokes: Sequence[Sequence[Tuple[int, int]]],
                            size: Tuple[int, int], stroke_width: int = 2) -> bytes:
        png = render_png_from_strokes(strokes, size, stroke_width)
        self._signature_image = png
        return png

    # -------- Overlays -------------------------------------------------------
    def add_signature_to_page(self) -> Optional[int]:
        """
        Place the current signature image on the viewed page.
        Returns the store index, or None if no image/document/measured container.
        """
        dims = self.tracker.dimensions
        if self._signature_image is None or self._document is None or not dims.is_measured:
            logger.debug("Signature not added: image=%s document=%s dims=%s",
                         self._signature_image is not None, self._document is not None, dims)
            return None

        place = self._cfg.placement
        inter = self._cfg.interaction
        overlay = SignatureOverlay(
            image=self._signature_image,
            x_percent=place.default_x_percent,
            y_percent=place.default_y_percent,
            width_percent=max(place.default_width_percent, pixel_to_percent(inter.min_width_px, dims.width_px)),
            height_percent=max(place.default_height_percent, pixel_to_percent(inter.min_height_px, dims.height_px)),
            page_index=self.current_page,
        )
        return self.store.add(overlay)

    def add_signature_from_image(self, image: ImageBlob) -> Optional[int]:
        self.set_signature_image(image)
        return self.add_signature_to_page()

    def remove_signature(self, index: int) -> SignatureOverlay:
        return self.store.remove(index)

    def current_signatures(self) -> List[Tuple[int, SignatureOverlay]]:
        """(store index, overlay) for the viewed page, in insertion order."""
        return [(i, ov) for i, ov in enumerate(self.store) if ov.page_index == self.current_page]

    def current_field_projections(self) -> List[FieldProjection]:
        if self._document is None:
            return []
        return project_fields(self._fields, self._document, self.current_page)

    # -------- Form -----------------------------------------------------------
    def update_field(self, name: str, value: Any) -> None:
        self.form.update_field(name, value)

    def validate_form(self) -> Dict[str, str]:
        """Validate all field values; returns field name -> error message."""
        self.form.validate()
        return self.form.errors

    # -------- Output ---------------------------------------------------------
    def default_output_path(self) -> Path:
        if self._document is None:
            raise InvalidDocumentError("No PDF loaded")
        return Path(self._naming.propose_output_path(NamingContext(input_path=str(self._document.path))))

    def save(self, output_path: Optional[Path] = None) -> Tuple[Path, EmbedReport]:
        """
        Fill the form values and write all overlays into a copy of the loaded PDF.
        Raises FormValidationError (and writes nothing) while the form is invalid.
        """
        if self._document is None:
            raise InvalidDocumentError("No PDF loaded")
        if self.form and not self.form.validate():
            raise FormValidationError(self.form.errors)
        self.controller.release(ReleaseReason.CANCEL)

        writer = PdfOverlayWriter(PdfReader(str(self._document.path)))
        if self.form:
            self.form.fill(writer.pdf_writer)
        with self.store.frozen() as overlays:
            report = EmbedPipeline(self._document, writer).embed(overlays)
            target = writer.write(Path(output_path) if output_path else self.default_output_path())
        return target, report

    def reset(self) -> None:
        self.controller.release(ReleaseReason.CANCEL)
        self.store.reset()
        self.store.page_count = 0
        if self._document is not None:
            self._document.close()
        self._document = None
        self._fields = []
        self.form = FormState()
        self._signature_image = None
        self.current_page = 0

    def close(self) -> None:
        self.reset()
        self.tracker.stop()
