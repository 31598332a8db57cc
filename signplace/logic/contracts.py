# signplace/logic/contracts.py
"""
Interfaces of the collaborators around the geometry code.

The geometry modules only talk to these protocols; the pypdf/pypdfium2/
reportlab implementations live in pdf_document, pdf_form_fields and
pdf_overlay_writer, the Tk implementations in signplace.gui.
"""
from __future__ import annotations
from typing import Any, Callable, Hashable, List, Protocol, Tuple

from ..models.form_field import FormField
from ..models.page_geometry import PageRect, PageSize
from ..models.pointer_event import PointerEvent
from ..models.signature_overlay import ImageBlob


class DocumentSource(Protocol):
    def page_count(self) -> int: ...

    def page_size(self, page_index: int) -> PageSize:
        """Raises PageNotFoundError when the index does not resolve."""
        ...

    def raster_image(self, page_index: int, scale: float) -> Any: ...


class FieldSource(Protocol):
    def list_fields(self) -> List[FormField]: ...


class OverlayOutput(Protocol):
    def draw_image(self, page_index: int, image: ImageBlob, rect: PageRect) -> None:
        """Raises ImageDecodeError for image data that cannot be embedded."""
        ...


class ResizeSource(Protocol):
    """Something with an observable pixel box (e.g. the preview canvas)."""

    def measure(self) -> Tuple[float, float]: ...

    def observe(self, callback: Callable[[], None]) -> Hashable: ...

    def unobserve(self, handle: Hashable) -> None: ...


class InputCapture(Protocol):
    """Window-level pointer subscription held for the duration of one gesture."""

    def acquire(self, on_move: Callable[[PointerEvent], Any],
                on_release: Callable[..., Any]) -> None: ...

    def release(self) -> None: ...
