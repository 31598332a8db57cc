"""Shared fakes and fixtures for the signature placement tests."""
from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest
from PIL import Image
from pypdf import PdfReader, PdfWriter
from pypdf.generic import RectangleObject
from reportlab.pdfgen import canvas

from signplace.exceptions.errors import ImageDecodeError, PageNotFoundError
from signplace.logic.container_tracker import ContainerTracker
from signplace.logic.geometry_store import GeometryStore
from signplace.models.page_geometry import PageRect, PageSize
from signplace.models.signature_overlay import SignatureOverlay


# ---------------------------------------------------------------------------
# Fakes for the collaborator protocols
# ---------------------------------------------------------------------------

class FakeResizeSource:
    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self.size = (width, height)
        self.callbacks: Dict[int, Callable[[], None]] = {}
        self._next = 0
        self.measure_calls = 0

    def measure(self) -> Tuple[float, float]:
        self.measure_calls += 1
        return self.size

    def observe(self, callback: Callable[[], None]) -> int:
        self._next += 1
        self.callbacks[self._next] = callback
        return self._next

    def unobserve(self, handle: int) -> None:
        del self.callbacks[handle]

    def resize(self, width: float, height: float) -> None:
        self.size = (width, height)
        for cb in list(self.callbacks.values()):
            cb()


class FakeDocument:
    def __init__(self, sizes: Sequence[Tuple[float, float]]) -> None:
        self.sizes = [PageSize(w, h) for w, h in sizes]

    def page_count(self) -> int:
        return len(self.sizes)

    def page_size(self, page_index: int) -> PageSize:
        if not 0 <= page_index < len(self.sizes):
            raise PageNotFoundError(f"Page {page_index} does not exist")
        return self.sizes[page_index]

    def raster_image(self, page_index: int, scale: float):
        return None


class FakeOutput:
    def __init__(self, bad_images: Sequence[object] = ()) -> None:
        self.bad_images = list(bad_images)
        self.draws: List[Tuple[int, object, PageRect]] = []

    def draw_image(self, page_index: int, image, rect: PageRect) -> None:
        if image in self.bad_images:
            raise ImageDecodeError("corrupt image")
        self.draws.append((page_index, image, rect))


class FakeCapture:
    def __init__(self) -> None:
        self.acquired = 0
        self.released = 0
        self.on_move = None
        self.on_release = None

    @property
    def active(self) -> bool:
        return self.acquired > self.released

    def acquire(self, on_move, on_release) -> None:
        self.acquired += 1
        self.on_move, self.on_release = on_move, on_release

    def release(self) -> None:
        self.released += 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_png(width: int = 40, height: int = 20, color=(0, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def make_pdf(path: Path, sizes: Sequence[Tuple[float, float]],
             text_fields: Sequence[tuple] = ()) -> Path:
    """
    PDF with one page per size. text_fields are (page_index, name, rect) with
    an optional fourth item of extra reportlab textfield options.
    """
    c = canvas.Canvas(str(path), pagesize=sizes[0])
    for i, size in enumerate(sizes):
        c.setPageSize(size)
        c.drawString(72, 72, f"Page {i + 1}")
        for page_index, name, rect, *extra in text_fields:
            if page_index == i:
                c.acroForm.textfield(name=name, x=rect.x, y=rect.y,
                                     width=rect.width, height=rect.height, **(extra[0] if extra else {}))
        c.showPage()
    c.save()
    return path


def shift_page_box(path: Path, box: Tuple[float, float, float, float]) -> Path:
    """Give every page of ``path`` the media and crop box ``box`` (llx, lly, urx, ury)."""
    writer = PdfWriter(clone_from=PdfReader(io.BytesIO(path.read_bytes())))
    for page in writer.pages:
        page.mediabox = RectangleObject(box)
        page.cropbox = RectangleObject(box)
    with path.open("wb") as fh:
        writer.write(fh)
    return path


def overlay(page_index: int = 0, x: float = 10.0, y: float = 10.0, w: float = 20.0, h: float = 10.0,
            image: object = b"img", overlay_id: Optional[str] = None) -> SignatureOverlay:
    kwargs = {}
    if overlay_id is not None:
        kwargs["overlay_id"] = overlay_id
    return SignatureOverlay(image=image, x_percent=x, y_percent=y, width_percent=w, height_percent=h,
                            page_index=page_index, **kwargs)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def source() -> FakeResizeSource:
    return FakeResizeSource(800, 1000)


@pytest.fixture()
def tracker(source: FakeResizeSource):
    t = ContainerTracker(source)
    t.start()
    yield t
    t.stop()


@pytest.fixture()
def store() -> GeometryStore:
    return GeometryStore(page_count=3)


@pytest.fixture()
def png_bytes() -> bytes:
    return make_png()
