"""
Tk implementations of the ResizeSource and InputCapture contracts.
"""
from __future__ import annotations
import tkinter as tk
from typing import Any, Callable, Dict, Optional, Tuple

from ..models.interaction_enums import ReleaseReason
from ..models.page_geometry import PageSize
from ..models.pointer_event import PointerEvent


class CanvasRasterBox:
    """
    The page image box inside the preview canvas: the current page fitted
    (aspect preserved, centred) into the canvas. Its pixel size is what the
    container tracker publishes.
    """

    def __init__(self, canvas: tk.Canvas, page_size: Callable[[], Optional[PageSize]], *, margin: int = 8) -> None:
        self._canvas = canvas
        self._page_size = page_size
        self._margin = margin
        # Misc.unbind(seq, funcid) drops every binding of seq before Python 3.13,
        # so <Configure> is bound once and observers are dispatched from here
        self._observers: Dict[int, Callable[[], None]] = {}
        self._next_handle = 0
        self._bound = False

    def box(self) -> Tuple[float, float, float, float]:
        """(left, top, width, height) of the page image in canvas pixels."""
        cw = max(0, self._canvas.winfo_width() - 2 * self._margin)
        ch = max(0, self._canvas.winfo_height() - 2 * self._margin)
        size = self._page_size()
        if size is None or cw <= 1 or ch <= 1 or not size.width or not size.height:
            return 0.0, 0.0, 0.0, 0.0
        scale = min(cw / size.width, ch / size.height)
        w, h = size.width * scale, size.height * scale
        return self._margin + (cw - w) / 2, self._margin + (ch - h) / 2, w, h

    def to_pointer_event(self, e: tk.Event) -> PointerEvent:
        left, top, _, _ = self.box()
        return PointerEvent.from_client(
            e.x_root, e.y_root,
            self._canvas.winfo_rootx() + left,
            self._canvas.winfo_rooty() + top,
        )

    # ---- ResizeSource ----
    def measure(self) -> Tuple[float, float]:
        _, _, w, h = self.box()
        return w, h

    def observe(self, callback: Callable[[], None]) -> int:
        if not self._bound:
            self._canvas.bind("<Configure>", self._on_configure, add="+")
            self._bound = True
        self._next_handle += 1
        self._observers[self._next_handle] = callback
        return self._next_handle

    def unobserve(self, handle: int) -> None:
        self._observers.pop(handle, None)

    def _on_configure(self, _e: Any = None) -> None:
        for callback in list(self._observers.values()):
            callback()


class TkPointerCapture:
    """
    Application-wide motion/release bindings held while a gesture runs, so a
    drag continues when the pointer leaves the overlay item.

    The bindings are installed once (added to, never replacing, other
    handlers) and only forward events while a gesture holds the capture.
    """

    def __init__(self, widget: tk.Misc, to_event: Callable[[tk.Event], PointerEvent]) -> None:
        self._widget = widget
        self._to_event = to_event
        self._on_move: Optional[Callable[[PointerEvent], Any]] = None
        self._on_release: Optional[Callable[..., Any]] = None
        self._bound = False

    @property
    def active(self) -> bool:
        return self._on_move is not None

    def acquire(self, on_move: Callable[[PointerEvent], Any], on_release: Callable[..., Any]) -> None:
        if self.active:
            return
        if not self._bound:
            w = self._widget
            w.bind_all("<B1-Motion>", self._motion, add="+")
            w.bind_all("<ButtonRelease-1>", lambda _e: self._release(ReleaseReason.UP), add="+")
            w.bind_all("<Escape>", lambda _e: self._release(ReleaseReason.CANCEL), add="+")
            w.winfo_toplevel().bind("<Leave>", self._leave, add="+")
            self._bound = True
        self._on_move, self._on_release = on_move, on_release

    def release(self) -> None:
        self._on_move = self._on_release = None

    def _motion(self, e: tk.Event) -> None:
        if self._on_move is not None:
            self._on_move(self._to_event(e))

    def _release(self, reason: ReleaseReason) -> None:
        if self._on_release is not None:
            self._on_release(reason)

    def _leave(self, e: tk.Event) -> None:
        # <Leave> also fires for child widgets; only the toplevel itself ends the gesture
        if e.widget is self._widget.winfo_toplevel():
            self._release(ReleaseReason.LEAVE)
