from __future__ import annotations

import pytest

from signplace.models.interaction_enums import ReleaseReason
from signplace.models.pointer_event import PointerEvent

tk_adapters = pytest.importorskip("signplace.gui.tk_adapters")


class FakeWidget:
    """Records bindings the way Tk would dispatch them (all handlers of a sequence)."""

    def __init__(self, width: int = 616, height: int = 816) -> None:
        self.width, self.height = width, height
        self.bindings = {}
        self.all_bindings = {}
        self.unbound = []
        self.toplevel = self

    def bind(self, seq, func, add=None):
        self.bindings.setdefault(seq, []).append(func)
        return f"handler{len(self.bindings[seq])}"

    def bind_all(self, seq, func, add=None):
        self.all_bindings.setdefault(seq, []).append(func)

    def unbind(self, seq, funcid=None):
        self.unbound.append(seq)

    def unbind_all(self, seq):
        self.unbound.append(seq)

    def winfo_toplevel(self):
        return self.toplevel

    def winfo_width(self):
        return self.width

    def winfo_height(self):
        return self.height

    def fire(self, table, seq, event=None):
        for func in list(table.get(seq, [])):
            func(event)


class _Event:
    def __init__(self, widget=None, x_root=0, y_root=0):
        self.widget, self.x_root, self.y_root = widget, x_root, y_root


def test_raster_box_observers_leave_other_configure_handlers() -> None:
    canvas = FakeWidget()
    other = []
    canvas.bind("<Configure>", lambda e: other.append(e), add="+")
    box = tk_adapters.CanvasRasterBox(canvas, lambda: None)
    calls = []

    handle = box.observe(lambda: calls.append("a"))
    box.observe(lambda: calls.append("b"))
    canvas.fire(canvas.bindings, "<Configure>")
    box.unobserve(handle)
    canvas.fire(canvas.bindings, "<Configure>")

    assert calls == ["a", "b", "b"]
    assert len(other) == 2
    assert canvas.unbound == []
    assert len(canvas.bindings["<Configure>"]) == 2


def test_pointer_capture_forwards_only_while_held() -> None:
    widget = FakeWidget()
    capture = tk_adapters.TkPointerCapture(widget, lambda e: PointerEvent(e.x_root, e.y_root))
    moves, releases = [], []

    capture.acquire(moves.append, releases.append)
    widget.fire(widget.all_bindings, "<B1-Motion>", _Event(x_root=5, y_root=6))
    widget.fire(widget.all_bindings, "<Escape>")
    capture.release()
    widget.fire(widget.all_bindings, "<B1-Motion>", _Event(x_root=7, y_root=8))
    widget.fire(widget.bindings, "<Leave>", _Event(widget=widget))

    assert moves == [PointerEvent(5, 6)]
    assert releases == [ReleaseReason.CANCEL]
    assert widget.unbound == []


def test_pointer_capture_binds_once() -> None:
    widget = FakeWidget()
    capture = tk_adapters.TkPointerCapture(widget, lambda e: PointerEvent(0, 0))
    releases = []
    for _ in range(3):
        capture.acquire(lambda ev: None, releases.append)
        capture.release()
    capture.acquire(lambda ev: None, releases.append)
    widget.fire(widget.bindings, "<Leave>", _Event(widget=widget))
    widget.fire(widget.bindings, "<Leave>", _Event(widget=object()))

    assert len(widget.all_bindings["<ButtonRelease-1>"]) == 1
    assert releases == [ReleaseReason.LEAVE]
