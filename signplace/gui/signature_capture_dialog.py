# signplace/gui/signature_capture_dialog.py
from __future__ import annotations
import tkinter as tk
from tkinter import ttk
from typing import List, Optional, Tuple

from ..logic.signature_image import render_png_from_strokes


class SignatureCaptureDialog(tk.Toplevel):
    """
    Freehand signature pad (Tk canvas with spline smoothing) and adjustable
    stroke width. On "Use" the strokes become a transparent PNG in ``result``.
    """
    CANVAS_W = 600
    CANVAS_H = 200

    def __init__(self, parent: tk.Misc, *, stroke_width: int = 2) -> None:
        super().__init__(parent)
        self.title("Draw Signature")
        self.transient(parent)
        self.grab_set()
        self.resizable(False, False)

        self._strokes: List[List[Tuple[int, int]]] = []
        self._current: List[Tuple[int, int]] = []
        self._line: Optional[int] = None
        self.result: Optional[bytes] = None

        self.columnconfigure(0, weight=1)

        # Toolbar
        bar = ttk.Frame(self)
        bar.grid(row=0, column=0, sticky="ew", padx=10, pady=(10, 4))
        ttk.Label(bar, text="Stroke width").pack(side="left")
        self.stroke_var = tk.IntVar(value=stroke_width)
        ttk.Scale(bar, from_=1, to=10, variable=self.stroke_var, orient="horizontal", length=160).pack(
            side="left", padx=(6, 12)
        )
        ttk.Button(bar, text="Clear", command=self._clear).pack(side="left")

        # Canvas
        self.canvas = tk.Canvas(
            self, width=self.CANVAS_W, height=self.CANVAS_H, bg="white",
            highlightthickness=1, highlightbackground="#888"
        )
        self.canvas.grid(row=1, column=0, sticky="nsew", padx=10, pady=4)
        self.canvas.bind("<ButtonPress-1>", self._on_down)
        self.canvas.bind("<B1-Motion>", self._on_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_up)

        # Footer
        btns = ttk.Frame(self)
        btns.grid(row=2, column=0, sticky="e", padx=10, pady=(4, 10))
        ttk.Button(btns, text="Cancel", command=self.destroy).pack(side="right", padx=(6, 0))
        ttk.Button(btns, text="Use", command=self._use).pack(side="right")

    # Canvas handlers
    def _on_down(self, e):
        self._current = [(e.x, e.y)]
        self._line = self.canvas.create_line(
            e.x, e.y, e.x + 1, e.y + 1,
            fill="black",
            width=int(self.stroke_var.get()),
            capstyle="round",
            smooth=True,
            splinesteps=24
        )

    def _on_move(self, e):
        if self._current and self._line is not None:
            self._current.append((e.x, e.y))
            self.canvas.coords(self._line, *sum(self._current, ()))

    def _on_up(self, e):
        if self._current:
            self._strokes.append(self._current)
            self._current = []

    # Actions
    def _clear(self):
        self.canvas.delete("all")
        self._strokes.clear()
        self._current = []

    def _use(self):
        if not self._strokes:
            self.bell()
            return
        self.result = render_png_from_strokes(
            self._strokes, (self.CANVAS_W, self.CANVAS_H), int(self.stroke_var.get())
        )
        self.destroy()
