from __future__ import annotations
import logging
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from typing import Dict, Optional, Tuple

from PIL import Image, ImageEnhance, ImageTk

from core.config.config_service import ConfigService, config_service
from ..exceptions.errors import FormValidationError, SignPlaceError
from ..logic.coordinate_transform import percent_rect_to_pixels
from ..logic.editor_service import SignatureEditor
from ..models.container_dimensions import ContainerDimensions
from ..models.page_geometry import PageSize
from ..models.store_event import StoreEvent
from .form_dialog import FormDialog
from .overlay_image_cache import OverlayImageCache
from .signature_capture_dialog import SignatureCaptureDialog
from .tk_adapters import CanvasRasterBox, TkPointerCapture

logger = logging.getLogger(__name__)

HANDLE_PX = 10


class EditorView(ttk.Frame):
    """
    Main view:
      • open a PDF, page through the preview
      • draw or upload a signature and drop it on the current page
      • drag overlays, resize them by the bottom-right handle
      • form fields shown as dashed outlines
      • save to "completed-<name>.pdf"
    """

    def __init__(self, parent: tk.Misc, *, config: Optional[ConfigService] = None, **kwargs) -> None:
        super().__init__(parent, **kwargs)
        self._cfg = config or config_service
        self._status = tk.StringVar(value="Open a PDF to start.")
        self._page_label = tk.StringVar(value="–")
        self._redraw_pending = False
        self._selected_id: Optional[str] = None

        # Tk image references must stay alive while shown
        self._page_tk: Optional[ImageTk.PhotoImage] = None
        self._page_key: Optional[Tuple[int, int, int]] = None
        self._overlay_tk: Dict[str, ImageTk.PhotoImage] = {}
        self._sig_cache = OverlayImageCache()

        self._make_ui()

        self._box = CanvasRasterBox(self._canvas, self._current_page_size)
        self._capture = TkPointerCapture(self._canvas, self._box.to_pointer_event)
        self.editor = SignatureEditor(self._box, config=self._cfg, capture=self._capture)
        self.editor.tracker.subscribe(self._on_dimensions)
        self.editor.store.subscribe(self._on_store_event)
        self.editor.tracker.start()
        self.bind("<Destroy>", self._on_destroy, add="+")

    # ------------------------------------------------------------------ UI
    def _make_ui(self) -> None:
        bar = ttk.Frame(self)
        bar.pack(side="top", fill="x", padx=8, pady=6)
        ttk.Button(bar, text="Open PDF…", command=self._open_pdf).pack(side="left")
        ttk.Button(bar, text="Draw signature…", command=self._draw_signature).pack(side="left", padx=(6, 0))
        ttk.Button(bar, text="Upload signature…", command=self._upload_signature).pack(side="left", padx=(6, 0))
        self._add_btn = ttk.Button(bar, text="Add to page", command=self._add_signature, state="disabled")
        self._add_btn.pack(side="left", padx=(6, 0))
        self._form_btn = ttk.Button(bar, text="Fill form…", command=self._fill_form, state="disabled")
        self._form_btn.pack(side="left", padx=(6, 0))

        ttk.Button(bar, text="◀", width=3, command=self._prev_page).pack(side="left", padx=(18, 0))
        ttk.Label(bar, textvariable=self._page_label, width=10, anchor="center").pack(side="left")
        ttk.Button(bar, text="▶", width=3, command=self._next_page).pack(side="left")

        ttk.Button(bar, text="Reset", command=self._reset).pack(side="right")
        ttk.Button(bar, text="Save…", command=self._save).pack(side="right", padx=(0, 6))

        self._canvas = tk.Canvas(
            self,
            width=self._cfg.preview.canvas_width,
            height=self._cfg.preview.canvas_height,
            bg="#f8f8f8", highlightthickness=1, highlightbackground="#888",
        )
        self._canvas.pack(side="top", fill="both", expand=True, padx=8)
        self._canvas.bind("<ButtonPress-1>", self._on_press)
        self._canvas.bind("<Button-3>", self._on_context_remove)
        self._canvas.bind("<Delete>", self._on_delete_key)
        self._canvas.bind("<BackSpace>", self._on_delete_key)

        ttk.Label(self, textvariable=self._status, anchor="w").pack(side="bottom", fill="x", padx=8, pady=(2, 6))

    # ------------------------------------------------------------------ helpers
    def _current_page_size(self) -> Optional[PageSize]:
        doc = self.editor.document if hasattr(self, "editor") else None
        if doc is None:
            return None
        return doc.page_size(self.editor.current_page)

    def _report(self, exc: Exception, title: str = "Error") -> None:
        logger.warning("%s: %s", title, exc)
        messagebox.showerror(title, str(exc), parent=self)

    def _schedule_redraw(self) -> None:
        if not self._redraw_pending:
            self._redraw_pending = True
            self.after_idle(self._redraw)

    def _refresh_controls(self) -> None:
        ed = self.editor
        self._page_label.set(f"{ed.current_page + 1} / {ed.page_count}" if ed.page_count else "–")
        ready = ed.can_add_signature and ed.document is not None
        self._add_btn.configure(state="normal" if ready else "disabled")
        self._form_btn.configure(state="normal" if ed.form else "disabled")

    # ------------------------------------------------------------------ actions
    def _open_pdf(self) -> None:
        p = filedialog.askopenfilename(parent=self, filetypes=[("PDF", "*.pdf")], title="Choose PDF")
        if p:
            self.open_document(p)

    def open_document(self, path) -> bool:
        try:
            doc = self.editor.load(path)
        except SignPlaceError as exc:
            self._report(exc, "Failed to load PDF")
            return False
        self._page_key = None
        n_fields = len(self.editor.fields)
        self._status.set(f"{doc.path.name}: {doc.page_count()} page(s), {n_fields} form field(s)")
        self._refresh_controls()
        self._schedule_redraw()
        return True

    def _draw_signature(self) -> None:
        dlg = SignatureCaptureDialog(self)
        self.wait_window(dlg)
        if dlg.result:
            self.editor.set_signature_image(dlg.result)
            self._status.set("Signature ready. Use “Add to page”.")
            self._refresh_controls()

    def _upload_signature(self) -> None:
        p = filedialog.askopenfilename(
            parent=self, title="Choose signature image",
            filetypes=[("Images", "*.png *.jpg *.jpeg *.gif")],
        )
        if not p:
            return
        try:
            self.editor.load_signature_file(p)
        except (SignPlaceError, OSError) as exc:
            self._report(exc, "Invalid signature image")
            return
        self._status.set("Signature ready. Use “Add to page”.")
        self._refresh_controls()

    def _add_signature(self) -> None:
        if self.editor.add_signature_to_page() is None:
            self._status.set("Open a PDF and create a signature first.")

    def _prev_page(self) -> None:
        if self.editor.previous_page():
            self._refresh_controls()

    def _next_page(self) -> None:
        if self.editor.next_page():
            self._refresh_controls()

    def _fill_form(self) -> None:
        self.wait_window(FormDialog(self, self.editor.form))

    def _save(self) -> None:
        if self.editor.document is None:
            messagebox.showinfo("Info", "Please open a PDF first.", parent=self)
            return
        errors = self.editor.validate_form()
        if errors:
            self._report(FormValidationError(errors), "Form incomplete")
            self._fill_form()
            return
        default = self.editor.default_output_path()
        p = filedialog.asksaveasfilename(
            parent=self, defaultextension=".pdf", filetypes=[("PDF", "*.pdf")],
            initialdir=str(default.parent), initialfile=default.name,
        )
        if not p:
            return
        try:
            target, report = self.editor.save(p)
        except (SignPlaceError, OSError) as exc:
            self._report(exc, "Failed to save PDF")
            return
        msg = f"Saved {target.name} ({len(report.embedded)} signature(s))"
        if report.skipped:
            msg += f", {len(report.skipped)} skipped"
            messagebox.showwarning("Some signatures were skipped",
                                   "\n".join(reason for _, reason in report.skipped), parent=self)
        self._status.set(msg)

    def _reset(self) -> None:
        self.editor.reset()
        self._selected_id = None
        self._page_key = None
        self._sig_cache.clear()
        self._status.set("Open a PDF to start.")
        self._refresh_controls()
        self._schedule_redraw()

    # ------------------------------------------------------------------ events
    def _overlay_at(self, e: tk.Event) -> Tuple[Optional[int], bool]:
        """(store index, on_handle) of the topmost overlay item under the pointer."""
        for item in reversed(self._canvas.find_overlapping(e.x, e.y, e.x, e.y)):
            tags = self._canvas.gettags(item)
            for tag in tags:
                if tag.startswith("ov:"):
                    return int(tag[3:]), "handle" in tags
        return None, False

    def _on_press(self, e: tk.Event) -> None:
        self._canvas.focus_set()
        index, on_handle = self._overlay_at(e)
        if index is None:
            self._selected_id = None
            self._schedule_redraw()
            return
        self._selected_id = self.editor.store.get(index).overlay_id
        event = self._box.to_pointer_event(e)
        if on_handle:
            self.editor.controller.start_resize(event, index)
        else:
            self.editor.controller.start_drag(event, index)
        self._schedule_redraw()

    def _on_context_remove(self, e: tk.Event) -> None:
        index, _ = self._overlay_at(e)
        if index is not None:
            self.editor.remove_signature(index)

    def _on_delete_key(self, _e: tk.Event) -> None:
        if self._selected_id is None:
            return
        try:
            self.editor.store.remove_by_id(self._selected_id)
        except SignPlaceError as exc:
            logger.debug("Delete ignored: %s", exc)
        self._selected_id = None

    def _on_dimensions(self, _dims: ContainerDimensions) -> None:
        self._schedule_redraw()

    def _on_store_event(self, event: StoreEvent) -> None:
        if event.kind == "reset":
            self._overlay_tk.clear()
            self._sig_cache.clear()
        elif event.kind == "removed" and event.overlay is not None:
            self._overlay_tk.pop(event.overlay.overlay_id, None)
            self._sig_cache.evict(event.overlay.overlay_id)
        self._schedule_redraw()

    def _on_destroy(self, e: tk.Event) -> None:
        if e.widget is self:
            self.editor.close()

    # ------------------------------------------------------------------ render
    def _redraw(self) -> None:
        self._redraw_pending = False
        c = self._canvas
        c.delete("all")
        left, top, w, h = self._box.box()
        dims = self.editor.tracker.dimensions
        if self.editor.document is None or not dims.is_measured:
            return

        self._draw_page(left, top, int(w), int(h))

        for proj in self.editor.current_field_projections():
            x, y, fw, fh = percent_rect_to_pixels(
                proj.x_percent, proj.y_percent, proj.width_percent, proj.height_percent, dims)
            c.create_rectangle(left + x, top + y, left + x + fw, top + y + fh,
                               outline="#0A84FF", dash=(4, 2), width=1, tags=("field",))
            if proj.name:
                c.create_text(left + x + 2, top + y, text=proj.name, anchor="sw",
                              fill="#0A84FF", font=("Segoe UI", 8), tags=("field",))

        for index, ov in self.editor.current_signatures():
            x, y, ow, oh = percent_rect_to_pixels(
                ov.x_percent, ov.y_percent, ov.width_percent, ov.height_percent, dims)
            tag = f"ov:{index}"
            x0, y0 = left + x, top + y
            img_tk = self._overlay_image(ov.overlay_id, ov.image, int(ow), int(oh))
            if img_tk is not None:
                c.create_image(x0, y0, image=img_tk, anchor="nw", tags=(tag,))
            selected = ov.overlay_id == self._selected_id
            c.create_rectangle(x0, y0, x0 + ow, y0 + oh, outline="#0A84FF" if selected else "#888",
                               width=2 if selected else 1, fill="", tags=(tag,))
            # transparent fill catches clicks on the whole overlay area
            c.create_rectangle(x0, y0, x0 + ow, y0 + oh, outline="", fill="#ffffff", stipple="gray12",
                               tags=(tag,))
            c.create_rectangle(x0 + ow - HANDLE_PX, y0 + oh - HANDLE_PX, x0 + ow, y0 + oh,
                               fill="#0A84FF", outline="white", tags=(tag, "handle"))

    def _draw_page(self, left: float, top: float, w: int, h: int) -> None:
        key = (self.editor.current_page, w, h)
        if self._page_key != key:
            pil = self.editor.current_page_image()
            if pil is None or w <= 0 or h <= 0:
                return
            self._page_tk = ImageTk.PhotoImage(pil.resize((w, h), Image.LANCZOS))
            self._page_key = key
        self._canvas.create_image(left, top, image=self._page_tk, anchor="nw", tags=("page",))

    def _overlay_image(self, overlay_id: str, blob, w: int, h: int) -> Optional[ImageTk.PhotoImage]:
        if w <= 0 or h <= 0:
            return None
        try:
            src = self._sig_cache.get(overlay_id, blob)
        except SignPlaceError as exc:
            logger.debug("Overlay %s not previewed: %s", overlay_id, exc)
            return None
        sig = src.resize((w, h), Image.LANCZOS)
        # ~80 % alpha so the page stays visible underneath
        r, g, b, a = sig.split()
        sig = Image.merge("RGBA", (r, g, b, ImageEnhance.Brightness(a).enhance(0.8)))
        img_tk = ImageTk.PhotoImage(sig)
        self._overlay_tk[overlay_id] = img_tk
        return img_tk
