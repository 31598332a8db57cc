# signplace/gui/form_dialog.py
from __future__ import annotations
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Dict, List

from ..exceptions.errors import FormError
from ..logic.form_state import FormState
from ..models.form_field import FieldType, FormField


class FormDialog(tk.Toplevel):
    """
    Editable list of the document's form fields.
    Values go to the FormState on "Apply"; validation errors are shown in red
    next to each field.
    """

    def __init__(self, parent: tk.Misc, form: FormState) -> None:
        super().__init__(parent)
        self.title("Form fields")
        self.transient(parent)
        self.grab_set()
        self._form = form
        self._readers: Dict[str, Callable[[], Any]] = {}
        self._error_vars: Dict[str, tk.StringVar] = {}

        body = ttk.Frame(self, padding=10)
        body.pack(fill="both", expand=True)
        body.columnconfigure(1, weight=1)

        values = form.values
        errors = form.errors
        for row, field in enumerate(form.fields):
            ttk.Label(body, text=field.name + (" *" if field.required else "")).grid(
                row=row, column=0, sticky="w", padx=(0, 8), pady=2)
            widget = self._make_input(body, field, values.get(field.name))
            widget.grid(row=row, column=1, sticky="ew", pady=2)
            err = tk.StringVar(value=errors.get(field.name, ""))
            self._error_vars[field.name] = err
            ttk.Label(body, textvariable=err, foreground="#c00").grid(row=row, column=2, sticky="w", padx=(8, 0))

        btns = ttk.Frame(self, padding=(10, 0, 10, 10))
        btns.pack(fill="x")
        ttk.Button(btns, text="Close", command=self.destroy).pack(side="right")
        ttk.Button(btns, text="Apply", command=self._apply).pack(side="right", padx=(0, 6))

    def _make_input(self, parent: tk.Misc, field: FormField, value: Any) -> tk.Widget:
        state = "disabled" if field.read_only else "normal"
        if field.field_type == FieldType.CHECKBOX:
            var = tk.BooleanVar(value=bool(value))
            self._readers[field.name] = var.get
            return ttk.Checkbutton(parent, variable=var, state=state)
        if field.field_type in (FieldType.DROPDOWN, FieldType.RADIO):
            var = tk.StringVar(value=value or "")
            self._readers[field.name] = var.get
            return ttk.Combobox(parent, textvariable=var, values=list(field.options),
                                state="disabled" if field.read_only else "readonly")
        if field.field_type == FieldType.LIST:
            box = tk.Listbox(parent, selectmode="multiple", height=min(5, max(1, len(field.options))),
                             exportselection=False)
            for i, opt in enumerate(field.options):
                box.insert("end", opt)
                if opt in (value or []):
                    box.selection_set(i)
            box.configure(state=state)
            self._readers[field.name] = lambda b=box, f=field: [f.options[i] for i in b.curselection()]
            return box
        var = tk.StringVar(value="" if value is None else str(value))
        self._readers[field.name] = var.get
        return ttk.Entry(parent, textvariable=var, state=state)

    def _apply(self) -> None:
        problems: List[str] = []
        for field in self._form.fields:
            if field.read_only:
                continue
            try:
                self._form.update_field(field.name, self._readers[field.name]())
            except FormError as exc:
                problems.append(str(exc))
        self._form.validate()
        errors = self._form.errors
        for name, var in self._error_vars.items():
            var.set(errors.get(name, ""))
        if not errors and not problems:
            self.destroy()
