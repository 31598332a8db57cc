"""
FormState – values typed into the document's form fields.

Starts from the values read out of the PDF, takes edits per field name,
validates them (required, maximum length, allowed options) and writes them
into a pypdf ``PdfWriter`` before the signatures are merged.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from pypdf import PdfWriter

from ..exceptions.errors import FieldNotFoundError, FormError
from ..models.form_field import FieldType, FormField

logger = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    return value is None or value is False or value == "" or value == []


def validate_field(field: FormField, value: Any) -> Optional[str]:
    """Error message for ``value`` in ``field``, None if it is acceptable."""
    if field.required and _is_empty(value):
        return f"{field.name} is required"
    if field.field_type == FieldType.TEXT and field.max_length and value \
            and len(str(value)) > field.max_length:
        return f"{field.name} exceeds maximum length of {field.max_length}"
    if field.field_type in (FieldType.DROPDOWN, FieldType.RADIO) and value \
            and field.options and value not in field.options:
        return f"{field.name} has invalid option"
    if field.field_type == FieldType.LIST and isinstance(value, (list, tuple)) \
            and field.options and not all(v in field.options for v in value):
        return f"{field.name} has invalid options"
    return None


class FormState:
    def __init__(self, fields: Iterable[FormField] = ()) -> None:
        # radio groups and multi-widget fields list one widget per entry; first one wins
        self._fields: "OrderedDict[str, FormField]" = OrderedDict()
        self._pages: Dict[str, List[int]] = {}
        for f in fields:
            if f.field_type == FieldType.SIGNATURE:
                continue
            self._fields.setdefault(f.name, f)
            pages = self._pages.setdefault(f.name, [])
            if f.page_index not in pages:
                pages.append(f.page_index)
        self._values: Dict[str, Any] = {name: f.value for name, f in self._fields.items()}
        self._errors: Dict[str, str] = {}

    # ---------- read ---------------------------------------------------------
    def __bool__(self) -> bool:
        return bool(self._fields)

    @property
    def fields(self) -> List[FormField]:
        return list(self._fields.values())

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    def value(self, name: str) -> Any:
        self._field(name)
        return self._values.get(name)

    # ---------- write --------------------------------------------------------
    def update_field(self, name: str, value: Any) -> None:
        field = self._field(name)
        if field.read_only:
            raise FormError(f"{name} is read-only")
        self._values[name] = value
        self._errors.pop(name, None)

    def validate(self) -> bool:
        errors: Dict[str, str] = {}
        for name, field in self._fields.items():
            msg = validate_field(field, self._values.get(name))
            if msg:
                errors[name] = msg
        self._errors = errors
        if errors:
            logger.info("Form has %d invalid field(s)", len(errors))
        return not errors

    # ---------- output -------------------------------------------------------
    def fill(self, writer: PdfWriter) -> int:
        """Write the current values into the cloned document. Returns the number of fields set."""
        per_page: Dict[int, Dict[str, Any]] = {}
        for name, field in self._fields.items():
            if field.read_only:
                continue
            pdf_value = self._pdf_value(field, self._values.get(name))
            if pdf_value is None:
                continue
            for page_index in self._pages[name]:
                per_page.setdefault(page_index, {})[name] = pdf_value
        if not per_page:
            return 0
        for page_index, values in per_page.items():
            writer.update_page_form_field_values(writer.pages[page_index], values)
        filled = len({n for values in per_page.values() for n in values})
        logger.debug("Filled %d form field(s)", filled)
        return filled

    # ---------- helpers ------------------------------------------------------
    def _field(self, name: str) -> FormField:
        try:
            return self._fields[name]
        except KeyError:
            raise FieldNotFoundError(f"No form field named {name!r}") from None

    @staticmethod
    def _pdf_value(field: FormField, value: Any) -> Any:
        ftype = field.field_type
        if ftype == FieldType.CHECKBOX:
            on_state = field.options[0] if field.options else "Yes"
            return f"/{on_state}" if value else "/Off"
        if ftype == FieldType.RADIO:
            return f"/{value}" if value else None
        if ftype == FieldType.LIST:
            return [str(v) for v in value] if value else None
        if value is None:
            return None
        return str(value)
