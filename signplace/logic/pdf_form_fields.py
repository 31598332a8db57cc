"""
PdfFormFieldReader – lists AcroForm widgets with their page and rectangle.

Walks the /Annots of every page (so the page index is exact), and resolves
name, type, flags and value through the /Parent chain the way PDF
inheritance works for terminal fields. Rectangles are returned relative to
the lower-left corner of the page's visible box (cropbox), the same origin
PdfDocument sizes pages by and PdfOverlayWriter draws in.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from pypdf import PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import DictionaryObject, NameObject

from ..models.form_field import FieldType, FormField
from ..models.page_geometry import PageRect

logger = logging.getLogger(__name__)

# field flag bits (PDF 32000-1, 12.7.3.1 / 12.7.4)
FF_READ_ONLY = 1 << 0
FF_REQUIRED = 1 << 1
FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16
FF_COMBO = 1 << 17

_MAX_PARENT_DEPTH = 32
_OFF = "/Off"


def _inherited(obj: DictionaryObject, key: str) -> Optional[Any]:
    node: Optional[DictionaryObject] = obj
    for _ in range(_MAX_PARENT_DEPTH):
        if node is None:
            return None
        if key in node:
            return node[key]
        parent = node.get("/Parent")
        node = parent.get_object() if parent is not None else None
    return None


def _full_name(obj: DictionaryObject) -> str:
    parts: List[str] = []
    node: Optional[DictionaryObject] = obj
    for _ in range(_MAX_PARENT_DEPTH):
        if node is None:
            break
        t = node.get("/T")
        if t is not None:
            parts.append(str(t))
        parent = node.get("/Parent")
        node = parent.get_object() if parent is not None else None
    return ".".join(reversed(parts))


def _field_type(ft: Optional[str], flags: int) -> Optional[FieldType]:
    if ft == "/Tx":
        return FieldType.TEXT
    if ft == "/Btn":
        if flags & FF_PUSHBUTTON:
            return None
        return FieldType.RADIO if flags & FF_RADIO else FieldType.CHECKBOX
    if ft == "/Ch":
        return FieldType.DROPDOWN if flags & FF_COMBO else FieldType.LIST
    if ft == "/Sig":
        return FieldType.SIGNATURE
    return None


def _plain_value(value: Any) -> Any:
    if value is None:
        return None
    value = value.get_object() if hasattr(value, "get_object") else value
    if isinstance(value, NameObject):
        return str(value)[1:]
    if isinstance(value, list):
        return [_plain_value(v) for v in value]
    return str(value)


def _on_states(widget: DictionaryObject) -> List[str]:
    """Appearance state names of a button widget other than /Off."""
    ap = widget.get("/AP")
    normal = ap.get_object().get("/N") if ap is not None else None
    if normal is None:
        return []
    normal = normal.get_object()
    if not isinstance(normal, DictionaryObject):
        return []
    return [str(k)[1:] for k in normal.keys() if k != _OFF]


def _button_options(annot: DictionaryObject, ftype: FieldType) -> Tuple[str, ...]:
    if ftype == FieldType.CHECKBOX:
        return tuple(_on_states(annot)[:1])
    # radio: the on-states of all widgets of the group
    parent = annot.get("/Parent")
    kids = parent.get_object().get("/Kids") if parent is not None else None
    widgets = [k.get_object() for k in kids.get_object()] if kids is not None else [annot]
    options: List[str] = []
    for w in widgets:
        for state in _on_states(w):
            if state not in options:
                options.append(state)
    return tuple(options)


def _choice_options(annot: DictionaryObject) -> Tuple[str, ...]:
    opt = _inherited(annot, "/Opt")
    if opt is None:
        return ()
    options: List[str] = []
    for entry in opt.get_object():
        entry = entry.get_object()
        # [export value, display text] pairs: the export value is what /V holds
        options.append(str(entry[0].get_object() if isinstance(entry, list) else entry))
    return tuple(options)


def _field_value(raw: Any, ftype: FieldType) -> Any:
    value = _plain_value(raw)
    if ftype == FieldType.CHECKBOX:
        return value not in (None, "", "Off")
    if ftype in (FieldType.RADIO, FieldType.DROPDOWN):
        return "" if value in (None, "Off") else value
    if ftype == FieldType.LIST:
        if value is None:
            return []
        return value if isinstance(value, list) else [value]
    if ftype == FieldType.TEXT:
        return value or ""
    return value


class PdfFormFieldReader:
    def __init__(self, reader: PdfReader) -> None:
        self._reader = reader

    def list_fields(self) -> List[FormField]:
        fields: List[FormField] = []
        for page_index, page in enumerate(self._reader.pages):
            annots = page.get("/Annots")
            if annots is None:
                continue
            box = page.cropbox
            origin = (float(box.left), float(box.bottom))
            for ref in annots.get_object():
                try:
                    field = self._widget_to_field(ref.get_object(), page_index, origin)
                except (PdfReadError, KeyError, TypeError, ValueError) as exc:
                    logger.warning("Failed to read form widget on page %d: %s", page_index, exc)
                    continue
                if field is not None:
                    fields.append(field)
        logger.debug("Detected %d form field widget(s)", len(fields))
        return fields

    @staticmethod
    def _widget_to_field(annot: DictionaryObject, page_index: int,
                         origin: Tuple[float, float] = (0.0, 0.0)) -> Optional[FormField]:
        if annot.get("/Subtype") != "/Widget":
            return None
        rect = annot.get("/Rect")
        if rect is None or len(rect) != 4:
            return None
        flags = int(_inherited(annot, "/Ff") or 0)
        ftype = _field_type(_inherited(annot, "/FT"), flags)
        if ftype is None:
            return None

        options: Tuple[str, ...] = ()
        max_length: Optional[int] = None
        if ftype in (FieldType.CHECKBOX, FieldType.RADIO):
            options = _button_options(annot, ftype)
        elif ftype in (FieldType.DROPDOWN, FieldType.LIST):
            options = _choice_options(annot)
        elif ftype == FieldType.TEXT:
            max_len = _inherited(annot, "/MaxLen")
            max_length = int(max_len) if max_len is not None else None

        left, bottom = origin
        x1, y1, x2, y2 = (float(v) for v in rect)
        return FormField(
            name=_full_name(annot),
            field_type=ftype,
            page_index=page_index,
            rect=PageRect.from_corners(x1 - left, y1 - bottom, x2 - left, y2 - bottom),
            value=_field_value(_inherited(annot, "/V"), ftype),
            required=bool(flags & FF_REQUIRED),
            read_only=bool(flags & FF_READ_ONLY),
            options=options,
            max_length=max_length,
        )
