from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from .page_geometry import PageRect


class FieldType(str, Enum):
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DROPDOWN = "dropdown"
    LIST = "list"
    SIGNATURE = "signature"


@dataclass(frozen=True)
class FormField:
    """
    Interactive form field widget as read from the document.
    ``rect`` is in page space (points, origin bottom-left of the visible page box).
    ``options`` holds the choices of dropdown/list/radio fields and the
    on-state name of a checkbox.
    """
    name: str
    field_type: FieldType
    page_index: int
    rect: PageRect
    value: Optional[Any] = None
    required: bool = False
    read_only: bool = False
    options: Tuple[str, ...] = ()
    max_length: Optional[int] = None
