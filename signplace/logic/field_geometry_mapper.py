"""
Projects form field rectangles from page space (points, origin bottom-left)
into percentage space (origin top-left) for display on the preview.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..exceptions.errors import PageNotFoundError
from ..models.field_projection import FieldProjection
from ..models.form_field import FormField
from ..models.page_geometry import PageRect, PageSize
from .contracts import DocumentSource

logger = logging.getLogger(__name__)


def _ratio_percent(value: float, total: float) -> float:
    if not total:
        return 0.0
    return value / total * 100.0


def project_field_rect(rect: PageRect, page_size: PageSize, page_index: int, name: str = "") -> FieldProjection:
    # flip: PDF y grows upwards, the preview grows downwards
    adjusted_y = page_size.height - rect.y - rect.height
    return FieldProjection(
        x_percent=_ratio_percent(rect.x, page_size.width),
        y_percent=_ratio_percent(adjusted_y, page_size.height),
        width_percent=_ratio_percent(rect.width, page_size.width),
        height_percent=_ratio_percent(rect.height, page_size.height),
        page_index=page_index,
        name=name,
    )


def project_field(field: FormField, page_size: PageSize) -> FieldProjection:
    return project_field_rect(field.rect, page_size, field.page_index, field.name)


def project_fields(
    fields: Iterable[FormField],
    document: DocumentSource,
    page_index: Optional[int] = None,
) -> List[FieldProjection]:
    """
    Project every field (or only those on ``page_index``) using the size of
    the page each field sits on. Fields on unresolvable pages are skipped.
    """
    result: List[FieldProjection] = []
    for field in fields:
        if page_index is not None and field.page_index != page_index:
            continue
        try:
            size = document.page_size(field.page_index)
        except PageNotFoundError:
            logger.warning("Field %r skipped: page %d not in document", field.name, field.page_index)
            continue
        result.append(project_field(field, size))
    return result
