"""
Conversions between percentage space, raster (pixel) space and page space.

Percentage space is what the geometry store keeps; pixel values are always
derived from the current container dimensions at the moment of use.
"""
from __future__ import annotations
from typing import Tuple

from ..models.container_dimensions import ContainerDimensions
from ..models.page_geometry import PageSize


def percent_to_pixel(percent: float, dimension_px: float) -> float:
    return percent / 100.0 * dimension_px


def pixel_to_percent(pixel: float, dimension_px: float) -> float:
    """Inverse of :func:`percent_to_pixel`; 0.0 while the dimension is unmeasured."""
    if not dimension_px:
        return 0.0
    return pixel / dimension_px * 100.0


def page_to_raster_scale(page_size: PageSize, raster_size: Tuple[float, float]) -> Tuple[float, float]:
    """Per-axis raster/page scale. Compute per page; pages may differ in size."""
    raster_w, raster_h = raster_size
    sx = raster_w / page_size.width if page_size.width else 0.0
    sy = raster_h / page_size.height if page_size.height else 0.0
    return sx, sy


def percent_rect_to_pixels(x_percent: float, y_percent: float, width_percent: float, height_percent: float,
                           dims: ContainerDimensions) -> Tuple[float, float, float, float]:
    """(x, y, w, h) in container pixels, origin top-left."""
    return (
        percent_to_pixel(x_percent, dims.width_px),
        percent_to_pixel(y_percent, dims.height_px),
        percent_to_pixel(width_percent, dims.width_px),
        percent_to_pixel(height_percent, dims.height_px),
    )


def pixel_rect_to_percent(x_px: float, y_px: float, width_px: float, height_px: float,
                          dims: ContainerDimensions) -> Tuple[float, float, float, float]:
    return (
        pixel_to_percent(x_px, dims.width_px),
        pixel_to_percent(y_px, dims.height_px),
        pixel_to_percent(width_px, dims.width_px),
        pixel_to_percent(height_px, dims.height_px),
    )
