from __future__ import annotations

import math

import pytest

from signplace.logic.coordinate_transform import (
    page_to_raster_scale,
    percent_rect_to_pixels,
    percent_to_pixel,
    pixel_rect_to_percent,
    pixel_to_percent,
)
from signplace.models.container_dimensions import ContainerDimensions
from signplace.models.page_geometry import PageSize


def test_percent_to_pixel() -> None:
    assert percent_to_pixel(25, 800) == pytest.approx(200)
    assert percent_to_pixel(0, 800) == 0


def test_pixel_to_percent() -> None:
    assert pixel_to_percent(200, 800) == pytest.approx(25)


@pytest.mark.parametrize("percent,dim", [(0.0, 1.0), (12.5, 333.0), (33.3333, 1024.0), (100.0, 7.0)])
def test_round_trip(percent: float, dim: float) -> None:
    assert pixel_to_percent(percent_to_pixel(percent, dim), dim) == pytest.approx(percent, abs=1e-9)


@pytest.mark.parametrize("pixel", [0.0, 1.0, -40.0, 1e9])
def test_zero_dimension_returns_zero(pixel: float) -> None:
    result = pixel_to_percent(pixel, 0)
    assert result == 0
    assert not math.isnan(result)


def test_page_to_raster_scale_is_per_axis() -> None:
    sx, sy = page_to_raster_scale(PageSize(600, 800), (900, 1000))
    assert sx == pytest.approx(1.5)
    assert sy == pytest.approx(1.25)


def test_page_to_raster_scale_zero_page() -> None:
    assert page_to_raster_scale(PageSize(0, 0), (100, 100)) == (0.0, 0.0)


def test_rect_helpers_are_inverse() -> None:
    dims = ContainerDimensions(640, 480)
    px = percent_rect_to_pixels(10, 20, 30, 40, dims)
    assert px == pytest.approx((64, 96, 192, 192))
    assert pixel_rect_to_percent(*px, dims) == pytest.approx((10, 20, 30, 40))
