"""Mapping between raster pixels and the viewport rectangle on the plane."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .complex_math import Complex
from .errors import InvalidRectangle, InvalidSurfaceDimensions


@dataclass(frozen=True)
class Rectangle:
    """Region of the complex plane shown on the surface.

    ``top`` is the larger imaginary value: row 0 of the raster sits on the
    top edge and rows grow downwards.
    """

    top: float
    left: float
    bottom: float
    right: float

    def validate(self) -> "Rectangle":
        bounds = (self.top, self.left, self.bottom, self.right)
        if not all(math.isfinite(value) for value in bounds):
            raise InvalidRectangle(f"Rectangle bounds must be finite, got {bounds}.")
        if not self.right > self.left:
            raise InvalidRectangle(f"Rectangle needs right > left, got left={self.left!r} right={self.right!r}.")
        if not self.top > self.bottom:
            raise InvalidRectangle(f"Rectangle needs top > bottom, got bottom={self.bottom!r} top={self.top!r}.")
        return self

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom

    @property
    def center(self) -> Complex:
        return Complex((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)


DEFAULT_RECTANGLE = Rectangle(top=2.0, left=-4.0, bottom=-2.0, right=4.0)


def validate_surface(width: int, height: int) -> tuple[int, int]:
    if isinstance(width, bool) or isinstance(height, bool):
        raise InvalidSurfaceDimensions(f"Surface dimensions must be integers, got {width!r}x{height!r}.")
    if int(width) != width or int(height) != height:
        raise InvalidSurfaceDimensions(f"Surface dimensions must be integers, got {width!r}x{height!r}.")
    if width <= 0 or height <= 0:
        raise InvalidSurfaceDimensions(f"Surface dimensions must be positive, got {width}x{height}.")
    return int(width), int(height)


def step_sizes(rect: Rectangle, width: int, height: int) -> tuple[float, float]:
    """Plane distance covered by one pixel along each axis."""

    step_real = np.float64(rect.right - rect.left) / np.float64(width)
    step_imag = np.float64(rect.top - rect.bottom) / np.float64(height)
    return float(step_real), float(step_imag)


def pixel_to_point(index: int, width: int, height: int, rect: Rectangle) -> Complex:
    """Map a row-major pixel index onto the plane."""

    if not 0 <= index < width * height:
        raise IndexError(f"Pixel index {index} outside a {width}x{height} surface.")
    step_real, step_imag = step_sizes(rect, width, height)
    x = index % width
    y = index // width
    real = np.float64(rect.left) + np.float64(x) * np.float64(step_real)
    imag = np.float64(rect.top) - np.float64(y) * np.float64(step_imag)
    return Complex(float(real), float(imag))


def point_to_pixel(point: Complex, width: int, height: int, rect: Rectangle) -> tuple[int, int]:
    """Nearest pixel ``(x, y)`` for ``point``, clamped to the surface."""

    step_real, step_imag = step_sizes(rect, width, height)
    x = int(round((point.real - rect.left) / step_real))
    y = int(round((rect.top - point.imag) / step_imag))
    return min(max(x, 0), width - 1), min(max(y, 0), height - 1)


def screen_to_point(
    click_x: float,
    click_y: float,
    canvas_origin: tuple[float, float],
    width: int,
    height: int,
    rect: Rectangle,
) -> Complex:
    """Convert page coordinates of a click into a plane point.

    The canvas page offset is removed first so the click is expressed in
    surface-local pixels, then the same linear map as ``pixel_to_point``
    is applied.
    """

    origin_x, origin_y = canvas_origin
    local_x = np.float64(click_x) - np.float64(origin_x)
    local_y = np.float64(click_y) - np.float64(origin_y)
    step_real, step_imag = step_sizes(rect, width, height)
    real = np.float64(rect.left) + local_x * np.float64(step_real)
    imag = np.float64(rect.top) - local_y * np.float64(step_imag)
    return Complex(float(real), float(imag))


def plane_axes(
    rect: Rectangle,
    width: int,
    height: int,
    row_start: int = 0,
    row_stop: Optional[int] = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Real axis for a full row and imaginary axis for rows ``[row_start, row_stop)``."""

    if row_stop is None:
        row_stop = height
    step_real, step_imag = step_sizes(rect, width, height)
    cols = np.arange(width, dtype=np.float64)
    rows = np.arange(row_start, row_stop, dtype=np.float64)
    reals = np.float64(rect.left) + cols * np.float64(step_real)
    imags = np.float64(rect.top) - rows * np.float64(step_imag)
    return reals, imags
