"""Click-driven zoom of the viewport rectangle."""

from __future__ import annotations

import numpy as np

from .complex_math import Complex
from .viewport import Rectangle

DEFAULT_ZOOM_RATE = 4.0


def validate_zoom_rate(zoom_rate: float) -> float:
    if not zoom_rate > 1:
        raise ValueError(f"zoom_rate must be greater than 1, got {zoom_rate!r}.")
    return float(zoom_rate)


def zoom(click_point: Complex, rect: Rectangle, zoom_rate: float = DEFAULT_ZOOM_RATE) -> Rectangle:
    """Pull every edge of ``rect`` towards ``click_point``.

    Each edge covers ``1/zoom_rate`` of its distance to the click, so a
    rate of 2 puts every new corner halfway between the old corner and the
    click. With the default rate of 4 a click on the center of the
    ``(2, -4, -2, 4)`` rectangle yields ``(1.5, -3, -1.5, 3)``.
    """

    rect.validate()
    rate = np.float64(validate_zoom_rate(zoom_rate))
    click_real = np.float64(click_point.real)
    click_imag = np.float64(click_point.imag)
    top = np.float64(rect.top)
    left = np.float64(rect.left)
    bottom = np.float64(rect.bottom)
    right = np.float64(rect.right)

    new_top = top - (top - click_imag) / rate
    new_bottom = bottom + (click_imag - bottom) / rate
    new_left = left + (click_real - left) / rate
    new_right = right - (right - click_real) / rate

    # Collapses once the plane step falls below float64 resolution.
    return Rectangle(
        top=float(new_top),
        left=float(new_left),
        bottom=float(new_bottom),
        right=float(new_right),
    ).validate()
