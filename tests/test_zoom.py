from __future__ import annotations

import numpy as np
import pytest

from mandelview.complex_math import Complex
from mandelview.errors import InvalidRectangle
from mandelview.viewport import DEFAULT_RECTANGLE, Rectangle
from mandelview.zoom import zoom


def test_zoom_on_origin_with_default_rate() -> None:
    new_rect = zoom(Complex(0.0, 0.0), DEFAULT_RECTANGLE, 4)

    assert new_rect == Rectangle(top=1.5, left=-3.0, bottom=-1.5, right=3.0)


def test_zoom_returns_new_rectangle() -> None:
    rect = Rectangle(top=2.0, left=-4.0, bottom=-2.0, right=4.0)

    zoom(Complex(1.0, 1.0), rect)

    assert rect == DEFAULT_RECTANGLE


def _midpoint(click: Complex, rect: Rectangle) -> Rectangle:
    return Rectangle(
        top=(rect.top + click.imag) / 2,
        left=(rect.left + click.real) / 2,
        bottom=(click.imag + rect.bottom) / 2,
        right=(click.real + rect.right) / 2,
    )


@pytest.mark.parametrize("seed", range(10))
def test_rate_two_matches_midpoint_policy(seed: int) -> None:
    rng = np.random.default_rng(seed)
    left, bottom = rng.uniform(-3.0, 1.0, size=2)
    rect = Rectangle(
        top=float(bottom + rng.uniform(0.01, 3.0)),
        left=float(left),
        bottom=float(bottom),
        right=float(left + rng.uniform(0.01, 3.0)),
    )
    click = Complex(float(rng.uniform(rect.left, rect.right)), float(rng.uniform(rect.bottom, rect.top)))

    zoomed = zoom(click, rect, 2)
    expected = _midpoint(click, rect)

    assert zoomed.top == pytest.approx(expected.top, abs=1e-12)
    assert zoomed.left == pytest.approx(expected.left, abs=1e-12)
    assert zoomed.bottom == pytest.approx(expected.bottom, abs=1e-12)
    assert zoomed.right == pytest.approx(expected.right, abs=1e-12)


def test_each_edge_covers_a_fraction_of_its_distance_to_the_click() -> None:
    new_rect = zoom(Complex(-1.0, 0.5), DEFAULT_RECTANGLE, 4)

    assert new_rect == Rectangle(top=1.625, left=-3.25, bottom=-1.375, right=2.75)
    assert new_rect.width == pytest.approx(DEFAULT_RECTANGLE.width * 3 / 4)
    assert new_rect.height == pytest.approx(DEFAULT_RECTANGLE.height * 3 / 4)


def test_repeated_zoom_keeps_click_inside() -> None:
    rect = DEFAULT_RECTANGLE
    click = Complex(-0.743643, 0.131825)
    for _ in range(10):
        rect = zoom(click, rect)
        assert rect.left <= click.real <= rect.right
        assert rect.bottom <= click.imag <= rect.top


@pytest.mark.parametrize("rate", [1, 0.5, 0, -2.0])
def test_rate_not_above_one_is_rejected(rate: float) -> None:
    with pytest.raises(ValueError):
        zoom(Complex(0.0, 0.0), DEFAULT_RECTANGLE, rate)


def test_invalid_rectangle_is_rejected() -> None:
    with pytest.raises(InvalidRectangle):
        zoom(Complex(0.0, 0.0), Rectangle(top=-1.0, left=0.0, bottom=1.0, right=1.0))


def test_zoom_beyond_float_resolution_collapses() -> None:
    tiny = float(np.nextafter(1.0, 2.0))
    rect = Rectangle(top=tiny, left=1.0, bottom=1.0, right=tiny)

    with pytest.raises(InvalidRectangle):
        zoom(Complex(1.0, 1.0), rect, 1.5)
