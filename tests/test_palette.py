from __future__ import annotations

import numpy as np
import pytest

from mandelview.evaluator import EscapeResult
from mandelview.palette import DEFAULT_ALPHA, Palette, color_for, colorize, parse_color

PALETTE = Palette(inside_color=(1, 2, 3), outside_color=(10, 20, 30))


def test_color_for_scales_by_weight() -> None:
    assert color_for(EscapeResult(inside=False, weight=2.0), PALETTE) == (20, 40, 60, DEFAULT_ALPHA)
    assert color_for(EscapeResult(inside=True, weight=0.5), PALETTE) == (0, 1, 2, DEFAULT_ALPHA)


def test_color_for_clamps_to_byte_range() -> None:
    palette = Palette(inside_color=(100, 200, 100), outside_color=(200, 200, 200))

    rgba = color_for(EscapeResult(inside=False, weight=10.0), palette)

    assert rgba == (255, 255, 255, DEFAULT_ALPHA)


def test_alpha_does_not_depend_on_weight() -> None:
    alphas = {color_for(EscapeResult(inside=False, weight=w), PALETTE, alpha=100)[3] for w in (0.0, 1.0, 49.0)}

    assert alphas == {100}


def test_colorize_matches_scalar_mapping() -> None:
    rng = np.random.default_rng(7)
    weights = rng.uniform(0.0, 60.0, size=64)
    weights[:8] = np.arange(8)
    insiders = rng.random(64) < 0.5
    palette = Palette(inside_color=(3, 90, 17), outside_color=(250, 4, 61))

    rgba = colorize(weights, insiders, palette)

    assert rgba.dtype == np.uint8
    assert rgba.shape == (64, 4)
    for row, weight, inside in zip(rgba, weights, insiders):
        expected = color_for(EscapeResult(inside=bool(inside), weight=float(weight)), palette)
        assert tuple(int(v) for v in row) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("#0a3ba0", (10, 59, 160)),
        ("#000000", (0, 0, 0)),
        ("red", (255, 0, 0)),
    ],
)
def test_parse_color(value: str, expected) -> None:
    assert parse_color(value) == expected


def test_parse_color_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_color("#12345z")


@pytest.mark.parametrize(
    "palette",
    [
        Palette(inside_color=(0, 0, 256), outside_color=(0, 0, 0)),
        Palette(inside_color=(0, 0, 0), outside_color=(-1, 0, 0)),
        Palette(inside_color=(0, 0), outside_color=(0, 0, 0)),
        Palette(inside_color=(0, 0, 0.5), outside_color=(0, 0, 0)),
    ],
)
def test_invalid_palettes(palette: Palette) -> None:
    with pytest.raises(ValueError):
        palette.validate()
