"""Palette handling and the weight-to-RGBA color mapping."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from matplotlib import colors as mcolors

from .evaluator import EscapeResult

RGB = tuple[int, int, int]

DEFAULT_ALPHA = 250


@dataclass(frozen=True)
class Palette:
    """Base colors for points inside the set and points that escaped."""

    inside_color: RGB
    outside_color: RGB

    def validate(self) -> "Palette":
        for name, color in (("inside_color", self.inside_color), ("outside_color", self.outside_color)):
            if len(color) != 3:
                raise ValueError(f"{name} must have exactly three components, got {color!r}.")
            for component in color:
                if isinstance(component, bool) or int(component) != component or not 0 <= component <= 255:
                    raise ValueError(f"{name} components must be integers in [0, 255], got {color!r}.")
        return self


DEFAULT_PALETTE = Palette(inside_color=(100, 200, 100), outside_color=(200, 200, 200))


def validate_alpha(alpha: int) -> int:
    if isinstance(alpha, bool) or int(alpha) != alpha or not 0 <= alpha <= 255:
        raise ValueError(f"alpha must be an integer in [0, 255], got {alpha!r}.")
    return int(alpha)


def _scale(component: int, weight: float) -> int:
    return int(min(max(round(component * weight), 0), 255))


def color_for(result: EscapeResult, palette: Palette, alpha: int = DEFAULT_ALPHA) -> tuple[int, int, int, int]:
    """RGBA bytes for a single escape result."""

    base = palette.inside_color if result.inside else palette.outside_color
    r, g, b = (_scale(component, result.weight) for component in base)
    return r, g, b, alpha


def colorize(weights: np.ndarray, insiders: np.ndarray, palette: Palette, alpha: int = DEFAULT_ALPHA) -> np.ndarray:
    """Vectorized ``color_for`` over flat weight/membership arrays.

    Returns an ``(n, 4)`` ``uint8`` array; every channel is clamped to
    ``[0, 255]`` before the cast.
    """

    inside = np.asarray(palette.inside_color, dtype=np.float64)
    outside = np.asarray(palette.outside_color, dtype=np.float64)
    base = np.where(np.asarray(insiders, dtype=bool)[:, None], inside, outside)
    scaled = np.rint(base * np.asarray(weights, dtype=np.float64)[:, None])
    rgba = np.empty((base.shape[0], 4), dtype=np.uint8)
    rgba[:, :3] = np.clip(scaled, 0, 255).astype(np.uint8)
    rgba[:, 3] = alpha
    return rgba


def parse_color(value: str) -> RGB:
    """Parse ``#RRGGBB`` or a matplotlib color name into a 0-255 triple."""

    try:
        rgb = mcolors.to_rgb(value)
    except ValueError as exc:
        raise ValueError(f"Invalid color {value!r}; use #RRGGBB or a named color.") from exc
    return tuple(int(round(channel * 255)) for channel in rgb)
