"""Public API for the Mandelbrot viewer core."""

from .complex_math import Complex, add, magnitude_squared, multiply
from .errors import (
    CacheUnavailable,
    InvalidRectangle,
    InvalidSurfaceDimensions,
    MandelviewError,
    RenderCancelled,
)
from .evaluator import BAILOUT_RADIUS, DEFAULT_MAX_ITERATIONS, EscapeResult, evaluate
from .palette import DEFAULT_ALPHA, DEFAULT_PALETTE, Palette, color_for, colorize, parse_color
from .renderer import DEFAULT_BATCH_ROWS, RenderCache, RenderResult, as_array, recolor, render, to_image
from .session import SessionConfig, ViewerSession
from .viewport import (
    DEFAULT_RECTANGLE,
    Rectangle,
    pixel_to_point,
    plane_axes,
    point_to_pixel,
    screen_to_point,
    step_sizes,
    validate_surface,
)
from .zoom import DEFAULT_ZOOM_RATE, zoom

__all__ = [
    "BAILOUT_RADIUS",
    "CacheUnavailable",
    "Complex",
    "DEFAULT_ALPHA",
    "DEFAULT_BATCH_ROWS",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_PALETTE",
    "DEFAULT_RECTANGLE",
    "DEFAULT_ZOOM_RATE",
    "EscapeResult",
    "InvalidRectangle",
    "InvalidSurfaceDimensions",
    "MandelviewError",
    "Palette",
    "Rectangle",
    "RenderCache",
    "RenderCancelled",
    "RenderResult",
    "SessionConfig",
    "ViewerSession",
    "add",
    "as_array",
    "color_for",
    "colorize",
    "evaluate",
    "magnitude_squared",
    "multiply",
    "parse_color",
    "pixel_to_point",
    "plane_axes",
    "point_to_pixel",
    "recolor",
    "render",
    "screen_to_point",
    "step_sizes",
    "to_image",
    "validate_surface",
    "zoom",
]
