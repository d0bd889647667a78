"""Exception types raised by the Mandelbrot viewer core."""

from __future__ import annotations


class MandelviewError(Exception):
    """Base class for every precondition failure raised by the core."""


class InvalidRectangle(MandelviewError, ValueError):
    """The plane rectangle is degenerate, inverted or not finite."""


class InvalidSurfaceDimensions(MandelviewError, ValueError):
    """The raster surface has a non-positive width or height."""


class CacheUnavailable(MandelviewError, RuntimeError):
    """A recolor was requested without a matching full render."""


class RenderCancelled(MandelviewError):
    """The in-flight render was cancelled before every pixel was written."""
