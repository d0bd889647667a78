"""Viewer session owning the displayed buffer, palette and render cache."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

import PIL.Image

from .complex_math import Complex
from .errors import CacheUnavailable, RenderCancelled
from .evaluator import DEFAULT_MAX_ITERATIONS, validate_inside_offset, validate_max_iterations
from .palette import DEFAULT_ALPHA, DEFAULT_PALETTE, Palette, validate_alpha
from .renderer import DEFAULT_BATCH_ROWS, RenderCache, recolor, render, to_image
from .viewport import DEFAULT_RECTANGLE, Rectangle, screen_to_point, validate_surface
from .zoom import DEFAULT_ZOOM_RATE, validate_zoom_rate, zoom


@dataclass(frozen=True)
class SessionConfig:
    """Settings held constant for every render of a session."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    zoom_rate: float = DEFAULT_ZOOM_RATE
    inside_offset: float = 0.0
    alpha: int = DEFAULT_ALPHA
    batch_rows: int = DEFAULT_BATCH_ROWS

    def validate(self) -> "SessionConfig":
        validate_max_iterations(self.max_iterations)
        validate_inside_offset(self.inside_offset)
        validate_alpha(self.alpha)
        validate_zoom_rate(self.zoom_rate)
        if self.batch_rows < 1:
            raise ValueError(f"batch_rows must be at least 1, got {self.batch_rows}.")
        return self


class ViewerSession:
    """Interactive state for one raster surface.

    Renders and recolors are serialized by a single lock. Starting a render
    first cancels the one in flight, and the displayed ``pixels``/``cache``
    pair is only swapped once a render has written every pixel, so a
    cancelled or failed render never reaches the display.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        rect: Rectangle = DEFAULT_RECTANGLE,
        palette: Palette = DEFAULT_PALETTE,
        config: Optional[SessionConfig] = None,
        device: Optional[str] = None,
    ) -> None:
        self.width, self.height = validate_surface(width, height)
        self.initial_rect = rect.validate()
        self.rect = self.initial_rect
        self.palette = palette.validate()
        self.config = (config or SessionConfig()).validate()
        self.device = device
        self.pixels: Optional[bytearray] = None
        self.cache: Optional[RenderCache] = None
        self.generation = 0
        self._lock = threading.RLock()
        self._guard = threading.Lock()
        self._in_flight: Optional[threading.Event] = None

    def cancel(self) -> None:
        """Ask the in-flight render, if any, to stop at its next row band."""

        with self._guard:
            if self._in_flight is not None:
                self._in_flight.set()

    def render(self, rect: Optional[Rectangle] = None) -> bytearray:
        target = self.rect if rect is None else rect
        target.validate()

        event = threading.Event()
        with self._guard:
            if self._in_flight is not None:
                self._in_flight.set()
            self._in_flight = event

        try:
            with self._lock:
                if event.is_set():
                    raise RenderCancelled(f"Render of {target} superseded before it started.")
                result = render(
                    target,
                    self.width,
                    self.height,
                    self.palette,
                    self.config.max_iterations,
                    inside_offset=self.config.inside_offset,
                    alpha=self.config.alpha,
                    batch_rows=self.config.batch_rows,
                    cancel_event=event,
                    device=self.device,
                )
                self.rect = target
                self.pixels = result.pixels
                self.cache = result.cache
                self.generation += 1
                return self.pixels
        finally:
            with self._guard:
                if self._in_flight is event:
                    self._in_flight = None

    def recolor(self, palette: Palette) -> bytearray:
        """Apply ``palette`` to the displayed buffer using the cached escape results."""

        palette.validate()
        with self._lock:
            cache = self.cache
            if cache is None or self.pixels is None:
                raise CacheUnavailable("Nothing rendered yet; recolor needs a full render first.")
            if (cache.width, cache.height) != (self.width, self.height) or cache.rect != self.rect:
                raise CacheUnavailable(
                    f"Cache was built for {cache.width}x{cache.height} over {cache.rect}, "
                    f"not {self.width}x{self.height} over {self.rect}."
                )
            recolor(cache, palette, self.pixels, alpha=self.config.alpha)
            self.palette = palette
            return self.pixels

    def zoom_to(self, point: Complex) -> Rectangle:
        """Zoom around a plane point and render the new rectangle."""

        new_rect = zoom(point, self.rect, self.config.zoom_rate)
        self.render(new_rect)
        return new_rect

    def click(self, page_x: float, page_y: float, canvas_origin: tuple[float, float] = (0.0, 0.0)) -> Rectangle:
        """Handle a click in page coordinates: map it, zoom and re-render."""

        point = screen_to_point(page_x, page_y, canvas_origin, self.width, self.height, self.rect)
        return self.zoom_to(point)

    def reset(self) -> bytearray:
        return self.render(self.initial_rect)

    def image(self) -> PIL.Image.Image:
        if self.pixels is None:
            raise CacheUnavailable("Nothing rendered yet.")
        return to_image(self.pixels, self.width, self.height)
