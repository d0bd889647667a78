"""Rendering primitives: full escape-time renders and cached recolors."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np
import PIL.Image
import tensorflow as tf

from .errors import CacheUnavailable, RenderCancelled
from .evaluator import BAILOUT_SQUARED, validate_inside_offset, validate_max_iterations
from .palette import DEFAULT_ALPHA, Palette, colorize, validate_alpha
from .viewport import Rectangle, plane_axes, validate_surface

BYTES_PER_PIXEL = 4
DEFAULT_BATCH_ROWS = 64


@dataclass(frozen=True)
class RenderCache:
    """Per-pixel escape results of the last full render.

    ``weights`` and ``insiders`` are flat arrays indexed exactly like the
    pixels of the RGBA buffer.
    """

    weights: np.ndarray
    insiders: np.ndarray
    width: int
    height: int
    rect: Rectangle

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class RenderResult:
    """Completed RGBA buffer and the cache that can recolor it."""

    pixels: bytearray
    cache: RenderCache


@tf.function
def _escape_step(
    zr: tf.Tensor,
    zi: tf.Tensor,
    cr: tf.Tensor,
    ci: tf.Tensor,
    weights: tf.Tensor,
    active: tf.Tensor,
    i: tf.Tensor,
) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every orbit that is still inside the bailout disc."""

    zr_new = zr * zr - zi * zi + cr
    zi_new = zr * zi + zi * zr + ci
    zr = tf.where(active, zr_new, zr)
    zi = tf.where(active, zi_new, zi)
    escaped = tf.logical_and(active, zr * zr + zi * zi > tf.cast(BAILOUT_SQUARED, zr.dtype))
    weights = tf.where(escaped, tf.cast(i, weights.dtype), weights)
    active = tf.logical_and(active, tf.logical_not(escaped))
    return zr, zi, weights, active


@tf.function
def _escape_run(cr: tf.Tensor, ci: tf.Tensor, max_iterations: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
    """Iterate ``z = z*z + c`` for indices ``1 .. max_iterations-1`` in a while loop."""

    max_iterations = tf.cast(max_iterations, tf.int32)
    i = tf.constant(1, dtype=tf.int32)
    zr = tf.zeros_like(cr)
    zi = tf.zeros_like(ci)
    weights = tf.zeros_like(cr)
    active = tf.ones_like(cr, tf.bool)

    def cond(i, zr, zi, weights, active):
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i, zr, zi, weights, active):
        zr, zi, weights, active = _escape_step(zr, zi, cr, ci, weights, active, i)
        return i + 1, zr, zi, weights, active

    _, zr, zi, weights, active = tf.while_loop(cond, body, (i, zr, zi, weights, active))
    return zr, zi, weights, active


def _evaluate_rows(
    rect: Rectangle,
    width: int,
    height: int,
    row_start: int,
    row_stop: int,
    max_iterations: int,
    inside_offset: float,
    device: Optional[str],
) -> tuple[np.ndarray, np.ndarray]:
    reals, imags = plane_axes(rect, width, height, row_start, row_stop)
    cr, ci = np.meshgrid(reals, imags)

    with tf.device(device if device is not None else "/CPU:0"):
        cr_tf = tf.convert_to_tensor(cr.ravel(), dtype=tf.float64)
        ci_tf = tf.convert_to_tensor(ci.ravel(), dtype=tf.float64)
        zr, zi, weights, active = _escape_run(cr_tf, ci_tf, tf.constant(max_iterations, dtype=tf.int32))

    zr = zr.numpy()
    zi = zi.numpy()
    insiders = active.numpy()
    weights = weights.numpy()
    magnitudes = np.sqrt(zr * zr + zi * zi) + np.float64(inside_offset)
    weights = np.where(insiders, magnitudes, weights)
    return weights, insiders


def _pixel_view(pixels: bytearray) -> np.ndarray:
    return np.frombuffer(pixels, dtype=np.uint8).reshape(-1, BYTES_PER_PIXEL)


def render(
    rect: Rectangle,
    width: int,
    height: int,
    palette: Palette,
    max_iterations: int,
    *,
    inside_offset: float = 0.0,
    alpha: int = DEFAULT_ALPHA,
    batch_rows: int = DEFAULT_BATCH_ROWS,
    cancel_event: Optional[threading.Event] = None,
    device: Optional[str] = None,
) -> RenderResult:
    """Render ``rect`` onto a ``width`` x ``height`` RGBA buffer.

    Rows are evaluated in bands of ``batch_rows``. ``cancel_event`` is
    checked before every band; once it is set the render stops with
    :class:`RenderCancelled` and the partial buffer is dropped.
    """

    rect.validate()
    width, height = validate_surface(width, height)
    palette.validate()
    max_iterations = validate_max_iterations(max_iterations)
    inside_offset = validate_inside_offset(inside_offset)
    alpha = validate_alpha(alpha)
    if batch_rows < 1:
        raise ValueError(f"batch_rows must be at least 1, got {batch_rows}.")

    count = width * height
    pixels = bytearray(count * BYTES_PER_PIXEL)
    view = _pixel_view(pixels)
    weights = np.empty(count, dtype=np.float64)
    insiders = np.empty(count, dtype=bool)

    for row_start in range(0, height, batch_rows):
        if cancel_event is not None and cancel_event.is_set():
            raise RenderCancelled(f"Render of {rect} cancelled at row {row_start} of {height}.")
        row_stop = min(row_start + batch_rows, height)
        band = slice(row_start * width, row_stop * width)
        band_weights, band_insiders = _evaluate_rows(
            rect, width, height, row_start, row_stop, max_iterations, inside_offset, device
        )
        weights[band] = band_weights
        insiders[band] = band_insiders
        view[band] = colorize(band_weights, band_insiders, palette, alpha)

    weights.flags.writeable = False
    insiders.flags.writeable = False
    cache = RenderCache(weights=weights, insiders=insiders, width=width, height=height, rect=rect)
    return RenderResult(pixels=pixels, cache=cache)


def recolor(
    cache: Optional[RenderCache],
    palette: Palette,
    pixels: Optional[bytearray] = None,
    *,
    alpha: int = DEFAULT_ALPHA,
) -> bytearray:
    """Recompute colors from ``cache`` without touching the evaluator.

    ``pixels`` is updated in place when given; otherwise a new buffer is
    returned.
    """

    if cache is None:
        raise CacheUnavailable("No render cache available; run a full render first.")
    palette.validate()
    alpha = validate_alpha(alpha)

    expected = cache.pixel_count * BYTES_PER_PIXEL
    if pixels is None:
        pixels = bytearray(expected)
    elif len(pixels) != expected:
        raise CacheUnavailable(
            f"Cache for a {cache.width}x{cache.height} surface does not match a buffer of {len(pixels)} bytes."
        )

    colors = colorize(cache.weights, cache.insiders, palette, alpha)
    _pixel_view(pixels)[:] = colors
    return pixels


def as_array(pixels: bytearray, width: int, height: int) -> np.ndarray:
    """``(height, width, 4)`` view of an RGBA buffer."""

    return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width, BYTES_PER_PIXEL)


def to_image(pixels: bytearray, width: int, height: int) -> PIL.Image.Image:
    return PIL.Image.fromarray(np.array(as_array(pixels, width, height), copy=True))
