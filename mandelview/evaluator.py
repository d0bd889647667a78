"""Scalar escape-time evaluation of a single plane coordinate."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .complex_math import Complex, add, magnitude_squared, multiply

BAILOUT_RADIUS = 2
BAILOUT_SQUARED = BAILOUT_RADIUS * BAILOUT_RADIUS
DEFAULT_MAX_ITERATIONS = 50

_ORIGIN = Complex(0.0, 0.0)


@dataclass(frozen=True)
class EscapeResult:
    """Membership of a point and the weight that drives its color.

    Escaped points carry the iteration index at which the orbit left the
    bailout disc. Points that never escaped carry the magnitude of their
    final iterate plus the configured offset.
    """

    inside: bool
    weight: float


def validate_max_iterations(max_iterations: int) -> int:
    max_iterations = int(max_iterations)
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}.")
    return max_iterations


def validate_inside_offset(inside_offset: float) -> float:
    if not math.isfinite(inside_offset) or inside_offset < 0:
        raise ValueError(f"inside_offset must be a finite value >= 0, got {inside_offset!r}.")
    return float(inside_offset)


def evaluate(c: Complex, max_iterations: int = DEFAULT_MAX_ITERATIONS, inside_offset: float = 0.0) -> EscapeResult:
    """Iterate ``z = z*z + c`` from the origin and classify ``c``."""

    max_iterations = validate_max_iterations(max_iterations)
    inside_offset = validate_inside_offset(inside_offset)
    z = _ORIGIN
    for i in range(1, max_iterations):
        z = add(multiply(z, z), c)
        if magnitude_squared(z) > BAILOUT_SQUARED:
            return EscapeResult(inside=False, weight=float(i))
    return EscapeResult(inside=True, weight=math.sqrt(magnitude_squared(z)) + inside_offset)
