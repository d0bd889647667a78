"""Minimal complex arithmetic used as the unit of escape-time iteration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Complex:
    """A point ``real + imag*i`` of the complex plane."""

    real: float
    imag: float


def multiply(z1: Complex, z2: Complex) -> Complex:
    return Complex(
        z1.real * z2.real - z1.imag * z2.imag,
        z1.real * z2.imag + z1.imag * z2.real,
    )


def add(z1: Complex, z2: Complex) -> Complex:
    return Complex(z1.real + z2.real, z1.imag + z2.imag)


def magnitude_squared(z: Complex) -> float:
    return z.real * z.real + z.imag * z.imag
