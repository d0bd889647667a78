from __future__ import annotations

from mandelview.complex_math import Complex, add, magnitude_squared, multiply


def test_multiply_matches_builtin_complex() -> None:
    z1 = Complex(1.5, -2.0)
    z2 = Complex(-0.25, 3.0)

    product = multiply(z1, z2)

    expected = complex(1.5, -2.0) * complex(-0.25, 3.0)
    assert product == Complex(expected.real, expected.imag)


def test_add_is_componentwise() -> None:
    assert add(Complex(1.0, 2.0), Complex(-3.0, 0.5)) == Complex(-2.0, 2.5)


def test_operations_return_new_values() -> None:
    z = Complex(2.0, 1.0)

    squared = multiply(z, z)

    assert squared == Complex(3.0, 4.0)
    assert z == Complex(2.0, 1.0)
    assert magnitude_squared(squared) == 25.0
