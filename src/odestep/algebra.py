"""Elementwise recurrences used by the steppers.

Every stepper expresses its update rule as one or two calls to the functions
below, so the loop logic lives in exactly one place:

    increment(x, dxdt, dt)                        x[i] += dt * dxdt[i]
    scale_two_sum(dest, ca, a, cb, b)             dest[i] = ca*a[i] + cb*b[i]
    scale_two_sum_accumulate(dest, ca, a, cb, b)  dest[i] += ca*a[i] + cb*b[i]

The functions are generic over the element type (anything with `+` and `*`)
and over the container (anything with `len()` and indexed read/write). They
never allocate and never validate: all operands must have the length of the
destination.
"""

from __future__ import annotations

from typing import Any

from .state import StateVector


def increment(x: StateVector[Any], dxdt: StateVector[Any], dt: Any) -> None:
    """Explicit Euler update, in place.

    Args:
        x: State to advance, mutated in place.
        dxdt: Derivative evaluated at x, same length as x.
        dt: Step size.
    """
    for i in range(len(x)):
        x[i] += dt * dxdt[i]


def scale_two_sum(
    dest: StateVector[Any],
    coeff_a: Any,
    a: StateVector[Any],
    coeff_b: Any,
    b: StateVector[Any],
) -> None:
    """Overwrite dest with the linear combination coeff_a*a + coeff_b*b.

    dest must be a different buffer from a and b.
    """
    for i in range(len(dest)):
        dest[i] = coeff_a * a[i] + coeff_b * b[i]


def scale_two_sum_accumulate(
    dest: StateVector[Any],
    coeff_a: Any,
    a: StateVector[Any],
    coeff_b: Any,
    b: StateVector[Any],
) -> None:
    """Add the linear combination coeff_a*a + coeff_b*b to dest."""
    for i in range(len(dest)):
        dest[i] += coeff_a * a[i] + coeff_b * b[i]
