"""Exact rational geometry kernel.

Same algorithms as ``FloatKernel`` but every coordinate is a
``fractions.Fraction``, so orientation tests have no tolerance and clipped
cells tile the bounding square exactly. Much slower; meant for checking
results and for inputs where ties must be decided exactly.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Sequence

from .geometry import Bisector, FloatKernel, PlanarKernel, Point, Polygon


def to_fraction(value) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, int):
        return Fraction(value)
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Cannot represent {value!r} as a fraction")
    return Fraction(number)


class RationalKernel(PlanarKernel):
    """Kernel over ``Fraction`` coordinates with exact predicates."""

    tolerance = 0

    def __repr__(self) -> str:
        return "RationalKernel()"

    def coerce(self, point: Sequence) -> Point:
        return (to_fraction(point[0]), to_fraction(point[1]))

    def bisector(self, a: Point, b: Point, extent) -> Bisector:
        return super().bisector(a, b, to_fraction(extent))

    def square(self, centre: Point, half_width) -> Polygon:
        return super().square(self.coerce(centre), to_fraction(half_width))


def make_kernel(name: str = "float", tolerance: float = 1e-7):
    """Build the kernel registered under ``name`` ("float" or "exact")."""
    if name == "float":
        return FloatKernel(tolerance)
    if name == "exact":
        return RationalKernel()
    raise ValueError(f"Unknown geometry kernel: {name}")
