"""Planar geometry kernel used by the Voronoi builder.

The builder never touches coordinates directly. Everything it needs goes
through a ``GeometryKernel``:

- ``contains``: inclusive point-in-convex-polygon test
- ``clip``: split a convex polygon by a line into its two sides plus the
  points found on the line
- ``bisector``: perpendicular bisector of two sites as a long directed line
- ``merge``: join convex pieces of one region into a single convex polygon

``FloatKernel`` works on floats with a distance tolerance and vectorises its
orientation tests with numpy. The exact variant lives in ``exact.py``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Protocol, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]


def orient(a: Point, b: Point, c: Point):
    """Twice the signed area of triangle abc (> 0 when c is left of a->b)."""
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


@dataclass(frozen=True)
class Polygon:
    """Convex polygon with counter-clockwise vertex order."""

    vertices: Tuple[Point, ...]

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self):
        return iter(self.vertices)

    def edges(self) -> Iterable[Tuple[Point, Point]]:
        n = len(self.vertices)
        for i in range(n):
            yield self.vertices[i], self.vertices[(i + 1) % n]

    @property
    def area(self):
        """Shoelace area; exact for rational coordinates."""
        total = 0
        for a, b in self.edges():
            total += a[0] * b[1] - b[0] * a[1]
        return total / 2

    @property
    def centroid(self) -> Point:
        """Area centroid, falling back to the vertex mean for degenerate input."""
        n = len(self.vertices)
        if n == 0:
            raise ValueError("empty polygon has no centroid")
        area = self.area
        if n < 3 or area == 0:
            xs = sum(v[0] for v in self.vertices)
            ys = sum(v[1] for v in self.vertices)
            return (xs / n, ys / n)

        cx = 0
        cy = 0
        for a, b in self.edges():
            cross = a[0] * b[1] - b[0] * a[1]
            cx += (a[0] + b[0]) * cross
            cy += (a[1] + b[1]) * cross
        return (cx / (6 * area), cy / (6 * area))

    @property
    def bounds(self) -> Tuple[Point, Point]:
        """Axis-aligned (min, max) corners."""
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        return (min(xs), min(ys)), (max(xs), max(ys))

    def as_array(self) -> np.ndarray:
        return np.array(self.vertices, dtype=float).reshape(-1, 2)


@dataclass(frozen=True)
class Bisector:
    """Directed line through ``start`` and ``end``."""

    start: Point
    end: Point


class ClipResult(NamedTuple):
    """Outcome of clipping a convex polygon by a line."""

    left: Optional[Polygon]
    right: Optional[Polygon]
    remainder: Tuple[Point, ...]


class GeometryKernel(Protocol):
    """Capabilities the Voronoi builder consumes."""

    def coerce(self, point: Sequence[float]) -> Point:
        ...

    def contains(self, polygon: Polygon, point: Point) -> bool:
        ...

    def clip(self, polygon: Polygon, line: Bisector) -> ClipResult:
        ...

    def side(self, line: Bisector, point: Point) -> int:
        ...

    def bisector(self, a: Point, b: Point, extent) -> Bisector:
        ...

    def merge(self, polygons: Iterable[Polygon]) -> Polygon:
        ...

    def square(self, centre: Point, half_width) -> Polygon:
        ...


class PlanarKernel(ABC):
    """Kernel algorithms written against the scalar operations only.

    Subclasses decide the scalar type (``coerce``) and how close to a line a
    point may be before it counts as on it (``_slack``).
    """

    @abstractmethod
    def coerce(self, point: Sequence[float]) -> Point:
        """Convert a point to the kernel's scalar type."""

    def _slack(self, start: Point, end: Point):
        return 0

    def _sign(self, value, start: Point, end: Point) -> int:
        slack = self._slack(start, end)
        if value > slack:
            return 1
        if value < -slack:
            return -1
        return 0

    def _sides(self, start: Point, end: Point, points: Sequence[Point]) -> List[int]:
        return [self._sign(orient(start, end, p), start, end) for p in points]

    def side(self, line: Bisector, point: Point) -> int:
        """+1 left of the line, -1 right of it, 0 on it."""
        return self._sign(orient(line.start, line.end, point), line.start, line.end)

    def contains(self, polygon: Polygon, point: Point) -> bool:
        if len(polygon) < 3:
            return False
        for a, b in polygon.edges():
            if self._sign(orient(a, b, point), a, b) < 0:
                return False
        return True

    def _crossing(self, p: Point, q: Point, line: Bisector) -> Point:
        dp = orient(line.start, line.end, p)
        dq = orient(line.start, line.end, q)
        t = dp / (dp - dq)
        return (p[0] + t * (q[0] - p[0]), p[1] + t * (q[1] - p[1]))

    def clip(self, polygon: Polygon, line: Bisector) -> ClipResult:
        vertices = polygon.vertices
        sides = self._sides(line.start, line.end, vertices)
        has_left = 1 in sides
        has_right = -1 in sides

        if not (has_left and has_right):
            remainder = tuple(v for v, s in zip(vertices, sides) if s == 0)
            return ClipResult(
                polygon if has_left else None,
                polygon if has_right else None,
                remainder,
            )

        left: List[Point] = []
        right: List[Point] = []
        remainder: List[Point] = []
        n = len(vertices)
        for i in range(n):
            p, sp = vertices[i], sides[i]
            q, sq = vertices[(i + 1) % n], sides[(i + 1) % n]
            if sp >= 0:
                left.append(p)
            if sp <= 0:
                right.append(p)
            if sp == 0:
                remainder.append(p)
            if sp * sq < 0:
                x = self._crossing(p, q, line)
                left.append(x)
                right.append(x)
                remainder.append(x)

        return ClipResult(Polygon(tuple(left)), Polygon(tuple(right)), tuple(remainder))

    def bisector(self, a: Point, b: Point, extent) -> Bisector:
        """Perpendicular bisector of ab, reaching at least ``extent`` each way."""
        dx = b[0] - a[0]
        dy = b[1] - a[1]
        norm = max(abs(dx), abs(dy))
        if norm == 0:
            raise ValueError(f"Cannot bisect coincident points {a}")
        scale = extent / norm
        mx = (a[0] + b[0]) / 2
        my = (a[1] + b[1]) / 2
        px = -dy * scale
        py = dx * scale
        return Bisector((mx + px, my + py), (mx - px, my - py))

    def merge(self, polygons: Iterable[Polygon]) -> Polygon:
        """Convex hull of the pieces (monotone chain, collinear points dropped)."""
        points = sorted({v for polygon in polygons for v in polygon.vertices})
        if len(points) < 3:
            return Polygon(tuple(points))

        def half(chain_points):
            chain: List[Point] = []
            for p in chain_points:
                while len(chain) >= 2 and self._sign(
                    orient(chain[-2], chain[-1], p), chain[-2], p
                ) <= 0:
                    chain.pop()
                chain.append(p)
            return chain

        lower = half(points)
        upper = half(reversed(points))
        return Polygon(tuple(lower[:-1] + upper[:-1]))

    def square(self, centre: Point, half_width) -> Polygon:
        cx, cy = centre
        h = half_width
        return Polygon(
            (
                (cx - h, cy - h),
                (cx + h, cy - h),
                (cx + h, cy + h),
                (cx - h, cy + h),
            )
        )


class FloatKernel(PlanarKernel):
    """Floating point kernel.

    A point closer than ``tolerance`` to a line is treated as lying on it, so
    containment is inclusive and shared cell edges match even when their
    vertices were computed along different paths.
    """

    def __init__(self, tolerance: float = 1e-7):
        if tolerance < 0:
            raise ValueError("tolerance must not be negative")
        self.tolerance = tolerance

    def __repr__(self) -> str:
        return f"FloatKernel(tolerance={self.tolerance!r})"

    def coerce(self, point: Sequence[float]) -> Point:
        x, y = float(point[0]), float(point[1])
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Point coordinates must be finite, got {point!r}")
        return (x, y)

    def _slack(self, start: Point, end: Point) -> float:
        return self.tolerance * math.hypot(end[0] - start[0], end[1] - start[1])

    def _sides(self, start: Point, end: Point, points: Sequence[Point]) -> List[int]:
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        ex = end[0] - start[0]
        ey = end[1] - start[1]
        cross = ex * (pts[:, 1] - start[1]) - ey * (pts[:, 0] - start[0])
        slack = self._slack(start, end)
        return np.where(cross > slack, 1, np.where(cross < -slack, -1, 0)).tolist()

    def contains(self, polygon: Polygon, point: Point) -> bool:
        if len(polygon) < 3:
            return False
        verts = polygon.as_array()
        edge = np.roll(verts, -1, axis=0) - verts
        rel = np.asarray(point, dtype=float) - verts
        cross = edge[:, 0] * rel[:, 1] - edge[:, 1] * rel[:, 0]
        slack = self.tolerance * np.hypot(edge[:, 0], edge[:, 1])
        return bool(np.all(cross >= -slack))
