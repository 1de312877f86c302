"""Invariant checks for Voronoi diagrams.

Three properties must hold after any sequence of insertions:

- partition: the cells tile the bounding square without overlapping
- bijection: one cell per successfully inserted site
- correctness: every point belongs to a cell of one of its nearest sites

Geometry is handed to shapely for unions and overlaps, and nearest sites
come from a scipy KD-tree, so the checks share no code with the builder.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import cKDTree
from shapely.strtree import STRtree
from shapely.ops import unary_union

from .export import polygon_to_shapely
from .voronoi import Diagram

logger = structlog.get_logger()


@dataclass
class PartitionReport:
    """Area bookkeeping for the partition invariant."""
    bounding_area: float
    covered_area: float
    cell_area_sum: float
    max_overlap: float
    tolerance: float

    @property
    def ok(self) -> bool:
        return (
            abs(self.covered_area - self.bounding_area) <= self.tolerance
            and abs(self.cell_area_sum - self.bounding_area) <= self.tolerance
            and self.max_overlap <= self.tolerance
        )


@dataclass
class CorrectnessReport:
    """Sample points whose containing cell is not a nearest site."""
    checked: int
    mismatches: List[Tuple[Tuple[float, float], Tuple[float, float]]] = field(
        default_factory=list
    )
    uncovered: int = 0

    @property
    def ok(self) -> bool:
        return not self.mismatches and self.uncovered == 0


@dataclass
class ValidationReport:
    partition: PartitionReport
    correctness: CorrectnessReport
    cells: int
    expected_cells: Optional[int] = None

    @property
    def bijection_ok(self) -> bool:
        return self.expected_cells is None or self.cells == self.expected_cells

    @property
    def ok(self) -> bool:
        return self.partition.ok and self.correctness.ok and self.bijection_ok

    def summary(self) -> dict:
        return {
            "ok": self.ok,
            "cells": self.cells,
            "expected_cells": self.expected_cells,
            "partition_ok": self.partition.ok,
            "covered_area": self.partition.covered_area,
            "bounding_area": self.partition.bounding_area,
            "max_overlap": self.partition.max_overlap,
            "samples": self.correctness.checked,
            "mismatches": len(self.correctness.mismatches),
            "uncovered": self.correctness.uncovered,
        }


def check_partition(diagram: Diagram, rel_tolerance: float = 1e-6) -> PartitionReport:
    """Compare the union and pairwise overlaps of all cells with the bounding square."""
    bounding = polygon_to_shapely(diagram.bounds)
    tolerance = rel_tolerance * bounding.area
    polygons = [polygon_to_shapely(cell.area) for cell in diagram]
    if not polygons:
        return PartitionReport(bounding.area, 0.0, 0.0, 0.0, tolerance)

    covered = unary_union(polygons).intersection(bounding).area
    area_sum = sum(p.area for p in polygons)

    tree = STRtree(polygons)
    max_overlap = 0.0
    for i, polygon in enumerate(polygons):
        for j in tree.query(polygon):
            j = int(j)
            if j <= i:
                continue
            overlap = polygon.intersection(polygons[j]).area
            max_overlap = max(max_overlap, overlap)

    return PartitionReport(bounding.area, covered, area_sum, max_overlap, tolerance)


def check_correctness(
    diagram: Diagram,
    samples: int = 500,
    seed: Optional[int] = None,
    points: Optional[Iterable[Sequence[float]]] = None,
    rel_tolerance: float = 1e-6,
) -> CorrectnessReport:
    """Check that sample points lie in a cell of one of their nearest sites.

    A point on a boundary may sit in either neighbouring cell, so the test
    compares distances rather than site identities.
    """
    if len(diagram) == 0:
        return CorrectnessReport(checked=0)

    (xmin, ymin), (xmax, ymax) = diagram.bounds.bounds
    if points is None:
        rng = np.random.default_rng(seed)
        xs = rng.uniform(float(xmin), float(xmax), samples)
        ys = rng.uniform(float(ymin), float(ymax), samples)
        points = np.column_stack([xs, ys])
    else:
        points = np.asarray(list(points), dtype=float).reshape(-1, 2)

    sites = np.array(diagram.sites, dtype=float)
    tree = cKDTree(sites)
    nearest, _ = tree.query(points)
    tolerance = rel_tolerance * float(xmax - xmin)

    report = CorrectnessReport(checked=len(points))
    for point, best in zip(points, nearest):
        cell = diagram.cell_at(point)
        if cell is None:
            report.uncovered += 1
            continue
        site = np.asarray(cell.site, dtype=float)
        if np.hypot(*(point - site)) > best + tolerance:
            report.mismatches.append((tuple(point), tuple(site)))

    return report


def validate(
    diagram: Diagram,
    expected_sites: Optional[int] = None,
    samples: int = 500,
    seed: Optional[int] = None,
) -> ValidationReport:
    report = ValidationReport(
        partition=check_partition(diagram),
        correctness=check_correctness(diagram, samples=samples, seed=seed),
        cells=len(diagram),
        expected_cells=expected_sites,
    )
    log = logger.info if report.ok else logger.warning
    log("Validated Voronoi diagram", **report.summary())
    return report
