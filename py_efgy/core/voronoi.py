"""Incremental planar Voronoi diagrams.

A diagram partitions a fixed bounding square into convex cells, one per
site, each cell holding exactly the points closer to its site than to any
other site. Sites are added one at a time:

1. locate the cell containing the new site (point location, not a nearest
   site search: the partition guarantees a single containing cell)
2. clip that cell by the bisector of the two sites
3. walk the boundary points of the clipped region, re-clipping every cell
   that contains one of them (the neighbour cascade)
4. re-check cells the cascade could not reach (the perimeter sweep)
5. merge the claimed pieces into the new cell

Diagrams are immutable values: inserting returns a new diagram.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple, Union

import structlog

from ..config import Settings, get_settings
from .colour import HSLA
from .exact import make_kernel
from .geometry import GeometryKernel, Point, Polygon

logger = structlog.get_logger()


class VoronoiError(ValueError):
    """Base error for invalid diagram operations."""


class DuplicateSiteError(VoronoiError):
    """Raised when a site is inserted twice under the ``raise`` policy."""


class InsertionStatus(Enum):
    BOOTSTRAPPED = "bootstrapped"
    INSERTED = "inserted"
    OUTSIDE = "outside"
    DUPLICATE = "duplicate"
    DEGENERATE = "degenerate"


@dataclass(frozen=True, eq=False)
class Cell:
    """A site, its convex region and an optional display colour.

    Cells compare and hash by site only.
    """

    site: Point
    area: Polygon
    colour: Optional[HSLA] = None

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.site == other.site

    def __hash__(self):
        return hash(self.site)


@dataclass(frozen=True)
class InsertionReport:
    """What a single insertion did to the diagram."""

    status: InsertionStatus
    site: Point
    located: Optional[Point] = None
    reclipped: Tuple[Point, ...] = ()
    swept: Tuple[Point, ...] = ()

    @property
    def changed(self) -> bool:
        return self.status in (InsertionStatus.BOOTSTRAPPED, InsertionStatus.INSERTED)


@dataclass
class _Insertion:
    """Working state of one insertion; never visible outside ``_insert``."""

    site: Point
    cells: Dict[Point, Cell]
    used: Set[Point] = field(default_factory=set)
    pieces: List[Polygon] = field(default_factory=list)
    reclipped: List[Point] = field(default_factory=list)
    swept: List[Point] = field(default_factory=list)


SiteLike = Union[Sequence[float], Cell]


class Diagram:
    """Voronoi diagram inside a square of half-width ``bounding_box_size``."""

    def __init__(
        self,
        bounding_box_size: Optional[float] = None,
        kernel: Optional[GeometryKernel] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings if settings is not None else get_settings()
        size = (
            bounding_box_size
            if bounding_box_size is not None
            else self.settings.bounding_box_size
        )
        if not size > 0:
            raise VoronoiError(f"bounding_box_size must be positive, got {size}")
        self.bounding_box_size = size
        self.kernel = (
            kernel
            if kernel is not None
            else make_kernel(self.settings.kernel, self.settings.tolerance)
        )
        self._cells: Dict[Point, Cell] = {}
        self._bounds: Optional[Polygon] = None

    def _evolve(self, cells: Dict[Point, Cell], bounds: Optional[Polygon]) -> "Diagram":
        other = Diagram.__new__(Diagram)
        other.settings = self.settings
        other.bounding_box_size = self.bounding_box_size
        other.kernel = self.kernel
        other._cells = cells
        other._bounds = bounds
        return other

    # ---------------- Read access ----------------
    @property
    def cells(self) -> Tuple[Cell, ...]:
        return tuple(self._cells.values())

    @property
    def sites(self) -> Tuple[Point, ...]:
        return tuple(self._cells)

    @property
    def bounds(self) -> Polygon:
        """The bounding square, once known."""
        if self._bounds is not None:
            return self._bounds
        return self.kernel.square((0, 0), self.bounding_box_size)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    def __contains__(self, site) -> bool:
        if isinstance(site, Cell):
            site = site.site
        return self.kernel.coerce(site) in self._cells

    def __getitem__(self, site) -> Cell:
        return self._cells[self.kernel.coerce(site)]

    def __repr__(self) -> str:
        return (
            f"Diagram(cells={len(self._cells)}, "
            f"bounding_box_size={self.bounding_box_size!r}, kernel={self.kernel!r})"
        )

    def cell_at(self, point: Sequence[float]) -> Optional[Cell]:
        """First cell whose polygon contains ``point``, if any."""
        p = self.kernel.coerce(point)
        for cell in self._cells.values():
            if self.kernel.contains(cell.area, p):
                return cell
        return None

    # ---------------- Insertion ----------------
    def insert(self, site: SiteLike, colour: Optional[HSLA] = None) -> "Diagram":
        diagram, _ = self.insert_with_report(site, colour)
        return diagram

    def __add__(self, site: SiteLike) -> "Diagram":
        return self.insert(site)

    def insert_with_report(
        self, site: SiteLike, colour: Optional[HSLA] = None
    ) -> Tuple["Diagram", InsertionReport]:
        if isinstance(site, Cell):
            colour = colour if colour is not None else site.colour
            site = site.site
        try:
            v = self.kernel.coerce(site)
        except (TypeError, ValueError) as e:
            raise VoronoiError(f"Invalid site {site!r}: {e}") from e

        if not self._cells:
            return self._bootstrap(v, colour)

        if v in self._cells:
            if self.settings.duplicate_policy == "raise":
                raise DuplicateSiteError(f"Site {v} is already in the diagram")
            logger.debug("Ignoring duplicate site", site=v)
            return self, InsertionReport(InsertionStatus.DUPLICATE, v)

        return self._insert(v, colour)

    def _bootstrap(
        self, v: Point, colour: Optional[HSLA]
    ) -> Tuple["Diagram", InsertionReport]:
        if self.settings.centre_on_first_site:
            bounds = self.kernel.square(v, self.bounding_box_size)
        else:
            bounds = self.bounds
            if not self.kernel.contains(bounds, v):
                logger.debug("Site outside bounding square", site=v)
                return self, InsertionReport(InsertionStatus.OUTSIDE, v)

        logger.debug("Bootstrapped diagram", site=v, size=self.bounding_box_size)
        cells = {v: Cell(v, bounds, colour)}
        return self._evolve(cells, bounds), InsertionReport(InsertionStatus.BOOTSTRAPPED, v)

    def _split(self, cell: Cell, v: Point) -> Optional[Tuple[Polygon, Polygon, Tuple[Point, ...]]]:
        """Clip ``cell`` by the bisector of its site and ``v``.

        Returns (retained, claimed, remainder), or None when the bisector does
        not separate the polygon or the cell's site lies on it.
        """
        extent = self.bounding_box_size * self.settings.bisector_extent_factor
        line = self.kernel.bisector(cell.site, v, extent)
        result = self.kernel.clip(cell.area, line)
        if result.left is None or result.right is None:
            return None

        side = self.kernel.side(line, cell.site)
        if side > 0:
            return result.left, result.right, result.remainder
        if side < 0:
            return result.right, result.left, result.remainder
        return None

    def _claim(self, state: _Insertion, key: Point) -> Optional[Tuple[Point, ...]]:
        """Mark a cell used and give its part beyond the bisector to the new site."""
        state.used.add(key)
        cell = state.cells[key]
        split = self._split(cell, state.site)
        if split is None:
            return None
        retained, claimed, remainder = split
        state.cells[key] = replace(cell, area=retained)
        state.pieces.append(claimed)
        return remainder

    def _locate_and_split(self, state: _Insertion) -> Optional[Tuple[Point, Tuple[Point, ...]]]:
        """Split the first containing cell that the bisector actually separates."""
        for key in list(state.cells):
            if not self.kernel.contains(state.cells[key].area, state.site):
                continue
            remainder = self._claim(state, key)
            if remainder is not None:
                return key, remainder
            logger.debug("Located cell not separated by bisector", site=state.site, cell=key)
        return None

    def _cascade(self, state: _Insertion, remainder: Iterable[Point]) -> None:
        worklist = deque(remainder)
        seen = set(worklist)
        while worklist:
            q = worklist.popleft()
            for key in list(state.cells):
                if key in state.used:
                    continue
                if not self.kernel.contains(state.cells[key].area, q):
                    continue
                further = self._claim(state, key)
                if further is None:
                    continue
                state.reclipped.append(key)
                for p in further:
                    if p not in seen:
                        seen.add(p)
                        worklist.append(p)

    def _sweep(self, state: _Insertion) -> None:
        for key in list(state.cells):
            if key in state.used:
                continue
            if self._claim(state, key) is not None:
                state.swept.append(key)

    def _insert(self, v: Point, colour: Optional[HSLA]) -> Tuple["Diagram", InsertionReport]:
        state = _Insertion(site=v, cells=dict(self._cells))

        located = self._locate_and_split(state)
        if located is None:
            if state.used:
                logger.warning("Degenerate split, site not inserted", site=v)
                return self, InsertionReport(InsertionStatus.DEGENERATE, v)
            logger.debug("Site outside bounding square", site=v)
            return self, InsertionReport(InsertionStatus.OUTSIDE, v)

        located_site, remainder = located
        self._cascade(state, remainder)
        if self.settings.perimeter_sweep:
            self._sweep(state)

        state.cells[v] = Cell(v, self.kernel.merge(state.pieces), colour)
        logger.debug(
            "Inserted site",
            site=v,
            located=located_site,
            reclipped=len(state.reclipped),
            swept=len(state.swept),
            cells=len(state.cells),
        )
        report = InsertionReport(
            InsertionStatus.INSERTED,
            v,
            located=located_site,
            reclipped=tuple(state.reclipped),
            swept=tuple(state.swept),
        )
        return self._evolve(state.cells, self._bounds), report


def create_empty(
    bounding_box_size: Optional[float] = None,
    kernel: Optional[GeometryKernel] = None,
    settings: Optional[Settings] = None,
) -> Diagram:
    """Empty diagram whose first cell will span the bounding square."""
    return Diagram(bounding_box_size, kernel=kernel, settings=settings)


def insert(diagram: Diagram, site: SiteLike, colour: Optional[HSLA] = None) -> Diagram:
    """Insert ``site`` and return the updated diagram (no-op when it cannot land)."""
    return diagram.insert(site, colour)


def insert_with_report(
    diagram: Diagram, site: SiteLike, colour: Optional[HSLA] = None
) -> Tuple[Diagram, InsertionReport]:
    return diagram.insert_with_report(site, colour)


def cells_of(diagram: Diagram) -> Tuple[Cell, ...]:
    return diagram.cells


def build_diagram(
    sites: Iterable[Sequence[float]],
    colours: Optional[Iterable[Optional[HSLA]]] = None,
    bounding_box_size: Optional[float] = None,
    kernel: Optional[GeometryKernel] = None,
    settings: Optional[Settings] = None,
) -> Diagram:
    """Fold ``sites`` into a fresh diagram, one insertion at a time."""
    diagram = create_empty(bounding_box_size, kernel=kernel, settings=settings)
    sites = list(sites)
    colours = list(colours) if colours is not None else [None] * len(sites)
    if len(colours) != len(sites):
        raise VoronoiError(f"Got {len(colours)} colours for {len(sites)} sites")

    logger.info("Building Voronoi diagram", sites=len(sites))
    skipped: Dict[str, int] = {}
    swept = 0
    for site, colour in zip(sites, colours):
        diagram, report = diagram.insert_with_report(site, colour)
        if not report.changed:
            skipped[report.status.value] = skipped.get(report.status.value, 0) + 1
        swept += len(report.swept)

    logger.info("Voronoi diagram complete", cells=len(diagram), skipped=skipped, swept=swept)
    return diagram
