"""Tests for the exact rational kernel."""

from fractions import Fraction

import pytest

from py_efgy.core import RationalKernel, create_empty, insert_with_report, make_kernel
from py_efgy.core.geometry import FloatKernel, Polygon

SITES = [
    (0, 0), (100, 0), (0, 100), (-250, -300), (400, 350),
    (-600, 500), (700, -650), (123, -45), (-80, 620), (910, 15),
]


@pytest.fixture
def kernel():
    return RationalKernel()


class TestRationalKernel:
    """Test exact predicates and constructions."""

    def test_coerce_to_fractions(self, kernel):
        x, y = kernel.coerce((1, 0.5))
        assert isinstance(x, Fraction) and isinstance(y, Fraction)
        assert (x, y) == (Fraction(1), Fraction(1, 2))

    def test_coerce_rejects_nan(self, kernel):
        with pytest.raises(ValueError):
            kernel.coerce((float("nan"), 0))

    def test_bisector_at_one_third(self, kernel):
        square = kernel.square((0, 0), 1)
        a, b = kernel.coerce((Fraction(-1, 3), 0)), kernel.coerce((1, 0))
        line = kernel.bisector(a, b, 4)
        result = kernel.clip(square, line)

        assert set(result.remainder) == {(Fraction(1, 3), -1), (Fraction(1, 3), 1)}
        assert result.left.area + result.right.area == 4

    def test_no_tolerance(self, kernel):
        square = kernel.square((0, 0), 1)
        just_outside = (Fraction(1) + Fraction(1, 10**12), Fraction(0))
        assert not kernel.contains(square, just_outside)
        assert FloatKernel(tolerance=1e-7).contains(
            Polygon(tuple((float(x), float(y)) for x, y in square.vertices)),
            (float(just_outside[0]), 0.0),
        )

    def test_make_kernel(self):
        assert isinstance(make_kernel("exact"), RationalKernel)
        assert isinstance(make_kernel("float", 1e-6), FloatKernel)
        with pytest.raises(ValueError):
            make_kernel("interval")


class TestExactDiagram:
    """Diagrams built with exact arithmetic tile the square exactly."""

    @pytest.fixture
    def diagram(self, kernel, settings):
        d = create_empty(1000, kernel=kernel, settings=settings)
        for site in SITES:
            d, report = insert_with_report(d, site)
            assert report.changed
        return d

    def test_area_is_conserved_exactly(self, diagram):
        total = sum(cell.area.area for cell in diagram)
        assert isinstance(total, Fraction)
        assert total == 4_000_000

    def test_bijection(self, diagram):
        assert len(diagram) == len(SITES)

    def test_three_site_cell_is_exact(self, kernel, settings):
        d = create_empty(1000, kernel=kernel, settings=settings)
        for site in [(0, 0), (100, 0)]:
            d, _ = insert_with_report(d, site)
        d, report = insert_with_report(d, (0, 100))

        assert report.located == (0, 0)
        assert report.reclipped == ((100, 0),)
        assert set(d[(0, 100)].area.vertices) == {(-1000, 50), (50, 50), (1000, 1000), (-1000, 1000)}
        assert d[(0, 100)].area.area == 1_448_750

    def test_every_vertex_is_equidistant(self, diagram):
        """Vertices inside the square sit on bisectors, so their nearest sites tie."""
        sites = list(diagram.sites)
        for cell in diagram:
            for vertex in cell.area.vertices:
                if abs(vertex[0]) == 1000 or abs(vertex[1]) == 1000:
                    continue
                dists = sorted(
                    (vertex[0] - s[0]) ** 2 + (vertex[1] - s[1]) ** 2 for s in sites
                )
                assert dists[0] == dists[1]
