"""Tests for the partition, bijection and correctness checks."""

import pytest
from structlog.testing import capture_logs

from py_efgy.core import build_diagram, create_empty, jittered_grid, random_sites
from py_efgy.core.validation import check_correctness, check_partition, validate


class TestRandomDiagrams:
    """Diagrams grown from generated sites satisfy every invariant."""

    def test_random_sites(self, settings):
        sites = random_sites(60, 1000, seed=7)
        diagram = build_diagram(sites, settings=settings)
        report = validate(diagram, expected_sites=60, samples=400, seed=1)

        assert report.partition.ok
        assert report.correctness.ok
        assert report.bijection_ok
        assert report.ok

    def test_jittered_grid(self, settings):
        sites = jittered_grid(1000, 250, seed=3)
        diagram = build_diagram(sites, settings=settings)
        report = validate(diagram, expected_sites=len(sites), samples=400, seed=2)

        assert len(diagram) == 64
        assert report.ok

    def test_cell_areas_sum_to_square(self, settings):
        diagram = build_diagram(random_sites(30, 1000, seed=5), settings=settings)
        assert sum(cell.area.area for cell in diagram) == pytest.approx(4_000_000, rel=1e-9)

    def test_every_site_lies_in_its_own_cell(self, settings):
        diagram = build_diagram(random_sites(40, 1000, seed=9), settings=settings)
        for cell in diagram:
            assert diagram.kernel.contains(cell.area, cell.site)


class TestChecks:
    def test_empty_diagram_is_not_a_partition(self, empty):
        report = check_partition(empty)

        assert report.covered_area == 0.0
        assert not report.ok

    def test_empty_diagram_has_nothing_to_check(self, empty):
        assert check_correctness(empty).checked == 0

    def test_bijection_mismatch(self, settings):
        diagram = build_diagram([(0, 0), (100, 0), (0, 100)], settings=settings)
        report = validate(diagram, expected_sites=4, samples=50, seed=0)

        assert report.partition.ok
        assert not report.bijection_ok
        assert not report.ok

    def test_explicit_sample_points(self, empty):
        diagram = empty + (-10, 0) + (10, 0)
        report = check_correctness(diagram, points=[(-1, 0), (1, 0), (0, 999)])

        assert report.checked == 3
        assert report.ok

    def test_summary_is_logged(self, settings):
        diagram = build_diagram([(0, 0), (100, 0)], settings=settings)
        with capture_logs() as logs:
            validate(diagram, expected_sites=2, samples=20, seed=0)

        events = [log for log in logs if log["event"] == "Validated Voronoi diagram"]
        assert len(events) == 1
        assert events[0]["ok"] is True
        assert events[0]["cells"] == 2

    def test_failure_is_logged_as_warning(self, settings):
        diagram = build_diagram([(0, 0)], settings=settings)
        with capture_logs() as logs:
            validate(diagram, expected_sites=2, samples=20, seed=0)

        assert logs[-1]["log_level"] == "warning"


class TestBuildDiagram:
    def test_skipped_sites_are_counted(self, settings):
        with capture_logs() as logs:
            diagram = build_diagram([(0, 0), (0, 0), (5000, 0), (10, 10)], settings=settings)

        assert len(diagram) == 2
        complete = [log for log in logs if log["event"] == "Voronoi diagram complete"][0]
        assert complete["skipped"] == {"duplicate": 1, "outside": 1}

    def test_colour_count_must_match(self, settings):
        from py_efgy.core import VoronoiError

        with pytest.raises(VoronoiError):
            build_diagram([(0, 0), (1, 1)], colours=[None], settings=settings)

    def test_exact_kernel_build(self, settings):
        from py_efgy.core import RationalKernel

        diagram = build_diagram(
            [(0, 0), (300, -200), (-450, 120), (20, 640)],
            kernel=RationalKernel(),
            settings=settings,
        )
        assert check_partition(diagram).ok
        assert check_correctness(diagram, samples=200, seed=4).ok
