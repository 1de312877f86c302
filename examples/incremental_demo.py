#!/usr/bin/env python3
"""
Demonstration of incremental Voronoi insertion.

This script walks through:
1. Bootstrapping a diagram with its first site
2. Growing it one site at a time and reading the insertion reports
3. Sites that do not land (outside the square, duplicates)
4. Checking the invariants and writing SVG output
"""

from py_efgy.core import (
    HSLA, InsertionStatus, RationalKernel, build_diagram, create_empty,
    insert_with_report, random_colour, random_sites,
)
from py_efgy.core.validation import validate
from py_efgy.render import write_svg


def main():
    print("=== Incremental Voronoi Demo ===\n")

    # 1. First site covers the whole bounding square
    print("1. Bootstrapping with a single site...")
    diagram = create_empty(1000)
    diagram, report = insert_with_report(diagram, (0, 0), colour=HSLA(0.0, 0.8, 0.5))
    print(f"   - Status: {report.status.value}")
    print(f"   - Cell area: {diagram[(0, 0)].area.area:.0f}")

    # 2. Each insertion reports which cells it clipped
    print("\n2. Inserting more sites...")
    for site in [(100, 0), (0, 100), (0, -10)]:
        diagram, report = insert_with_report(diagram, site, colour=random_colour())
        print(
            f"   - {site}: located in {report.located}, "
            f"reclipped {len(report.reclipped)}, swept {len(report.swept)}"
        )

    # 3. No-ops leave the diagram untouched
    print("\n3. Sites that do not land...")
    for site in [(1500, 0), (100, 0)]:
        result, report = insert_with_report(diagram, site)
        print(f"   - {site}: {report.status.value}, unchanged: {result is diagram}")
    assert report.status is InsertionStatus.DUPLICATE

    # 4. Bigger diagrams, float and exact kernels
    print("\n4. Building from random sites...")
    sites = random_sites(200, 1000, seed=42)
    diagram = build_diagram(sites, colours=[random_colour() for _ in sites])
    summary = validate(diagram, expected_sites=len(sites), seed=42).summary()
    print(f"   - Cells: {summary['cells']}, valid: {summary['ok']}")

    exact = build_diagram(sites[:20], kernel=RationalKernel())
    total = sum(cell.area.area for cell in exact)
    print(f"   - Exact kernel area sum: {total} (bounding square 4000000)")

    path = write_svg(diagram, "voronoi_demo.svg")
    print(f"\nWrote {path}")


if __name__ == "__main__":
    main()
