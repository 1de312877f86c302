"""
Command line entry point: build a Voronoi diagram from generated sites.
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np
import structlog

from .config import get_settings
from .core import build_diagram, jittered_grid, make_kernel, random_colour, random_sites

logger = structlog.get_logger()


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog through stdlib logging with a JSON or console renderer."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="py-efgy", description="Build an incremental planar Voronoi diagram"
    )
    parser.add_argument("--sites", type=int, default=50, help="Number of random sites")
    parser.add_argument(
        "--layout", choices=["random", "grid"], default="random", help="Site layout"
    )
    parser.add_argument(
        "--spacing", type=float, default=None, help="Grid spacing (grid layout)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--bounding-box-size",
        type=float,
        default=settings.bounding_box_size,
        help="Half-width of the bounding square",
    )
    parser.add_argument(
        "--kernel", choices=["float", "exact"], default=settings.kernel, help="Geometry kernel"
    )
    parser.add_argument("--colour", action="store_true", help="Give each cell a random colour")
    parser.add_argument("--svg", default=None, help="Write the diagram as SVG")
    parser.add_argument("--geojson", default=None, help="Write the diagram as GeoJSON")
    parser.add_argument("--png", default=None, help="Write a matplotlib rendering")
    parser.add_argument("--validate", action="store_true", help="Check the diagram invariants")
    parser.add_argument("--samples", type=int, default=500, help="Sample points for --validate")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level",
    )
    parser.add_argument(
        "--log-format", default=settings.log_format, choices=["json", "plain"], help="Log format"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    size = args.bounding_box_size
    if args.layout == "grid":
        spacing = args.spacing or (2 * size) / max(1.0, np.sqrt(max(args.sites, 1)))
        sites = jittered_grid(size, spacing, seed=args.seed)
    else:
        sites = random_sites(args.sites, size, seed=args.seed)

    rng = np.random.default_rng(args.seed)
    colours = [random_colour(rng) for _ in range(len(sites))] if args.colour else None

    settings = get_settings()
    kernel = make_kernel(args.kernel, settings.tolerance)
    diagram = build_diagram(sites, colours=colours, bounding_box_size=size, kernel=kernel)

    if args.svg:
        from .render.svg import write_svg

        write_svg(diagram, args.svg)
    if args.geojson:
        from .core.export import write_geojson

        write_geojson(diagram, args.geojson)
    if args.png:
        from .render.plot import save_plot

        save_plot(diagram, args.png)

    if args.validate and len(sites) == 0:
        logger.warning("No sites generated, skipping validation")
    elif args.validate:
        from .core.validation import validate

        expected = len({(float(x), float(y)) for x, y in sites})
        report = validate(diagram, expected_sites=expected, samples=args.samples, seed=args.seed)
        if not report.ok:
            logger.error("Diagram failed validation", **report.summary())
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
