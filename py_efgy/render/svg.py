"""Render Voronoi diagrams to SVG.

Each cell becomes one ``<path>``. SVG's y axis points down, so y is negated.
Every segment after the first vertex is written in whichever of its
absolute or relative forms is shorter, using H/V for axis-parallel edges.
"""

from pathlib import Path
from typing import List, Sequence, Tuple, Union
from xml.sax.saxutils import quoteattr

import structlog

logger = structlog.get_logger()


def _fmt(value: float, precision: int) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def path_data(vertices: Sequence[Tuple[float, float]], precision: int = 3) -> str:
    """Closed SVG path data for a polygon given in diagram coordinates."""
    points = [(float(x), -float(y)) for x, y in vertices]
    if not points:
        return ""

    parts: List[str] = [f"M{_fmt(points[0][0], precision)},{_fmt(points[0][1], precision)}"]
    for (px, py), (x, y) in zip(points, points[1:]):
        dx = x - px
        dy = y - py
        if _fmt(dy, precision) == "0":
            absolute = f"H{_fmt(x, precision)}"
            relative = f"h{_fmt(dx, precision)}"
        elif _fmt(dx, precision) == "0":
            absolute = f"V{_fmt(y, precision)}"
            relative = f"v{_fmt(dy, precision)}"
        else:
            absolute = f"L{_fmt(x, precision)},{_fmt(y, precision)}"
            relative = f"l{_fmt(dx, precision)},{_fmt(dy, precision)}"
        parts.append(relative if len(relative) <= len(absolute) else absolute)
    parts.append("Z")
    return "".join(parts)


def render_svg(
    diagram,
    stroke: str = "#000000",
    stroke_width: float = 1.0,
    show_sites: bool = True,
    site_radius: float = 3.0,
    precision: int = 3,
) -> str:
    """SVG document for ``diagram``; cells without a colour are left unfilled."""
    (xmin, ymin), (xmax, ymax) = diagram.bounds.bounds
    xmin, ymin, xmax, ymax = float(xmin), float(ymin), float(xmax), float(ymax)
    width = xmax - xmin
    height = ymax - ymin

    lines = [
        "<?xml version='1.0' encoding='utf-8'?>",
        "<svg xmlns='http://www.w3.org/2000/svg' version='1.1' "
        f"viewBox='{_fmt(xmin, precision)} {_fmt(-ymax, precision)} "
        f"{_fmt(width, precision)} {_fmt(height, precision)}'>",
        f"<g stroke={quoteattr(stroke)} stroke-width='{_fmt(stroke_width, precision)}'>",
    ]
    for cell in diagram:
        fill = cell.colour.to_hex() if cell.colour is not None else "none"
        opacity = f" fill-opacity='{_fmt(cell.colour.alpha, 3)}'" if cell.colour is not None else ""
        lines.append(
            f"<path fill={quoteattr(fill)}{opacity} d='{path_data(cell.area.vertices, precision)}'/>"
        )
    lines.append("</g>")

    if show_sites:
        lines.append("<g fill='#000000'>")
        for cell in diagram:
            x, y = float(cell.site[0]), -float(cell.site[1])
            lines.append(
                f"<circle cx='{_fmt(x, precision)}' cy='{_fmt(y, precision)}' "
                f"r='{_fmt(site_radius, precision)}'/>"
            )
        lines.append("</g>")

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def write_svg(diagram, path: Union[str, Path], **kwargs) -> Path:
    path = Path(path)
    path.write_text(render_svg(diagram, **kwargs), encoding="utf-8")
    logger.info("Wrote SVG", path=str(path), cells=len(diagram))
    return path
