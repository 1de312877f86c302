"""Plot Voronoi diagrams with matplotlib."""

from pathlib import Path
from typing import Optional, Union

import matplotlib.pyplot as plt
import structlog
from matplotlib.patches import Polygon as PolygonPatch

logger = structlog.get_logger()


def plot_diagram(diagram, ax=None, show_sites: bool = True, title: Optional[str] = None):
    """
    Draw every cell as a filled patch, coloured by its HSLA payload.

    Args:
        diagram: Diagram to draw
        ax: Axes to draw into; a new figure is created when omitted
        show_sites: Whether to scatter the sites on top of the cells
        title: Optional axes title

    Returns:
        The matplotlib Figure holding the axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))
    else:
        fig = ax.figure

    for cell in diagram:
        vertices = [(float(x), float(y)) for x, y in cell.area.vertices]
        if cell.colour is not None:
            face_color = cell.colour.to_hex()
            alpha = cell.colour.alpha
        else:
            face_color = "none"
            alpha = 1.0
        ax.add_patch(
            PolygonPatch(
                vertices,
                closed=True,
                facecolor=face_color,
                edgecolor="black",
                linewidth=0.8,
                alpha=alpha,
            )
        )

    if show_sites and len(diagram):
        xs = [float(cell.site[0]) for cell in diagram]
        ys = [float(cell.site[1]) for cell in diagram]
        ax.scatter(xs, ys, c="black", s=6, zorder=5)

    (xmin, ymin), (xmax, ymax) = diagram.bounds.bounds
    ax.set_xlim(float(xmin), float(xmax))
    ax.set_ylim(float(ymin), float(ymax))
    ax.set_aspect("equal")
    if title:
        ax.set_title(title)
    return fig


def save_plot(diagram, path: Union[str, Path], dpi: int = 150, **kwargs) -> Path:
    path = Path(path)
    fig = plot_diagram(diagram, **kwargs)
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logger.info("Wrote plot", path=str(path), cells=len(diagram))
    return path
