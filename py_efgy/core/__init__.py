"""
Core Voronoi diagram functionality.
"""

from .geometry import Bisector, ClipResult, FloatKernel, GeometryKernel, Polygon
from .exact import RationalKernel, make_kernel
from .colour import HSLA, random_colour
from .voronoi import (
    Cell, Diagram, DuplicateSiteError, InsertionReport, InsertionStatus, VoronoiError,
    build_diagram, cells_of, create_empty, insert, insert_with_report,
)
from .sites import jittered_grid, random_sites

__all__ = ['Bisector', 'ClipResult', 'FloatKernel', 'GeometryKernel', 'Polygon',
           'RationalKernel', 'make_kernel', 'HSLA', 'random_colour',
           'Cell', 'Diagram', 'DuplicateSiteError', 'InsertionReport', 'InsertionStatus',
           'VoronoiError', 'build_diagram', 'cells_of', 'create_empty', 'insert',
           'insert_with_report', 'jittered_grid', 'random_sites']
