"""
py-efgy: incremental planar Voronoi diagrams.
"""

__version__ = "0.1.0"
