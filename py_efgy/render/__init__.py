"""
Diagram renderers.
"""

from .svg import path_data, render_svg, write_svg

__all__ = ['path_data', 'render_svg', 'write_svg']
