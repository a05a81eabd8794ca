"""
Utility Modules
===============
Shared utilities for HTML and SVG generation.
"""

from .html_builder import build_svg_document, get_control_styles, get_legend_html, svg_circle

__all__ = [
    'build_svg_document',
    'get_control_styles',
    'get_legend_html',
    'svg_circle',
]
