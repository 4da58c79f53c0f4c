"""
Module: primitives

Purpose:
    Cartographic drawing primitives. Each renderer takes a page
    surface, a target rectangle and a content descriptor, and draws
    strictly inside the rectangle.

Key Functions:
    - render_text() / render_title(): Text blocks
    - render_legend(): Legend box
    - render_scalebar(): Scale bar
    - render_north_arrow(): North arrow glyph
    - render_image(): Letterboxed image

Dependencies:
    - PIL: Drawing and fonts

Used By:
    - atlas_export.layout.compositor
"""

from .canvas import box_layer
from .fonts import load_font
from .image import fit_within, render_image
from .legend import legend_capacity, render_legend
from .north_arrow import arrow_polygons, render_north_arrow
from .scalebar import format_distance, render_scalebar, scale_bar_distance
from .text import render_text, render_title, wrap_text

__all__ = [
    "box_layer",
    "load_font",
    "fit_within",
    "render_image",
    "legend_capacity",
    "render_legend",
    "arrow_polygons",
    "render_north_arrow",
    "format_distance",
    "render_scalebar",
    "scale_bar_distance",
    "render_text",
    "render_title",
    "wrap_text",
]
