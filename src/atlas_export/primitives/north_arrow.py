"""
Module: primitives.north_arrow

Purpose:
    Fixed two-triangle north arrow glyph with an "N" label. Always
    points screen-up; map rotation is not taken into account.

Key Functions:
    - arrow_polygons(): Vertex lists for the dark and light halves
    - render_north_arrow(): Draw the glyph centred in a rect

Used By:
    - atlas_export.layout.compositor: northArrow elements
"""

from __future__ import annotations

from typing import List, Tuple

from PIL import Image

from atlas_export.core.models import PixelRect

from .canvas import box_layer
from .fonts import load_font

GLYPH_RATIO = 0.8
MIN_LABEL_PX = 10

DARK = (0, 0, 0, 255)
LIGHT = (255, 255, 255, 255)

Point = Tuple[float, float]


def arrow_polygons(cx: float, cy: float, size: float) -> Tuple[List[Point], List[Point]]:
    """
    Vertices of the two arrow halves centred on (cx, cy).

    Both halves share the apex and the inner notch; the dark half
    extends right, the light half left.

    Returns:
        (dark_half, light_half)
    """
    apex = (cx, cy - size / 2)
    notch = (cx, cy + size / 6)
    dark = [apex, (cx + size / 6, cy + size / 3), notch]
    light = [apex, (cx - size / 6, cy + size / 3), notch]
    return dark, light


def render_north_arrow(surface: Image.Image, rect: PixelRect) -> None:
    """Draw the north arrow centred in ``rect``."""
    if rect.is_empty:
        return

    cx = rect.width / 2
    cy = rect.height / 2
    size = min(rect.width, rect.height) * GLYPH_RATIO
    dark, light = arrow_polygons(cx, cy, size)

    with box_layer(surface, rect) as (layer, draw):
        draw.polygon(dark, fill=DARK)
        draw.polygon(light, fill=LIGHT, outline=DARK)
        draw.text(
            (cx, cy - size / 2 - 2),
            "N",
            fill=DARK,
            font=load_font(max(size / 4, MIN_LABEL_PX), bold=True),
            anchor="mb",
        )
