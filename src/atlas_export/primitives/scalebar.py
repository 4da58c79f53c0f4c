"""
Module: primitives.scalebar

Purpose:
    Scale bar rendering. Picks the longest round ground distance that
    fits the box at the export scale and draws it as four alternating
    segments with end ticks, labelled "0" and the distance.

Key Functions:
    - scale_bar_distance(): Round distance for a box width and scale
    - format_distance(): Human label in feet/miles or metres/km
    - render_scalebar(): Draw the bar into a rect

Dependencies:
    - PIL: ImageDraw
    - core.utils.units: nice_scale_number, unit constants

Used By:
    - atlas_export.layout.compositor: scalebar elements
"""

from __future__ import annotations

from PIL import Image

from atlas_export.core.models import PixelRect, ScaleBarContent
from atlas_export.core.utils.colors import parse_color
from atlas_export.core.utils.units import (
    EXPORT_DPI,
    FEET_PER_MILE,
    METERS_PER_KM,
    feet_to_meters,
    nice_scale_number,
)

from .canvas import box_layer
from .fonts import load_font

SCALEBAR_PADDING = 4
SEGMENTS = 4
MAX_BAR_HEIGHT = 10
LABEL_GAP = 16
TICK_OVERHANG = 3
MAX_LABEL_FONT_PX = 12

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def scale_bar_distance(box_width: float, scale: float, dpi: int = EXPORT_DPI) -> int:
    """
    Round ground distance for a scale bar.

    Args:
        box_width: Scale bar box width in pixels
        scale: Ground feet per page inch
        dpi: Export resolution

    Returns:
        Distance in feet

    Example:
        >>> scale_bar_distance(300, 500, 150)
        500
    """
    max_width_inches = (box_width - SCALEBAR_PADDING * 2) / dpi
    return nice_scale_number(scale * max_width_inches)


def format_distance(feet: float, units: str = "feet") -> str:
    """
    Label a distance in the requested unit system.

    Example:
        >>> format_distance(10000)
        '1.9 miles'
        >>> format_distance(500, "meters")
        '152 m'
    """
    if units in ("feet", "ft"):
        if feet >= FEET_PER_MILE:
            return f"{feet / FEET_PER_MILE:.1f} miles"
        return f"{feet:,.0f} feet"
    if units in ("meters", "m"):
        meters = feet_to_meters(feet)
        if meters >= METERS_PER_KM:
            return f"{meters / METERS_PER_KM:.1f} km"
        return f"{round(meters)} m"
    return f"{feet:,.0f} ft"


def render_scalebar(
    surface: Image.Image,
    rect: PixelRect,
    content: ScaleBarContent,
    scale: float,
    *,
    dpi: int = EXPORT_DPI,
) -> None:
    """
    Draw a scale bar into ``rect``.

    Args:
        surface: RGBA page surface
        rect: Target rectangle
        content: Unit settings
        scale: Ground feet per page inch
        dpi: Export resolution
    """
    if rect.is_empty:
        return

    distance = scale_bar_distance(rect.width, scale, dpi)
    bar_height = min(rect.height * 0.25, MAX_BAR_HEIGHT)
    bar_y = rect.height - SCALEBAR_PADDING - bar_height - LABEL_GAP
    bar_x = SCALEBAR_PADDING
    # Fallback distance can exceed the box on very narrow bars
    bar_width = min(distance / scale * dpi, rect.width - SCALEBAR_PADDING * 2)
    if bar_width <= 0:
        return
    seg_width = bar_width / SEGMENTS

    with box_layer(surface, rect) as (layer, draw):
        for i in range(SEGMENTS):
            left = bar_x + i * seg_width
            draw.rectangle(
                (left, bar_y, left + seg_width, bar_y + bar_height),
                fill=BLACK if i % 2 == 0 else WHITE,
            )
        draw.rectangle(
            (bar_x, bar_y, bar_x + bar_width, bar_y + bar_height),
            outline=BLACK,
            width=1,
        )
        for tick_x in (bar_x, bar_x + bar_width):
            draw.line(
                (tick_x, bar_y - TICK_OVERHANG, tick_x, bar_y + bar_height + TICK_OVERHANG),
                fill=BLACK,
                width=1,
            )

        font = load_font(max(1, min(rect.height * 0.3, MAX_LABEL_FONT_PX)))
        label_y = bar_y + bar_height + 4
        draw.text(
            (bar_x + bar_width / 2, label_y),
            format_distance(distance, content.units),
            fill=parse_color("#000000"),
            font=font,
            anchor="ma",
        )
        draw.text((bar_x, label_y), "0", fill=parse_color("#000000"), font=font, anchor="la")
