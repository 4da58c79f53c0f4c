"""
Module: primitives.legend

Purpose:
    Draw a legend box: border, background, optional bold title and one
    row per legend entry (swatch + label). Rows that would overflow the
    box are dropped.

Key Functions:
    - render_legend(): Draw legend entries into a rect
    - legend_capacity(): Number of rows that fit a box height

Dependencies:
    - PIL: ImageDraw
    - primitives.canvas: box_layer

Used By:
    - atlas_export.layout.compositor: legend elements
"""

from __future__ import annotations

from typing import Sequence

from PIL import Image, ImageDraw

from atlas_export.core.models import LegendContent, LegendEntry, PixelRect, SymbolKind
from atlas_export.core.utils.colors import parse_color

from .canvas import box_layer
from .fonts import load_font

LEGEND_PADDING = 8
ROW_HEIGHT = 20
TITLE_FONT_PX = 12
LABEL_FONT_PX = 11
BORDER_COLOR = "#999999"
LABEL_COLOR = "#333333"
SWATCH_OUTLINE = "#333333"
NO_SYMBOL_COLOR = "#888888"
SWATCH_WIDTH = 16
SWATCH_HEIGHT = 12
LINE_SWATCH_LENGTH = 20
LABEL_OFFSET = 24


def legend_capacity(height: int, show_title: bool) -> int:
    """
    Number of entry rows that fit a legend box of ``height`` pixels.

    A row is drawn only when it ends at or above the inner bottom edge.
    """
    top = LEGEND_PADDING + (ROW_HEIGHT if show_title else 0)
    limit = height - LEGEND_PADDING
    if top + ROW_HEIGHT > limit:
        return 0
    return (limit - top) // ROW_HEIGHT


def render_legend(
    surface: Image.Image,
    rect: PixelRect,
    content: LegendContent,
    entries: Sequence[LegendEntry],
) -> None:
    """
    Draw the legend into ``rect``.

    Args:
        surface: RGBA page surface
        rect: Target rectangle
        content: Title/background settings
        entries: Legend rows in map layer order
    """
    if rect.is_empty:
        return

    with box_layer(surface, rect) as (layer, draw):
        draw.rectangle(
            (0, 0, rect.width - 1, rect.height - 1),
            fill=parse_color(content.background_color, "#ffffff"),
            outline=parse_color(BORDER_COLOR),
            width=1,
        )

        y = LEGEND_PADDING
        if content.show_title:
            draw.text(
                (LEGEND_PADDING, y),
                content.title,
                fill=parse_color("#000000"),
                font=load_font(TITLE_FONT_PX, bold=True),
            )
            y += ROW_HEIGHT

        label_font = load_font(LABEL_FONT_PX)
        for entry in entries:
            if y + ROW_HEIGHT > rect.height - LEGEND_PADDING:
                break
            _draw_swatch(draw, entry, LEGEND_PADDING, y)
            draw.text(
                (LEGEND_PADDING + LABEL_OFFSET, y + 4),
                entry.label,
                fill=parse_color(LABEL_COLOR),
                font=label_font,
            )
            y += ROW_HEIGHT


def _draw_swatch(draw: ImageDraw.ImageDraw, entry: LegendEntry, x: int, y: int) -> None:
    """Swatch: stroke for line symbols, outlined box otherwise."""
    box = (x, y + 2, x + SWATCH_WIDTH - 1, y + 2 + SWATCH_HEIGHT - 1)
    symbol = entry.symbol
    if symbol is None:
        draw.rectangle(box, fill=parse_color(NO_SYMBOL_COLOR))
        return

    color = parse_color(symbol.color, "#666666")
    if symbol.kind == SymbolKind.LINE:
        draw.line((x, y + 8, x + LINE_SWATCH_LENGTH, y + 8), fill=color, width=2)
    else:
        draw.rectangle(box, fill=color, outline=parse_color(SWATCH_OUTLINE), width=1)
