"""
Module: primitives.text

Purpose:
    Title and free-text rendering. Text blocks wrap at word boundaries
    so that no rendered line is wider than the box's inner width.

Key Functions:
    - wrap_text(): Word wrap against a width using a measure function
    - render_text(): Draw a wrapped, aligned text block
    - render_title(): Draw a single vertically centred title line

Dependencies:
    - PIL: ImageDraw, ImageFont
    - primitives.canvas: box_layer
    - primitives.fonts: load_font

Used By:
    - atlas_export.layout.compositor: title and text elements
"""

from __future__ import annotations

from typing import Callable, List

from PIL import Image

from atlas_export.core.models import PixelRect, TextContent
from atlas_export.core.utils.colors import parse_color
from atlas_export.core.utils.units import EXPORT_DPI, css_px_to_device

from .canvas import box_layer
from .fonts import load_font

TEXT_PADDING = 5
TITLE_INSET = 10
LINE_HEIGHT_RATIO = 1.2

Measure = Callable[[str], float]

# Horizontal anchor per alignment: top-aligned for text, middle for titles
_TEXT_ANCHORS = {"left": "la", "center": "ma", "right": "ra"}
_TITLE_ANCHORS = {"left": "lm", "center": "mm", "right": "rm"}


def wrap_text(text: str, max_width: float, measure: Measure) -> List[str]:
    """
    Wrap text into lines no wider than ``max_width``.

    Breaks at whitespace; explicit newlines start a new line. A single
    word wider than the box is broken between characters.

    Args:
        text: Text to wrap
        max_width: Maximum line width (same units as ``measure``)
        measure: Returns the rendered width of a string

    Returns:
        Lines in order (empty list for empty text)

    Example:
        >>> wrap_text("aa bb cc", 5, len)
        ['aa bb', 'cc']
    """
    if not text:
        return []

    lines: List[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split():
            candidate = f"{line} {word}" if line else word
            if measure(candidate) <= max_width:
                line = candidate
                continue
            if line:
                lines.append(line)
            pieces = _break_word(word, max_width, measure)
            lines.extend(pieces[:-1])
            line = pieces[-1]
        lines.append(line)
    return lines


def _break_word(word: str, max_width: float, measure: Measure) -> List[str]:
    """Split one word into pieces that each fit ``max_width``."""
    if measure(word) <= max_width:
        return [word]
    pieces: List[str] = []
    piece = ""
    for char in word:
        if piece and measure(piece + char) > max_width:
            pieces.append(piece)
            piece = char
        else:
            piece += char
    pieces.append(piece)
    return pieces


def font_px(content: TextContent, dpi: int) -> int:
    """Template font size (CSS px) at the export resolution."""
    return max(1, round(css_px_to_device(content.font_size, dpi)))


def render_text(
    surface: Image.Image,
    rect: PixelRect,
    content: TextContent,
    *,
    dpi: int = EXPORT_DPI,
    measure: Measure | None = None,
) -> None:
    """
    Draw a wrapped text block inside ``rect``.

    Lines advance by 1.2x the font size. Lines that would start below
    the box's inner bottom edge are not drawn.

    Args:
        surface: RGBA page surface
        rect: Target rectangle
        content: Text content (text, size, weight, colour, alignment)
        dpi: Export resolution used to scale the CSS font size
        measure: Width function override (defaults to font metrics)
    """
    if rect.is_empty:
        return

    size = font_px(content, dpi)
    font = load_font(size, content.is_bold)

    with box_layer(surface, rect) as (layer, draw):
        if content.background_color:
            draw.rectangle(
                (0, 0, rect.width - 1, rect.height - 1),
                fill=parse_color(content.background_color, "#ffffff"),
            )

        measure = measure or (lambda s: draw.textlength(s, font=font))
        lines = wrap_text(content.text, rect.width - TEXT_PADDING * 2, measure)

        x = _aligned_x(content.align, rect.width, TEXT_PADDING)
        anchor = _TEXT_ANCHORS.get(content.align, "la")
        color = parse_color(content.color, "#000000")
        line_height = size * LINE_HEIGHT_RATIO

        for index, line in enumerate(lines):
            y = TEXT_PADDING + index * line_height
            if y > rect.height - TEXT_PADDING:
                break
            if not line:
                continue
            draw.text((x, y), line, fill=color, font=font, anchor=anchor)


def render_title(
    surface: Image.Image,
    rect: PixelRect,
    content: TextContent,
    title: str,
    *,
    dpi: int = EXPORT_DPI,
) -> None:
    """
    Draw ``title`` as a single line centred vertically in ``rect``.

    The stored content text is a placeholder; the job title replaces it.
    """
    if rect.is_empty:
        return

    size = font_px(content, dpi)
    font = load_font(size, content.is_bold)

    with box_layer(surface, rect) as (layer, draw):
        if content.background_color:
            draw.rectangle(
                (0, 0, rect.width - 1, rect.height - 1),
                fill=parse_color(content.background_color, "#ffffff"),
            )
        text = " ".join(title.split())
        if not text:
            return
        x = _aligned_x(content.align, rect.width, TITLE_INSET)
        draw.text(
            (x, rect.height / 2),
            text,
            fill=parse_color(content.color, "#000000"),
            font=font,
            anchor=_TITLE_ANCHORS.get(content.align, "mm"),
        )


def _aligned_x(align: str, width: int, inset: int) -> float:
    if align == "center":
        return width / 2
    if align == "right":
        return width - inset
    return inset
