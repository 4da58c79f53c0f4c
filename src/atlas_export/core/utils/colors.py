"""Colour parsing with fallback for template-supplied colour strings."""

from __future__ import annotations

import logging
from typing import Optional

from PIL import ImageColor

logger = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]


def parse_color(value: Optional[str], default: str = "#000000") -> RGBA:
    """
    Parse a CSS-style colour string into an RGBA tuple.

    Invalid or missing values fall back to ``default``.

    Example:
        >>> parse_color("#ff0000")
        (255, 0, 0, 255)
        >>> parse_color("not-a-colour", "#ffffff")
        (255, 255, 255, 255)
    """
    if value:
        try:
            return ImageColor.getcolor(value, "RGBA")
        except ValueError:
            logger.debug(f"Unparseable colour {value!r}, using {default}")
    return ImageColor.getcolor(default, "RGBA")


def to_hex(rgb: tuple[int, ...]) -> str:
    """(r, g, b[, a]) -> '#rrggbb' (alpha dropped)."""
    r, g, b = (max(0, min(255, int(c))) for c in rgb[:3])
    return f"#{r:02x}{g:02x}{b:02x}"
