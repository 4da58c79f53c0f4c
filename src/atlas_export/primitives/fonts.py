"""
Font loading for primitive renderers.

Prefers common TrueType faces and falls back to Pillow's bundled
default font when none are installed. The fallback is reported once
per process.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from PIL import ImageFont

logger = logging.getLogger(__name__)

_fallback_warned = False

_REGULAR_FONTS = (
    "arial.ttf",        # Windows
    "Arial.ttf",        # Mac
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
)
_BOLD_FONTS = (
    "arialbd.ttf",
    "Arial Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
)


@lru_cache(maxsize=64)
def load_font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    """
    Load a font at ``size`` pixels.

    Args:
        size: Pixel size (clamped to >= 1)
        bold: Prefer a bold face

    Returns:
        Font object
    """
    size = max(1, int(round(size)))
    options = _BOLD_FONTS + _REGULAR_FONTS if bold else _REGULAR_FONTS
    for font_name in options:
        try:
            return ImageFont.truetype(font_name, size)
        except OSError:
            continue

    global _fallback_warned
    if not _fallback_warned:
        logger.warning("Could not load TrueType font, using default")
        _fallback_warned = True
    return ImageFont.load_default(size)
