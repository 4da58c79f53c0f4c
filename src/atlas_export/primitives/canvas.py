"""
Module: primitives.canvas

Purpose:
    Box-scoped drawing layer shared by all primitive renderers. A
    renderer draws into a transparent layer the size of its target
    rectangle; on exit the layer is clipped to the page and
    alpha-composited at the rectangle's position. Pixels outside the
    rectangle are never touched.

Key Functions:
    - box_layer(): Context manager yielding (layer, draw) for a rect

Dependencies:
    - PIL: Image, ImageDraw

Used By:
    - atlas_export.primitives.*: Every renderer
    - atlas_export.layout.compositor: Map raster placement
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Tuple

from PIL import Image, ImageDraw

from atlas_export.core.models import PixelRect


TRANSPARENT = (0, 0, 0, 0)


@contextmanager
def box_layer(
    surface: Image.Image,
    rect: PixelRect,
) -> Iterator[Tuple[Image.Image, ImageDraw.ImageDraw]]:
    """
    Yield a transparent RGBA layer covering ``rect``.

    Drawing coordinates inside the layer are relative to the rect's
    top-left corner. The surface must be RGBA.

    Args:
        surface: Page surface (modified on exit)
        rect: Target rectangle in page pixels

    Example:
        >>> with box_layer(page, PixelRect(10, 10, 100, 40)) as (layer, draw):
        ...     draw.rectangle((0, 0, 99, 39), outline="black")
    """
    layer = Image.new("RGBA", (max(rect.width, 0), max(rect.height, 0)), TRANSPARENT)
    yield layer, ImageDraw.Draw(layer)

    visible = rect.clamp_to(surface.size)
    if visible.is_empty:
        return
    crop = layer.crop((
        visible.left - rect.left,
        visible.top - rect.top,
        visible.right - rect.left,
        visible.bottom - rect.top,
    ))
    surface.alpha_composite(crop, dest=(visible.left, visible.top))
