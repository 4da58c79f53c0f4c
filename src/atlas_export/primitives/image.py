"""
Module: primitives.image

Purpose:
    Fit an image inside a box preserving its aspect ratio (letterboxed,
    centred) and draw it.

Key Functions:
    - fit_within(): Placement of an image inside a box
    - render_image(): Resample and draw an image into a rect

Used By:
    - atlas_export.layout.compositor: image/logo elements
"""

from __future__ import annotations

from PIL import Image

from atlas_export.core.models import PixelRect

from .canvas import box_layer


def fit_within(image_size: tuple[int, int], box_size: tuple[int, int]) -> PixelRect:
    """
    Largest aspect-preserving placement of an image inside a box.

    Args:
        image_size: (width, height) of the source image
        box_size: (width, height) of the target box

    Returns:
        Placement relative to the box's top-left corner

    Example:
        >>> fit_within((200, 100), (100, 100))
        PixelRect(left=0, top=25, width=100, height=50)
    """
    img_w, img_h = image_size
    box_w, box_h = box_size
    if img_w <= 0 or img_h <= 0 or box_w <= 0 or box_h <= 0:
        return PixelRect(0, 0, 0, 0)

    img_aspect = img_w / img_h
    box_aspect = box_w / box_h
    if img_aspect > box_aspect:
        width = box_w
        height = max(1, round(box_w / img_aspect))
    else:
        height = box_h
        width = max(1, round(box_h * img_aspect))
    return PixelRect((box_w - width) // 2, (box_h - height) // 2, width, height)


def render_image(surface: Image.Image, rect: PixelRect, image: Image.Image) -> None:
    """
    Draw ``image`` letterboxed inside ``rect``.

    The source image is not modified.
    """
    if rect.is_empty:
        return

    placement = fit_within(image.size, rect.size)
    if placement.is_empty:
        return

    resized = image.convert("RGBA").resize(placement.size, Image.Resampling.LANCZOS)
    with box_layer(surface, rect) as (layer, draw):
        layer.alpha_composite(resized, dest=(placement.left, placement.top))
