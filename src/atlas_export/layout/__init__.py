"""
Module: layout

Purpose:
    Page composition from a template and a captured map raster.

Key Functions:
    - compose_layout(): Render all visible elements onto a page
    - element_rect(): Percentage element -> pixel rectangle
    - page_size_px(): Template page -> pixel size

Key Classes:
    - ComposedPage: Composition result
    - LayoutConfig: Compositor settings
"""

from .config import LayoutConfig
from .compositor import ComposedPage, compose_layout, element_rect, page_size_px

__all__ = [
    "LayoutConfig",
    "ComposedPage",
    "compose_layout",
    "element_rect",
    "page_size_px",
]
