"""
Module: capture

Purpose:
    Screenshot capture from the live map surface and legend derivation
    from its layers.

Key Functions:
    - capture_map(): Ground rectangle -> raster, view always restored
    - derive_legend_entries(): Legend rows from visible layers

Key Classes:
    - MapSurface: Abstract map view
    - StaticImageSurface: Image-backed map view

Used By:
    - atlas_export.controller
"""

from .surface import LayerSymbol, MapLayer, MapSurface, StaticImageSurface, ViewState
from .screenshot import capture_map, screen_rect_for
from .legend_source import derive_legend_entries

__all__ = [
    "LayerSymbol",
    "MapLayer",
    "MapSurface",
    "StaticImageSurface",
    "ViewState",
    "capture_map",
    "screen_rect_for",
    "derive_legend_entries",
]
