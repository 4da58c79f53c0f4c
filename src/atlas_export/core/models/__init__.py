"""
Core data models.

Exports:
    - Template, Element, ElementType: Page layout description
    - TextContent, LegendContent, ScaleBarContent, ImageContent,
      MapContent, NorthArrowContent: Element content variants
    - ExportGeometry, PixelRect: Ground and page geometry
    - LegendEntry, LegendSymbol, SymbolKind: Legend rows
"""

from .template import (
    PAGE_SIZES,
    Element,
    ElementContent,
    ElementType,
    ImageContent,
    LegendContent,
    MapContent,
    NorthArrowContent,
    ScaleBarContent,
    Template,
    TextContent,
    content_from_dict,
    content_to_dict,
    page_dimensions,
    page_size_label,
)
from .geometry import ExportGeometry, PixelRect, format_scale
from .legend import LegendEntry, LegendSymbol, SymbolKind

__all__ = [
    "PAGE_SIZES",
    "Element",
    "ElementContent",
    "ElementType",
    "ImageContent",
    "LegendContent",
    "MapContent",
    "NorthArrowContent",
    "ScaleBarContent",
    "Template",
    "TextContent",
    "content_from_dict",
    "content_to_dict",
    "page_dimensions",
    "page_size_label",
    "ExportGeometry",
    "PixelRect",
    "format_scale",
    "LegendEntry",
    "LegendSymbol",
    "SymbolKind",
]
