"""
Core models and utilities shared by every stage of the export pipeline.
"""

from .models import (
    Element,
    ElementType,
    ExportGeometry,
    LegendEntry,
    LegendSymbol,
    PixelRect,
    SymbolKind,
    Template,
)

__all__ = [
    "Element",
    "ElementType",
    "ExportGeometry",
    "LegendEntry",
    "LegendSymbol",
    "PixelRect",
    "SymbolKind",
    "Template",
]
