"""
Module: core.models.legend

Purpose:
    Legend rows derived on demand from the live map's layers. Only one
    simplified symbol is kept per layer.

Key Classes:
    - LegendSymbol: Swatch kind + colour
    - LegendEntry: Label with optional symbol

Used By:
    - atlas_export.capture.legend_source: Builds entries
    - atlas_export.primitives.legend: Draws entries
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


DEFAULT_SYMBOL_COLOR = "#666666"


class SymbolKind(str, Enum):
    LINE = "line"
    FILL = "fill"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class LegendSymbol:
    kind: SymbolKind = SymbolKind.FILL
    color: str = DEFAULT_SYMBOL_COLOR


@dataclass(frozen=True, slots=True)
class LegendEntry:
    """
    One legend row.

    Example:
        >>> LegendEntry("Parcels", LegendSymbol(SymbolKind.FILL, "#ff0000"))
    """
    label: str
    symbol: Optional[LegendSymbol] = None
