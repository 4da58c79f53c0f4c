"""
Legend derivation from the live map's layers.

One entry per visible, listed, titled layer. Only the renderer's single
symbol is sampled; class-break and unique-value renderers are not
enumerated.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from atlas_export.core.models import LegendEntry, LegendSymbol, SymbolKind
from atlas_export.core.models.legend import DEFAULT_SYMBOL_COLOR
from atlas_export.core.utils.colors import to_hex

from .screenshot import DEFAULT_OVERLAY_LAYER_ID
from .surface import LayerSymbol, MapLayer

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PREFIX = "atlas-"


def derive_legend_entries(
    layers: Iterable[MapLayer],
    *,
    overlay_layer_id: str = DEFAULT_OVERLAY_LAYER_ID,
    system_prefix: str = DEFAULT_SYSTEM_PREFIX,
) -> List[LegendEntry]:
    """
    Legend rows for the map's layers, in layer order.

    Skips hidden layers, layers excluded from lists, graphics layers,
    the export-area overlay, system layers and untitled layers.
    """
    entries = []
    for layer in layers:
        if not layer.visible or layer.list_mode == "hide":
            continue
        if layer.kind == "graphics" or layer.id == overlay_layer_id:
            continue
        if layer.id.startswith(system_prefix) or not layer.title:
            continue
        entries.append(LegendEntry(layer.title, _simplify(layer.symbol)))

    logger.debug(f"Derived {len(entries)} legend entries")
    return entries


def _simplify(symbol: Optional[LayerSymbol]) -> Optional[LegendSymbol]:
    if symbol is None:
        return None
    kind = SymbolKind.LINE if "line" in (symbol.type or "") else SymbolKind.FILL
    if symbol.color is None:
        color = DEFAULT_SYMBOL_COLOR
    elif isinstance(symbol.color, str):
        color = symbol.color
    else:
        color = to_hex(symbol.color)
    return LegendSymbol(kind, color)
