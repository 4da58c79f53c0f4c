"""
Configuration for page composition.

Frozen so one config instance can be shared across jobs.
"""

from dataclasses import dataclass

from atlas_export.core.utils.units import EXPORT_DPI


@dataclass(frozen=True)
class LayoutConfig:
    """
    Compositor settings.

    Attributes:
        dpi: Output resolution (pixels per page inch)
        map_border_color: Outline drawn around the map frame
        map_border_width: Outline width in pixels (0 disables it)
    """
    dpi: int = EXPORT_DPI
    map_border_color: str = "#000000"
    map_border_width: int = 1

    def __post_init__(self) -> None:
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if self.map_border_width < 0:
            raise ValueError(f"map_border_width must be >= 0: {self.map_border_width}")
