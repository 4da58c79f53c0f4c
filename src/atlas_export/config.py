"""
Module: config

Purpose:
    Configuration dataclass for the export pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - ExporterConfig: Settings shared by every export job

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - atlas_export.controller: ExportController
    - atlas_export.cli: Command line flags
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from atlas_export.core.utils.units import EXPORT_DPI
from atlas_export.layout import LayoutConfig


@dataclass(frozen=True)
class ExporterConfig:
    """
    Configuration for map exports (immutable).

    Attributes:
        dpi: Output resolution in pixels per page inch
        output_dir: Directory exported files are saved into
        jpeg_quality: JPEG quality (1-95) for JPEG files and the PDF raster
        overlay_layer_id: Export-area preview layer hidden during capture
        system_layer_prefix: Layer ids with this prefix stay out of legends
        settle_delay: Seconds to wait after navigating before the idle wait
        idle_timeout: Upper bound in seconds on waiting for tiles to load
        image_timeout: HTTP timeout in seconds for image/logo elements
        map_border_color: Outline colour of the map frame

    Example:
        >>> config = ExporterConfig(output_dir=Path("exports"), dpi=200)
    """

    dpi: int = EXPORT_DPI
    output_dir: Path = field(default_factory=Path.cwd)
    jpeg_quality: int = 92

    # Capture
    overlay_layer_id: str = "export-area-layer"
    system_layer_prefix: str = "atlas-"
    settle_delay: float = 0.5
    idle_timeout: float = 5.0

    # Assets
    image_timeout: float = 10

    # Map frame
    map_border_color: str = "#000000"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be within 1-95: {self.jpeg_quality}")
        if self.settle_delay < 0:
            raise ValueError(f"settle_delay must be non-negative: {self.settle_delay}")
        if self.idle_timeout <= 0:
            raise ValueError(f"idle_timeout must be positive: {self.idle_timeout}")
        if self.image_timeout <= 0:
            raise ValueError(f"image_timeout must be positive: {self.image_timeout}")
        object.__setattr__(self, "output_dir", Path(self.output_dir))

    @property
    def layout(self) -> LayoutConfig:
        """Compositor settings derived from this config."""
        return LayoutConfig(dpi=self.dpi, map_border_color=self.map_border_color)
