"""
Module: capture.surface

Purpose:
    Abstract interface for the live map surface the exporter captures
    from, plus a concrete surface backed by a georeferenced image.

Key Classes:
    - MapSurface: Abstract map view (navigation, projection, screenshot)
    - ViewState: Snapshot of center/zoom/extent for restoration
    - MapLayer: Layer as seen by legend derivation and overlay toggling
    - LayerSymbol: Simplified single symbol of a layer's renderer
    - StaticImageSurface: MapSurface over a PIL image with a world extent

Dependencies:
    - PIL: Screenshots
    - abc (std)

Used By:
    - atlas_export.capture.screenshot: capture_map()
    - atlas_export.capture.legend_source: derive_legend_entries()
    - atlas_export.controller / atlas_export.cli
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from PIL import Image

from atlas_export.core.models import PixelRect

Extent = Tuple[float, float, float, float]


@dataclass(frozen=True, slots=True)
class ViewState:
    """
    View position snapshot (immutable).

    Attributes:
        center: (x, y) in map units
        zoom: Zoom level
        extent: (xmin, ymin, xmax, ymax) in map units
    """
    center: Tuple[float, float]
    zoom: float
    extent: Extent


@dataclass(frozen=True, slots=True)
class LayerSymbol:
    """
    Single symbol sampled from a layer renderer.

    Attributes:
        type: Renderer symbol type, e.g. "simple-fill", "simple-line"
        color: (r, g, b[, a]) tuple, colour string, or None
    """
    type: str = "simple-fill"
    color: Union[Tuple[int, ...], str, None] = None


@dataclass
class MapLayer:
    """
    Map layer (mutable: visibility is toggled during capture).

    Attributes:
        id: Layer id
        title: Display title (legend label)
        visible: Current visibility
        kind: Layer type, e.g. "feature", "graphics", "tile"
        list_mode: "show" or "hide" (hidden layers stay out of the legend)
        symbol: Renderer's single symbol, if any
    """
    id: str
    title: Optional[str] = None
    visible: bool = True
    kind: str = "feature"
    list_mode: str = "show"
    symbol: Optional[LayerSymbol] = None


class MapSurface(ABC):
    """
    Abstract live map view.

    Implementations wrap a real map widget. Navigation, idle waits and
    screenshots are coroutines run on the host event loop.
    """

    @property
    @abstractmethod
    def view_state(self) -> ViewState:
        """Current center/zoom/extent."""

    @property
    @abstractmethod
    def layers(self) -> Sequence[MapLayer]:
        """All layers in draw order."""

    def find_layer(self, layer_id: str) -> Optional[MapLayer]:
        """Layer with ``layer_id``, or None."""
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    @abstractmethod
    async def go_to_extent(self, extent: Extent) -> None:
        """Show ``extent`` without animation."""

    @abstractmethod
    async def restore_view(self, state: ViewState) -> None:
        """Return the view to a previously recorded state."""

    @abstractmethod
    async def wait_until_idle(self) -> None:
        """Resolve once tiles/data for the current view have loaded."""

    @abstractmethod
    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        """Project a ground coordinate to screen pixels."""

    @abstractmethod
    async def take_screenshot(self, rect: PixelRect, size: Tuple[int, int]) -> Image.Image:
        """Raster of the screen rectangle ``rect`` scaled to ``size``."""


class StaticImageSurface(MapSurface):
    """
    Map surface over a single georeferenced image.

    The image covers ``image_extent`` in map units; the view is a
    ``viewport`` of screen pixels that can be moved around it. Used by
    the command line tool and as a realistic surface in tests.

    Example:
        >>> surface = StaticImageSurface(basemap, (0, 0, 10000, 8000), (1280, 800))
        >>> await surface.go_to_extent((2000, 2000, 4000, 3500))
    """

    def __init__(
        self,
        image: Image.Image,
        image_extent: Extent,
        viewport: Tuple[int, int] = (1280, 800),
        layers: Sequence[MapLayer] = (),
        background: str = "#ffffff",
    ) -> None:
        xmin, ymin, xmax, ymax = image_extent
        if xmax <= xmin or ymax <= ymin:
            raise ValueError(f"Invalid image extent: {image_extent}")
        if viewport[0] <= 0 or viewport[1] <= 0:
            raise ValueError(f"Invalid viewport: {viewport}")

        self._image = image.convert("RGB")
        self._image_extent = image_extent
        self._viewport = viewport
        self._layers = list(layers)
        self._background = background
        self._base_resolution = max(
            (xmax - xmin) / viewport[0],
            (ymax - ymin) / viewport[1],
        )
        self._resolution = self._base_resolution
        self._view = self._state_for(((xmin + xmax) / 2, (ymin + ymax) / 2), self._resolution)

    @property
    def view_state(self) -> ViewState:
        return self._view

    @property
    def layers(self) -> Sequence[MapLayer]:
        return self._layers

    @property
    def viewport(self) -> Tuple[int, int]:
        return self._viewport

    async def go_to_extent(self, extent: Extent) -> None:
        xmin, ymin, xmax, ymax = extent
        resolution = max((xmax - xmin) / self._viewport[0], (ymax - ymin) / self._viewport[1])
        self._resolution = resolution
        self._view = self._state_for(((xmin + xmax) / 2, (ymin + ymax) / 2), resolution)

    async def restore_view(self, state: ViewState) -> None:
        self._resolution = (state.extent[2] - state.extent[0]) / self._viewport[0]
        self._view = state

    async def wait_until_idle(self) -> None:
        return None

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        cx, cy = self._view.center
        return (
            self._viewport[0] / 2 + (x - cx) / self._resolution,
            self._viewport[1] / 2 - (y - cy) / self._resolution,
        )

    def to_map(self, px: float, py: float) -> Tuple[float, float]:
        cx, cy = self._view.center
        return (
            cx + (px - self._viewport[0] / 2) * self._resolution,
            cy - (py - self._viewport[1] / 2) * self._resolution,
        )

    async def take_screenshot(self, rect: PixelRect, size: Tuple[int, int]) -> Image.Image:
        if rect.is_empty:
            raise ValueError(f"Empty screenshot rectangle: {rect}")
        left, top = self.to_map(rect.left, rect.top)
        right, bottom = self.to_map(rect.right, rect.bottom)
        return self._image.transform(
            size,
            Image.Transform.EXTENT,
            data=(*self._image_px(left, top), *self._image_px(right, bottom)),
            resample=Image.Resampling.BICUBIC,
            fillcolor=self._background,
        )

    def _image_px(self, x: float, y: float) -> Tuple[float, float]:
        xmin, ymin, xmax, ymax = self._image_extent
        return (
            (x - xmin) / (xmax - xmin) * self._image.width,
            (ymax - y) / (ymax - ymin) * self._image.height,
        )

    def _state_for(self, center: Tuple[float, float], resolution: float) -> ViewState:
        half_w = self._viewport[0] * resolution / 2
        half_h = self._viewport[1] * resolution / 2
        return ViewState(
            center=center,
            zoom=math.log2(self._base_resolution / resolution),
            extent=(center[0] - half_w, center[1] - half_h, center[0] + half_w, center[1] + half_h),
        )
