"""
Module: core.models.geometry

Purpose:
    Geometry value types: the resolved ground-space export rectangle
    handed over by the extent/scale resolver, and pixel rectangles on
    the output page.

Key Classes:
    - ExportGeometry: Ground rectangle + scale the map must depict
    - PixelRect: Integer rectangle on the page surface

Key Functions:
    - format_scale(): Display form of a feet-per-inch scale

Dependencies:
    - dataclasses (std)

Used By:
    - atlas_export.capture.screenshot: Target extent
    - atlas_export.layout.compositor: Element rectangles
    - atlas_export.primitives: Render targets
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class ExportGeometry:
    """
    Resolved export extent (immutable).

    Produced by the extent resolver; its aspect ratio already matches
    the template's map element.

    Attributes:
        xmin, ymin, xmax, ymax: Ground rectangle in map units
        scale: Ground feet per page inch
        width_inches, height_inches: Map element size on paper
        width_feet, height_feet: Ground size of the rectangle
        is_auto: Whether the scale was fitted to the current view

    Invariants:
        - xmax > xmin
        - ymax > ymin
        - scale > 0
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float
    scale: float
    width_inches: float = 0.0
    height_inches: float = 0.0
    width_feet: float = 0.0
    height_feet: float = 0.0
    is_auto: bool = False

    def __post_init__(self) -> None:
        if self.xmax <= self.xmin:
            raise ValueError(f"xmax must be > xmin: {self.xmax} <= {self.xmin}")
        if self.ymax <= self.ymin:
            raise ValueError(f"ymax must be > ymin: {self.ymax} <= {self.ymin}")
        if self.scale <= 0:
            raise ValueError(f"scale must be positive: {self.scale}")

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def center(self) -> tuple[float, float]:
        return ((self.xmin + self.xmax) / 2, (self.ymin + self.ymax) / 2)

    @property
    def extent(self) -> tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax)"""
        return (self.xmin, self.ymin, self.xmax, self.ymax)

    @property
    def corners(self) -> tuple[tuple[float, float], ...]:
        """Four corners, clockwise from the top-left."""
        return (
            (self.xmin, self.ymax),
            (self.xmax, self.ymax),
            (self.xmax, self.ymin),
            (self.xmin, self.ymin),
        )

    @classmethod
    def from_dict(cls, data: dict) -> ExportGeometry:
        """Build from the resolver's camelCase payload."""
        return cls(
            xmin=float(data["xmin"]),
            ymin=float(data["ymin"]),
            xmax=float(data["xmax"]),
            ymax=float(data["ymax"]),
            scale=float(data["scale"]),
            width_inches=float(data.get("widthInches", 0.0)),
            height_inches=float(data.get("heightInches", 0.0)),
            width_feet=float(data.get("widthFeet", 0.0)),
            height_feet=float(data.get("heightFeet", 0.0)),
            is_auto=bool(data.get("isAuto", False)),
        )


@dataclass(frozen=True, slots=True)
class PixelRect:
    """
    Rectangle on the page surface in whole pixels.

    Example:
        >>> rect = PixelRect(10, 20, 100, 50)
        >>> rect.box
        (10, 20, 110, 70)
    """

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) for PIL."""
        return (self.left, self.top, self.right, self.bottom)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def clamp_to(self, size: tuple[int, int]) -> PixelRect:
        """Intersect with a (0, 0, width, height) surface."""
        left = min(max(self.left, 0), size[0])
        top = min(max(self.top, 0), size[1])
        right = min(max(self.right, 0), size[0])
        bottom = min(max(self.bottom, 0), size[1])
        return PixelRect(left, top, right - left, bottom - top)


def format_scale(scale: Optional[float]) -> str:
    """
    Display form of a feet-per-inch scale.

    Example:
        >>> format_scale(500)
        '1" = 500\\''
        >>> format_scale(2500)
        '1" = 2.5k\\''
        >>> format_scale(None)
        'Auto'
    """
    if not scale:
        return "Auto"
    if scale >= 1000:
        thousands = f"{scale / 1000:.1f}"
        if thousands.endswith(".0"):
            thousands = thousands[:-2]
        return f"1\" = {thousands}k'"
    return f"1\" = {round(scale):,}'"
