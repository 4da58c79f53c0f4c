"""
Module: core.utils.units

Purpose:
    Unit conversions between page percentages, inches, pixels at a DPI,
    PDF points and ground distances, plus the "nice number" selection
    used to label scale bars with legible round distances.

Key Functions:
    - pct_to_px(): Percentage of a page dimension to pixels
    - physical_size_px(): Inches to pixels at a DPI
    - nice_scale_number(): Largest round distance under 90% of a bound
    - px_to_pt(): Pixels to PDF points
    - feet_to_meters() / meters_to_feet(): Ground unit conversion

Dependencies:
    - None (pure functions)

Used By:
    - atlas_export.layout.compositor: Element rectangles, page size
    - atlas_export.primitives.scalebar: Bar length and labels
    - atlas_export.output.encoder: PDF page size
"""

from __future__ import annotations


# Export resolution (print quality). Default for ExporterConfig.dpi.
EXPORT_DPI = 150

# CSS reference resolution; template font sizes are CSS pixels.
CSS_DPI = 96

FEET_TO_METERS = 0.3048
FEET_PER_MILE = 5280
METERS_PER_KM = 1000

NICE_SCALE_NUMBERS: tuple[int, ...] = (
    10, 20, 25, 50, 100, 200, 250, 500,
    1000, 2000, 2500, 5000, 10000, 20000,
)
NICE_SCALE_FALLBACK = 100
NICE_SCALE_HEADROOM = 0.9


def pct_to_px(pct: float, page_dim_px: int) -> int:
    """
    Convert a percentage of a page dimension to whole pixels.

    Args:
        pct: Percentage (0-100)
        page_dim_px: Page dimension in pixels

    Returns:
        round(pct / 100 * page_dim_px)

    Example:
        >>> pct_to_px(80, 1650)
        1320
    """
    return round(pct * page_dim_px / 100)


def physical_size_px(inches: float, dpi: int = EXPORT_DPI) -> int:
    """
    Convert a physical length to pixels at the given resolution.

    Example:
        >>> physical_size_px(11, 150)
        1650
    """
    return round(inches * dpi)


def css_px_to_device(css_px: float, dpi: int = EXPORT_DPI) -> float:
    """Scale a CSS pixel size (96 DPI) to the export resolution."""
    return css_px * dpi / CSS_DPI


def px_to_pt(px: float, dpi: int = EXPORT_DPI) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * 72.0 / dpi


def nice_scale_number(max_ground_units: float) -> int:
    """
    Pick a human-legible scale bar distance.

    Returns the largest member of NICE_SCALE_NUMBERS that is no more
    than 90% of ``max_ground_units``. Falls back to 100 when no member
    qualifies.

    Args:
        max_ground_units: Longest distance that fits the bar

    Returns:
        Round ground distance

    Example:
        >>> nice_scale_number(973.3)
        500
        >>> nice_scale_number(5)
        100
    """
    limit = max_ground_units * NICE_SCALE_HEADROOM
    chosen = NICE_SCALE_FALLBACK
    for candidate in NICE_SCALE_NUMBERS:
        if candidate <= limit:
            chosen = candidate
        else:
            break
    return chosen


def feet_to_meters(feet: float) -> float:
    return feet * FEET_TO_METERS


def meters_to_feet(meters: float) -> float:
    return meters / FEET_TO_METERS
