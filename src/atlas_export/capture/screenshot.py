"""
Module: capture.screenshot

Purpose:
    Capture a pixel-accurate raster of an export rectangle from the
    live map. The overlay visibility and the view position are
    acquired before capture and always released afterwards, whether
    the capture succeeds or fails.

Key Functions:
    - capture_map(): Ground rectangle -> raster at a target pixel size
    - screen_rect_for(): On-screen pixel rectangle of a ground rectangle

Dependencies:
    - asyncio (std): Settle delay and bounded idle wait
    - PIL: Result raster
    - capture.surface: MapSurface

Used By:
    - atlas_export.controller: CAPTURING_SCREENSHOT step
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Optional, Tuple

from PIL import Image

from atlas_export.core.models import ExportGeometry, PixelRect
from atlas_export.errors import CaptureFailedError

from .surface import MapLayer, MapSurface, ViewState

logger = logging.getLogger(__name__)

DEFAULT_OVERLAY_LAYER_ID = "export-area-layer"
DEFAULT_SETTLE_DELAY = 0.5
DEFAULT_IDLE_TIMEOUT = 5.0


async def capture_map(
    surface: MapSurface,
    geometry: ExportGeometry,
    size: Tuple[int, int],
    *,
    overlay_layer_id: str = DEFAULT_OVERLAY_LAYER_ID,
    settle_delay: float = DEFAULT_SETTLE_DELAY,
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
) -> Image.Image:
    """
    Capture ``geometry``'s ground rectangle at ``size`` pixels.

    Steps:
    1. Hide the export-area overlay (remember its visibility)
    2. Record the current view
    3. Move to the export extent without animation
    4. Settle, then wait for the surface to go idle (bounded)
    5. Project the rectangle corners to screen pixels
    6. Screenshot that screen rectangle scaled to ``size``
    7. Restore overlay visibility and the original view (always)

    Args:
        surface: Live map surface
        geometry: Resolved export rectangle
        size: Output (width, height) in pixels
        overlay_layer_id: Export-area preview layer to hide
        settle_delay: Seconds to wait after navigation before polling idle
        idle_timeout: Upper bound on the idle wait; capture proceeds after it

    Returns:
        RGB raster of exactly ``size``

    Raises:
        CaptureFailedError: If navigation, projection or screenshot fails
    """
    overlay = surface.find_layer(overlay_layer_id)
    overlay_was_visible = overlay.visible if overlay is not None else None
    original_view = surface.view_state

    if overlay is not None:
        overlay.visible = False

    try:
        await surface.go_to_extent(geometry.extent)
        await _wait_for_idle(surface, settle_delay, idle_timeout)
        rect = screen_rect_for(surface, geometry)
        logger.debug(f"Capturing screen rect {rect} at {size[0]}x{size[1]}")
        image = await surface.take_screenshot(rect, size)
    except Exception as e:
        raise CaptureFailedError(f"Map capture failed: {e}") from e
    finally:
        await _restore(surface, overlay, overlay_was_visible, original_view)

    if image.size != tuple(size):
        image = image.resize(size, Image.Resampling.LANCZOS)
    return image.convert("RGB")


def screen_rect_for(surface: MapSurface, geometry: ExportGeometry) -> PixelRect:
    """
    Screen rectangle covering the geometry's four corners.

    Uses the view's current projection, so any residual aspect mismatch
    between the requested extent and the rendered viewport is absorbed.
    """
    points = [surface.to_screen(x, y) for x, y in geometry.corners]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    left = math.floor(min(xs) + 0.5)
    top = math.floor(min(ys) + 0.5)
    right = math.floor(max(xs) + 0.5)
    bottom = math.floor(max(ys) + 0.5)
    return PixelRect(left, top, right - left, bottom - top)


async def _wait_for_idle(surface: MapSurface, settle_delay: float, timeout: float) -> None:
    """Settle, then wait for idle; a timeout falls through."""
    if settle_delay > 0:
        await asyncio.sleep(settle_delay)
    try:
        await asyncio.wait_for(surface.wait_until_idle(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Map did not finish loading within {timeout}s, capturing anyway")


async def _restore(
    surface: MapSurface,
    overlay: Optional[MapLayer],
    overlay_was_visible: Optional[bool],
    original_view: ViewState,
) -> None:
    if overlay is not None:
        overlay.visible = bool(overlay_was_visible)
    try:
        await surface.restore_view(original_view)
    except Exception as e:
        raise CaptureFailedError(f"Failed to restore map view: {e}") from e
    logger.debug("Restored map view and overlay visibility")
