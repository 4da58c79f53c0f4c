"""
Module: layout.compositor

Purpose:
    Compose a full export page: background fill, then every visible
    template element painted in list order at its percentage-resolved
    pixel rectangle. Later elements paint over earlier ones.

Key Functions:
    - compose_layout(): Template + captured map -> ComposedPage
    - element_rect(): Percentage element -> pixel rectangle

Key Classes:
    - ComposedPage: Page raster plus non-fatal warnings

Dependencies:
    - PIL: Page surface
    - atlas_export.primitives: Element renderers
    - atlas_export.assets: Image/logo loading

Used By:
    - atlas_export.controller: COMPOSING step
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from atlas_export.assets import ImageLoader
from atlas_export.core.models import (
    Element,
    ElementType,
    ExportGeometry,
    LegendEntry,
    PixelRect,
    Template,
)
from atlas_export.core.utils.colors import parse_color
from atlas_export.core.utils.units import pct_to_px, physical_size_px
from atlas_export.errors import AssetLoadFailedError
from atlas_export.primitives import (
    box_layer,
    render_image,
    render_legend,
    render_north_arrow,
    render_scalebar,
    render_text,
    render_title,
)

from .config import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass
class ComposedPage:
    """
    Result of composition.

    Attributes:
        image: RGB page raster at the export resolution
        warnings: Messages for elements that were skipped (e.g. failed images)
    """
    image: Image.Image
    warnings: List[str] = field(default_factory=list)


@dataclass
class _RenderContext:
    """Per-page inputs shared by every renderer."""
    map_image: Optional[Image.Image]
    legend_entries: Sequence[LegendEntry]
    title: str
    geometry: ExportGeometry
    config: LayoutConfig
    images: Dict[str, Image.Image]


Renderer = Callable[[Image.Image, PixelRect, Element, _RenderContext], None]


def page_size_px(template: Template, dpi: int) -> Tuple[int, int]:
    """Page raster size for ``template`` at ``dpi``."""
    width_in, height_in = template.page_dimensions
    return physical_size_px(width_in, dpi), physical_size_px(height_in, dpi)


def element_rect(element: Element, page_size: Tuple[int, int]) -> PixelRect:
    """
    Pixel rectangle of a percentage-positioned element.

    Example:
        >>> element_rect(Element("m", ElementType.MAP, 2, 12, 96, 80), (1650, 1275))
        PixelRect(left=33, top=153, width=1584, height=1020)
    """
    page_w, page_h = page_size
    return PixelRect(
        pct_to_px(element.x, page_w),
        pct_to_px(element.y, page_h),
        pct_to_px(element.width, page_w),
        pct_to_px(element.height, page_h),
    )


async def compose_layout(
    template: Template,
    map_image: Optional[Image.Image],
    legend_entries: Sequence[LegendEntry],
    title: str,
    geometry: ExportGeometry,
    *,
    config: Optional[LayoutConfig] = None,
    image_loader: Optional[ImageLoader] = None,
) -> ComposedPage:
    """
    Compose the export page.

    Image and logo elements are loaded first; a failed load is logged,
    reported in ``warnings`` and leaves that element's box blank. All
    painting is synchronous, so identical inputs produce identical pixels.

    Args:
        template: Layout to render
        map_image: Captured map raster (None leaves the map frame empty)
        legend_entries: Rows for legend elements
        title: Job title substituted into title elements
        geometry: Export geometry (scale drives the scale bar)
        config: Resolution and map frame styling
        image_loader: Loader for image/logo URLs

    Returns:
        ComposedPage with an RGB raster
    """
    config = config or LayoutConfig()
    size = page_size_px(template, config.dpi)
    logger.info(f"Composing '{template.name}' at {size[0]}x{size[1]} px ({config.dpi} dpi)")

    images, warnings = await _load_images(template.elements, image_loader)

    surface = Image.new("RGBA", size, parse_color(template.background_color, "#ffffff"))
    ctx = _RenderContext(
        map_image=map_image,
        legend_entries=legend_entries,
        title=title,
        geometry=geometry,
        config=config,
        images=images,
    )

    for element in template.elements:
        if not element.visible:
            continue
        rect = element_rect(element, size)
        logger.debug(f"Rendering {element.type} '{element.id}' at {rect}")
        _RENDERERS[element.type](surface, rect, element, ctx)

    return ComposedPage(image=surface.convert("RGB"), warnings=warnings)


async def _load_images(
    elements: Sequence[Element],
    loader: Optional[ImageLoader],
) -> Tuple[Dict[str, Image.Image], List[str]]:
    """Fetch every visible image/logo element's bitmap, collecting failures."""
    images: Dict[str, Image.Image] = {}
    warnings: List[str] = []
    for element in elements:
        if not element.visible or element.type not in (ElementType.IMAGE, ElementType.LOGO):
            continue
        url = element.content.url
        if not url:
            continue
        if loader is None:
            error = AssetLoadFailedError(url, "no image loader configured")
        else:
            try:
                images[element.id] = await loader.load(url)
                continue
            except AssetLoadFailedError as e:
                error = e
            except Exception as e:
                # Loaders supplied by the host may raise anything
                error = AssetLoadFailedError(url, str(e) or type(e).__name__)
        logger.warning(f"Skipping {element.type} '{element.id}': {error}")
        warnings.append(str(error))
    return images, warnings


# ─────────────────────────────────────────────────────────────────────────────
# Renderers
# ─────────────────────────────────────────────────────────────────────────────

def _render_map(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    if rect.is_empty:
        return
    if ctx.map_image is not None:
        raster = ctx.map_image
        if raster.size != rect.size:
            raster = raster.resize(rect.size, Image.Resampling.LANCZOS)
        with box_layer(surface, rect) as (layer, draw):
            layer.paste(raster.convert("RGBA"), (0, 0))
    if ctx.config.map_border_width > 0:
        ImageDraw.Draw(surface).rectangle(
            (rect.left, rect.top, rect.right - 1, rect.bottom - 1),
            outline=parse_color(ctx.config.map_border_color),
            width=ctx.config.map_border_width,
        )


def _render_title(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    render_title(surface, rect, element.content, ctx.title, dpi=ctx.config.dpi)


def _render_text(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    render_text(surface, rect, element.content, dpi=ctx.config.dpi)


def _render_legend(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    render_legend(surface, rect, element.content, ctx.legend_entries)


def _render_scalebar(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    render_scalebar(surface, rect, element.content, ctx.geometry.scale, dpi=ctx.config.dpi)


def _render_north_arrow(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    render_north_arrow(surface, rect)


def _render_image(surface: Image.Image, rect: PixelRect, element: Element, ctx: _RenderContext) -> None:
    image = ctx.images.get(element.id)
    if image is not None:
        render_image(surface, rect, image)


_RENDERERS: Dict[ElementType, Renderer] = {
    ElementType.MAP: _render_map,
    ElementType.TITLE: _render_title,
    ElementType.TEXT: _render_text,
    ElementType.LEGEND: _render_legend,
    ElementType.SCALEBAR: _render_scalebar,
    ElementType.NORTH_ARROW: _render_north_arrow,
    ElementType.IMAGE: _render_image,
    ElementType.LOGO: _render_image,
}

_missing = set(ElementType) - set(_RENDERERS)
if _missing:
    raise RuntimeError(f"No renderer registered for element types: {sorted(_missing)}")
