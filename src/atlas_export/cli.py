"""
Module: cli

Purpose:
    Command line export against a georeferenced basemap image.

    atlas-export --templates templates.json --template-id letter \\
        --basemap parcels.png --basemap-extent 0 0 20000 15000 \\
        --extent 4000 3000 8400 6400 --scale 400 --title "Parcel Map"

Key Functions:
    - main(): Entry point (console script ``atlas-export``)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PIL import Image

from atlas_export.capture import StaticImageSurface
from atlas_export.config import ExporterConfig
from atlas_export.controller import ExportRequest, export_map
from atlas_export.core.models import ExportGeometry, Template
from atlas_export.core.utils.serialization import TemplateError, load_templates
from atlas_export.core.utils.units import EXPORT_DPI
from atlas_export.errors import ExportError
from atlas_export.layout import element_rect, page_size_px
from atlas_export.output import OutputFormat

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atlas-export",
        description="Compose a printable map export from a layout template.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Template
    parser.add_argument("--templates", required=True, type=Path, help="JSON file of export templates")
    parser.add_argument("--template-id", help="Template to use (default: first enabled)")

    # Map
    parser.add_argument("--basemap", required=True, type=Path, help="Basemap image")
    parser.add_argument(
        "--basemap-extent", required=True, nargs=4, type=float,
        metavar=("XMIN", "YMIN", "XMAX", "YMAX"), help="Ground extent covered by the basemap",
    )
    parser.add_argument(
        "--extent", required=True, nargs=4, type=float,
        metavar=("XMIN", "YMIN", "XMAX", "YMAX"), help="Ground rectangle to export",
    )
    parser.add_argument("--scale", type=float, help="Feet per page inch (default: fit the extent)")
    parser.add_argument("--viewport", default="1280x800", help="Screen viewport WxH (default 1280x800)")

    # Output
    parser.add_argument("--title", default="", help="Map title (also names the file)")
    parser.add_argument(
        "--format", default="pdf", choices=[f.value for f in OutputFormat], help="Output format",
    )
    parser.add_argument("--output-dir", type=Path, default=Path.cwd(), help="Directory to save into")
    parser.add_argument("--dpi", type=int, default=EXPORT_DPI, help="Export resolution")

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        template = _select_template(load_templates(args.templates), args.template_id)
        viewport = _parse_viewport(args.viewport)
        config = ExporterConfig(dpi=args.dpi, output_dir=args.output_dir)
        geometry = _geometry(args.extent, args.scale, template, config.dpi)
        surface = StaticImageSurface(Image.open(args.basemap), tuple(args.basemap_extent), viewport)
    except (TemplateError, ValueError, OSError) as e:
        print(f"atlas-export: {e}", file=sys.stderr)
        return 2

    request = ExportRequest(
        template=template,
        output_format=OutputFormat(args.format),
        title=args.title or template.name,
        geometry=geometry,
    )

    try:
        result = asyncio.run(export_map(surface, request, config))
    except ExportError as e:
        print(f"atlas-export: {e}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        print(f"warning: {warning}", file=sys.stderr)
    print(result.path)
    return 0


def _select_template(templates: List[Template], template_id: Optional[str]) -> Template:
    enabled = [t for t in templates if t.enabled]
    if template_id is None:
        if not enabled:
            raise ValueError("No enabled templates available")
        return enabled[0]
    for template in enabled:
        if template.id == template_id:
            return template
    raise ValueError(f"Unknown or disabled template: {template_id}")


def _parse_viewport(value: str) -> tuple[int, int]:
    width, sep, height = value.lower().partition("x")
    if not sep or not width.isdigit() or not height.isdigit():
        raise ValueError(f"Viewport must be WxH: {value!r}")
    return int(width), int(height)


def _geometry(extent: List[float], scale: Optional[float], template: Template, dpi: int) -> ExportGeometry:
    """
    Geometry for ``extent``. Without a scale, the extent's width is
    fitted to the map element's printed width.
    """
    map_element = template.map_element
    width_in = height_in = 0.0
    if map_element is not None:
        rect = element_rect(map_element, page_size_px(template, dpi))
        width_in, height_in = rect.width / dpi, rect.height / dpi

    xmin, ymin, xmax, ymax = extent
    is_auto = scale is None
    if is_auto:
        if width_in <= 0:
            raise ValueError("Cannot fit a scale without a map element; pass --scale")
        scale = (xmax - xmin) / width_in

    return ExportGeometry(
        xmin=xmin,
        ymin=ymin,
        xmax=xmax,
        ymax=ymax,
        scale=scale,
        width_inches=width_in,
        height_inches=height_in,
        width_feet=xmax - xmin,
        height_feet=ymax - ymin,
        is_auto=is_auto,
    )


if __name__ == "__main__":
    sys.exit(main())
