"""
Module: output.encoder

Purpose:
    Serialize a composed page raster to PDF, PNG or JPEG and save it
    under a sanitized, dated filename.

Key Functions:
    - encode(): Dispatch on OutputFormat, wrapping failures
    - encode_pdf(): One-page PDF with the raster embedded as a full-page JPEG
    - encode_png() / encode_jpeg(): Raster files tagged with their DPI
    - output_filename(): "{title}_{YYYY-MM-DD}.{ext}"
    - unique_path(): Append " (n)" instead of overwriting

Dependencies:
    - reportlab: PDF generation
    - PIL: Raster encoding

Used By:
    - atlas_export.controller: ENCODING step
"""

from __future__ import annotations

import io
import logging
import re
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image
from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from atlas_export.core.utils.units import EXPORT_DPI
from atlas_export.errors import EncodingFailedError

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 92
FALLBACK_FILENAME = "Map_Export"

_UNSAFE_CHARS = re.compile(r"[^a-z0-9]", re.IGNORECASE)


class OutputFormat(str, Enum):
    """Export file formats."""
    PDF = "pdf"
    PNG = "png"
    JPG = "jpg"

    def __str__(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return self.value


def encode_pdf(
    image: Image.Image,
    page_inches: Tuple[float, float],
    dest: Path,
    *,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    """
    Write a single-page PDF sized to the physical page.

    The raster covers the whole page. Orientation follows the page
    dimensions (width > height is landscape).

    Example:
        >>> encode_pdf(page.image, (11, 8.5), Path("out/Parcels_2024-03-01.pdf"))
    """
    width_in, height_in = page_inches
    page_size = (width_in * inch, height_in * inch)
    page_size = landscape(page_size) if width_in > height_in else portrait(page_size)

    dest.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(dest), pagesize=page_size)
    c.drawImage(_jpeg_reader(image, jpeg_quality), 0, 0, width=page_size[0], height=page_size[1])
    c.showPage()
    c.save()
    return dest


def encode_png(image: Image.Image, dest: Path, *, dpi: int = EXPORT_DPI) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    image.save(dest, format="PNG", dpi=(dpi, dpi))
    return dest


def encode_jpeg(
    image: Image.Image,
    dest: Path,
    *,
    dpi: int = EXPORT_DPI,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    dest.parent.mkdir(parents=True, exist_ok=True)
    image.convert("RGB").save(dest, format="JPEG", quality=jpeg_quality, dpi=(dpi, dpi))
    return dest


def encode(
    image: Image.Image,
    fmt: OutputFormat,
    page_inches: Tuple[float, float],
    dest: Path,
    *,
    dpi: int = EXPORT_DPI,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> Path:
    """
    Encode ``image`` as ``fmt`` at ``dest``.

    Raises:
        EncodingFailedError: If serialization or the file write fails
    """
    fmt = OutputFormat(fmt)
    try:
        if fmt == OutputFormat.PDF:
            path = encode_pdf(image, page_inches, dest, jpeg_quality=jpeg_quality)
        elif fmt == OutputFormat.PNG:
            path = encode_png(image, dest, dpi=dpi)
        else:
            path = encode_jpeg(image, dest, dpi=dpi, jpeg_quality=jpeg_quality)
    except Exception as e:
        raise EncodingFailedError(f"Failed to write {fmt.value.upper()} to {dest}: {e}") from e

    logger.info(f"Wrote {fmt.value.upper()} {image.width}x{image.height} to {path}")
    return path


def output_filename(title: str, fmt: OutputFormat, today: Optional[date] = None) -> str:
    """
    Sanitized download name.

    Example:
        >>> output_filename("Parcel Map", OutputFormat.PDF, date(2024, 3, 1))
        'Parcel_Map_2024-03-01.pdf'
    """
    today = today or date.today()
    stem = _UNSAFE_CHARS.sub("_", title) or FALLBACK_FILENAME
    return f"{stem}_{today.isoformat()}.{OutputFormat(fmt).extension}"


def unique_path(directory: Path, filename: str) -> Path:
    """``directory/filename``, or the first free ``name (n).ext`` variant."""
    candidate = directory / filename
    stem, suffix = candidate.stem, candidate.suffix
    n = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({n}){suffix}"
        n += 1
    return candidate


def _jpeg_reader(image: Image.Image, quality: int) -> ImageReader:
    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG", quality=quality)
    buf.seek(0)
    return ImageReader(buf)
