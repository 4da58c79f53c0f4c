"""
Module: output

Purpose:
    File encoding of composed pages.

Key Functions:
    - encode(): Write PDF/PNG/JPEG
    - output_filename(): Sanitized dated name
    - unique_path(): Non-overwriting destination

Dependencies:
    - reportlab: PDF generation
    - PIL: Raster formats
"""

from .encoder import (
    OutputFormat,
    encode,
    encode_jpeg,
    encode_pdf,
    encode_png,
    output_filename,
    unique_path,
)

__all__ = [
    "OutputFormat",
    "encode",
    "encode_jpeg",
    "encode_pdf",
    "encode_png",
    "output_filename",
    "unique_path",
]
