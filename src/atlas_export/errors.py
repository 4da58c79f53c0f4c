"""
Module: errors

Purpose:
    Exception taxonomy for the export pipeline. Fatal errors abort the
    job and are shown verbatim to the operator; AssetLoadFailedError is
    the only non-fatal one and is logged instead of raised past the
    compositor.

Key Classes:
    - ExportError: Base class for all export failures
    - MissingMapElementError: Template has no visible map element
    - CaptureFailedError: Screenshot/view navigation failed
    - AssetLoadFailedError: Image/logo element could not be loaded
    - EncodingFailedError: Serialization of the page failed
    - ExportInProgressError: A job is already running

Used By:
    - atlas_export.capture.screenshot
    - atlas_export.layout.compositor
    - atlas_export.output.encoder
    - atlas_export.controller
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for export pipeline failures."""
    pass


class MissingMapElementError(ExportError):
    """Template has no visible map element."""

    def __init__(self, template_name: str) -> None:
        super().__init__(f"Template '{template_name}' has no map element")
        self.template_name = template_name


class CaptureFailedError(ExportError):
    """Capturing the map raster failed. The view has been restored."""
    pass


class AssetLoadFailedError(ExportError):
    """An image or logo could not be loaded (non-fatal)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to load image: {url} ({reason})")
        self.url = url
        self.reason = reason


class EncodingFailedError(ExportError):
    """Writing the composed page to the output format failed."""
    pass


class ExportInProgressError(ExportError):
    """An export job is already running."""
    pass
