"""
Module: controller

Purpose:
    Orchestrate one export job and publish its progress.
    Prepare → Capture → Compose → Encode

Key Functions:
    - export_map(): One-shot export without a long-lived controller

Key Classes:
    - ExportController: Single-flight job runner with status reporting
    - ExportRequest: Inputs of one job
    - ExportResult: Output of a finished job
    - ExportJob: Observable job state
    - JobStatus: Job lifecycle states

Dependencies:
    - atlas_export.capture: Map screenshot and legend
    - atlas_export.layout: Page composition
    - atlas_export.output: File encoding

Used By:
    - atlas_export.cli
    - Host applications embedding the exporter
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from atlas_export.assets import DefaultImageLoader, ImageLoader
from atlas_export.capture import MapSurface, capture_map, derive_legend_entries
from atlas_export.core.models import ExportGeometry, Template
from atlas_export.errors import ExportInProgressError, MissingMapElementError
from atlas_export.layout import compose_layout, element_rect, page_size_px
from atlas_export.output import OutputFormat, encode, output_filename, unique_path

from .config import ExporterConfig

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    """Export job lifecycle."""
    IDLE = "idle"
    PREPARING = "preparing"
    CAPTURING_SCREENSHOT = "capturing-screenshot"
    COMPOSING = "composing"
    ENCODING = "encoding"
    DONE = "done"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value

    @property
    def is_active(self) -> bool:
        return self in _ACTIVE

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.ERROR)


_ACTIVE = frozenset({
    JobStatus.PREPARING,
    JobStatus.CAPTURING_SCREENSHOT,
    JobStatus.COMPOSING,
    JobStatus.ENCODING,
})

_STATUS_MESSAGES = {
    JobStatus.IDLE: "",
    JobStatus.PREPARING: "Preparing export...",
    JobStatus.CAPTURING_SCREENSHOT: "Capturing map...",
    JobStatus.COMPOSING: "Composing layout...",
    JobStatus.ENCODING: "Generating file...",
    JobStatus.DONE: "Export complete!",
}


@dataclass(frozen=True)
class ExportRequest:
    """
    Inputs of one export job (immutable).

    Attributes:
        template: Layout template
        output_format: PDF, PNG or JPG
        title: Map title; also names the output file
        geometry: Resolved export rectangle and scale
    """
    template: Template
    output_format: OutputFormat
    title: str
    geometry: ExportGeometry


@dataclass(frozen=True)
class ExportResult:
    """
    Finished export (immutable).

    Attributes:
        path: Written file
        output_format: Format of the file
        page_size_px: Page raster size
        warnings: Non-fatal problems (e.g. images that failed to load)
    """
    path: Path
    output_format: OutputFormat
    page_size_px: Tuple[int, int]
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExportJob:
    """
    Snapshot of the current job, published on every status change.

    Attributes:
        status: Lifecycle state
        progress_message: Human-readable text for the current step
        error_message: Verbatim error text, set only in ERROR
        result: Set once DONE
    """
    status: JobStatus = JobStatus.IDLE
    progress_message: str = ""
    error_message: Optional[str] = None
    result: Optional[ExportResult] = field(default=None)


class ExportController:
    """
    Runs export jobs one at a time against a live map.

    A second ``start()`` while a job is active is refused. Closing the
    panel does not cancel a running job; it finishes in the background.

    Example:
        >>> controller = ExportController(surface, ExporterConfig(output_dir=Path("out")))
        >>> result = await controller.start(request)
        >>> result.path
        PosixPath('out/Parcels_2024-03-01.pdf')
    """

    def __init__(
        self,
        surface: MapSurface,
        config: Optional[ExporterConfig] = None,
        image_loader: Optional[ImageLoader] = None,
        on_change: Optional[Callable[[ExportJob], None]] = None,
    ) -> None:
        self.surface = surface
        self.config = config or ExporterConfig()
        self.image_loader = image_loader or DefaultImageLoader(timeout=self.config.image_timeout)
        self.on_change = on_change
        self._job = ExportJob()

    @property
    def job(self) -> ExportJob:
        return self._job

    @property
    def is_busy(self) -> bool:
        return self._job.status.is_active

    async def start(self, request: ExportRequest) -> ExportResult:
        """
        Run one export job to completion.

        Returns:
            ExportResult for the written file

        Raises:
            ExportInProgressError: If a job is already running
            MissingMapElementError: If the template has no visible map
            CaptureFailedError / EncodingFailedError: Fatal pipeline errors
            asyncio.CancelledError: Re-raised after the job is set to ERROR
        """
        if self.is_busy:
            raise ExportInProgressError("An export is already in progress")

        try:
            self._set(JobStatus.PREPARING)
            result = await self._run(request)
        except asyncio.CancelledError:
            logger.warning(f"Export of '{request.template.name}' cancelled")
            self._set(JobStatus.ERROR, error="Export cancelled")
            raise
        except Exception as e:
            logger.exception(f"Export of '{request.template.name}' failed")
            self._set(JobStatus.ERROR, error=str(e))
            raise

        self._set(JobStatus.DONE, result=result)
        return result

    def dismiss(self) -> None:
        """Acknowledge a finished or failed job."""
        if self._job.status.is_terminal:
            self._set(JobStatus.IDLE)

    def close(self) -> None:
        """Panel closed. A running job is left to finish."""
        if self.is_busy:
            logger.info(f"Export panel closed during {self._job.status}, job continues")
            return
        self.dismiss()

    async def _run(self, request: ExportRequest) -> ExportResult:
        config = self.config
        template = request.template

        map_element = template.map_element
        if map_element is None:
            raise MissingMapElementError(template.name)

        page_size = page_size_px(template, config.dpi)
        map_size = element_rect(map_element, page_size).size
        logger.info(
            f"Export '{template.name}': page {page_size[0]}x{page_size[1]} px, "
            f"map {map_size[0]}x{map_size[1]} px"
        )

        self._set(JobStatus.CAPTURING_SCREENSHOT)
        map_image = await capture_map(
            self.surface,
            request.geometry,
            map_size,
            overlay_layer_id=config.overlay_layer_id,
            settle_delay=config.settle_delay,
            idle_timeout=config.idle_timeout,
        )

        self._set(JobStatus.COMPOSING)
        entries = derive_legend_entries(
            self.surface.layers,
            overlay_layer_id=config.overlay_layer_id,
            system_prefix=config.system_layer_prefix,
        )
        page = await compose_layout(
            template,
            map_image,
            entries,
            request.title,
            request.geometry,
            config=config.layout,
            image_loader=self.image_loader,
        )

        self._set(JobStatus.ENCODING)
        dest = unique_path(config.output_dir, output_filename(request.title, request.output_format))
        path = encode(
            page.image,
            request.output_format,
            template.page_dimensions,
            dest,
            dpi=config.dpi,
            jpeg_quality=config.jpeg_quality,
        )

        return ExportResult(
            path=path,
            output_format=OutputFormat(request.output_format),
            page_size_px=page_size,
            warnings=tuple(page.warnings),
        )

    def _set(
        self,
        status: JobStatus,
        error: Optional[str] = None,
        result: Optional[ExportResult] = None,
    ) -> None:
        # Replaced before on_change runs; a raising callback sees the new state.
        self._job = replace(
            self._job,
            status=status,
            progress_message=_STATUS_MESSAGES.get(status, ""),
            error_message=error,
            result=result,
        )
        logger.info(f"Export status: {status}" + (f" ({error})" if error else ""))
        if self.on_change is not None:
            self.on_change(self._job)


async def export_map(
    surface: MapSurface,
    request: ExportRequest,
    config: Optional[ExporterConfig] = None,
    image_loader: Optional[ImageLoader] = None,
) -> ExportResult:
    """
    Export once with a throwaway controller.

    Example:
        >>> result = asyncio.run(export_map(surface, request))
    """
    controller = ExportController(surface, config, image_loader)
    return await controller.start(request)
