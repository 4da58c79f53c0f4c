"""
Unit Tests for the Export Controller

Tests for the job state machine, single-flight behaviour and the full
prepare → capture → compose → encode pipeline.
"""

import asyncio
import re
from pathlib import Path

import pytest
from PIL import Image

from atlas_export.assets import ImageLoader
from atlas_export.config import ExporterConfig
from atlas_export.controller import (
    ExportController,
    ExportRequest,
    JobStatus,
    export_map,
)
from atlas_export.core.utils.serialization import template_from_dict
from atlas_export.errors import (
    CaptureFailedError,
    ExportInProgressError,
    MissingMapElementError,
)
from atlas_export.output import OutputFormat


class NoImages(ImageLoader):
    async def load(self, url):
        raise AssertionError(f"unexpected image load: {url}")


@pytest.fixture
def config(tmp_path):
    return ExporterConfig(output_dir=tmp_path, settle_delay=0.01, idle_timeout=0.5)


def make_controller(surface, config, image_loader=None):
    statuses = []
    controller = ExportController(
        surface,
        config,
        image_loader or NoImages(),
        on_change=lambda job: statuses.append(job.status),
    )
    return controller, statuses


def request_for(template, geometry, fmt=OutputFormat.PDF, title="Parcel Map"):
    return ExportRequest(template=template, output_format=fmt, title=title, geometry=geometry)


class TestExportController:
    """Tests for ExportController."""

    def test_start_when_successful_then_walks_every_status(self, make_surface, letter_template, geometry, config):
        """PREPARING → CAPTURING_SCREENSHOT → COMPOSING → ENCODING → DONE."""
        controller, statuses = make_controller(make_surface(), config)

        result = asyncio.run(controller.start(request_for(letter_template, geometry)))

        assert statuses == [
            JobStatus.PREPARING,
            JobStatus.CAPTURING_SCREENSHOT,
            JobStatus.COMPOSING,
            JobStatus.ENCODING,
            JobStatus.DONE,
        ]
        assert controller.job.status == JobStatus.DONE
        assert controller.job.result == result
        assert controller.job.progress_message == "Export complete!"
        assert controller.job.error_message is None

    def test_start_when_successful_then_writes_dated_file(self, make_surface, letter_template, geometry, config):
        controller, _ = make_controller(make_surface(), config)

        result = asyncio.run(controller.start(request_for(letter_template, geometry)))

        assert result.path.parent == config.output_dir
        assert re.fullmatch(r"Parcel_Map_\d{4}-\d{2}-\d{2}\.pdf", result.path.name)
        assert result.path.read_bytes().startswith(b"%PDF")
        assert result.page_size_px == (1650, 1275)
        assert result.warnings == ()

    def test_start_when_png_then_page_pixels_written(self, make_surface, letter_template, geometry, config):
        controller, _ = make_controller(make_surface(), config)

        result = asyncio.run(controller.start(request_for(letter_template, geometry, OutputFormat.PNG)))

        with Image.open(result.path) as written:
            assert written.size == (1650, 1275)

    def test_start_when_run_twice_then_second_file_not_overwritten(
        self, make_surface, letter_template, geometry, config,
    ):
        controller, _ = make_controller(make_surface(), config)
        request = request_for(letter_template, geometry, OutputFormat.JPG)

        first = asyncio.run(controller.start(request))
        second = asyncio.run(controller.start(request))

        assert first.path != second.path
        assert second.path.name.endswith(" (1).jpg")

    def test_start_when_successful_then_map_view_restored(self, make_surface, letter_template, geometry, config):
        surface = make_surface()
        original = surface.view_state
        controller, _ = make_controller(surface, config)

        asyncio.run(controller.start(request_for(letter_template, geometry)))

        assert surface.view_state == original
        assert surface.find_layer("export-area-layer").visible is True

    def test_start_when_no_map_element_then_rejects_before_navigation(
        self, make_surface, mapless_template, geometry, config,
    ):
        """A template without a map fails in PREPARING and never touches the view."""
        surface = make_surface()
        controller, statuses = make_controller(surface, config)

        with pytest.raises(MissingMapElementError):
            asyncio.run(controller.start(request_for(mapless_template, geometry)))

        assert surface.calls == []
        assert statuses == [JobStatus.PREPARING, JobStatus.ERROR]
        assert controller.job.error_message == "Template 'Letter Standard' has no map element"
        assert controller.job.progress_message == ""
        assert list(config.output_dir.iterdir()) == []

    def test_start_when_capture_fails_then_error_status_and_view_restored(
        self, make_surface, letter_template, geometry, config,
    ):
        surface = make_surface(fail_on="take_screenshot")
        original = surface.view_state
        controller, statuses = make_controller(surface, config)

        with pytest.raises(CaptureFailedError):
            asyncio.run(controller.start(request_for(letter_template, geometry)))

        assert statuses[-1] == JobStatus.ERROR
        assert "screenshot failed" in controller.job.error_message
        assert surface.view_state == original

    def test_start_when_image_unreachable_then_completes_with_warning(
        self, make_surface, make_template_doc, geometry, config, tmp_path,
    ):
        """A broken logo does not fail the export."""
        doc = make_template_doc()
        doc["elements"].append(
            {"id": "logo", "type": "logo", "x": 86, "y": 76, "width": 10, "height": 8,
             "content": {"url": str(tmp_path / "missing-logo.png")}}
        )
        template = template_from_dict(doc)
        controller = ExportController(make_surface(), config)

        result = asyncio.run(controller.start(request_for(template, geometry)))

        assert controller.job.status == JobStatus.DONE
        assert len(result.warnings) == 1
        assert "missing-logo.png" in result.warnings[0]

    def test_start_when_job_running_then_second_start_refused(
        self, make_surface, letter_template, geometry, config,
    ):
        """Only one export runs at a time."""
        controller, _ = make_controller(make_surface(), config)
        request = request_for(letter_template, geometry)

        async def both():
            return await asyncio.gather(
                controller.start(request),
                controller.start(request),
                return_exceptions=True,
            )

        first, second = asyncio.run(both())

        assert first.path.exists()
        assert isinstance(second, ExportInProgressError)
        assert controller.job.status == JobStatus.DONE

    def test_close_when_job_running_then_job_continues(self, make_surface, letter_template, geometry, config):
        """Closing the panel mid-export does not cancel the job."""
        controller = None
        seen = []

        def on_change(job):
            seen.append(job.status)
            if job.status == JobStatus.CAPTURING_SCREENSHOT:
                controller.close()

        controller = ExportController(make_surface(), config, NoImages(), on_change=on_change)

        result = asyncio.run(controller.start(request_for(letter_template, geometry)))

        assert result.path.exists()
        assert seen[-1] == JobStatus.DONE

    def test_start_when_cancelled_mid_capture_then_controller_reusable(
        self, make_surface, letter_template, geometry, tmp_path,
    ):
        """A cancelled job ends in ERROR, so the next start() is accepted."""
        surface = make_surface(stall_idle=True)
        original = surface.view_state
        config = ExporterConfig(output_dir=tmp_path, settle_delay=0, idle_timeout=60)
        controller, statuses = make_controller(surface, config)
        request = request_for(letter_template, geometry)

        async def cancel_then_restart():
            task = asyncio.create_task(controller.start(request))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            cancelled = controller.job
            surface.stall_idle = False
            return cancelled, await controller.start(request)

        cancelled, result = asyncio.run(cancel_then_restart())

        assert cancelled.status == JobStatus.ERROR
        assert cancelled.error_message == "Export cancelled"
        assert JobStatus.CAPTURING_SCREENSHOT in statuses
        assert result.path.exists()
        assert controller.job.status == JobStatus.DONE
        assert surface.view_state == original

    def test_start_when_listener_raises_then_job_not_left_active(
        self, make_surface, letter_template, geometry, config,
    ):
        def on_change(job):
            if job.status == JobStatus.PREPARING:
                raise RuntimeError("listener broke")

        controller = ExportController(make_surface(), config, NoImages(), on_change=on_change)

        with pytest.raises(RuntimeError, match="listener broke"):
            asyncio.run(controller.start(request_for(letter_template, geometry)))

        assert controller.job.status == JobStatus.ERROR
        assert controller.job.error_message == "listener broke"
        assert not controller.is_busy

    def test_dismiss_when_done_then_idle(self, make_surface, letter_template, geometry, config):
        controller, statuses = make_controller(make_surface(), config)
        asyncio.run(controller.start(request_for(letter_template, geometry)))

        controller.dismiss()

        assert controller.job.status == JobStatus.IDLE
        assert controller.job.result is None
        assert statuses[-1] == JobStatus.IDLE

    def test_close_when_error_then_idle(self, make_surface, mapless_template, geometry, config):
        controller, _ = make_controller(make_surface(), config)
        with pytest.raises(MissingMapElementError):
            asyncio.run(controller.start(request_for(mapless_template, geometry)))

        controller.close()

        assert controller.job.status == JobStatus.IDLE
        assert not controller.is_busy

    def test_dismiss_when_idle_then_no_change(self, make_surface, config):
        controller, statuses = make_controller(make_surface(), config)
        controller.dismiss()
        assert statuses == []

    def test_export_map_when_called_then_returns_result(self, make_surface, letter_template, geometry, config):
        result = asyncio.run(export_map(make_surface(), request_for(letter_template, geometry), config, NoImages()))
        assert result.output_format == OutputFormat.PDF
        assert result.path.exists()


class TestJobStatus:
    """Tests for JobStatus helpers."""

    @pytest.mark.parametrize("status", [
        JobStatus.PREPARING,
        JobStatus.CAPTURING_SCREENSHOT,
        JobStatus.COMPOSING,
        JobStatus.ENCODING,
    ])
    def test_is_active_when_working_status_then_true(self, status):
        assert status.is_active
        assert not status.is_terminal

    @pytest.mark.parametrize("status", [JobStatus.DONE, JobStatus.ERROR])
    def test_is_terminal_when_finished_then_true(self, status):
        assert status.is_terminal
        assert not status.is_active


class TestExporterConfig:
    """Tests for ExporterConfig validation."""

    def test_init_when_defaults_then_150_dpi(self):
        config = ExporterConfig()
        assert config.dpi == 150
        assert config.jpeg_quality == 92
        assert config.overlay_layer_id == "export-area-layer"
        assert config.layout.dpi == 150

    def test_init_when_string_output_dir_then_path(self):
        assert ExporterConfig(output_dir="exports").output_dir == Path("exports")

    @pytest.mark.parametrize("kwargs,match", [
        ({"dpi": 0}, "dpi must be positive"),
        ({"jpeg_quality": 100}, "jpeg_quality"),
        ({"settle_delay": -1}, "settle_delay"),
        ({"idle_timeout": 0}, "idle_timeout"),
        ({"image_timeout": 0}, "image_timeout"),
    ])
    def test_init_when_invalid_then_raises_error(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            ExporterConfig(**kwargs)
