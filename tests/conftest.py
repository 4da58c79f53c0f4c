import asyncio
import sys
from pathlib import Path

import pytest
from PIL import Image, ImageChops

# Add src to sys.path so we can import atlas_export
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from atlas_export.capture import LayerSymbol, MapLayer, StaticImageSurface  # noqa: E402
from atlas_export.core.models import ExportGeometry  # noqa: E402
from atlas_export.core.utils.serialization import template_from_dict  # noqa: E402


BASEMAP_EXTENT = (0.0, 0.0, 20000.0, 15000.0)
VIEWPORT = (400, 300)

RED = (255, 0, 0)
BLUE = (0, 0, 255)


# ─────────────────────────────────────────────────────────────────────────────
# Template documents
# ─────────────────────────────────────────────────────────────────────────────

def template_doc(**overrides) -> dict:
    """Letter landscape template document with one of every element."""
    doc = {
        "id": "letter-standard",
        "name": "Letter Standard",
        "pageSize": "letter-landscape",
        "backgroundColor": "#ffffff",
        "enabled": True,
        "elements": [
            {"id": "title", "type": "title", "x": 0, "y": 0, "width": 100, "height": 8,
             "content": {"text": "Map Title", "fontSize": 24, "fontWeight": "bold", "align": "center"}},
            {"id": "map", "type": "map", "x": 2, "y": 10, "width": 80, "height": 70},
            {"id": "legend", "type": "legend", "x": 84, "y": 10, "width": 14, "height": 40,
             "content": {"title": "Legend", "showTitle": True}},
            {"id": "scalebar", "type": "scalebar", "x": 84, "y": 52, "width": 14, "height": 8,
             "content": {"units": "feet"}},
            {"id": "north", "type": "northArrow", "x": 86, "y": 62, "width": 10, "height": 12},
            {"id": "notes", "type": "text", "x": 2, "y": 84, "width": 60, "height": 12,
             "content": {"text": "Prepared by the planning department.", "fontSize": 10}},
        ],
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def make_template_doc():
    return template_doc


@pytest.fixture
def letter_template():
    return template_from_dict(template_doc())


@pytest.fixture
def mapless_template():
    doc = template_doc()
    doc["elements"] = [el for el in doc["elements"] if el["type"] != "map"]
    return template_from_dict(doc)


@pytest.fixture
def geometry():
    """Ground rectangle with the map element's 1320x892 aspect, 400 ft/in."""
    return ExportGeometry(
        xmin=4000, ymin=3000, xmax=7520, ymax=5378.67, scale=400,
        width_inches=8.8, height_inches=5.95, width_feet=3520, height_feet=2378.67,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Map surfaces
# ─────────────────────────────────────────────────────────────────────────────

def split_basemap(size=(400, 300)) -> Image.Image:
    """Left half red, right half blue."""
    img = Image.new("RGB", size, BLUE)
    img.paste(RED, (0, 0, size[0] // 2, size[1]))
    return img


def sample_layers():
    return [
        MapLayer("parcels", "Parcels", symbol=LayerSymbol("simple-fill", (255, 0, 0, 0.5))),
        MapLayer("roads", "Roads", symbol=LayerSymbol("simple-line", (40, 40, 40))),
        MapLayer("export-area-layer", "Export Area", kind="graphics"),
        MapLayer("atlas-selection", "Selection"),
    ]


class RecordingSurface(StaticImageSurface):
    """StaticImageSurface that records calls and can fail or stall on demand."""

    def __init__(self, *args, fail_on=None, stall_idle=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []
        self.fail_on = fail_on
        self.stall_idle = stall_idle

    async def go_to_extent(self, extent):
        self.calls.append("go_to_extent")
        if self.fail_on == "go_to_extent":
            raise RuntimeError("navigation failed")
        await super().go_to_extent(extent)

    async def wait_until_idle(self):
        self.calls.append("wait_until_idle")
        if self.stall_idle:
            await asyncio.sleep(3600)

    async def take_screenshot(self, rect, size):
        self.calls.append("take_screenshot")
        if self.fail_on == "take_screenshot":
            raise RuntimeError("screenshot failed")
        return await super().take_screenshot(rect, size)

    async def restore_view(self, state):
        self.calls.append("restore_view")
        await super().restore_view(state)


@pytest.fixture
def basemap_surface():
    return StaticImageSurface(split_basemap(), BASEMAP_EXTENT, VIEWPORT, layers=sample_layers())


@pytest.fixture
def make_surface():
    def _make(**kwargs):
        return RecordingSurface(split_basemap(), BASEMAP_EXTENT, VIEWPORT, layers=sample_layers(), **kwargs)
    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Misc
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def fixed_measure():
    """Deterministic font metrics: every character is 10 px wide."""
    return lambda s: len(s) * 10


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def blank_page():
    """Factory for an opaque RGBA page surface."""
    def _make(size=(300, 200), color=(255, 255, 255, 255)):
        return Image.new("RGBA", size, color)
    return _make


def changed_bbox(before: Image.Image, after: Image.Image):
    """Bounding box of pixels that differ (RGB), or None."""
    return ImageChops.difference(before.convert("RGB"), after.convert("RGB")).getbbox()


@pytest.fixture
def diff_bbox():
    return changed_bbox
