"""
Unit Tests for Image Asset Loading
"""

import asyncio
import base64
import io
from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

from atlas_export.assets import DefaultImageLoader
from atlas_export.errors import AssetLoadFailedError


def png_bytes(size=(8, 4), color=(255, 0, 0)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def load(loader, url):
    return asyncio.run(loader.load(url))


class TestDefaultImageLoader:
    """Tests for DefaultImageLoader."""

    def test_load_when_absolute_path_then_decodes(self, sample_image):
        image = load(DefaultImageLoader(), str(sample_image))
        assert image.size == (200, 100)

    def test_load_when_relative_path_then_resolved_against_base_dir(self, sample_image):
        loader = DefaultImageLoader(base_dir=sample_image.parent)
        assert load(loader, "sample.png").size == (200, 100)

    def test_load_when_missing_file_then_raises_asset_error(self, tmp_path):
        loader = DefaultImageLoader(base_dir=tmp_path)
        with pytest.raises(AssetLoadFailedError, match="Failed to load image: logos/missing.png"):
            load(loader, "logos/missing.png")

    def test_load_when_base64_data_url_then_decodes(self):
        url = "data:image/png;base64," + base64.b64encode(png_bytes()).decode("ascii")
        assert load(DefaultImageLoader(), url).size == (8, 4)

    def test_load_when_bad_base64_then_raises_asset_error(self):
        with pytest.raises(AssetLoadFailedError, match="invalid base64"):
            load(DefaultImageLoader(), "data:image/png;base64,@@@")

    def test_load_when_http_then_fetches_with_timeout(self):
        """Remote images are fetched through the session with the configured timeout."""
        session = MagicMock(spec=requests.Session)
        session.get.return_value.content = png_bytes((16, 16))
        loader = DefaultImageLoader(timeout=3, session=session)

        image = load(loader, "https://example.org/logo.png")

        assert image.size == (16, 16)
        session.get.assert_called_once_with("https://example.org/logo.png", timeout=3)
        session.get.return_value.raise_for_status.assert_called_once()

    def test_load_when_http_error_then_raises_asset_error(self):
        session = MagicMock(spec=requests.Session)
        session.get.side_effect = requests.ConnectionError("unreachable")
        loader = DefaultImageLoader(session=session)

        with pytest.raises(AssetLoadFailedError, match="unreachable") as exc_info:
            load(loader, "https://unreachable.invalid/logo.png")
        assert exc_info.value.url == "https://unreachable.invalid/logo.png"

    def test_load_when_not_an_image_then_raises_asset_error(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(AssetLoadFailedError, match="not a decodable image"):
            load(DefaultImageLoader(), str(path))

    def test_load_when_empty_url_then_raises_asset_error(self):
        with pytest.raises(AssetLoadFailedError, match="empty URL"):
            load(DefaultImageLoader(), "")

    def test_load_when_image_over_pixel_limit_then_raises_asset_error(self, sample_image, monkeypatch):
        """Pillow's decompression-bomb guard is reported like any other bad image."""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

        with pytest.raises(AssetLoadFailedError, match="image rejected"):
            load(DefaultImageLoader(), str(sample_image))

    def test_load_when_path_has_null_byte_then_raises_asset_error(self, tmp_path):
        loader = DefaultImageLoader(base_dir=tmp_path)

        with pytest.raises(AssetLoadFailedError, match="null byte") as exc_info:
            load(loader, "logo\x00.png")
        assert isinstance(exc_info.value.__cause__, ValueError)
