"""
Module: assets.loader

Purpose:
    Load image/logo elements' bitmaps. Remote URLs are fetched with
    requests; inline data URLs are decoded; anything else is treated as
    a local path. Blocking I/O runs in a worker thread so the event loop
    stays responsive.

Key Classes:
    - ImageLoader: Abstract async loader
    - DefaultImageLoader: http(s) / data: / filesystem loader

Dependencies:
    - requests: HTTP fetch
    - PIL: Decoding

Used By:
    - atlas_export.layout.compositor: image and logo elements
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes

import requests
from PIL import Image, UnidentifiedImageError

from atlas_export.errors import AssetLoadFailedError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ImageLoader(ABC):
    """Resolves an image URL to a decoded PIL image."""

    @abstractmethod
    async def load(self, url: str) -> Image.Image:
        """
        Load ``url``.

        Raises:
            AssetLoadFailedError: If the image cannot be fetched or decoded
        """


class DefaultImageLoader(ImageLoader):
    """
    Loader for http(s) URLs, data URLs and local paths.

    Args:
        timeout: HTTP timeout in seconds
        base_dir: Directory relative paths are resolved against
        session: Optional requests session (shared connection pool)

    Example:
        >>> loader = DefaultImageLoader(timeout=5)
        >>> logo = await loader.load("https://example.org/logo.png")
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        base_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.session = session or requests.Session()

    async def load(self, url: str) -> Image.Image:
        if not url:
            raise AssetLoadFailedError(str(url), "empty URL")
        return await asyncio.to_thread(self._load_sync, url)

    def _load_sync(self, url: str) -> Image.Image:
        try:
            data = self._read_bytes(url)
        except AssetLoadFailedError:
            raise
        except requests.RequestException as e:
            raise AssetLoadFailedError(url, str(e)) from e
        except Exception as e:
            # OSError for missing files, ValueError for paths with NUL bytes
            raise AssetLoadFailedError(url, str(e)) from e

        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise AssetLoadFailedError(url, f"not a decodable image: {e}") from e
        except Exception as e:
            # DecompressionBombError and other decoder failures
            raise AssetLoadFailedError(url, f"image rejected: {e}") from e

        logger.debug(f"Loaded image {_short(url)} ({image.width}x{image.height})")
        return image

    def _read_bytes(self, url: str) -> bytes:
        lowered = url.lower()
        if lowered.startswith(("http://", "https://")):
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.content
        if lowered.startswith("data:"):
            return _decode_data_url(url)
        path = Path(url)
        if not path.is_absolute():
            path = self.base_dir / path
        return path.read_bytes()


def _decode_data_url(url: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise AssetLoadFailedError(_short(url), "malformed data URL")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise AssetLoadFailedError(_short(url), f"invalid base64: {e}") from e
    return unquote_to_bytes(payload)


def _short(url: str) -> str:
    return url if len(url) <= 60 else url[:57] + "..."
