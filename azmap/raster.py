"""Load the equirectangular world map and encode finished charts as PNG."""

import io
import logging
import os
from urllib.parse import urlparse

import requests
from PIL import Image, PngImagePlugin

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "azmap/1.0 (azimuthal equidistant chart generator)",
}


class SourceRaster:
    """Read-only equirectangular world map.

    Pixel (0, 0) is longitude -pi, latitude +pi/2 (the northwest corner).
    The image is converted to RGBA once so samples are always 4-tuples, and
    it is never written to, so one instance can be shared between threads.
    """

    def __init__(self, image: Image.Image):
        width, height = image.size
        if width < 1 or height < 1:
            raise ValueError(f"source raster must be non-empty, got {width}x{height}")
        self._image = image.convert("RGBA")
        self._pixels = self._image.load()

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    def pixels(self):
        """Return the Pillow pixel accessor (index with [x, y])."""
        return self._pixels

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        return self._pixels[x, y]


def _is_url(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def _fetch(url: str, timeout: int) -> bytes:
    """Download a map image over HTTP(S)."""
    sess = requests.Session()
    sess.headers.update(HEADERS)
    resp = sess.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def load_world_map(location: str, timeout: int = 60) -> SourceRaster:
    """Load the world map from a local path or an http(s) URL.

    Any format Pillow can decode is accepted. Raises OSError (including
    FileNotFoundError and PIL.UnidentifiedImageError) for unreadable files and
    requests.RequestException for failed downloads.
    """
    if _is_url(location):
        logger.info(f"Downloading world map from {location}")
        data = _fetch(location, timeout)
        image = Image.open(io.BytesIO(data))
    else:
        if urlparse(location).scheme not in ("", "file") and not os.path.exists(location):
            raise ValueError(f"Unsupported map location: {location}")
        path = location[len("file://"):] if location.startswith("file://") else location
        logger.info(f"Reading world map from {path}")
        image = Image.open(path)
    image.load()
    raster = SourceRaster(image)
    logger.info(f"World map is {raster.width}x{raster.height}")
    return raster


def encode_png(image: Image.Image, text: dict[str, str] | None = None) -> bytes:
    """Encode an image as PNG bytes, with optional tEXt metadata."""
    info = None
    if text:
        info = PngImagePlugin.PngInfo()
        for key, value in text.items():
            info.add_text(key, value)
    buf = io.BytesIO()
    image.save(buf, format="PNG", pnginfo=info)
    return buf.getvalue()
