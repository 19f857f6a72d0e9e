import io

import pytest
import requests
from PIL import Image

from azmap import raster
from azmap.raster import SourceRaster, encode_png, load_world_map


class FakeResponse:
    def __init__(self, content, status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def png_bytes(size=(8, 4), color=(1, 2, 3)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def test_source_raster_converts_to_rgba():
    src = SourceRaster(Image.new("L", (6, 3), 128))
    assert src.size == (6, 3)
    assert src.width == 6
    assert src.height == 3
    assert src.pixel(5, 2) == (128, 128, 128, 255)


def test_source_raster_rejects_empty_image():
    with pytest.raises(ValueError):
        SourceRaster(Image.new("RGB", (0, 4)))


def test_load_world_map_from_path(world_png):
    world = load_world_map(str(world_png))
    assert world.size == (36, 18)
    assert world.pixel(1, 1) == (7, 14, 99, 255)


def test_load_world_map_from_file_url(world_png):
    world = load_world_map(f"file://{world_png}")
    assert world.size == (36, 18)


def test_load_world_map_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_world_map(str(tmp_path / "nope.png"))


def test_load_world_map_not_an_image(tmp_path):
    path = tmp_path / "world.png"
    path.write_text("not a png")
    with pytest.raises(OSError):
        load_world_map(str(path))


def test_load_world_map_unsupported_scheme():
    with pytest.raises(ValueError):
        load_world_map("ftp://example.com/world.png")


def test_load_world_map_from_url(monkeypatch):
    calls = []

    def fake_get(self, url, timeout):
        calls.append((url, timeout, self.headers["User-Agent"]))
        return FakeResponse(png_bytes())

    monkeypatch.setattr(requests.Session, "get", fake_get)
    world = load_world_map("https://example.com/world.png", timeout=5)
    assert world.size == (8, 4)
    assert world.pixel(0, 0) == (1, 2, 3, 255)
    assert calls == [("https://example.com/world.png", 5, raster.HEADERS["User-Agent"])]


def test_load_world_map_http_error(monkeypatch):
    monkeypatch.setattr(requests.Session, "get",
                        lambda self, url, timeout: FakeResponse(b"", status=404))
    with pytest.raises(requests.HTTPError):
        load_world_map("http://example.com/world.png")


def test_encode_png_keeps_transparency_and_metadata():
    img = Image.new("RGBA", (5, 5))
    img.putpixel((2, 2), (9, 8, 7, 255))
    data = encode_png(img, {"Title": "centered on 0° N, 0° E"})
    decoded = Image.open(io.BytesIO(data))
    assert decoded.mode == "RGBA"
    assert decoded.getpixel((0, 0)) == (0, 0, 0, 0)
    assert decoded.getpixel((2, 2)) == (9, 8, 7, 255)
    assert decoded.text["Title"] == "centered on 0° N, 0° E"


def test_encode_png_without_metadata():
    data = encode_png(Image.new("RGBA", (3, 3)))
    assert data.startswith(b"\x89PNG")
