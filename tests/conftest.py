import pytest
from PIL import Image


def make_source(width, height, color_fn):
    """Build an RGB image whose pixel (x, y) is color_fn(x, y)."""
    img = Image.new("RGB", (width, height))
    for y in range(height):
        for x in range(width):
            img.putpixel((x, y), color_fn(x, y))
    return img


@pytest.fixture
def grid_source():
    """4x2 world map with a distinct solid color per pixel."""
    return make_source(4, 2, lambda x, y: (10 + 40 * x, 20 + 100 * y, 200))


@pytest.fixture
def world_png(tmp_path):
    path = tmp_path / "world.png"
    make_source(36, 18, lambda x, y: (7 * x, 14 * y, 99)).save(path)
    return path
