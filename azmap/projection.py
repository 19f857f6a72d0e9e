"""Azimuthal equidistant projection: equirectangular world raster -> circular chart."""

import logging
import math
from dataclasses import dataclass

from PIL import Image

from .raster import SourceRaster

logger = logging.getLogger(__name__)

HALF_DIAGONAL = math.sqrt(0.5)  # pixel center to pixel corner, in pixels


def wrap(value: float, period: float) -> float:
    """Wrap value into the half-open interval [0, period)."""
    result = value % period
    # A tiny negative value can round up to exactly `period`.
    if result >= period:
        result -= period
    return result


def source_pixel(lat: float, lon: float, width: int, height: int) -> tuple[int, int]:
    """Return the (x, y) source pixel holding the point (lat, lon), in radians.

    Longitude 0 lands on column width/2 and north is row 0. Out-of-range
    values wrap around rather than being clamped.
    """
    x = int(wrap(1.0 + lon / math.pi, 2.0) * width / 2)
    y = int(wrap(1.0 - 2.0 * lat / math.pi, 2.0) * height / 2)
    # Float rounding in the multiply can land exactly on the far edge.
    return x % width, y % height


@dataclass(frozen=True)
class RingSample:
    """Trig terms shared by the eight symmetric pixels at one angular distance."""
    dist: float
    sin_dist: float
    cos_dist: float
    lat_part1: float
    lat_part2: float
    long_part1: float
    long_part2: float


def octant_coords(octant: int, x: float, y: float, px: int, py: int,
                  diameter: int) -> tuple[float, float, int, int]:
    """Reflect a wedge pixel into one of the eight octants of the circle.

    Returns (x, y, out_x, out_y): the local offsets in radians and the output
    pixel they belong to.
    """
    out_x, out_y = px, py
    if octant in (1, 2, 5, 6):
        x, y = y, x
        out_x, out_y = out_y, out_x
    if octant in (1, 3, 4, 6):
        x = -x
    if octant in (1, 2, 4, 7):
        y = -y
    if 2 <= octant < 6:
        out_x = diameter - out_x - 1
    if octant >= 4:
        out_y = diameter - out_y - 1
    return x, y, out_x, out_y


class Projector:
    """Reprojects an equirectangular raster around a fixed center point.

    The outer edge of the output circle is the antipode of the center, so the
    whole sphere is visible. Per-center trig terms are computed once and the
    instance can be reused for any number of sources; it holds no mutable state.
    """

    def __init__(self, center_lat: float, center_lon: float, diameter: int):
        if not (math.isfinite(center_lat) and math.isfinite(center_lon)):
            raise ValueError(f"center must be finite, got ({center_lat}, {center_lon})")
        if diameter < 1:
            raise ValueError(f"diameter must be at least 1 pixel, got {diameter}")
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.diameter = diameter
        self.center = diameter / 2.0
        self.pixel_radians = math.pi / self.center
        # Slightly past the antipode so pixels straddling the rim are kept.
        self.max_distance = (self.center + HALF_DIAGONAL) * self.pixel_radians
        self.lat_sin = math.sin(center_lat)
        self.lat_cos = math.cos(center_lat)

    def ring_sample(self, dist: float) -> RingSample:
        """Compute the trig terms for a nonzero angular distance."""
        sin_dist = math.sin(dist)
        cos_dist = math.cos(dist)
        return RingSample(
            dist=dist,
            sin_dist=sin_dist,
            cos_dist=cos_dist,
            lat_part1=cos_dist * self.lat_sin,
            lat_part2=sin_dist * self.lat_cos / dist,
            long_part1=dist * self.lat_cos * cos_dist,
            long_part2=self.lat_sin * sin_dist,
        )

    def destination(self, sample: RingSample, x: float, y: float) -> tuple[float, float]:
        """Return the (lat, lon) at local offset (x, y) radians from the center."""
        # Rounding can push the sine a hair past 1 near the poles.
        lat_sin = max(-1.0, min(1.0, sample.lat_part1 + y * sample.lat_part2))
        lat = math.asin(lat_sin)
        lon = self.center_lon + math.atan2(
            x * sample.sin_dist, sample.long_part1 - y * sample.long_part2)
        return lat, lon

    def project(self, source) -> Image.Image:
        """Render the chart for `source` (a SourceRaster or a Pillow image).

        Returns a new RGBA image of side `diameter`. Pixels outside the circle
        stay fully transparent.
        """
        if not isinstance(source, SourceRaster):
            source = SourceRaster(source)
        width, height = source.width, source.height
        src = source.pixels()
        output = Image.new("RGBA", (self.diameter, self.diameter))
        out = output.load()

        center = self.center
        pixel_radians = self.pixel_radians
        logger.debug(f"Projecting {width}x{height} source to {self.diameter}px "
                     f"around ({self.center_lat:.6f}, {self.center_lon:.6f}) rad")

        for py in range(int(center + 0.5)):
            y = (center - py - 0.5) * pixel_radians
            for px in range(py + 1):
                x = (px + 0.5 - center) * pixel_radians
                dist = math.sqrt(x * x + y * y)
                if dist == 0:
                    out[px, py] = src[source_pixel(self.center_lat, self.center_lon,
                                                   width, height)]
                    continue
                if dist >= self.max_distance:
                    continue
                sample = self.ring_sample(dist)
                for octant in range(8):
                    x_coord, y_coord, out_x, out_y = octant_coords(
                        octant, x, y, px, py, self.diameter)
                    lat, lon = self.destination(sample, x_coord, y_coord)
                    out[out_x, out_y] = src[source_pixel(lat, lon, width, height)]
        return output


def project(source, center_lat: float, center_lon: float, diameter: int) -> Image.Image:
    """Project `source` around (center_lat, center_lon), in radians.

    Convenience wrapper around Projector for one-off charts. Any finite center
    is accepted and longitude wraps around; a NaN or infinite center, a
    diameter below 1 or an empty source raises ValueError before any pixel
    is computed.
    """
    return Projector(center_lat, center_lon, diameter).project(source)
