#!/usr/bin/env python3
"""AZMAP - Azimuthal equidistant chart generator.

Reprojects an equirectangular world map around a chosen point and writes
the circular chart as a PNG with transparent corners.
"""

import argparse
import logging
import os
import sys
import time

import requests

from azmap.coords import MM_PER_INCH, chart_title, diameter_for_print, to_radians
from azmap.projection import Projector
from azmap.raster import encode_png, load_world_map

WORLD_MAP = os.environ.get("AZMAP_WORLD_MAP", "assets/world.png")
DPI = int(os.environ.get("AZMAP_DPI", 300))
OUTPUT = os.environ.get("AZMAP_OUTPUT", "chart.png")
DEFAULT_INCHES = 7.5

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def latitude(value: str) -> float:
    lat = float(value)
    if not -90.0 <= lat <= 90.0:
        raise argparse.ArgumentTypeError(f"latitude must be within [-90, 90], got {value}")
    return lat


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render an azimuthal equidistant world chart centered on a point.",
    )
    parser.add_argument("--lat", type=latitude, required=True,
                        help="Center latitude in decimal degrees (north positive)")
    parser.add_argument("--lon", type=float, required=True,
                        help="Center longitude in decimal degrees (east positive)")
    parser.add_argument("--name", default="",
                        help="Place name recorded in the PNG title")
    parser.add_argument("--map", default=WORLD_MAP,
                        help="Equirectangular world map: file path or http(s) URL")
    size = parser.add_mutually_exclusive_group()
    size.add_argument("--diameter", type=int,
                      help="Chart diameter in pixels")
    size.add_argument("--inches", type=float,
                      help=f"Printed chart diameter in inches (default {DEFAULT_INCHES})")
    size.add_argument("--mm", type=float,
                      help="Printed chart diameter in millimetres")
    parser.add_argument("--dpi", type=int, default=DPI,
                        help="Print resolution used with --inches/--mm")
    parser.add_argument("-o", "--output", default=OUTPUT,
                        help="Output PNG path")
    parser.add_argument("--timeout", type=int, default=60,
                        help="Download timeout in seconds for URL maps")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose logging")
    return parser


def resolve_diameter(args: argparse.Namespace) -> int:
    if args.diameter is not None:
        if args.diameter < 1:
            raise ValueError(f"diameter must be at least 1 pixel, got {args.diameter}")
        return args.diameter
    if args.mm is not None:
        return diameter_for_print(args.mm / MM_PER_INCH, args.dpi)
    inches = args.inches if args.inches is not None else DEFAULT_INCHES
    return diameter_for_print(inches, args.dpi)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        title = chart_title(args.lat, args.lon, args.name)
        diameter = resolve_diameter(args)
        projector = Projector(to_radians(args.lat), to_radians(args.lon), diameter)
        world = load_world_map(args.map, timeout=args.timeout)

        logger.info(f"Generating {diameter}px chart {title}")
        started = time.perf_counter()
        chart = projector.project(world)
        logger.info(f"Projection took {time.perf_counter() - started:.2f}s")

        png = encode_png(chart, {
            "Title": f"Azimuthal Equidistant Chart {title}",
            "Center": f"{args.lat:.6f},{args.lon:.6f}",
        })
        with open(args.output, "wb") as f:
            f.write(png)
    except (OSError, ValueError, requests.RequestException) as e:
        logger.error(f"Chart generation failed: {e}")
        return 1

    logger.info(f"Wrote {args.output} ({len(png)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
