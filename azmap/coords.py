"""Coordinate conversions and labels for chart centers."""

import math

MM_PER_INCH = 25.4


def to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def format_degrees(degrees: float, pos_symbol: str, neg_symbol: str) -> str:
    """Format decimal degrees as degrees/minutes/seconds, e.g. 40° 25' 1.2" N.

    Minutes are shown when nonzero or when seconds are shown; seconds only
    when they round to at least a tenth.
    """
    symbol = pos_symbol
    if degrees < 0:
        degrees = -degrees
        symbol = neg_symbol
    if not math.isfinite(degrees * 36000):
        return f"{degrees:g}° {symbol}"
    # Work in tenths of a second so 40.4 reads 40° 24', not 40° 23' 60.0".
    deg, rem = divmod(round(degrees * 36000), 36000)
    minutes, tenths = divmod(rem, 600)

    out = f"{deg}° "
    if minutes > 0 or tenths > 0:
        out += f"{minutes}' "
    if tenths > 0:
        out += f'{tenths / 10:.1f}" '
    return out + symbol


def wrap_longitude(lon: float) -> float:
    """Wrap longitude degrees into (-180, 180]; non-finite values pass through."""
    if not math.isfinite(lon):
        return lon
    return -((-lon + 180) % 360 - 180)


def format_position(lat: float, lon: float) -> str:
    lon = wrap_longitude(lon)
    return f"{format_degrees(lat, 'N', 'S')}, {format_degrees(lon, 'E', 'W')}"


def chart_title(lat: float, lon: float, name: str = "") -> str:
    """Return the chart subtitle, e.g. 'centered on Madrid (40° 25' N, 3° 42' W)'."""
    label = format_position(lat, lon)
    name = name.strip()
    if name:
        label = f"{name} ({label})"
    return f"centered on {label}"


def diameter_for_print(inches: float, dpi: int) -> int:
    """Pixel diameter of a chart printed `inches` across at `dpi`."""
    diameter = int(dpi * inches)
    if diameter < 1:
        raise ValueError(f"{inches} in at {dpi} dpi is less than one pixel")
    return diameter
