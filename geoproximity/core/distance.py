"""
Distance calculations for proximity search.

Haversine formula for great-circle distance between two lat/lon points,
plus the short labels shown next to nearby results.
"""

import math

EARTH_RADIUS_KM = 6371.0


def to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a display would (0.125 -> 0.13), unlike the banker's rounding of round()."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points in kilometers,
    rounded to 2 decimal places.
    """
    dlat = to_radians(lat2 - lat1)
    dlon = to_radians(lon2 - lon1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(to_radians(lat1)) * math.cos(to_radians(lat2)) * math.sin(dlon / 2) ** 2)
    # Guard against a drifting a few ulps above 1 for antipodal points.
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round_half_up(EARTH_RADIUS_KM * c, 2)


def format_distance(distance_km: float) -> str:
    """Whole meters below one kilometer, otherwise kilometers without trailing zeros."""
    if distance_km < 1:
        return f"{int(round_half_up(distance_km * 1000))}m"
    km = f"{distance_km:.2f}".rstrip("0").rstrip(".")
    return f"{km}km"
