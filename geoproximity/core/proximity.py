"""
Proximity ranking of shops, service providers and other candidate locations.

Candidates come from heterogeneous sources, so the coordinate is located via an
ordered list of extractors (first match wins) instead of ad hoc key probing.
Ranking is pure: no I/O, no shared state, input candidates are never mutated.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from geoproximity.core.distance import format_distance, haversine_km
from geoproximity.models import Coordinate, InputError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DISTANCE_KM = 50.0


class CoordinateExtractor(Protocol):
    def extract(self, candidate: Mapping[str, Any]) -> Optional[Coordinate]:
        ...


class KeyPairExtractor:
    """Read a coordinate from a fixed latitude/longitude key pair."""

    def __init__(self, lat_key: str, lon_key: str) -> None:
        self.lat_key = lat_key
        self.lon_key = lon_key

    def extract(self, candidate: Mapping[str, Any]) -> Optional[Coordinate]:
        latitude = candidate.get(self.lat_key)
        longitude = candidate.get(self.lon_key)
        if latitude in (None, "") or longitude in (None, ""):
            return None
        try:
            return Coordinate(latitude, longitude)
        except InputError as exc:
            raise InputError(f"invalid {self.lat_key}/{self.lon_key}: {exc}") from exc

    def __repr__(self) -> str:
        return f"KeyPairExtractor({self.lat_key!r}, {self.lon_key!r})"


DEFAULT_EXTRACTORS: Tuple[CoordinateExtractor, ...] = (
    KeyPairExtractor("shop_latitude", "shop_longitude"),
    KeyPairExtractor("service_latitude", "service_longitude"),
    KeyPairExtractor("latitude", "longitude"),
)


def extract_coordinate(
    candidate: Any,
    extractors: Sequence[CoordinateExtractor] = DEFAULT_EXTRACTORS,
) -> Optional[Coordinate]:
    if not isinstance(candidate, Mapping):
        return None
    for extractor in extractors:
        coordinate = extractor.extract(candidate)
        if coordinate is not None:
            return coordinate
    return None


def _validate_radius(max_distance_km: Any) -> float:
    if isinstance(max_distance_km, bool):
        raise InputError("max_distance_km must be numeric")
    try:
        radius = float(max_distance_km)
    except (TypeError, ValueError):
        raise InputError(f"max_distance_km must be numeric, got {max_distance_km!r}") from None
    if not math.isfinite(radius) or radius < 0:
        raise InputError(f"max_distance_km must be a non-negative finite number, got {max_distance_km!r}")
    return radius


def find_nearby(
    user: Coordinate,
    candidates: Iterable[Mapping[str, Any]],
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    extractors: Sequence[CoordinateExtractor] = DEFAULT_EXTRACTORS,
) -> List[Dict[str, Any]]:
    """Rank candidates within max_distance_km of user, nearest first.

    Each returned dict is a copy of the candidate with `distance` (km, rounded to
    2 decimals) and `distance_text` added. Candidates without a recognised
    coordinate are skipped; ties keep their input order.
    """
    if not isinstance(user, Coordinate):
        raise InputError("user location must be a Coordinate")
    radius = _validate_radius(max_distance_km)

    located = []
    skipped = 0
    for candidate in candidates:
        coordinate = extract_coordinate(candidate, extractors)
        if coordinate is None:
            skipped += 1
            continue
        located.append((candidate, coordinate))

    ranked: List[Dict[str, Any]] = []
    for candidate, coordinate in located:
        distance = haversine_km(user.latitude, user.longitude, coordinate.latitude, coordinate.longitude)
        if distance > radius:
            continue
        entry = dict(candidate)
        entry["distance"] = distance
        entry["distance_text"] = format_distance(distance)
        ranked.append(entry)

    ranked.sort(key=lambda entry: entry["distance"])
    logger.debug(
        "find_nearby: %d within %.2fkm, %d beyond, %d without coordinates",
        len(ranked),
        radius,
        len(located) - len(ranked),
        skipped,
    )
    return ranked
