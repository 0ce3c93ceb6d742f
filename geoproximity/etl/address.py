"""Utilities for turning Nominatim address bags into display-ready addresses."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from geoproximity.models import AddressComponents, format_coordinates

logger = logging.getLogger(__name__)

# Output field -> source keys, first non-blank wins.
COMPONENT_FIELDS: Dict[str, Tuple[str, ...]] = {
    "street_address": ("road",),
    "house_number": ("house_number",),
    "building": ("building", "shop", "amenity"),
    "area": ("suburb", "neighbourhood", "quarter"),
    "district": ("city_district", "district"),
    "city": ("city", "town", "municipality"),
    "governorate": ("state", "governorate", "province"),
    "country": ("country",),
    "postcode": ("postcode",),
}

# Segments appended after the street line, in display order.
LOCALITY_SEGMENTS: Tuple[Tuple[str, ...], ...] = (
    ("suburb", "neighbourhood", "quarter"),
    ("city_district", "district"),
    ("city", "town", "village", "municipality"),
    ("state", "governorate", "province"),
    ("country",),
)

DETAIL_KEYS: Tuple[str, ...] = ("building", "shop", "amenity")


def first_present(bag: Optional[Mapping[str, Any]], keys: Iterable[str]) -> str:
    for key in keys:
        value = (bag or {}).get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def street_line(bag: Optional[Mapping[str, Any]]) -> str:
    road = first_present(bag, ("road",))
    house_number = first_present(bag, ("house_number",))
    if road and house_number:
        return f"{house_number} {road}"
    return road or first_present(bag, ("pedestrian",))


def format_address(
    bag: Optional[Mapping[str, Any]],
    display_name: Optional[str],
    latitude: float,
    longitude: float,
) -> str:
    """Compose a human-readable address from an upstream address bag.

    Street line and locality segments are joined with ", ", a building/shop/amenity
    name is prepended with " - " and the postal code is appended in parentheses.
    With nothing usable in the bag the upstream display name is returned, and
    failing that the bare coordinates.
    """
    segments: List[str] = [street_line(bag)]
    segments.extend(first_present(bag, keys) for keys in LOCALITY_SEGMENTS)
    line = ", ".join(segment for segment in segments if segment)

    detail = first_present(bag, DETAIL_KEYS)
    if detail and line:
        line = f"{detail} - {line}"
    elif detail:
        line = detail

    if line:
        postcode = first_present(bag, ("postcode",))
        if postcode:
            line = f"{line} ({postcode})"
        return line

    fallback = (display_name or "").strip()
    if fallback:
        logger.debug("No address segments for (%s, %s); using display name", latitude, longitude)
        return fallback
    return format_coordinates(latitude, longitude)


def build_components(
    bag: Optional[Mapping[str, Any]],
    display_name: Optional[str],
    latitude: float,
    longitude: float,
) -> AddressComponents:
    fields = {name: first_present(bag, keys) for name, keys in COMPONENT_FIELDS.items()}
    return AddressComponents(
        latitude=latitude,
        longitude=longitude,
        coordinates=format_coordinates(latitude, longitude),
        display_name=(display_name or "").strip(),
        **fields,
    )
