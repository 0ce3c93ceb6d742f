"""Reverse geocoding of device coordinates into structured, display-ready addresses."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from geoproximity.core.config import Settings
from geoproximity.etl.address import build_components, format_address
from geoproximity.models import AddressComponents, Coordinate, InputError, ResolvedLocation, format_coordinates
from geoproximity.vendors.nominatim import GeocodeError, NominatimClient

logger = logging.getLogger(__name__)


class ReverseLookup(Protocol):
    def reverse(self, latitude: float, longitude: float) -> Dict[str, Any]:
        ...


class AddressResolver:
    """Resolve a coordinate with exactly one upstream lookup per call.

    Failures surface as GeocodeError; the resolver never retries and never
    substitutes a coordinate string on its own. Callers that prefer a degraded
    result use coordinate_fallback().
    """

    def __init__(self, lookup: ReverseLookup) -> None:
        self._lookup = lookup

    @classmethod
    def from_settings(cls, settings: Settings) -> "AddressResolver":
        return cls(NominatimClient(settings))

    def resolve(self, coordinate: Coordinate, accuracy: Optional[float] = None) -> ResolvedLocation:
        if not isinstance(coordinate, Coordinate):
            raise InputError("coordinate must be a Coordinate")
        latitude, longitude = coordinate.latitude, coordinate.longitude

        result = self._lookup.reverse(latitude, longitude)
        if not isinstance(result, dict):
            result = {}
        display_name = str(result.get("display_name") or "").strip()
        if not display_name:
            logger.warning("No address found for coordinates (%s, %s)", latitude, longitude)
            raise GeocodeError("no address found")

        bag = result.get("address")
        if not isinstance(bag, dict):
            bag = {}

        address = format_address(bag, display_name, latitude, longitude)
        components = build_components(bag, display_name, latitude, longitude)
        logger.info("Resolved coordinates (%s, %s) to %s", latitude, longitude, address)

        return ResolvedLocation(
            latitude=latitude,
            longitude=longitude,
            address=address,
            address_components=components,
            accuracy=accuracy,
        )


def coordinate_fallback(coordinate: Coordinate, accuracy: Optional[float] = None) -> ResolvedLocation:
    """Plain-coordinate location for callers that opt out of hard geocoding failures."""
    text = format_coordinates(coordinate.latitude, coordinate.longitude)
    return ResolvedLocation(
        latitude=coordinate.latitude,
        longitude=coordinate.longitude,
        address=text,
        address_components=AddressComponents(
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
            coordinates=text,
            display_name=text,
        ),
        accuracy=accuracy,
    )


def resolve_or_fallback(
    resolver: AddressResolver,
    coordinate: Coordinate,
    accuracy: Optional[float] = None,
) -> ResolvedLocation:
    try:
        return resolver.resolve(coordinate, accuracy=accuracy)
    except GeocodeError as exc:
        logger.warning("Falling back to coordinates for (%s, %s): %s", coordinate.latitude, coordinate.longitude, exc)
        return coordinate_fallback(coordinate, accuracy=accuracy)
