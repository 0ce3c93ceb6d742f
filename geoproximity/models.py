"""Core data models shared by the address resolver and the proximity ranker."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional


class InputError(ValueError):
    """Raised when a coordinate or search parameter is out of range or malformed."""


def _to_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InputError(f"{name} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InputError(f"{name} must be numeric, got {value!r}") from None
    if not math.isfinite(number):
        raise InputError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        latitude = _to_float(self.latitude, "latitude")
        longitude = _to_float(self.longitude, "longitude")
        if not -90.0 <= latitude <= 90.0:
            raise InputError(f"latitude must be within [-90, 90], got {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise InputError(f"longitude must be within [-180, 180], got {longitude}")
        object.__setattr__(self, "latitude", latitude)
        object.__setattr__(self, "longitude", longitude)

    @classmethod
    def parse(cls, latitude: Any, longitude: Any) -> "Coordinate":
        """Build a coordinate from loosely typed input (query strings, JSON, CLI args)."""
        if latitude is None or longitude is None:
            raise InputError("latitude and longitude are required")
        return cls(latitude, longitude)


def parse_accuracy(value: Any) -> Optional[float]:
    """Accuracy in meters as reported by the device; blank means unknown."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    accuracy = _to_float(value, "accuracy")
    if accuracy < 0:
        raise InputError(f"accuracy must not be negative, got {value!r}")
    return accuracy


def format_coordinates(latitude: float, longitude: float) -> str:
    return f"{latitude}, {longitude}"


@dataclass(frozen=True)
class AddressComponents:
    """Field-level breakdown of a single reverse-geocoding result.

    Textual fields are always strings; a field the upstream omitted is "".
    """

    latitude: float
    longitude: float
    coordinates: str = ""
    street_address: str = ""
    house_number: str = ""
    building: str = ""
    area: str = ""
    district: str = ""
    city: str = ""
    governorate: str = ""
    country: str = ""
    postcode: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class ResolvedLocation:
    latitude: float
    longitude: float
    address: str
    address_components: AddressComponents
    accuracy: Optional[float] = None
