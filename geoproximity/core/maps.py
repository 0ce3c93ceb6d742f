"""Google Maps links for resolved and ranked locations."""

from typing import Optional
from urllib.parse import quote

MAPS_SEARCH_URL = "https://www.google.com/maps/search"
MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir"


def maps_url(latitude: float, longitude: float, name: str = "") -> str:
    query = quote(name, safe="") if name else f"{latitude},{longitude}"
    return f"{MAPS_SEARCH_URL}/{query}/@{latitude},{longitude},15z"


def directions_url(
    to_latitude: float,
    to_longitude: float,
    from_latitude: Optional[float] = None,
    from_longitude: Optional[float] = None,
) -> str:
    url = f"{MAPS_DIRECTIONS_URL}/"
    if from_latitude is not None and from_longitude is not None:
        url += f"{from_latitude},{from_longitude}/"
    return f"{url}{to_latitude},{to_longitude}"
