"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "GeoProximity/1.0"


class ConfigError(RuntimeError):
    """Raised when configuration values are missing or malformed."""


@dataclass(frozen=True)
class Settings:
    nominatim_url: str = DEFAULT_NOMINATIM_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = 10.0
    zoom: int = 18
    accept_language: Optional[str] = None
    max_distance_km: float = 50.0
    server_port: int = 8080


def _get_number(name: str, default: str, cast):
    raw = os.getenv(name, default).strip() or default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    nominatim_url = os.getenv("NOMINATIM_URL", "").strip() or DEFAULT_NOMINATIM_URL
    user_agent = os.getenv("GEOCODER_USER_AGENT", DEFAULT_USER_AGENT).strip()
    request_timeout = _get_number("GEOCODER_TIMEOUT", "10", float)
    zoom = _get_number("GEOCODER_ZOOM", "18", int)
    accept_language = os.getenv("GEOCODER_ACCEPT_LANGUAGE", "").strip() or None
    max_distance_km = _get_number("NEARBY_MAX_DISTANCE_KM", "50", float)
    server_port = _get_number("PORT", os.getenv("SERVER_PORT") or "8080", int)

    if not user_agent:
        logger.warning("GEOCODER_USER_AGENT is empty; reverse geocoding requests will be refused.")
    if max_distance_km < 0:
        raise ConfigError("NEARBY_MAX_DISTANCE_KM must not be negative")

    return Settings(
        nominatim_url=nominatim_url,
        user_agent=user_agent,
        request_timeout=request_timeout,
        zoom=zoom,
        accept_language=accept_language,
        max_distance_km=max_distance_km,
        server_port=server_port,
    )
