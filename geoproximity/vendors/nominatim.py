"""Client utilities for the Nominatim reverse-geocoding API."""

import logging
import threading
from typing import Any, Dict, Optional

import requests

from geoproximity.core.config import ConfigError, Settings

logger = logging.getLogger(__name__)


class GeocodeError(RuntimeError):
    """Raised when a reverse lookup fails or yields nothing usable."""


class NominatimClient:
    """Reverse geocoder bound to one configuration.

    requests.Session is not documented as thread-safe, so unless a session is
    injected each thread gets its own. An injected session is used as-is and
    is the caller's to confine to one thread.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        if not settings.user_agent:
            raise ConfigError("A User-Agent identifying the application is required by Nominatim.")
        self._settings = settings
        self._session = session
        self._local = threading.local()

    def _get_session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    def reverse(self, latitude: float, longitude: float) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "lat": latitude,
            "lon": longitude,
            "format": "json",
            "zoom": self._settings.zoom,
            "addressdetails": 1,
        }
        if self._settings.accept_language:
            params["accept-language"] = self._settings.accept_language

        try:
            response = self._get_session().get(
                self._settings.nominatim_url,
                params=params,
                headers={"User-Agent": self._settings.user_agent},
                timeout=self._settings.request_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Reverse geocoding failed for (%s, %s): %s", latitude, longitude, exc)
            raise GeocodeError(f"reverse geocoding request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Reverse geocoding returned a non-JSON body for (%s, %s)", latitude, longitude)
            raise GeocodeError("reverse geocoding returned a malformed response") from exc

        if not isinstance(payload, dict):
            raise GeocodeError("reverse geocoding returned a malformed response")
        if "error" in payload:
            logger.info("Nominatim error for (%s, %s): %s", latitude, longitude, payload.get("error"))
            raise GeocodeError("no address found")

        logger.debug("Nominatim returned %s for (%s, %s)", payload.get("display_name"), latitude, longitude)
        return payload
