"""HTTP entrypoint exposing address resolution and nearby search (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from functools import lru_cache
from typing import Any, Dict

from flask import Flask, jsonify, request

from geoproximity.core.config import ConfigError, get_settings
from geoproximity.core.maps import maps_url
from geoproximity.core.proximity import find_nearby
from geoproximity.core.resolver import AddressResolver, resolve_or_fallback
from geoproximity.jobs.find_nearby import add_directions
from geoproximity.models import Coordinate, InputError, parse_accuracy
from geoproximity.vendors.nominatim import GeocodeError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

_TRUE_VALUES = {"1", "true", "yes"}


@lru_cache(maxsize=1)
def get_resolver() -> AddressResolver:
    return AddressResolver.from_settings(get_settings())


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, no upstream call."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "geocoder": settings.nominatim_url,
                "max_distance_km": settings.max_distance_km,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/resolve")
def resolve_address() -> Any:
    """
    Reverse geocode a coordinate.
    Required query params: lat, lon
    Optional: accuracy (meters), fallback (1/true/yes to return bare coordinates on lookup failure)
    """
    try:
        coordinate = Coordinate.parse(request.args.get("lat"), request.args.get("lon"))
        accuracy = parse_accuracy(request.args.get("accuracy"))
    except InputError as exc:
        return jsonify({"error": str(exc)}), 400

    fallback = request.args.get("fallback", "").lower() in _TRUE_VALUES
    try:
        resolver = get_resolver()
    except ConfigError as exc:
        logger.error("Address resolver is misconfigured: %s", exc)
        return jsonify({"error": str(exc)}), 503

    try:
        if fallback:
            location = resolve_or_fallback(resolver, coordinate, accuracy=accuracy)
        else:
            location = resolver.resolve(coordinate, accuracy=accuracy)
    except GeocodeError as exc:
        return jsonify({"error": str(exc)}), 502

    payload = asdict(location)
    payload["maps_url"] = maps_url(location.latitude, location.longitude)
    return jsonify({"data": payload}), 200


@app.post("/nearby")
def nearby() -> Any:
    """
    Rank candidates by distance from the caller.
    Required JSON fields: latitude, longitude, candidates (list)
    Optional: max_distance_km (float), include_links (bool)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "request body must be a JSON object"}), 400

    candidates = payload.get("candidates")
    if not isinstance(candidates, list):
        return jsonify({"error": "candidates must be a list"}), 400

    max_distance_km = payload.get("max_distance_km")
    if max_distance_km is None:
        max_distance_km = get_settings().max_distance_km

    try:
        user = Coordinate.parse(payload.get("latitude"), payload.get("longitude"))
        ranked = find_nearby(user, candidates, max_distance_km=max_distance_km)
    except InputError as exc:
        return jsonify({"error": str(exc)}), 400

    if payload.get("include_links"):
        add_directions(user, ranked)

    return jsonify({"data": ranked}), 200


def main() -> None:
    settings = get_settings()
    logger.info("[BOOT] Binding on 0.0.0.0:%d", settings.server_port)
    app.run(host="0.0.0.0", port=settings.server_port)


if __name__ == "__main__":
    main()
