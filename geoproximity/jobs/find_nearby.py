"""CLI job to rank a JSON list of locations by distance from a point."""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from geoproximity.core.config import ConfigError, get_settings
from geoproximity.core.maps import directions_url
from geoproximity.core.proximity import extract_coordinate, find_nearby
from geoproximity.models import Coordinate, InputError

logger = logging.getLogger(__name__)


def load_candidates(path: str) -> List[Dict[str, Any]]:
    """Read candidates from a JSON file holding either a list or {"items": [...]}."""
    if path == "-":
        payload = json.load(sys.stdin)
    else:
        with open(path, "r", encoding="utf-8") as fh:
            payload = json.load(fh)

    if isinstance(payload, dict):
        payload = payload.get("items")
    if not isinstance(payload, list):
        raise InputError("candidates file must contain a JSON list or an object with an 'items' list")
    return payload


def add_directions(user: Coordinate, ranked: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    for entry in ranked:
        target = extract_coordinate(entry)
        entry["directions_url"] = directions_url(
            target.latitude, target.longitude, user.latitude, user.longitude
        )
    return ranked


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Find candidate locations near a point")
    parser.add_argument("--lat", dest="latitude", required=True, help="Latitude of the user")
    parser.add_argument("--lon", dest="longitude", required=True, help="Longitude of the user")
    parser.add_argument(
        "--candidates",
        dest="candidates",
        required=True,
        help="Path to a JSON file of candidate locations ('-' reads stdin)",
    )
    parser.add_argument(
        "--max-distance",
        dest="max_distance_km",
        type=float,
        default=None,
        help="Search radius in kilometers (defaults to NEARBY_MAX_DISTANCE_KM)",
    )
    parser.add_argument("--links", dest="links", action="store_true", help="Attach Google Maps directions links")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        user = Coordinate.parse(args.latitude, args.longitude)
        candidates = load_candidates(args.candidates)
        max_distance_km = args.max_distance_km
        if max_distance_km is None:
            max_distance_km = get_settings().max_distance_km
        ranked = find_nearby(user, candidates, max_distance_km=max_distance_km)
    except (ConfigError, InputError, OSError, ValueError) as exc:
        logger.error("Unable to rank candidates: %s", exc)
        return 2

    if args.links:
        add_directions(user, ranked)

    logger.info("Found %d of %d candidates within %skm", len(ranked), len(candidates), max_distance_km)
    json.dump(ranked, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
