"""CLI job to reverse geocode a single coordinate."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from typing import List, Optional

from geoproximity.core.config import ConfigError, get_settings
from geoproximity.core.resolver import AddressResolver, resolve_or_fallback
from geoproximity.models import Coordinate, InputError, parse_accuracy
from geoproximity.vendors.nominatim import GeocodeError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve a coordinate into a structured address")
    parser.add_argument("--lat", dest="latitude", required=True, help="Latitude in decimal degrees")
    parser.add_argument("--lon", dest="longitude", required=True, help="Longitude in decimal degrees")
    parser.add_argument("--accuracy", dest="accuracy", help="Reported accuracy in meters")
    parser.add_argument(
        "--fallback",
        dest="fallback",
        action="store_true",
        help="Print the bare coordinates instead of failing when no address is found",
    )
    return parser


def run(latitude: str, longitude: str, accuracy: Optional[str] = None, fallback: bool = False) -> dict:
    coordinate = Coordinate.parse(latitude, longitude)
    accuracy_m = parse_accuracy(accuracy)
    resolver = AddressResolver.from_settings(get_settings())
    if fallback:
        location = resolve_or_fallback(resolver, coordinate, accuracy=accuracy_m)
    else:
        location = resolver.resolve(coordinate, accuracy=accuracy_m)
    return asdict(location)


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        result = run(args.latitude, args.longitude, accuracy=args.accuracy, fallback=args.fallback)
    except (ConfigError, InputError) as exc:
        logger.error("Invalid input or configuration: %s", exc)
        return 2
    except GeocodeError as exc:
        logger.error("Reverse geocoding failed: %s", exc)
        return 1

    json.dump(result, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
