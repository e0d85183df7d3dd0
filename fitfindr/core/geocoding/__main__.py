"""CLI for geocoding stored locations.

Usage:
    python -m fitfindr.core.geocoding missing
    python -m fitfindr.core.geocoding all
    python -m fitfindr.core.geocoding location <location-id>
"""

import argparse
import logging
import sys
from typing import Optional

from fitfindr.core.config import settings
from fitfindr.core.db import create_session, init_db
from fitfindr.core.geocoding.backfill import GeocodeRunSummary, LocationGeocoder
from fitfindr.core.logging import configure_logging

logger = logging.getLogger(__name__)


def print_summary(summary: GeocodeRunSummary) -> None:
    """Print run totals and the locations that failed."""
    print("\n=== SUMMARY ===")
    print(f"Total locations: {summary.total}")
    print(f"Successful: {summary.succeeded}")
    print(f"Failed: {summary.failed}")

    if summary.failures:
        print("\n=== FAILED LOCATIONS ===")
        for result in summary.failures:
            print(f"- {result.name or result.id}: {result.error}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the geocoding CLI."""
    parser = argparse.ArgumentParser(
        description="Geocode stored locations using address format fallbacks"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("missing", help="Geocode locations without coordinates")
    subparsers.add_parser(
        "all", help="Re-geocode every location, replacing existing coordinates"
    )
    single = subparsers.add_parser("location", help="Geocode a single location")
    single.add_argument("location_id", help="ID of the location to geocode")

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    configure_logging(
        testing=not settings.JSON_LOGS,
        level="DEBUG" if args.verbose else settings.LOG_LEVEL,
    )

    init_db()
    with create_session() as session:
        geocoder = LocationGeocoder(session)

        if args.command == "location":
            result = geocoder.geocode_location(args.location_id)
            if not result.success or result.coordinates is None:
                print(f"Failed: {result.error}")
                return 1
            print(
                f"{result.name}: {result.coordinates.latitude}, "
                f"{result.coordinates.longitude}"
            )
            print(f"Address used: {result.address_used}")
            return 0

        if args.command == "missing":
            summary = geocoder.geocode_missing_locations()
        else:
            print("This will try each location's address in these formats:")
            print("1. Full address with all fields")
            print("2. Address without line 2")
            print("3. City, state, and postal code")
            print("4. City and state only\n")
            summary = geocoder.regeocode_all_locations()

    print_summary(summary)
    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
