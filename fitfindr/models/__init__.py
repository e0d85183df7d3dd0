"""Geocoding value models package."""

from .geocoding import (
    AddressRecord,
    Coordinates,
    GeocodeFailure,
    GeocodeOutcome,
    GeocodeSuccess,
    GeocodingResult,
    ProximityMatch,
)

__all__ = [
    "AddressRecord",
    "Coordinates",
    "GeocodeFailure",
    "GeocodeOutcome",
    "GeocodeSuccess",
    "GeocodingResult",
    "ProximityMatch",
]
