"""Geocoding and proximity search.

This package provides:
- Address normalization and town-name disambiguation
- A geocoding service over a pluggable provider (Nominatim by default)
- Multi-format address resolution with provider-friendly pacing
- Haversine distances and radius filtering
- Bulk geocoding of stored locations
"""

from fitfindr.core.geocoding.distance import distance_miles, filter_by_proximity
from fitfindr.core.geocoding.normalizer import AddressNormalizer, normalize_address
from fitfindr.core.geocoding.provider import GeocodingProvider, NominatimProvider
from fitfindr.core.geocoding.resolver import (
    ADDRESS_FORMATS,
    AddressResolver,
    PacingPolicy,
    build_address_candidates,
)
from fitfindr.core.geocoding.service import GeocodingService, get_geocoding_service

__all__ = [
    "ADDRESS_FORMATS",
    "AddressNormalizer",
    "AddressResolver",
    "GeocodingProvider",
    "GeocodingService",
    "NominatimProvider",
    "PacingPolicy",
    "build_address_candidates",
    "distance_miles",
    "filter_by_proximity",
    "get_geocoding_service",
    "normalize_address",
]
