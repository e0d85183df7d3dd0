"""Prometheus metrics for the geocoding core."""

from prometheus_client import Counter

# Single-query lookups
GEOCODING_REQUESTS = Counter(
    "geocoding_requests_total",
    "Total number of geocoding lookups",
    ["outcome"],  # found, not_found, error, invalid
)

GEOCODING_CACHE = Counter(
    "geocoding_cache_total",
    "Geocoding response cache lookups",
    ["result"],  # hit, miss
)

GEOCODING_DISAMBIGUATION = Counter(
    "geocoding_disambiguation_total",
    "Candidate lists passed through town-name disambiguation",
    ["result"],  # filtered, fallback
)

# Multi-format address resolution
GEOCODING_RESOLUTIONS = Counter(
    "geocoding_resolutions_total",
    "Total number of address resolutions",
    ["status"],  # success, failure
)
