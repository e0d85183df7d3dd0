"""Geocoding service for free-text location queries.

This module turns a query such as "Austin, TX" or a full street address
into a single best coordinate match:
- Expands street-type abbreviations before querying the provider
- Filters out candidates from commonly confused towns
- Ranks remaining candidates by provider importance
- Treats provider errors as "not found" so callers never crash on them
"""

import logging
from typing import Any, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable

from fitfindr.core.config import Settings, settings
from fitfindr.core.geocoding.metrics import GEOCODING_REQUESTS
from fitfindr.core.geocoding.normalizer import AddressNormalizer
from fitfindr.core.geocoding.provider import (
    GeocodingProvider,
    NominatimProvider,
    connect_redis,
)
from fitfindr.models.geocoding import Coordinates, GeocodingResult

logger = logging.getLogger(__name__)


def _importance(candidate: dict[str, Any]) -> float:
    return float(candidate.get("importance") or 0)


class GeocodingService:
    """Resolves free-text queries to a single coordinate match."""

    def __init__(
        self,
        provider: GeocodingProvider,
        normalizer: Optional[AddressNormalizer] = None,
    ):
        """Initialize the geocoding service.

        Args:
            provider: Backend answering raw candidate searches
            normalizer: Query normalizer and disambiguation rules
        """
        self.provider = provider
        self.normalizer = normalizer or AddressNormalizer()

    def geocode_address(self, query: Optional[str]) -> Optional[GeocodingResult]:
        """Geocode a query to its best match.

        Args:
            query: Address or place description (e.g. "Austin, TX")

        Returns:
            GeocodingResult, or None if the query is empty, the provider
            failed or nothing matched
        """
        if not query or not query.strip():
            logger.warning("Empty query provided for geocoding")
            GEOCODING_REQUESTS.labels(outcome="invalid").inc()
            return None

        normalized = self.normalizer.normalize(query)
        rules = self.normalizer.triggered_rules(normalized)

        try:
            candidates = self.provider.search(normalized)
        except (GeocoderTimedOut, GeocoderUnavailable, GeocoderServiceError) as e:
            logger.warning(f"Geocoding request failed for '{query[:50]}': {e}")
            GEOCODING_REQUESTS.labels(outcome="error").inc()
            return None

        if not candidates:
            logger.info(f"No geocoding results for query: {query[:100]}")
            GEOCODING_REQUESTS.labels(outcome="not_found").inc()
            return None

        candidates = self.normalizer.filter_candidates(candidates, rules)

        # sorted() is stable, so equal importance keeps provider order
        best = sorted(candidates, key=_importance, reverse=True)[0]

        result = GeocodingResult(
            coordinates=Coordinates(
                latitude=float(best["lat"]),
                longitude=float(best["lon"]),
            ),
            display_name=best["display_name"],
        )

        logger.info(
            "Geocoded '%s' (normalized '%s') to %s, %s: %s",
            query,
            normalized,
            result.coordinates.latitude,
            result.coordinates.longitude,
            result.display_name,
        )
        GEOCODING_REQUESTS.labels(outcome="found").inc()
        return result


def create_geocoding_service(config: Optional[Settings] = None) -> GeocodingService:
    """Build a Nominatim-backed service from settings."""
    config = config or settings
    provider = NominatimProvider(
        user_agent=config.NOMINATIM_USER_AGENT,
        domain=config.NOMINATIM_DOMAIN,
        timeout=config.GEOCODING_TIMEOUT,
        limit=config.GEOCODING_RESULT_LIMIT,
        country_codes=config.GEOCODING_COUNTRY_CODES,
        redis_client=connect_redis(config.REDIS_URL),
        cache_ttl=config.GEOCODING_CACHE_TTL,
    )
    logger.info(f"Geocoding service initialized with {provider.name} provider")
    return GeocodingService(provider)


# Singleton instance
_geocoding_service: Optional[GeocodingService] = None


def get_geocoding_service() -> GeocodingService:
    """Get or create the singleton geocoding service instance.

    Returns:
        GeocodingService instance
    """
    global _geocoding_service
    if _geocoding_service is None:
        _geocoding_service = create_geocoding_service()
    return _geocoding_service
