"""Geocoding provider adapters.

The geocoding service talks to a provider through a single ``search``
method, so tests and alternative backends can stand in for Nominatim
without network access.
"""

import hashlib
import json
import logging
from typing import Any, Optional, Protocol

from geopy.geocoders import Nominatim
from redis import Redis
from redis.exceptions import RedisError

from fitfindr.core.geocoding.metrics import GEOCODING_CACHE

logger = logging.getLogger(__name__)

Candidate = dict[str, Any]


class GeocodingProvider(Protocol):
    """Free-text geocoding backend."""

    def search(self, query: str) -> list[Candidate]:
        """Return raw candidate matches for ``query``.

        Each candidate carries at least ``lat``, ``lon`` and
        ``display_name``, and usually ``importance``. Transport failures
        are raised as ``geopy.exc.GeocoderServiceError``.
        """
        ...


class NominatimProvider:
    """OpenStreetMap Nominatim search with an optional Redis response cache."""

    name = "nominatim"

    def __init__(
        self,
        user_agent: str = "FitFindr/1.0",
        domain: str = "nominatim.openstreetmap.org",
        timeout: int = 10,
        limit: int = 5,
        country_codes: str = "us",
        redis_client: Optional[Redis] = None,
        cache_ttl: int = 3600,
    ):
        """Initialize the provider.

        Args:
            user_agent: Client identifier sent with every request
            domain: Nominatim host
            timeout: Request timeout in seconds
            limit: Maximum number of candidates to request
            country_codes: Country restriction passed to the provider
            redis_client: Cache backend; caching is disabled when None
            cache_ttl: Cache lifetime in seconds
        """
        self.geocoder = Nominatim(user_agent=user_agent, domain=domain, timeout=timeout)
        self.limit = limit
        self.country_codes = country_codes
        self.redis_client = redis_client
        self.cache_ttl = cache_ttl

    def _get_cache_key(self, query: str) -> str:
        """Generate cache key for an exact query string."""
        query_hash = hashlib.sha256(query.encode()).hexdigest()
        return f"geocode:{self.name}:{query_hash}"

    def _get_cached(self, query: str) -> Optional[list[Candidate]]:
        if not self.redis_client:
            return None

        try:
            cached = self.redis_client.get(self._get_cache_key(query))
        except RedisError as e:
            logger.warning(f"Cache retrieval error: {e}")
            return None

        if cached is None:
            GEOCODING_CACHE.labels(result="miss").inc()
            return None

        GEOCODING_CACHE.labels(result="hit").inc()
        logger.debug(f"Cache hit for query: {query[:50]}")
        return json.loads(cached)

    def _cache(self, query: str, candidates: list[Candidate]) -> None:
        if not self.redis_client or not candidates:
            return

        try:
            self.redis_client.setex(
                self._get_cache_key(query), self.cache_ttl, json.dumps(candidates)
            )
        except RedisError as e:
            logger.warning(f"Cache storage error: {e}")

    def search(self, query: str) -> list[Candidate]:
        """Search Nominatim for up to ``limit`` candidates."""
        cached = self._get_cached(query)
        if cached is not None:
            return cached

        locations = self.geocoder.geocode(
            query,
            exactly_one=False,
            limit=self.limit,
            addressdetails=True,
            country_codes=self.country_codes,
        )
        candidates = [location.raw for location in locations or []]

        self._cache(query, candidates)
        return candidates


def connect_redis(redis_url: Optional[str]) -> Optional[Redis]:
    """Connect to Redis for response caching, or return None.

    Connection problems disable caching rather than failing startup.
    """
    if not redis_url:
        return None

    try:
        client = Redis.from_url(redis_url, decode_responses=True)
        client.ping()
        logger.info("Redis caching enabled for geocoding")
        return client
    except RedisError as e:
        logger.warning(f"Redis connection failed, caching disabled: {e}")
        return None
