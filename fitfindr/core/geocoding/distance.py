"""Great-circle distance and radius filtering."""

import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional, TypeVar

from fitfindr.core.geocoding.constants import DEFAULT_RADIUS_MILES, EARTH_RADIUS_MILES
from fitfindr.models.geocoding import ProximityMatch

T = TypeVar("T")

CoordinateGetter = Callable[[Any], tuple[Optional[float], Optional[float]]]


def distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the distance between two points using the haversine formula.

    Args:
        lat1: Latitude of point 1
        lon1: Longitude of point 1
        lat2: Latitude of point 2
        lon2: Longitude of point 2

    Returns:
        Distance in miles. Non-finite inputs yield NaN.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def entity_coordinates(entity: Any) -> tuple[Optional[float], Optional[float]]:
    """Read ``latitude``/``longitude`` from a mapping or an object."""
    if isinstance(entity, Mapping):
        return entity.get("latitude"), entity.get("longitude")
    return getattr(entity, "latitude", None), getattr(entity, "longitude", None)


def _as_finite(value: Any) -> Optional[float]:
    if value is None:
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def filter_by_proximity(
    entities: Iterable[T],
    center_lat: float,
    center_lon: float,
    radius_miles: float = DEFAULT_RADIUS_MILES,
    coordinates: CoordinateGetter = entity_coordinates,
) -> list[ProximityMatch[T]]:
    """Filter entities to those within ``radius_miles`` of a center point.

    Entities without a usable latitude or longitude are skipped. The
    boundary is inclusive, and results are sorted by ascending distance
    with ties kept in input order.

    Args:
        entities: Locations, events or plain mappings
        center_lat: Center latitude
        center_lon: Center longitude
        radius_miles: Search radius in miles
        coordinates: Returns ``(latitude, longitude)`` for an entity

    Returns:
        Matches carrying the entity and its distance in miles
    """
    matches: list[ProximityMatch[T]] = []
    for entity in entities:
        raw_lat, raw_lon = coordinates(entity)
        lat, lon = _as_finite(raw_lat), _as_finite(raw_lon)
        if lat is None or lon is None:
            continue

        distance = distance_miles(center_lat, center_lon, lat, lon)
        if distance <= radius_miles:
            matches.append(ProximityMatch(entity=entity, distance=distance))

    # list.sort is stable, so equal distances keep their input order
    matches.sort(key=lambda match: match.distance)
    return matches
