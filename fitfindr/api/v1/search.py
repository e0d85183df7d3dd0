"""Location and event search.

A free-text query is geocoded first. When it resolves, every (filtered)
location or event within the chosen radius is returned nearest first.
When it does not, the query falls back to a case-insensitive text match.
"""

from datetime import datetime, timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY

from fitfindr.api.deps import get_geocoder
from fitfindr.api.v1.models import EventResponse, LocationResponse, SearchResponse
from fitfindr.core.config import SEARCH_RADIUS_OPTIONS, settings
from fitfindr.core.db import get_session
from fitfindr.core.geocoding.distance import filter_by_proximity
from fitfindr.core.geocoding.service import GeocodingService
from fitfindr.core.logging import get_logger
from fitfindr.database.models import EventModel, EventType, LocationCategory
from fitfindr.database.repositories import EventRepository, LocationRepository

logger = get_logger().bind(module="search")

router = APIRouter(tags=["search"])

DateFilter = Literal["today", "week", "upcoming"]


def validate_radius(radius: int) -> int:
    """Reject radii outside the offered options."""
    if radius not in SEARCH_RADIUS_OPTIONS:
        raise HTTPException(
            status_code=HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"radius must be one of {list(SEARCH_RADIUS_OPTIONS)}",
        )
    return radius


def date_range(
    key: Optional[DateFilter], now: Optional[datetime] = None
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Start and end of a named date filter.

    ``week`` runs Monday 00:00 to Sunday 23:59:59.999999 of the current week;
    ``upcoming`` covers the next 30 days.
    """
    if key is None:
        return None, None

    now = now or datetime.now()
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end_of_day = timedelta(days=1) - timedelta(microseconds=1)

    if key == "today":
        return start_of_today, start_of_today + end_of_day
    if key == "week":
        week_start = start_of_today - timedelta(days=start_of_today.weekday())
        return week_start, week_start + timedelta(days=6) + end_of_day
    return now, now + timedelta(days=30)


def _event_coordinates(
    event: EventModel,
) -> tuple[Optional[float], Optional[float]]:
    # Events have no coordinates of their own; they sit at their venue
    return event.location.latitude, event.location.longitude


@router.get("/locations/search", response_model=SearchResponse[LocationResponse])
def search_locations(
    q: Optional[str] = Query(None, description="Place, address or keyword"),
    category: Optional[LocationCategory] = Query(None, description="Category"),
    radius: int = Query(
        settings.DEFAULT_SEARCH_RADIUS_MILES,
        description=f"Search radius in miles, one of {list(SEARCH_RADIUS_OPTIONS)}",
    ),
    session: Session = Depends(get_session),
    geocoder: GeocodingService = Depends(get_geocoder),
) -> SearchResponse[LocationResponse]:
    """Search locations near a place, falling back to name/city/state match."""
    radius = validate_radius(radius)
    query = (q or "").strip()
    repository = LocationRepository(session)

    if not query:
        locations = repository.list_locations(category)
        data = [LocationResponse.model_validate(location) for location in locations]
        return SearchResponse[LocationResponse](
            radius_miles=radius, mode="all", count=len(data), data=data
        )

    result = geocoder.geocode_address(query)
    if result is None:
        logger.info("location_search_text_fallback", query=query)
        locations = repository.search_text(query, category)
        data = [LocationResponse.model_validate(location) for location in locations]
        return SearchResponse[LocationResponse](
            query=query, radius_miles=radius, mode="text", count=len(data), data=data
        )

    matches = filter_by_proximity(
        repository.list_locations(category),
        result.coordinates.latitude,
        result.coordinates.longitude,
        radius,
    )
    data = [
        LocationResponse.model_validate(match.entity).model_copy(
            update={"distance_miles": round(match.distance, 2)}
        )
        for match in matches
    ]
    logger.info(
        "location_search_proximity", query=query, radius=radius, results=len(data)
    )
    return SearchResponse[LocationResponse](
        query=query,
        radius_miles=radius,
        mode="proximity",
        geocoded=result,
        count=len(data),
        data=data,
    )


@router.get("/events/search", response_model=SearchResponse[EventResponse])
def search_events(
    q: Optional[str] = Query(None, description="Place, address or keyword"),
    event_type: Optional[EventType] = Query(None, description="Event type"),
    date: Optional[DateFilter] = Query(None, description="today, week or upcoming"),
    radius: int = Query(
        settings.DEFAULT_SEARCH_RADIUS_MILES,
        description=f"Search radius in miles, one of {list(SEARCH_RADIUS_OPTIONS)}",
    ),
    session: Session = Depends(get_session),
    geocoder: GeocodingService = Depends(get_geocoder),
) -> SearchResponse[EventResponse]:
    """Search events by venue proximity, falling back to a text match."""
    radius = validate_radius(radius)
    query = (q or "").strip()
    start, end = date_range(date)
    repository = EventRepository(session)

    if not query:
        events = repository.list_events(event_type, start, end)
        data = [EventResponse.model_validate(event) for event in events]
        return SearchResponse[EventResponse](
            radius_miles=radius, mode="all", count=len(data), data=data
        )

    result = geocoder.geocode_address(query)
    if result is None:
        logger.info("event_search_text_fallback", query=query)
        events = repository.search_text(query, event_type, start, end)
        data = [EventResponse.model_validate(event) for event in events]
        return SearchResponse[EventResponse](
            query=query, radius_miles=radius, mode="text", count=len(data), data=data
        )

    matches = filter_by_proximity(
        repository.list_events(event_type, start, end),
        result.coordinates.latitude,
        result.coordinates.longitude,
        radius,
        coordinates=_event_coordinates,
    )
    data = [
        EventResponse.model_validate(match.entity).model_copy(
            update={"distance_miles": round(match.distance, 2)}
        )
        for match in matches
    ]
    logger.info("event_search_proximity", query=query, radius=radius, results=len(data))
    return SearchResponse[EventResponse](
        query=query,
        radius_miles=radius,
        mode="proximity",
        geocoded=result,
        count=len(data),
        data=data,
    )
