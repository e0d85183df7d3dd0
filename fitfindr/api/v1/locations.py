"""Location endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND

from fitfindr.api.deps import get_geocoder
from fitfindr.api.v1.models import LocationCreate, LocationResponse
from fitfindr.core.db import get_session
from fitfindr.core.geocoding.service import GeocodingService
from fitfindr.core.logging import get_logger
from fitfindr.database.repositories import LocationRepository

logger = get_logger().bind(module="locations")

router = APIRouter(prefix="/locations", tags=["locations"])


@router.post("", response_model=LocationResponse, status_code=HTTP_201_CREATED)
def create_location(
    payload: LocationCreate,
    session: Session = Depends(get_session),
    geocoder: GeocodingService = Depends(get_geocoder),
) -> LocationResponse:
    """Create a location, geocoding its address when no coordinates are given.

    A failed lookup still creates the location, without coordinates; it can
    be geocoded later through the geocoding endpoints.
    """
    latitude, longitude = payload.latitude, payload.longitude

    if latitude is None or longitude is None:
        full_address = payload.full_address()
        result = geocoder.geocode_address(full_address)
        if result:
            latitude = result.coordinates.latitude
            longitude = result.coordinates.longitude
            logger.info(
                "location_geocoded",
                address=full_address,
                latitude=latitude,
                longitude=longitude,
            )
        else:
            logger.warning("location_geocoding_failed", address=full_address)

    fields = payload.model_dump(exclude={"latitude", "longitude"})
    location = LocationRepository(session).create(
        **fields, latitude=latitude, longitude=longitude
    )
    return LocationResponse.model_validate(location)


@router.get("/{location_id}", response_model=LocationResponse)
def get_location(
    location_id: str,
    session: Session = Depends(get_session),
) -> LocationResponse:
    """Get a location by ID."""
    location = LocationRepository(session).get_by_id(location_id)
    if location is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Location not found")
    return LocationResponse.model_validate(location)
