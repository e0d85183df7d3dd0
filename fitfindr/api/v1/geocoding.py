"""Geocoding endpoints.

Bulk runs pause between locations to respect the provider's usage policy,
so they can take a while; run at most one at a time.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.status import HTTP_404_NOT_FOUND

from fitfindr.api.deps import get_geocoder, get_location_geocoder
from fitfindr.core.geocoding.backfill import (
    LOCATION_NOT_FOUND,
    GeocodeRunSummary,
    LocationGeocodeResult,
    LocationGeocoder,
)
from fitfindr.core.geocoding.service import GeocodingService
from fitfindr.models.geocoding import GeocodingResult

router = APIRouter(prefix="/geocoding", tags=["geocoding"])


@router.get("/lookup", response_model=GeocodingResult)
def lookup(
    q: str = Query(..., min_length=1, description="Address or place to geocode"),
    geocoder: GeocodingService = Depends(get_geocoder),
) -> GeocodingResult:
    """Geocode a free-text query."""
    result = geocoder.geocode_address(q)
    if result is None:
        raise HTTPException(
            status_code=HTTP_404_NOT_FOUND, detail=f"No geocoding results for '{q}'"
        )
    return result


@router.post("/locations/missing", response_model=GeocodeRunSummary)
def geocode_missing_locations(
    geocoder: LocationGeocoder = Depends(get_location_geocoder),
) -> GeocodeRunSummary:
    """Geocode all locations that don't have coordinates."""
    return geocoder.geocode_missing_locations()


@router.post("/locations/all", response_model=GeocodeRunSummary)
def regeocode_all_locations(
    geocoder: LocationGeocoder = Depends(get_location_geocoder),
) -> GeocodeRunSummary:
    """Re-geocode every location, replacing existing coordinates."""
    return geocoder.regeocode_all_locations()


@router.post("/locations/{location_id}", response_model=LocationGeocodeResult)
def geocode_location(
    location_id: str,
    geocoder: LocationGeocoder = Depends(get_location_geocoder),
) -> LocationGeocodeResult:
    """Geocode one location, trying progressively shorter address formats."""
    result = geocoder.geocode_location(location_id)
    if not result.success and result.error == LOCATION_NOT_FOUND:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=result.error)
    return result
