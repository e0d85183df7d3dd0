"""Shared FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.orm import Session

from fitfindr.core.db import get_session
from fitfindr.core.geocoding.backfill import LocationGeocoder
from fitfindr.core.geocoding.service import GeocodingService, get_geocoding_service


def get_geocoder() -> GeocodingService:
    """Process-wide geocoding service."""
    return get_geocoding_service()


def get_location_geocoder(
    session: Session = Depends(get_session),
) -> LocationGeocoder:
    """Location geocoder bound to the request's session."""
    return LocationGeocoder(session)
