"""Geocoding of stored locations.

This module fills in or refreshes the coordinates of locations in the
database, one location at a time, using the multi-format resolver.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fitfindr.core.config import settings
from fitfindr.core.geocoding.resolver import AddressResolver, PacingPolicy
from fitfindr.core.geocoding.service import get_geocoding_service
from fitfindr.database.models import LocationModel
from fitfindr.database.repositories import LocationRepository
from fitfindr.models.geocoding import Coordinates, GeocodeOutcome, GeocodeSuccess

logger = logging.getLogger(__name__)

LOCATION_NOT_FOUND = "Location not found"


class LocationGeocodeResult(BaseModel):
    """Geocoding result for one stored location."""

    id: str
    name: Optional[str] = None
    success: bool
    coordinates: Optional[Coordinates] = None
    display_name: Optional[str] = None
    address_used: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_outcome(
        cls, location_id: str, name: Optional[str], outcome: GeocodeOutcome
    ) -> "LocationGeocodeResult":
        if isinstance(outcome, GeocodeSuccess):
            return cls(
                id=location_id,
                name=name,
                success=True,
                coordinates=outcome.coordinates,
                display_name=outcome.display_name,
                address_used=outcome.address_used,
            )
        return cls(
            id=location_id,
            name=name,
            success=False,
            error=outcome.reason,
        )


class GeocodeRunSummary(BaseModel):
    """Counts and per-location results of a bulk geocoding run."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    results: list[LocationGeocodeResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[LocationGeocodeResult]:
        return [result for result in self.results if not result.success]


def create_address_resolver() -> AddressResolver:
    """Build a resolver using the shared service and configured pacing."""
    policy = PacingPolicy(
        attempt_delay=settings.GEOCODING_ATTEMPT_DELAY,
        entity_delay=settings.GEOCODING_ENTITY_DELAY,
    )
    return AddressResolver(get_geocoding_service(), policy)


class LocationGeocoder:
    """Geocodes locations stored in the database.

    Each successful resolution writes the location's latitude and longitude
    exactly once; no other location field is modified. Running two
    geocoders over the same location concurrently is not supported.
    """

    def __init__(self, db: Session, resolver: Optional[AddressResolver] = None):
        """Initialize the location geocoder.

        Args:
            db: Database session
            resolver: Address resolver (defaults to the configured one)
        """
        self.db = db
        self.repository = LocationRepository(db)
        self.resolver = resolver or create_address_resolver()

    def _store(
        self,
        location: LocationModel,
        location_id: str,
        name: Optional[str],
        outcome: GeocodeOutcome,
    ) -> LocationGeocodeResult:
        # The instance may be expired; only location_id and name are read
        if isinstance(outcome, GeocodeSuccess):
            try:
                self.repository.update_coordinates(
                    location,
                    outcome.coordinates.latitude,
                    outcome.coordinates.longitude,
                )
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception(f"Failed to save coordinates for {name}")
                return LocationGeocodeResult(
                    id=location_id,
                    name=name,
                    success=False,
                    error=f"Failed to save coordinates: {e}",
                )
            logger.info(
                f"Geocoded {name}: {outcome.coordinates.latitude}, "
                f"{outcome.coordinates.longitude} "
                f"(address used: {outcome.address_used})"
            )
        else:
            logger.warning(f"Failed to geocode {name}: {outcome.reason}")
        return LocationGeocodeResult.from_outcome(location_id, name, outcome)

    def geocode_location(self, location_id: str) -> LocationGeocodeResult:
        """Geocode a single location by ID.

        Args:
            location_id: The location ID

        Returns:
            Result with the coordinates and address used, or the error
        """
        location = self.repository.get_by_id(location_id)
        if location is None:
            return LocationGeocodeResult(
                id=location_id, success=False, error=LOCATION_NOT_FOUND
            )

        outcome = self.resolver.resolve_one(location.to_address_record())
        return self._store(location, location.id, location.name, outcome)

    def geocode_missing_locations(self) -> GeocodeRunSummary:
        """Geocode all locations that don't have coordinates."""
        locations = self.repository.list_missing_coordinates()
        logger.info(f"Found {len(locations)} locations without coordinates")
        return self._run(locations)

    def regeocode_all_locations(self) -> GeocodeRunSummary:
        """Re-geocode every location, including those with coordinates."""
        locations = self.repository.list_all_for_geocoding()
        logger.info(f"Re-geocoding {len(locations)} locations")
        return self._run(locations)

    def _run(self, locations: Sequence[LocationModel]) -> GeocodeRunSummary:
        summary = GeocodeRunSummary(total=len(locations))

        # Snapshot before any commit or rollback expires the instances
        targets = [
            (location, location.id, location.name, location.to_address_record())
            for location in locations
        ]
        outcomes = self.resolver.iter_resolve(address for *_, address in targets)

        # Persist each location as soon as it resolves
        for (location, location_id, name, _), outcome in zip(targets, outcomes):
            try:
                result = self._store(location, location_id, name, outcome)
            except Exception as e:
                logger.exception(f"Unexpected error storing {name}")
                result = LocationGeocodeResult(
                    id=location_id,
                    name=name,
                    success=False,
                    error=f"Unexpected error: {e}",
                )
            summary.results.append(result)
            if result.success:
                summary.succeeded += 1
            else:
                summary.failed += 1

        logger.info(
            f"Geocoding run finished: {summary.succeeded} succeeded, "
            f"{summary.failed} failed of {summary.total}"
        )
        return summary
