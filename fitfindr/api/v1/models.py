"""Request and response models for the v1 API."""

from datetime import datetime
from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fitfindr.database.models import EventType, LocationCategory
from fitfindr.models.geocoding import GeocodingResult

T = TypeVar("T")

SearchMode = Literal["proximity", "text", "all"]


class LocationResponse(BaseModel):
    """Location as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    category: LocationCategory
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    website_url: Optional[str] = None
    phone: Optional[str] = None
    distance_miles: Optional[float] = Field(
        default=None, description="Distance from the search center, in miles"
    )


class EventLocation(BaseModel):
    """Venue summary embedded in an event."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class EventResponse(BaseModel):
    """Event as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    event_type: EventType
    start_date_time: datetime
    end_date_time: Optional[datetime] = None
    location: EventLocation
    distance_miles: Optional[float] = Field(
        default=None, description="Distance of the venue from the search center"
    )


class SearchResponse(BaseModel, Generic[T]):
    """Search results with the mode that produced them."""

    query: Optional[str] = None
    radius_miles: int
    mode: SearchMode = Field(
        ...,
        description="proximity: geocoded radius search; text: substring "
        "fallback; all: no query",
    )
    geocoded: Optional[GeocodingResult] = None
    count: int
    data: list[T]


class LocationCreate(BaseModel):
    """Payload for creating a location."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: LocationCategory = LocationCategory.OTHER
    address_line1: str = Field(..., min_length=1)
    address_line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(default="USA", min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    website_url: Optional[str] = None
    phone: Optional[str] = None

    @model_validator(mode="after")
    def validate_coordinate_pair(self) -> "LocationCreate":
        """Latitude and longitude are given together or not at all."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self

    def full_address(self) -> str:
        """All non-empty address components joined for geocoding."""
        parts = [
            self.address_line1,
            self.address_line2,
            self.city,
            self.state,
            self.postal_code,
            self.country,
        ]
        return ", ".join(part.strip() for part in parts if part and part.strip())
