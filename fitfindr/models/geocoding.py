"""Value types exchanged with the geocoding core."""

from dataclasses import dataclass
from typing import Annotated, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class Coordinates(BaseModel):
    """Geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(
        ...,
        title="Latitude",
        description="Latitude coordinate",
        examples=[30.2672],
    )
    longitude: float = Field(
        ...,
        title="Longitude",
        description="Longitude coordinate",
        examples=[-97.7431],
    )

    @model_validator(mode="after")
    def validate_coordinates(self) -> "Coordinates":
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        if not -180 <= self.longitude <= 180:
            raise ValueError("Longitude must be between -180 and 180 degrees")
        return self


class GeocodingResult(BaseModel):
    """Best match returned by the geocoding service for one query."""

    model_config = ConfigDict(frozen=True)

    coordinates: Coordinates
    display_name: str = Field(..., description="Provider's human-readable name")


class AddressRecord(BaseModel):
    """Postal address of a location, as stored by the location owner."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    line1: str | None = None
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class GeocodeSuccess(BaseModel):
    """Resolution that found coordinates for one of the address formats."""

    status: Literal["success"] = "success"
    coordinates: Coordinates
    display_name: str
    address_used: str = Field(
        ..., description="Exact address string that produced the match"
    )
    attempts: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return True


class GeocodeFailure(BaseModel):
    """Resolution where no address format produced a match."""

    status: Literal["failure"] = "failure"
    reason: str
    attempts: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return False


GeocodeOutcome = Annotated[
    Union[GeocodeSuccess, GeocodeFailure], Field(discriminator="status")
]


@dataclass(frozen=True)
class ProximityMatch(Generic[T]):
    """An entity paired with its distance (miles) from a search center."""

    entity: T
    distance: float
