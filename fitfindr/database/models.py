"""SQLAlchemy models for locations and events."""

import enum
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Text
from sqlalchemy.orm import relationship

from fitfindr.models.geocoding import AddressRecord

from .base import Base


class LocationCategory(str, enum.Enum):
    """Kinds of fitness venues."""

    GYM = "GYM"
    YOGA_STUDIO = "YOGA_STUDIO"
    CLIMBING_GYM = "CLIMBING_GYM"
    TRACK = "TRACK"
    POOL = "POOL"
    PARK = "PARK"
    DISC_GOLF = "DISC_GOLF"
    OTHER = "OTHER"


class EventType(str, enum.Enum):
    """Kinds of events hosted at a venue."""

    CLASS = "CLASS"
    PICKUP = "PICKUP"
    RUN_CLUB = "RUN_CLUB"
    TOURNAMENT = "TOURNAMENT"
    MEETUP = "MEETUP"
    OTHER = "OTHER"


class LocationModel(Base):
    """A fitness venue with its postal address and coordinates."""

    __tablename__ = "location"

    id = Column(
        Text,
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
    )
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    category: Column[str] = Column(  # type: ignore[assignment]
        Enum(LocationCategory, name="location_category_enum"),
        nullable=False,
        default=LocationCategory.OTHER,
    )

    # Address
    address_line1 = Column(Text, nullable=True)
    address_line2 = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    postal_code = Column(Text, nullable=True)
    country = Column(Text, nullable=True)

    # Only written by geocoding or by the user creating the location
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    website_url = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    events = relationship("EventModel", back_populates="location")

    def to_address_record(self) -> AddressRecord:
        """Address components used for geocoding."""
        return AddressRecord(
            line1=self.address_line1,
            line2=self.address_line2,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
            country=self.country,
        )


class EventModel(Base):
    """An event hosted at a location."""

    __tablename__ = "event"

    id = Column(
        Text,
        primary_key=True,
        default=lambda: str(uuid4()),
        nullable=False,
    )
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    event_type: Column[str] = Column(  # type: ignore[assignment]
        Enum(EventType, name="event_type_enum"),
        nullable=False,
        default=EventType.OTHER,
    )
    start_date_time = Column(DateTime, nullable=False)
    end_date_time = Column(DateTime, nullable=True)
    location_id = Column(
        Text,
        ForeignKey("location.id"),
        nullable=False,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    location = relationship("LocationModel", back_populates="events")
