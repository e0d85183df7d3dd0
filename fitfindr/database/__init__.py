"""Database models and repositories."""

from .base import Base
from .models import EventModel, EventType, LocationCategory, LocationModel
from .repositories import EventRepository, LocationRepository

__all__ = [
    "Base",
    "EventModel",
    "EventRepository",
    "EventType",
    "LocationCategory",
    "LocationModel",
    "LocationRepository",
]
