"""Repository pattern for database operations."""

from datetime import datetime
from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql import Select

from .models import EventModel, EventType, LocationCategory, LocationModel

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """Base repository for common database operations."""

    def __init__(self, session: Session, model: type[ModelType]):
        self.session = session
        self.model = model

    def get_by_id(self, id: str) -> Optional[ModelType]:
        """Get entity by ID."""
        return self.session.get(self.model, id)

    def create(self, **kwargs: Any) -> ModelType:
        """Create new entity."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance


class LocationRepository(BaseRepository[LocationModel]):
    """Repository for locations."""

    def __init__(self, session: Session):
        super().__init__(session, LocationModel)

    def list_locations(
        self, category: Optional[LocationCategory] = None
    ) -> Sequence[LocationModel]:
        """All locations, newest first, optionally limited to one category."""
        query = select(LocationModel)
        if category:
            query = query.where(LocationModel.category == category)
        query = query.order_by(LocationModel.created_at.desc())
        return self.session.execute(query).scalars().all()

    def list_missing_coordinates(self) -> Sequence[LocationModel]:
        """Locations with no latitude or no longitude."""
        query = (
            select(LocationModel)
            .where(
                or_(
                    LocationModel.latitude.is_(None),
                    LocationModel.longitude.is_(None),
                )
            )
            .order_by(LocationModel.created_at)
        )
        return self.session.execute(query).scalars().all()

    def list_all_for_geocoding(self) -> Sequence[LocationModel]:
        """Every location, oldest first."""
        query = select(LocationModel).order_by(LocationModel.created_at)
        return self.session.execute(query).scalars().all()

    def search_text(
        self, text: str, category: Optional[LocationCategory] = None
    ) -> Sequence[LocationModel]:
        """Case-insensitive substring match over name, city and state.

        ``%`` and ``_`` in the text match literally.
        """
        query = select(LocationModel).where(
            or_(
                LocationModel.name.icontains(text, autoescape=True),
                LocationModel.city.icontains(text, autoescape=True),
                LocationModel.state.icontains(text, autoescape=True),
            )
        )
        if category:
            query = query.where(LocationModel.category == category)
        query = query.order_by(LocationModel.created_at.desc())
        return self.session.execute(query).scalars().all()

    def update_coordinates(
        self, location: LocationModel, latitude: float, longitude: float
    ) -> LocationModel:
        """Store geocoded coordinates for a location."""
        location.latitude = latitude
        location.longitude = longitude
        self.session.commit()
        return location


class EventRepository(BaseRepository[EventModel]):
    """Repository for events; events are loaded with their location."""

    def __init__(self, session: Session):
        super().__init__(session, EventModel)

    @staticmethod
    def _apply_filters(
        query: Select,
        event_type: Optional[EventType],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> Select:
        if event_type:
            query = query.where(EventModel.event_type == event_type)
        if start:
            query = query.where(EventModel.start_date_time >= start)
        if end:
            query = query.where(EventModel.start_date_time <= end)
        return query.order_by(EventModel.start_date_time.asc())

    def list_events(
        self,
        event_type: Optional[EventType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[EventModel]:
        """Events ordered by start time, with optional type and date filters."""
        query = select(EventModel).options(joinedload(EventModel.location))
        query = self._apply_filters(query, event_type, start, end)
        return self.session.execute(query).scalars().all()

    def search_text(
        self,
        text: str,
        event_type: Optional[EventType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[EventModel]:
        """Case-insensitive substring match over title, description and city."""
        query = (
            select(EventModel)
            .join(EventModel.location)
            .options(joinedload(EventModel.location))
            .where(
                or_(
                    EventModel.title.icontains(text, autoescape=True),
                    EventModel.description.icontains(text, autoescape=True),
                    LocationModel.city.icontains(text, autoescape=True),
                )
            )
        )
        query = self._apply_filters(query, event_type, start, end)
        return self.session.execute(query).scalars().all()
