import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, selectinload
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from typing import Any, Dict, Iterator, List, Optional
from datetime import datetime

from wanderwise.models.database_models import (
    Base,
    DayActivity,
    ItineraryDay,
    SavedPlace,
    Trip,
    TripDestination,
)
from wanderwise.models.request_models import DateRange, PlaceInput
from wanderwise.models.response_models import (
    Itinerary,
    SavedPlace as SavedPlaceView,
    TripDetail,
    TripSummary,
)
from wanderwise.utils.errors import NotFound, StorageError, ValidationError

UPDATABLE_TRIP_FIELDS = ("title", "description", "start_date", "end_date")

def trip_title(destination: str) -> str:
    return f"Trip to {destination}"

class DatabaseManager:
    """Owns the engine and session factory and every trip/saved-place query.

    All operations take the caller's user id and filter on it; a record owned
    by somebody else is reported exactly like a missing one.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.logger = logging.getLogger(__name__)
        self.engine = None
        self.SessionLocal = None
        self._initialize_database()

    def _initialize_database(self):
        """Initialize database connection and create tables"""
        try:
            engine_kwargs: Dict[str, Any] = {"echo": self.echo, "pool_pre_ping": True}
            if self.database_url.startswith("sqlite"):
                engine_kwargs["connect_args"] = {"check_same_thread": False}
                if ":memory:" in self.database_url or self.database_url == "sqlite://":
                    # One shared connection, otherwise every session sees an empty database
                    engine_kwargs["poolclass"] = StaticPool
            self.engine = create_engine(self.database_url, **engine_kwargs)
            if self.database_url.startswith("sqlite"):
                event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

            # Create tables
            Base.metadata.create_all(bind=self.engine)

            # Create session factory
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

            self.logger.info("[db] Database initialized successfully")

        except Exception as e:
            self.logger.error(f"[db] Failed to initialize database: {str(e)}")
            raise

    def get_session(self) -> Session:
        """Get a database session"""
        return self.SessionLocal()

    @contextmanager
    def transaction(self, action: str) -> Iterator[Session]:
        """Session that commits once on success and rolls back on any storage error"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            self.logger.error(f"[db] Database error while trying to {action}: {str(e)}")
            raise StorageError(f"Failed to {action}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # --- Trips ---

    def save_itinerary(self, user_id: str, itinerary: Itinerary,
                       dates: Optional[DateRange] = None) -> str:
        """Persist a trip with its destination and day/activity subtree in one commit"""
        trip = Trip(
            title=trip_title(itinerary.destination),
            description=itinerary.summary,
            user_id=user_id,
            start_date=dates.start_date if dates else None,
            end_date=dates.end_date if dates else None,
            destinations=[
                TripDestination(name=itinerary.destination, description=itinerary.summary)
            ],
            itinerary=[
                ItineraryDay(
                    day=day.day,
                    title=day.title,
                    activities=[
                        DayActivity(
                            position=position,
                            time=activity.time,
                            title=activity.title,
                            description=activity.description,
                            type=activity.type.value,
                            duration=activity.duration,
                        )
                        for position, activity in enumerate(day.activities)
                    ],
                )
                for day in itinerary.days
            ],
        )

        with self.transaction("create trip") as session:
            session.add(trip)
            session.flush()
            trip_id = trip.id

        self.logger.info(f"[db] Trip {trip_id} saved successfully", extra={"days": len(itinerary.days)})
        return trip_id

    def _owned_trip(self, session: Session, user_id: str, trip_id: str, *options) -> Trip:
        query = session.query(Trip).filter(Trip.id == trip_id, Trip.user_id == user_id)
        if options:
            query = query.options(*options)
        trip = query.first()
        if trip is None:
            self.logger.warning(f"[db] Trip {trip_id} not found for user")
            raise NotFound("Trip not found")
        return trip

    def list_trips(self, user_id: str) -> List[TripSummary]:
        """All trips of a user, newest first, with destinations but no days"""
        with self.transaction("fetch trips") as session:
            trips = (
                session.query(Trip)
                .options(selectinload(Trip.destinations))
                .filter(Trip.user_id == user_id)
                .order_by(Trip.created_at.desc())
                .all()
            )
            return [TripSummary.model_validate(t) for t in trips]

    def get_trip(self, user_id: str, trip_id: str) -> TripDetail:
        with self.transaction("fetch trip") as session:
            trip = self._owned_trip(
                session, user_id, trip_id,
                selectinload(Trip.destinations),
                selectinload(Trip.itinerary).selectinload(ItineraryDay.activities),
            )
            return TripDetail.model_validate(trip)

    def update_trip(self, user_id: str, trip_id: Optional[str],
                    updates: Optional[Dict[str, Any]]) -> TripSummary:
        """Overwrite only the provided title/description/date fields"""
        changes = {k: v for k, v in (updates or {}).items() if k in UPDATABLE_TRIP_FIELDS}
        if not trip_id or not changes:
            raise ValidationError("Trip ID and updates are required")

        with self.transaction("update trip") as session:
            trip = self._owned_trip(session, user_id, trip_id, selectinload(Trip.destinations))
            start = changes.get("start_date", trip.start_date)
            end = changes.get("end_date", trip.end_date)
            if start and end and end < start:
                raise ValidationError("End date must not be before start date")
            for field, value in changes.items():
                setattr(trip, field, value)
            trip.updated_at = datetime.utcnow()
            session.flush()
            updated = TripSummary.model_validate(trip)

        self.logger.info(f"[db] Trip {trip_id} updated successfully", extra={"fields": list(changes)})
        return updated

    def delete_trip(self, user_id: str, trip_id: Optional[str]) -> None:
        if not trip_id:
            raise ValidationError("Trip ID is required")
        with self.transaction("delete trip") as session:
            trip = self._owned_trip(session, user_id, trip_id)
            session.delete(trip)
        self.logger.info(f"[db] Trip {trip_id} deleted successfully")

    # --- Saved places ---

    def is_place_saved(self, user_id: str, place_id: str) -> bool:
        with self.transaction("fetch saved place") as session:
            return session.get(SavedPlace, (user_id, place_id)) is not None

    def list_saved_places(self, user_id: str) -> List[SavedPlaceView]:
        with self.transaction("fetch saved places") as session:
            places = (
                session.query(SavedPlace)
                .filter(SavedPlace.user_id == user_id)
                .order_by(SavedPlace.created_at.desc())
                .all()
            )
            return [SavedPlaceView.model_validate(p) for p in places]

    def save_place(self, user_id: str, place: PlaceInput) -> SavedPlaceView:
        """Insert or refresh a saved place; saving the same id twice keeps one row"""
        if not place.id:
            raise ValidationError("Place ID is required")
        with self.transaction("save place") as session:
            saved = session.get(SavedPlace, (user_id, place.id))
            if saved is None:
                saved = SavedPlace(user_id=user_id, id=place.id)
                session.add(saved)
            saved.name = place.name
            saved.description = place.description
            saved.image = place.image
            saved.type = place.type
            session.flush()
            result = SavedPlaceView.model_validate(saved)
        self.logger.info(f"[db] Place {place.id} saved")
        return result

    def delete_saved_place(self, user_id: str, place_id: Optional[str]) -> None:
        if not place_id:
            raise ValidationError("Place ID is required")
        with self.transaction("delete saved place") as session:
            deleted = (
                session.query(SavedPlace)
                .filter(SavedPlace.user_id == user_id, SavedPlace.id == place_id)
                .delete()
            )
        self.logger.info(f"[db] Removed {deleted} saved place(s) for id {place_id}")

    def close(self):
        """Close database connections"""
        if self.engine:
            self.engine.dispose()
            self.logger.info("[db] Database connections closed")

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # ON DELETE CASCADE is a no-op in SQLite unless this pragma is on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
