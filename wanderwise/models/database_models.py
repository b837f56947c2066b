from sqlalchemy import Column, String, DateTime, Date, Text, Integer, ForeignKey
from sqlalchemy.orm import declarative_base, relationship
import uuid
from datetime import datetime

Base = declarative_base()

def generate_id() -> str:
    return str(uuid.uuid4())

class Trip(Base):
    __tablename__ = "trips"

    id = Column(String, primary_key=True, default=generate_id)
    user_id = Column(String, nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text)
    start_date = Column(Date)
    end_date = Column(Date)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    destinations = relationship("TripDestination", back_populates="trip", cascade="all, delete-orphan")
    itinerary = relationship(
        "ItineraryDay",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="ItineraryDay.day",
    )

class TripDestination(Base):
    __tablename__ = "trip_destinations"

    id = Column(String, primary_key=True, default=generate_id)
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)

    trip = relationship("Trip", back_populates="destinations")

class ItineraryDay(Base):
    __tablename__ = "itinerary_days"

    id = Column(String, primary_key=True, default=generate_id)
    trip_id = Column(String, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(Integer, nullable=False)  # 1-based
    title = Column(String)

    trip = relationship("Trip", back_populates="itinerary")
    activities = relationship(
        "DayActivity",
        back_populates="itinerary_day",
        cascade="all, delete-orphan",
        order_by="DayActivity.position",
    )

class DayActivity(Base):
    __tablename__ = "day_activities"

    id = Column(String, primary_key=True, default=generate_id)
    day_id = Column(String, ForeignKey("itinerary_days.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)  # order within the day
    time = Column(String)  # free text, e.g. "9:00 AM"
    title = Column(String, nullable=False)
    description = Column(Text)
    type = Column(String)  # food, attraction, activity, transport
    duration = Column(String)

    itinerary_day = relationship("ItineraryDay", back_populates="activities")

class SavedPlace(Base):
    __tablename__ = "saved_places"

    # Ids come from the caller (usually a destination id), so they are only unique per user
    user_id = Column(String, primary_key=True)
    id = Column(String, primary_key=True)

    name = Column(String)
    description = Column(Text)
    image = Column(String)
    type = Column(String)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
