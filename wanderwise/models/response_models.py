from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date, datetime
from typing import List, Optional, Union
from enum import Enum

from wanderwise.models.request_models import CamelModel

class ActivityType(str, Enum):
    FOOD = "food"
    ATTRACTION = "attraction"
    ACTIVITY = "activity"
    TRANSPORT = "transport"

# --- Generated content ---

class Activity(CamelModel):
    time: str
    title: str
    description: str = ""
    type: ActivityType
    duration: str = ""
    image: Optional[str] = None

class Day(CamelModel):
    day: int = Field(..., ge=1)
    title: str
    activities: List[Activity] = Field(default_factory=list)

class Itinerary(CamelModel):
    destination: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0)
    summary: str = ""
    days: List[Day] = Field(..., min_length=1)
    trip_id: Optional[str] = None

class Destination(CamelModel):
    id: Union[int, str]
    name: str
    description: str = ""
    image: str
    tags: List[str] = Field(default_factory=list)
    budget: Optional[str] = None  # "$" to "$$$"
    best_time: Optional[str] = None
    rating: Optional[float] = None

class Attraction(CamelModel):
    name: str
    description: str = ""
    image: str

class SeasonalWeather(CamelModel):
    spring: Optional[str] = None
    summer: Optional[str] = None
    fall: Optional[str] = None
    winter: Optional[str] = None

class DestinationDetail(CamelModel):
    id: Optional[Union[int, str]] = None
    name: str
    description: str = ""
    image: str
    rating: Optional[float] = None
    tags: List[str] = Field(default_factory=list)
    budget: Optional[str] = None
    best_time: Optional[str] = None
    weather: Optional[SeasonalWeather] = None
    attractions: List[Attraction] = Field(default_factory=list)

class GeoPoint(CamelModel):
    lat: float
    lng: float

class Recommendation(CamelModel):
    # Restaurants, attractions and activities carry different detail fields
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    name: str
    description: Optional[str] = None
    image: str
    location: GeoPoint

class RecommendationSet(CamelModel):
    restaurants: Optional[List[Recommendation]] = None
    attractions: Optional[List[Recommendation]] = None
    activities: Optional[List[Recommendation]] = None

class ForecastEntry(CamelModel):
    date: datetime
    day: str  # short weekday, e.g. "Mon"
    temp: int
    min_temp: int
    weather: str
    icon: str

class TranslationResult(CamelModel):
    translated_text: str
    detected_source_language: Optional[str] = None
    note: Optional[str] = None
    error: Optional[str] = None

# --- Persisted records ---

class StoredModel(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class StoredActivity(StoredModel):
    id: str
    time: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: Optional[str] = None
    duration: Optional[str] = None

class StoredDay(StoredModel):
    id: str
    day: int
    title: Optional[str] = None
    activities: List[StoredActivity] = Field(default_factory=list)

class StoredDestination(StoredModel):
    id: str
    name: str
    description: Optional[str] = None

class TripSummary(StoredModel):
    id: str
    title: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime
    destinations: List[StoredDestination] = Field(default_factory=list)

class TripDetail(TripSummary):
    itinerary: List[StoredDay] = Field(default_factory=list)

class SavedPlace(StoredModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None
    created_at: datetime

# --- Response envelopes ---

class DestinationsResponse(CamelModel):
    destinations: List[Destination]

class DestinationResponse(CamelModel):
    destination: DestinationDetail

class ItineraryResponse(CamelModel):
    itinerary: Itinerary

class TripsResponse(CamelModel):
    trips: List[TripSummary]

class TripResponse(CamelModel):
    trip: TripDetail

class TripSavedResponse(CamelModel):
    message: str
    trip_id: str

class TripUpdatedResponse(CamelModel):
    message: str
    trip: TripSummary

class MessageResponse(CamelModel):
    message: str

class SavedPlacesResponse(CamelModel):
    saved_places: List[SavedPlace]

class SavedPlaceStatusResponse(CamelModel):
    is_saved: bool

class SavedPlaceResponse(CamelModel):
    message: str
    saved_place: SavedPlace

class WeatherResponse(CamelModel):
    location: str
    forecast: List[ForecastEntry] = Field(default_factory=list)
