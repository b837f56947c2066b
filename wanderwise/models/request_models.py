from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from datetime import date
from typing import Any, Dict, List, Optional
from enum import Enum

class CamelModel(BaseModel):
    """Base model accepting both camelCase (wire) and snake_case (python) keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class TravelStyle(str, Enum):
    RELAXED = "relaxed"
    BALANCED = "balanced"
    ACTIVE = "active"

class BudgetLevel(str, Enum):
    BUDGET = "budget"
    MID = "mid"
    LUXURY = "luxury"

class RecommendationType(str, Enum):
    ALL = "all"
    RESTAURANTS = "restaurants"
    ATTRACTIONS = "attractions"
    ACTIVITIES = "activities"

class SavedPlaceActionType(str, Enum):
    SAVE = "save"
    DELETE = "delete"

def _unique(values: List[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result

class DateRange(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self

class TripPreferences(CamelModel):
    # Where and how long
    destination: Optional[str] = Field(None, max_length=200)
    ideal_destination: Optional[str] = Field(None, max_length=1000, description="Free-text description used when no destination is named")
    duration: int = Field(3, gt=0, description="Trip length in days")

    # Interests & style
    interests: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)
    travel_style: Optional[TravelStyle] = None

    # Budget
    budget: Optional[BudgetLevel] = None
    budget_amount: Optional[float] = Field(None, gt=0, description="Approximate spend per day")

    # Logistics
    accommodation: List[str] = Field(default_factory=list)
    transportation: List[str] = Field(default_factory=list)
    dietary: List[str] = Field(default_factory=list)
    dates: Optional[DateRange] = None
    special_requests: Optional[str] = Field(None, max_length=2000)

    @field_validator("interests", "activities", "accommodation", "transportation", "dietary", mode="before")
    @classmethod
    def coerce_to_list(cls, v):
        # Single-choice form fields arrive as plain strings
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("interests", "activities", "accommodation", "transportation", "dietary")
    @classmethod
    def deduplicate(cls, v):
        return _unique(v)

    @property
    def destination_label(self) -> str:
        """Name used for titles; falls back to the free-text description"""
        return (self.destination or self.ideal_destination or "").strip()

class ItineraryRequest(TripPreferences):
    save_trip: bool = Field(default=False)

class SaveTripRequest(CamelModel):
    itinerary: Optional[Dict[str, Any]] = None
    dates: Optional[DateRange] = None

class TripUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def validate_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        return self

    def provided_fields(self) -> Dict[str, Any]:
        """Only the fields the caller actually set"""
        return self.model_dump(exclude_unset=True, exclude_none=True)

class TranslationRequest(CamelModel):
    text: Optional[str] = None
    source_language: Optional[str] = "auto"
    target_language: Optional[str] = None

class PlaceInput(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    type: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        # Destination ids generated upstream are often integers
        if v is None:
            return v
        return str(v)

class SavedPlaceRequest(CamelModel):
    action: SavedPlaceActionType
    place: PlaceInput
