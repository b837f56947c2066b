"""
Parsing and repair of Gemini output.

The model is asked for JSON but nothing guarantees it. Text is parsed
strictly (no fence stripping, no partial extraction), display fields the
model tends to leave out are backfilled from the entity itself, and the
result is then validated against the response models. Any failure along the
way is a ``ParseError``; callers never see a partial object.

Backfill only fills what is missing, so running it again on its own output
changes nothing.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import pydantic

from wanderwise.models.request_models import RecommendationType
from wanderwise.models.response_models import (
    Destination,
    DestinationDetail,
    Itinerary,
    Recommendation,
    RecommendationSet,
)
from wanderwise.utils.errors import ParseError

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_PATH = "/placeholder.svg"

# (height, width) of the placeholder for each kind of card
DESTINATION_CARD_SIZE = (400, 600)
DESTINATION_HERO_SIZE = (600, 1200)
ATTRACTION_SIZE = (300, 400)
RECOMMENDATION_SIZE = (200, 300)

RECOMMENDATION_CATEGORIES = (
    RecommendationType.RESTAURANTS,
    RecommendationType.ATTRACTIONS,
    RecommendationType.ACTIVITIES,
)

RECOMMENDATION_ITEM_NAMES = {
    RecommendationType.RESTAURANTS: "restaurant",
    RecommendationType.ATTRACTIONS: "attraction",
    RecommendationType.ACTIVITIES: "activity",
}

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

def placeholder_image(name: Optional[str], height: int, width: int) -> str:
    """Fixed-pattern image URL embedding the URL-encoded name"""
    text = quote(str(name or ""), safe="-_.!~*'()")
    return f"{PLACEHOLDER_IMAGE_PATH}?height={height}&width={width}&text={text}"

def load_json(text: Optional[str]) -> Any:
    """Strictly parse model output as JSON"""
    if text is None or not text.strip():
        raise ParseError("Empty response from generation service")
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error("Error parsing Gemini response", extra={"error": str(e)})
        raise ParseError() from e

def _require_list(data: Any, what: str, item: str) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        raise ParseError(f"Expected a list of {what}")
    if not all(isinstance(entry, dict) for entry in data):
        raise ParseError(f"Every {item} entry must be an object")
    return data

def _require_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError(f"Expected a {what} object")
    return data

def backfill_image(entity: Dict[str, Any], size: tuple) -> Dict[str, Any]:
    if not entity.get("image"):
        entity["image"] = placeholder_image(entity.get("name"), *size)
    return entity

def backfill_images(entities: List[Dict[str, Any]], size: tuple) -> List[Dict[str, Any]]:
    for entity in entities:
        backfill_image(entity, size)
    return entities

def _is_numeric_id(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, str) and value.isdigit())

def backfill_ids(entities: List[Dict[str, Any]], numeric: bool = False) -> List[Dict[str, Any]]:
    """Give entities without an id their 1-based position.

    With ``numeric`` set, ids that are not integers (e.g. ``"r1"``) count as
    missing too.
    """
    for index, entity in enumerate(entities):
        value = entity.get("id")
        if value in (None, "") or (numeric and not _is_numeric_id(value)):
            entity["id"] = index + 1
    return entities

def backfill_recommendations(entities: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    backfill_ids(entities, numeric=True)
    backfill_images(entities, RECOMMENDATION_SIZE)
    for entity in entities:
        # No geocoding here; the map shows them at the origin
        if not isinstance(entity.get("location"), dict):
            entity["location"] = {"lat": 0, "lng": 0}
    return entities

def _validate(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        logger.error("Generated data failed schema validation", extra={"model": model.__name__, "errors": details})
        raise ParseError(details=details) from e

# --- Destinations ---

def parse_destinations(text: str) -> List[Destination]:
    data = _require_list(load_json(text), "destinations", "destination")
    backfill_ids(data)
    backfill_images(data, DESTINATION_CARD_SIZE)
    return [_validate(Destination, item) for item in data]

def parse_destination_detail(text: str, destination_id: Optional[str] = None) -> DestinationDetail:
    data = _require_object(load_json(text), "destination")
    if destination_id is not None and data.get("id") in (None, ""):
        data["id"] = destination_id
    backfill_image(data, DESTINATION_HERO_SIZE)
    attractions = data.get("attractions")
    if attractions is not None:
        backfill_images(_require_list(attractions, "attractions", "attraction"), ATTRACTION_SIZE)
    return _validate(DestinationDetail, data)

# --- Itineraries ---

def validate_itinerary(data: Any, expected_duration: Optional[int] = None) -> Itinerary:
    """Validate an itinerary object, including its day numbering.

    Days must be numbered 1..N in order with no gaps or duplicates, and N must
    match ``expected_duration`` (or the itinerary's own duration when no
    expectation is given).
    """
    itinerary = _validate(Itinerary, _require_object(data, "itinerary"))

    day_numbers = [d.day for d in itinerary.days]
    if day_numbers != list(range(1, len(day_numbers) + 1)):
        raise ParseError(
            "Itinerary days must be numbered consecutively from 1",
            details={"days": day_numbers},
        )

    expected = expected_duration if expected_duration is not None else itinerary.duration
    if len(itinerary.days) != expected:
        raise ParseError(
            f"Expected {expected} itinerary days, got {len(itinerary.days)}",
            details={"days": day_numbers},
        )

    itinerary.duration = len(itinerary.days)
    return itinerary

def parse_itinerary(text: str, expected_duration: Optional[int] = None) -> Itinerary:
    return validate_itinerary(load_json(text), expected_duration)

# --- Recommendations ---

def _build_recommendations(items: Any, category: RecommendationType) -> List[Recommendation]:
    entities = _require_list(items, category.value, RECOMMENDATION_ITEM_NAMES[category])
    backfill_recommendations(entities)
    return [_validate(Recommendation, item) for item in entities]

def _single_category_handler(category: RecommendationType) -> Callable[[Any], RecommendationSet]:
    def handle(data: Any) -> RecommendationSet:
        # The model sometimes wraps the list in {"<category>": [...]}
        if isinstance(data, dict):
            if category.value not in data:
                raise ParseError(f"Expected a list of {category.value}")
            data = data[category.value]
        return RecommendationSet(**{category.value: _build_recommendations(data, category)})
    return handle

def _all_categories_handler(data: Any) -> RecommendationSet:
    grouped = _require_object(data, "recommendations")
    result: Dict[str, List[Recommendation]] = {}
    for category in RECOMMENDATION_CATEGORIES:
        if grouped.get(category.value) is not None:
            result[category.value] = _build_recommendations(grouped[category.value], category)
    if not result:
        raise ParseError("No recommendation categories in response")
    return RecommendationSet(**result)

RECOMMENDATION_HANDLERS: Dict[RecommendationType, Callable[[Any], RecommendationSet]] = {
    RecommendationType.RESTAURANTS: _single_category_handler(RecommendationType.RESTAURANTS),
    RecommendationType.ATTRACTIONS: _single_category_handler(RecommendationType.ATTRACTIONS),
    RecommendationType.ACTIVITIES: _single_category_handler(RecommendationType.ACTIVITIES),
    RecommendationType.ALL: _all_categories_handler,
}

def parse_recommendations(text: str, kind: RecommendationType) -> RecommendationSet:
    return RECOMMENDATION_HANDLERS[kind](load_json(text))
