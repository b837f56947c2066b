"""
FastAPI dependencies.

Service objects are built once at startup and stored on ``app.state``; route
handlers receive them through these functions, so tests swap in fakes with
``app.dependency_overrides`` instead of touching the environment.
"""

import logging
from typing import Optional

from fastapi import Depends, Header, Request
from pydantic import BaseModel

from wanderwise.services.destination_service import DestinationService
from wanderwise.services.itinerary_generator import ItineraryGeneratorService
from wanderwise.services.translation_service import TranslationService
from wanderwise.services.vertex_ai_service import VertexAIService
from wanderwise.services.weather_service import WeatherService
from wanderwise.utils.config import get_settings
from wanderwise.utils.database import DatabaseManager
from wanderwise.utils.errors import AuthenticationRequired, TripPlannerError
from wanderwise.utils.firebase_auth import extract_bearer_token, verify_firebase_token

logger = logging.getLogger(__name__)

class CurrentUser(BaseModel):
    uid: str
    email: Optional[str] = None

def _service(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        logger.error(f"Service '{name}' requested before startup completed")
        raise TripPlannerError("Service not initialized")
    return service

def get_generation_client(request: Request) -> VertexAIService:
    return _service(request, "generation_client")

def get_database(request: Request) -> DatabaseManager:
    return _service(request, "database")

def get_translation_service(request: Request) -> TranslationService:
    return _service(request, "translation_service")

def get_weather_service(request: Request) -> WeatherService:
    return _service(request, "weather_service")

def get_destination_service(
    client: VertexAIService = Depends(get_generation_client),
) -> DestinationService:
    return DestinationService(client, suggestion_count=get_settings().DESTINATION_SUGGESTION_COUNT)

def get_itinerary_generator(
    client: VertexAIService = Depends(get_generation_client),
    database: DatabaseManager = Depends(get_database),
) -> ItineraryGeneratorService:
    return ItineraryGeneratorService(client, database)

async def get_current_user(authorization: Optional[str] = Header(None)) -> CurrentUser:
    """Resolve the Firebase user behind the bearer token"""
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationRequired()
    try:
        claims = await verify_firebase_token(token)
    except ValueError as e:
        raise AuthenticationRequired(str(e)) from e
    return CurrentUser(uid=claims["uid"], email=claims.get("email"))
