from fastapi import FastAPI, Body, Depends, Query, Request
import os
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from datetime import datetime
from typing import List, Optional, Union

from wanderwise.api.dependencies import (
    CurrentUser,
    get_current_user,
    get_database,
    get_destination_service,
    get_itinerary_generator,
    get_translation_service,
    get_weather_service,
)
from wanderwise.models.request_models import (
    ItineraryRequest,
    RecommendationType,
    SavedPlaceActionType,
    SavedPlaceRequest,
    SaveTripRequest,
    TranslationRequest,
    TripPreferences,
    TripUpdate,
)
from wanderwise.models.response_models import (
    DestinationResponse,
    DestinationsResponse,
    ItineraryResponse,
    MessageResponse,
    RecommendationSet,
    SavedPlaceResponse,
    SavedPlacesResponse,
    SavedPlaceStatusResponse,
    TranslationResult,
    TripResponse,
    TripSavedResponse,
    TripsResponse,
    TripUpdatedResponse,
    WeatherResponse,
)
from wanderwise.services.destination_service import SORT_OPTIONS, DestinationService, filter_destinations
from wanderwise.services.itinerary_generator import ItineraryGeneratorService
from wanderwise.services.response_parser import validate_itinerary
from wanderwise.services.translation_service import TranslationService
from wanderwise.services.vertex_ai_service import VertexAIService
from wanderwise.services.weather_service import WeatherService
from wanderwise.utils.config import get_settings, validate_settings
from wanderwise.utils.database import DatabaseManager
from wanderwise.utils.errors import ParseError, TripPlannerError, ValidationError
from wanderwise.utils.firebase_auth import initialize_firebase_admin, is_firebase_initialized
from wanderwise.utils.validators import TripPreferencesValidator

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Wanderwise Travel Planner API",
    description="Destinations, AI-written itineraries, saved trips and phrase translation using Google Vertex AI Gemini",
    version=get_settings().API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    settings = get_settings()

    if not validate_settings():
        logger.error("Invalid settings configuration")
        raise Exception("Invalid settings configuration")

    # Ensure GOOGLE_APPLICATION_CREDENTIALS is exported for ADC (Vertex AI)
    if settings.GOOGLE_APPLICATION_CREDENTIALS:
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = settings.GOOGLE_APPLICATION_CREDENTIALS
        logger.info("ADC path set from settings", extra={"gac_path": settings.GOOGLE_APPLICATION_CREDENTIALS})

    logger.info("Initializing services...")
    app.state.generation_client = VertexAIService(
        project_id=settings.GOOGLE_CLOUD_PROJECT,
        location=settings.GOOGLE_CLOUD_LOCATION,
        model_name=settings.GEMINI_MODEL,
        temperature=settings.GEMINI_TEMPERATURE,
    )
    app.state.database = DatabaseManager(settings.DATABASE_URL, echo=settings.DEBUG_MODE)
    app.state.translation_service = TranslationService(
        api_url=settings.LIBRETRANSLATE_URL,
        api_key=settings.LIBRETRANSLATE_API_KEY,
    )
    app.state.weather_service = WeatherService(
        api_key=settings.OPENWEATHER_API_KEY,
        api_url=settings.OPENWEATHER_URL,
        count=settings.WEATHER_FORECAST_COUNT,
    )

    # Trip and saved-place routes reject every request without Firebase
    try:
        initialize_firebase_admin()
    except Exception as fb_error:
        logger.warning(f"Firebase Admin SDK initialization failed: {fb_error}")
        logger.warning("Authenticated endpoints will answer 401 until Firebase is configured")

    logger.info("All services initialized successfully")

@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on shutdown"""
    for name in ("database", "translation_service", "weather_service"):
        service = getattr(app.state, name, None)
        if service is not None:
            service.close()

# --- Error handling ---

@app.exception_handler(TripPlannerError)
async def trip_planner_error_handler(request: Request, exc: TripPlannerError):
    logger.warning(
        f"{request.method} {request.url.path} failed: {exc.message}",
        extra={"status_code": exc.status_code, "error_type": type(exc).__name__}
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return JSONResponse(status_code=400, content={"error": ValidationError.default_message, "details": details})

# --- Service info ---

@app.get("/")
async def root():
    return {
        "message": "Wanderwise Travel Planner API",
        "version": get_settings().API_VERSION,
        "docs": "/docs",
    }

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "services": {
            "generation": getattr(app.state, "generation_client", None) is not None,
            "database": getattr(app.state, "database", None) is not None,
            "auth": is_firebase_initialized(),
        },
    }

# --- Destinations & recommendations ---

@app.get("/api/v1/destinations", response_model=DestinationsResponse, response_model_exclude_none=True)
def list_destinations(
    interests: Optional[str] = None,
    budget: Optional[str] = None,
    duration: Optional[int] = Query(None, gt=0),
    search: Optional[str] = None,
    tags: Optional[List[str]] = Query(None),
    sort: str = "default",
    service: DestinationService = Depends(get_destination_service),
):
    """Suggest destinations, then apply the optional search/tag/sort view"""
    if sort not in SORT_OPTIONS:
        raise ValidationError(f"Unknown sort option: {sort}")
    destinations = service.list_destinations(interests, budget, duration)
    return DestinationsResponse(destinations=filter_destinations(destinations, search, tags, sort))

@app.get("/api/v1/destinations/{destination_id}", response_model=DestinationResponse, response_model_exclude_none=True)
def get_destination(destination_id: str, service: DestinationService = Depends(get_destination_service)):
    return DestinationResponse(destination=service.get_destination(destination_id))

@app.get("/api/v1/recommendations", response_model=RecommendationSet, response_model_exclude_none=True)
def get_recommendations(
    location: Optional[str] = None,
    kind: RecommendationType = Query(RecommendationType.ALL, alias="type"),
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    service: DestinationService = Depends(get_destination_service),
):
    if not location and (latitude is None or longitude is None):
        raise ValidationError("Location is required")
    return service.get_recommendations(location or f"{latitude},{longitude}", kind)

# --- Itineraries ---

@app.post("/api/v1/validate-request")
async def validate_itinerary_request(request: TripPreferences):
    """Validate itinerary preferences without generating anything"""
    return TripPreferencesValidator.validate_complete_request(request, get_settings().MAX_TRIP_DURATION_DAYS)

@app.post("/api/v1/itinerary", response_model=ItineraryResponse, response_model_exclude_none=True)
def generate_itinerary(
    request: ItineraryRequest,
    user: CurrentUser = Depends(get_current_user),
    generator: ItineraryGeneratorService = Depends(get_itinerary_generator),
):
    """Generate an itinerary with Gemini and save it as a trip when ``saveTrip`` is set"""
    logger.info(
        "[itinerary] Request received",
        extra={
            "destination": request.destination_label,
            "duration": request.duration,
            "save": request.save_trip,
        }
    )
    validation = TripPreferencesValidator.validate_complete_request(request, get_settings().MAX_TRIP_DURATION_DAYS)
    if not validation['valid']:
        raise ValidationError(details=validation['errors'])

    itinerary = generator.generate(request, user_id=user.uid, save=request.save_trip)
    return ItineraryResponse(itinerary=itinerary)

# --- Trips ---

@app.get("/api/v1/trips", response_model=TripsResponse)
def list_trips(user: CurrentUser = Depends(get_current_user), db: DatabaseManager = Depends(get_database)):
    return TripsResponse(trips=db.list_trips(user.uid))

@app.get("/api/v1/trips/{trip_id}", response_model=TripResponse)
def get_trip(trip_id: str, user: CurrentUser = Depends(get_current_user), db: DatabaseManager = Depends(get_database)):
    return TripResponse(trip=db.get_trip(user.uid, trip_id))

@app.post("/api/v1/trips", response_model=TripSavedResponse)
def save_trip(
    payload: SaveTripRequest,
    user: CurrentUser = Depends(get_current_user),
    db: DatabaseManager = Depends(get_database),
):
    """Save a previously generated itinerary"""
    if not payload.itinerary:
        raise ValidationError("Itinerary data is required")
    try:
        itinerary = validate_itinerary(payload.itinerary)
    except ParseError as e:
        raise ValidationError("Invalid itinerary data", details=e.details or e.message) from e

    trip_id = db.save_itinerary(user.uid, itinerary, payload.dates)
    return TripSavedResponse(message="Trip saved successfully", trip_id=trip_id)

@app.put("/api/v1/trips/{trip_id}", response_model=TripUpdatedResponse)
def update_trip(
    trip_id: str,
    updates: Optional[TripUpdate] = Body(None),
    user: CurrentUser = Depends(get_current_user),
    db: DatabaseManager = Depends(get_database),
):
    trip = db.update_trip(user.uid, trip_id, updates.provided_fields() if updates else None)
    return TripUpdatedResponse(message="Trip updated successfully", trip=trip)

@app.delete("/api/v1/trips/{trip_id}", response_model=MessageResponse)
def delete_trip(trip_id: str, user: CurrentUser = Depends(get_current_user), db: DatabaseManager = Depends(get_database)):
    db.delete_trip(user.uid, trip_id)
    return MessageResponse(message="Trip deleted successfully")

# --- Saved places ---

@app.get("/api/v1/user/saved-places", response_model=Union[SavedPlaceStatusResponse, SavedPlacesResponse])
def get_saved_places(
    destination_id: Optional[str] = Query(None, alias="destinationId"),
    user: CurrentUser = Depends(get_current_user),
    db: DatabaseManager = Depends(get_database),
):
    """With ``destinationId`` report whether it is saved, otherwise list everything"""
    if destination_id:
        return SavedPlaceStatusResponse(is_saved=db.is_place_saved(user.uid, destination_id))
    return SavedPlacesResponse(saved_places=db.list_saved_places(user.uid))

@app.post("/api/v1/user/saved-places", response_model=Union[SavedPlaceResponse, MessageResponse])
def manage_saved_place(
    payload: SavedPlaceRequest,
    user: CurrentUser = Depends(get_current_user),
    db: DatabaseManager = Depends(get_database),
):
    if payload.action == SavedPlaceActionType.SAVE:
        saved = db.save_place(user.uid, payload.place)
        return SavedPlaceResponse(message="Place saved successfully", saved_place=saved)

    db.delete_saved_place(user.uid, payload.place.id)
    return MessageResponse(message="Place removed successfully")

# --- Translation & weather ---

@app.post("/api/v1/translate", response_model=TranslationResult, response_model_exclude_none=True)
def translate(payload: TranslationRequest, service: TranslationService = Depends(get_translation_service)):
    """Translate text; upstream failures fall back to the phrasebook instead of erroring"""
    if not payload.text or not payload.target_language:
        raise ValidationError("Missing required parameters")
    return service.translate(payload.text, payload.target_language, payload.source_language)

@app.get("/api/v1/weather", response_model=WeatherResponse)
def get_weather(location: str = Query(..., min_length=1), service: WeatherService = Depends(get_weather_service)):
    """Short forecast for a destination; empty when the weather API is unavailable"""
    return WeatherResponse(location=location, forecast=service.get_forecast(location))
