from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Google Cloud / Vertex AI Configuration
    GOOGLE_CLOUD_PROJECT: str = "your-project-id"
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TEMPERATURE: float = 0.7

    # Firebase Authentication
    FIREBASE_SERVICE_ACCOUNT_PATH: Optional[str] = None
    FIREBASE_PROJECT_ID: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./wanderwise.db"

    # Weather (OpenWeatherMap)
    OPENWEATHER_API_KEY: Optional[str] = None
    OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/forecast"
    WEATHER_FORECAST_COUNT: int = 5

    # Translation (LibreTranslate)
    LIBRETRANSLATE_URL: str = "https://libretranslate.com/translate"
    LIBRETRANSLATE_API_KEY: Optional[str] = None

    # API Configuration
    API_VERSION: str = "1.0.0"
    DEBUG_MODE: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Trip Planning Limits
    MAX_TRIP_DURATION_DAYS: int = 30
    DESTINATION_SUGGESTION_COUNT: int = 5

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}

# Global settings instance
settings = Settings()

def get_settings() -> Settings:
    """Get the global settings instance"""
    return settings

def validate_settings() -> bool:
    """Validate that all required settings are configured"""
    required_settings = [
        "GOOGLE_CLOUD_PROJECT",
        "DATABASE_URL"
    ]

    missing_settings = []
    for setting in required_settings:
        if not getattr(settings, setting) or getattr(settings, setting) == "your-project-id":
            missing_settings.append(setting)

    if missing_settings:
        print(f"Missing or invalid settings: {', '.join(missing_settings)}")
        print("Please configure these settings in your .env file or environment variables")
        return False

    # Firebase project falls back to the Vertex AI project
    if not settings.FIREBASE_PROJECT_ID:
        settings.FIREBASE_PROJECT_ID = settings.GOOGLE_CLOUD_PROJECT

    return True
