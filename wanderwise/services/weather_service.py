import logging
from datetime import datetime, timezone
from typing import List, Optional
import httpx

from wanderwise.models.response_models import ForecastEntry


def city_from_destination(destination: str) -> str:
    # "Kyoto, Japan" -> "Kyoto"
    return (destination or "").split(",")[0].strip()


class WeatherService:
    """
    Short forecast from OpenWeatherMap.
    Weather is a nice-to-have next to itineraries and destination pages, so
    every failure is logged and answered with an empty forecast.
    """

    def __init__(self, api_key: Optional[str], api_url: str, count: int = 5,
                 client: Optional[httpx.Client] = None):
        self.api_key = api_key
        self.api_url = api_url
        self.count = count
        self.logger = logging.getLogger(__name__)
        self.client = client or httpx.Client()

    def get_forecast(self, destination: str) -> List[ForecastEntry]:
        city = city_from_destination(destination)
        if not city:
            return []
        if not self.api_key:
            self.logger.warning("[weather] OPENWEATHER_API_KEY not configured; skipping forecast")
            return []

        try:
            response = self.client.get(
                self.api_url,
                params={
                    "q": city,
                    "appid": self.api_key,
                    "units": "metric",
                    "cnt": self.count,
                },
            )
            response.raise_for_status()
            items = response.json().get("list") or []
            forecast = [self._to_entry(item) for item in items]
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            self.logger.warning("[weather] Failed to fetch weather data", extra={"city": city, "error": str(e)})
            return []

        self.logger.info("[weather] Forecast fetched", extra={"city": city, "entries": len(forecast)})
        return forecast

    @staticmethod
    def _to_entry(item: dict) -> ForecastEntry:
        moment = datetime.fromtimestamp(item["dt"], tz=timezone.utc)
        main = item["main"]
        condition = item["weather"][0]
        return ForecastEntry(
            date=moment,
            day=moment.strftime("%a"),
            temp=round(main["temp"]),
            min_temp=round(main["temp_min"]),
            weather=condition["main"],
            icon=condition["icon"],
        )

    def close(self):
        self.client.close()
