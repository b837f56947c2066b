import logging
import time
from typing import Optional

from wanderwise.models.request_models import TripPreferences
from wanderwise.models.response_models import Itinerary
from wanderwise.prompts.system_prompts import build_itinerary_prompt
from wanderwise.services.response_parser import parse_itinerary
from wanderwise.services.vertex_ai_service import VertexAIService
from wanderwise.utils.database import DatabaseManager
from wanderwise.utils.errors import AuthenticationRequired

class ItineraryGeneratorService:
    """Prompt -> Gemini -> validated itinerary -> (optionally) saved trip"""

    def __init__(self, generation_client: VertexAIService, database: Optional[DatabaseManager] = None):
        self.generation_client = generation_client
        self.database = database
        self.logger = logging.getLogger(__name__)

    def generate(self, preferences: TripPreferences, user_id: Optional[str] = None,
                 save: bool = False) -> Itinerary:
        """Generate an itinerary and persist it when ``save`` is set.

        Generation failures raise ``UpstreamCallFailed``, malformed output
        raises ``ParseError`` and nothing is saved in either case.
        """
        started = time.perf_counter()
        prompt = build_itinerary_prompt(preferences)
        self.logger.debug("[itinerary] prompt\n%s", prompt)

        text = self.generation_client.generate_text(prompt)
        itinerary = parse_itinerary(text, expected_duration=preferences.duration)
        self.logger.info(
            "[itinerary] generated",
            extra={
                "destination": itinerary.destination,
                "days": len(itinerary.days),
                "seconds": round(time.perf_counter() - started, 2),
            }
        )

        if save:
            if not user_id:
                raise AuthenticationRequired()
            itinerary.trip_id = self.database.save_itinerary(user_id, itinerary, preferences.dates)

        return itinerary
