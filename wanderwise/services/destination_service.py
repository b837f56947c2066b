import logging
from typing import Iterable, List, Optional

from wanderwise.models.request_models import RecommendationType
from wanderwise.models.response_models import Destination, DestinationDetail, RecommendationSet
from wanderwise.prompts.system_prompts import (
    build_destination_detail_prompt,
    build_destinations_prompt,
    build_recommendations_prompt,
)
from wanderwise.services.response_parser import (
    parse_destination_detail,
    parse_destinations,
    parse_recommendations,
)
from wanderwise.services.vertex_ai_service import VertexAIService

DEFAULT_BUDGET = "$$"

SORT_OPTIONS = ("default", "name-asc", "name-desc", "rating-high", "rating-low", "budget-low", "budget-high")

def _budget_rank(destination: Destination) -> int:
    return len(destination.budget or DEFAULT_BUDGET)

def sort_destinations(destinations: List[Destination], option: str = "default") -> List[Destination]:
    """Sort a destination list; unknown options keep the original order"""
    if option == "name-asc":
        return sorted(destinations, key=lambda d: d.name.lower())
    if option == "name-desc":
        return sorted(destinations, key=lambda d: d.name.lower(), reverse=True)
    if option == "rating-high":
        return sorted(destinations, key=lambda d: d.rating or 0, reverse=True)
    if option == "rating-low":
        return sorted(destinations, key=lambda d: d.rating or 0)
    if option == "budget-low":
        return sorted(destinations, key=_budget_rank)
    if option == "budget-high":
        return sorted(destinations, key=_budget_rank, reverse=True)
    return list(destinations)

def filter_destinations(
    destinations: List[Destination],
    search: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    sort: str = "default",
) -> List[Destination]:
    """Search, tag-filter and sort an already generated destination list"""
    filtered = list(destinations)

    if search:
        query = search.lower()
        filtered = [
            d for d in filtered
            if query in d.name.lower()
            or query in d.description.lower()
            or any(query in tag.lower() for tag in d.tags)
        ]

    selected = set(tags or [])
    if selected:
        filtered = [d for d in filtered if any(tag in selected for tag in d.tags)]

    return sort_destinations(filtered, sort)


class DestinationService:
    """Destination suggestions, detail pages and local recommendations from Gemini"""

    def __init__(self, generation_client: VertexAIService, suggestion_count: int = 5):
        self.generation_client = generation_client
        self.suggestion_count = suggestion_count
        self.logger = logging.getLogger(__name__)

    def list_destinations(
        self,
        interests: Optional[str] = None,
        budget: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> List[Destination]:
        prompt = build_destinations_prompt(interests, budget, duration, count=self.suggestion_count)
        text = self.generation_client.generate_text(prompt)
        destinations = parse_destinations(text)
        self.logger.info("Destinations generated", extra={"count": len(destinations)})
        return destinations

    def get_destination(self, destination_id: str) -> DestinationDetail:
        prompt = build_destination_detail_prompt(destination_id)
        text = self.generation_client.generate_text(prompt)
        return parse_destination_detail(text, destination_id)

    def get_recommendations(self, location: str, kind: RecommendationType = RecommendationType.ALL) -> RecommendationSet:
        prompt = build_recommendations_prompt(location, kind)
        text = self.generation_client.generate_text(prompt)
        recommendations = parse_recommendations(text, kind)
        self.logger.info("Recommendations generated", extra={"location": location, "type": kind.value})
        return recommendations
