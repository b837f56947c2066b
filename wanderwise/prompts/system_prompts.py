"""
Prompt builders for the Gemini generation calls.

Each builder is a pure function of its input: optional preferences only add a
clause when they are set, and nothing here rejects input.
"""

from typing import Iterable, Optional

from wanderwise.models.request_models import RecommendationType, TripPreferences

ITINERARY_SCHEDULE_CLAUSE = (
    " The itinerary should include a daily schedule with morning, afternoon, and evening activities,"
    " recommended places to eat, and transportation tips."
)

ITINERARY_FORMAT_CLAUSE = """ Format the response as a JSON object with the following structure: {
      "destination": string,
      "duration": number,
      "summary": string,
      "days": [
        {
          "day": number,
          "title": string,
          "activities": [
            {
              "time": string,
              "title": string,
              "description": string,
              "type": string (one of: food, attraction, activity, transport),
              "duration": string
            }
          ]
        }
      ]
    }"""

DESTINATIONS_FORMAT_CLAUSE = (
    " Return the response as a JSON array with objects containing id, name, description,"
    " image (leave as null), tags (array), budget, and bestTime fields."
)

RECOMMENDATIONS_FORMAT_CLAUSE = (
    " Format the response as a JSON object with appropriate fields for each type of recommendation."
)

def _join(values: Iterable[str]) -> str:
    return ", ".join(values)

def _value(v) -> str:
    return v.value if hasattr(v, "value") else str(v)

def build_itinerary_prompt(preferences: TripPreferences) -> str:
    """Assemble the itinerary instruction from trip preferences"""
    duration = preferences.duration
    if preferences.destination:
        prompt = f"Create a detailed travel itinerary for a {duration}-day trip to {preferences.destination}."
    else:
        prompt = (
            f"Create a detailed travel itinerary for a {duration}-day trip to a destination matching"
            f" this description: {preferences.ideal_destination or ''}."
        )

    if preferences.interests:
        prompt += f" The traveler is interested in: {_join(preferences.interests)}."

    if preferences.travel_style:
        prompt += f" Their travel style is: {_value(preferences.travel_style)}."

    if preferences.budget:
        prompt += f" Their budget level is: {_value(preferences.budget)}."

    if preferences.budget_amount:
        prompt += f" They plan to spend around {preferences.budget_amount:g} per day."

    if preferences.activities:
        prompt += f" They want to include these activities: {_join(preferences.activities)}."

    if preferences.accommodation:
        prompt += f" They prefer staying in: {_join(preferences.accommodation)}."

    if preferences.transportation:
        prompt += f" They prefer getting around by: {_join(preferences.transportation)}."

    if preferences.dietary:
        prompt += f" Their dietary requirements are: {_join(preferences.dietary)}."

    dates = preferences.dates
    if dates and dates.start_date:
        if dates.end_date:
            prompt += f" They will travel from {dates.start_date.isoformat()} to {dates.end_date.isoformat()}."
        else:
            prompt += f" They will start traveling on {dates.start_date.isoformat()}."

    if preferences.special_requests and preferences.special_requests.strip():
        prompt += f" Special requests: {preferences.special_requests.strip()}."

    prompt += ITINERARY_SCHEDULE_CLAUSE
    prompt += ITINERARY_FORMAT_CLAUSE
    return prompt

def build_destinations_prompt(
    interests: Optional[str] = None,
    budget: Optional[str] = None,
    duration: Optional[int] = None,
    count: int = 5,
) -> str:
    """Prompt for a list of destination suggestions"""
    prompt = (
        f"Suggest {count} travel destinations with the following information for each: name, description,"
        " tags (3 categories), budget level ($ to $$$), and best time to visit."
    )

    if interests:
        prompt += f" The traveler is interested in: {interests}."

    if budget:
        prompt += f" Their budget is around: {budget}."

    if duration:
        prompt += f" They plan to travel for: {duration} days."

    prompt += DESTINATIONS_FORMAT_CLAUSE
    return prompt

def build_destination_detail_prompt(destination_id: str) -> str:
    """Prompt for a single destination's detail page"""
    return f"""Generate a detailed travel description for a destination with ID {destination_id}.
    Include name, description, rating, tags (array of 3-5 interests), budget level ($ to $$$), best time to visit (as bestTime),
    weather information for each season (as a weather object with spring, summer, fall and winter fields),
    and at least 4 popular attractions (as an attractions array of objects with name and description).
    If the ID doesn't give you enough information, pick a popular travel destination.
    Format the result as a JSON object."""

def _restaurants_prompt(location: str) -> str:
    return (
        f"Recommend 5 great restaurants in {location}. Include name, description, cuisine type,"
        " price level ($ to $$$), and at least one signature dish for each restaurant."
        " Return them as a JSON array."
    )

def _attractions_prompt(location: str) -> str:
    return (
        f"Recommend 5 must-see attractions in {location}. Include name, description, why it's special,"
        " entrance fee if applicable, and best time to visit. Return them as a JSON array."
    )

def _activities_prompt(location: str) -> str:
    return (
        f"Recommend 5 interesting activities to do in {location}. Include activity name, description,"
        " approximate duration, price range, and level of physical exertion required."
        " Return them as a JSON array."
    )

def _all_prompt(location: str) -> str:
    return (
        f"Recommend places for travelers in {location}. Provide 3 restaurants, 3 attractions, and 3 activities."
        " For each place, include name, brief description, and any relevant details like price level or"
        " special features. Use the keys restaurants, attractions and activities."
    )

RECOMMENDATION_PROMPTS = {
    RecommendationType.RESTAURANTS: _restaurants_prompt,
    RecommendationType.ATTRACTIONS: _attractions_prompt,
    RecommendationType.ACTIVITIES: _activities_prompt,
    RecommendationType.ALL: _all_prompt,
}

def build_recommendations_prompt(location: str, kind: RecommendationType) -> str:
    """Prompt for nearby recommendations of one kind, or all kinds grouped"""
    return RECOMMENDATION_PROMPTS[kind](location) + RECOMMENDATIONS_FORMAT_CLAUSE
