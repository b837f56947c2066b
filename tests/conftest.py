import json

import pytest

from wanderwise.utils.database import DatabaseManager


class FakeGenerationClient:
    """Stands in for VertexAIService: returns queued texts and records prompts"""

    def __init__(self):
        self.responses = []
        self.prompts = []

    def queue(self, response):
        """Queue a text (or an exception to raise) for the next call"""
        self.responses.append(response)

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        assert self.responses, "unexpected generation call"
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def build_itinerary(destination: str = "Tokyo, Japan", days: int = 3) -> dict:
    return {
        "destination": destination,
        "duration": days,
        "summary": f"{days} days of street food, temples and neighborhoods in {destination}.",
        "days": [
            {
                "day": n,
                "title": f"Day {n} in {destination}",
                "activities": [
                    {
                        "time": "9:00 AM",
                        "title": "Breakfast at Tsukiji Outer Market",
                        "description": "Grilled scallops and tamagoyaki from the stalls.",
                        "type": "food",
                        "duration": "1 hour",
                    },
                    {
                        "time": "11:00 AM",
                        "title": "Senso-ji Temple",
                        "description": "Walk Nakamise-dori up to Tokyo's oldest temple.",
                        "type": "attraction",
                        "duration": "2 hours",
                    },
                    {
                        "time": "6:00 PM",
                        "title": "Train to Shinjuku",
                        "description": "Take the Ginza line and change to the JR Yamanote line.",
                        "type": "transport",
                        "duration": "40 minutes",
                    },
                ],
            }
            for n in range(1, days + 1)
        ],
    }


@pytest.fixture
def itinerary_data():
    return build_itinerary()


@pytest.fixture
def itinerary_factory():
    return build_itinerary


@pytest.fixture
def itinerary_json(itinerary_data):
    return json.dumps(itinerary_data)


@pytest.fixture
def fake_client():
    return FakeGenerationClient()


@pytest.fixture
def database():
    db = DatabaseManager("sqlite://")
    yield db
    db.close()

