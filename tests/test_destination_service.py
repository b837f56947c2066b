import json

import pytest

from wanderwise.models.request_models import RecommendationType
from wanderwise.models.response_models import Destination
from wanderwise.services.destination_service import DestinationService, filter_destinations, sort_destinations
from wanderwise.utils.errors import ParseError


def destination(id, name, tags, budget=None, rating=None, description=""):
    return Destination(id=id, name=name, description=description, image="/x.svg", tags=tags, budget=budget, rating=rating)


@pytest.fixture
def destinations():
    return [
        destination(1, "Reykjavik", ["Nature", "Adventure"], "$$$", 4.7, "Glaciers and geysers"),
        destination(2, "Hoi An", ["Culture", "Food"], "$", 4.5, "Lantern-lit old town"),
        destination(3, "Barcelona", ["Beach", "Food"], None, 4.8, "Gaudi and tapas"),
    ]


def test_default_sort_keeps_order(destinations):
    assert [d.id for d in sort_destinations(destinations)] == [1, 2, 3]


@pytest.mark.parametrize("option, expected", [
    ("name-asc", [3, 2, 1]),
    ("name-desc", [1, 2, 3]),
    ("rating-high", [3, 1, 2]),
    ("rating-low", [2, 1, 3]),
    ("budget-low", [2, 3, 1]),
    ("budget-high", [1, 3, 2]),
])
def test_sort_options(destinations, option, expected):
    assert [d.id for d in sort_destinations(destinations, option)] == expected


def test_search_matches_name_description_and_tags(destinations):
    assert [d.id for d in filter_destinations(destinations, search="hoi")] == [2]
    assert [d.id for d in filter_destinations(destinations, search="TAPAS")] == [3]
    assert [d.id for d in filter_destinations(destinations, search="adventure")] == [1]


def test_tag_filter_matches_any_selected_tag(destinations):
    assert [d.id for d in filter_destinations(destinations, tags=["Food"])] == [2, 3]
    assert [d.id for d in filter_destinations(destinations, tags=["Nature", "Beach"])] == [1, 3]


def test_filter_then_sort(destinations):
    result = filter_destinations(destinations, tags=["Food"], sort="rating-high")
    assert [d.id for d in result] == [3, 2]


def test_list_destinations_uses_suggestion_count(fake_client):
    fake_client.queue(json.dumps([{"name": "Kyoto"}]))
    service = DestinationService(fake_client, suggestion_count=3)

    result = service.list_destinations(interests="temples")

    assert result[0].name == "Kyoto"
    assert fake_client.prompts[0].startswith("Suggest 3 travel destinations")


def test_recommendations_parse_failure_propagates(fake_client):
    fake_client.queue("Sorry, I can't help with that.")
    service = DestinationService(fake_client)

    with pytest.raises(ParseError):
        service.get_recommendations("Tokyo", RecommendationType.RESTAURANTS)
