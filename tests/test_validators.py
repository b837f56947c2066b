from datetime import date, timedelta

import pytest

from wanderwise.models.request_models import DateRange, TripPreferences
from wanderwise.utils.validators import TripPreferencesValidator


@pytest.mark.parametrize("destination", ["Paris, France", "St. John's", "São Paulo", "Queens (NY)"])
def test_valid_destinations(destination):
    assert TripPreferencesValidator.validate_destination(destination)


@pytest.mark.parametrize("destination", ["", "x", "Tokyo; DROP TABLE trips", "<script>"])
def test_invalid_destinations(destination):
    assert not TripPreferencesValidator.validate_destination(destination)


def test_duration_limit():
    assert TripPreferencesValidator.validate_duration(30, 30) == []
    assert TripPreferencesValidator.validate_duration(31, 30) == ["Trip duration cannot exceed 30 days"]


def test_date_mismatch_is_only_a_warning():
    start = date.today() + timedelta(days=10)
    preferences = TripPreferences(
        destination="Kyoto",
        duration=3,
        dates=DateRange(start_date=start, end_date=start + timedelta(days=4)),
    )

    result = TripPreferencesValidator.validate_complete_request(preferences)

    assert result["valid"] is True
    assert result["warnings"] == ["Date range covers 5 days but duration is 3"]


def test_unknown_dietary_restriction_warns():
    preferences = TripPreferences(destination="Kyoto", duration=3, dietary=["Vegan", "carnivore"])

    result = TripPreferencesValidator.validate_complete_request(preferences)

    assert result["valid"] is True
    assert result["warnings"] == ["Unknown dietary restriction: carnivore"]


def test_ideal_destination_is_enough():
    preferences = TripPreferences(idealDestination="somewhere warm with reefs", duration=5)
    assert TripPreferencesValidator.validate_complete_request(preferences)["valid"] is True


def test_missing_destination_and_long_trip():
    result = TripPreferencesValidator.validate_complete_request(TripPreferences(duration=45), max_days=30)

    assert result["valid"] is False
    assert result["errors"] == [
        "Please enter a destination or describe your ideal destination",
        "Trip duration cannot exceed 30 days",
    ]
