from datetime import date

import pytest

from wanderwise.models.database_models import DayActivity, ItineraryDay, TripDestination
from wanderwise.models.request_models import DateRange, PlaceInput
from wanderwise.services.response_parser import validate_itinerary
from wanderwise.utils.errors import NotFound, StorageError, ValidationError


@pytest.fixture
def tokyo(itinerary_data):
    return validate_itinerary(itinerary_data)


def test_save_and_get_itinerary(database, tokyo):
    dates = DateRange(start_date=date(2027, 4, 1), end_date=date(2027, 4, 3))
    trip_id = database.save_itinerary("alice", tokyo, dates)

    trip = database.get_trip("alice", trip_id)

    assert trip.title == "Trip to Tokyo, Japan"
    assert trip.description == tokyo.summary
    assert trip.start_date == date(2027, 4, 1)
    assert [d.name for d in trip.destinations] == ["Tokyo, Japan"]
    assert [d.day for d in trip.itinerary] == [1, 2, 3]
    assert [a.type for a in trip.itinerary[1].activities] == ["food", "attraction", "transport"]


def test_saved_subtrees_are_independent(database, itinerary_factory):
    first = database.save_itinerary("alice", validate_itinerary(itinerary_factory("Kyoto, Japan", 2)))
    second = database.save_itinerary("alice", validate_itinerary(itinerary_factory("Osaka, Japan", 2)))

    kyoto = database.get_trip("alice", first)
    osaka = database.get_trip("alice", second)

    assert first != second
    assert {d.id for d in kyoto.itinerary}.isdisjoint({d.id for d in osaka.itinerary})
    assert kyoto.itinerary[0].title == "Day 1 in Kyoto, Japan"
    assert osaka.itinerary[0].title == "Day 1 in Osaka, Japan"


def test_list_trips_is_per_user(database, tokyo):
    database.save_itinerary("alice", tokyo)
    database.save_itinerary("alice", tokyo)
    database.save_itinerary("bob", tokyo)

    assert len(database.list_trips("alice")) == 2
    assert len(database.list_trips("bob")) == 1
    assert database.list_trips("carol") == []


def test_other_users_trip_is_not_found(database, tokyo):
    trip_id = database.save_itinerary("alice", tokyo)

    with pytest.raises(NotFound):
        database.get_trip("bob", trip_id)
    with pytest.raises(NotFound):
        database.update_trip("bob", trip_id, {"title": "Stolen"})
    with pytest.raises(NotFound):
        database.delete_trip("bob", trip_id)

    assert database.get_trip("alice", trip_id).title == "Trip to Tokyo, Japan"


def test_update_trip_only_touches_given_fields(database, tokyo):
    trip_id = database.save_itinerary("alice", tokyo)
    before = database.get_trip("alice", trip_id)

    updated = database.update_trip("alice", trip_id, {"title": "Cherry blossoms", "end_date": date(2027, 4, 5)})

    assert updated.title == "Cherry blossoms"
    assert updated.end_date == date(2027, 4, 5)
    assert updated.description == before.description
    assert updated.updated_at >= before.updated_at
    assert len(database.get_trip("alice", trip_id).itinerary) == 3


def test_update_trip_ignores_unknown_fields(database, tokyo):
    trip_id = database.save_itinerary("alice", tokyo)
    with pytest.raises(ValidationError):
        database.update_trip("alice", trip_id, {"user_id": "bob"})


@pytest.mark.parametrize("trip_id, updates", [(None, {"title": "x"}), ("abc", None), ("abc", {})])
def test_update_trip_requires_id_and_updates(database, trip_id, updates):
    with pytest.raises(ValidationError) as exc_info:
        database.update_trip("alice", trip_id, updates)
    assert exc_info.value.message == "Trip ID and updates are required"


def test_delete_trip_cascades(database, tokyo):
    trip_id = database.save_itinerary("alice", tokyo)
    keep_id = database.save_itinerary("alice", tokyo)

    database.delete_trip("alice", trip_id)

    with pytest.raises(NotFound):
        database.get_trip("alice", trip_id)

    session = database.get_session()
    try:
        assert session.query(TripDestination).filter_by(trip_id=trip_id).count() == 0
        assert session.query(ItineraryDay).filter_by(trip_id=trip_id).count() == 0
        assert session.query(ItineraryDay).filter_by(trip_id=keep_id).count() == 3
        assert session.query(DayActivity).count() == 9
    finally:
        session.close()


def test_save_place_twice_keeps_one(database):
    place = PlaceInput(id=3, name="Hoi An, Vietnam", type="destination")

    database.save_place("alice", place)
    database.save_place("alice", place.model_copy(update={"description": "Lanterns"}))

    places = database.list_saved_places("alice")
    assert len(places) == 1
    assert places[0].id == "3"
    assert places[0].description == "Lanterns"


def test_saved_place_ids_are_per_user(database):
    database.save_place("alice", PlaceInput(id="3", name="Hoi An"))
    database.save_place("bob", PlaceInput(id="3", name="Hoi An"))

    database.delete_saved_place("alice", "3")

    assert database.is_place_saved("alice", "3") is False
    assert database.is_place_saved("bob", "3") is True


def test_delete_missing_saved_place_is_quiet(database):
    database.delete_saved_place("alice", "does-not-exist")
    assert database.list_saved_places("alice") == []


def test_save_place_requires_id(database):
    with pytest.raises(ValidationError):
        database.save_place("alice", PlaceInput(name="Nowhere"))


def test_update_trip_checks_dates_against_stored_ones(database, tokyo):
    dates = DateRange(start_date=date(2027, 6, 1), end_date=date(2027, 6, 3))
    trip_id = database.save_itinerary("alice", tokyo, dates)

    with pytest.raises(ValidationError) as exc_info:
        database.update_trip("alice", trip_id, {"start_date": date(2027, 7, 1)})
    assert exc_info.value.message == "End date must not be before start date"

    trip = database.get_trip("alice", trip_id)
    assert trip.start_date == date(2027, 6, 1)
    assert trip.end_date == date(2027, 6, 3)


def test_failed_save_leaves_nothing_behind(database, tokyo):
    # Assignment is not validated, so this reaches the NOT NULL constraint
    tokyo.days[2].activities[1].title = None

    with pytest.raises(StorageError):
        database.save_itinerary("alice", tokyo)

    assert database.list_trips("alice") == []
    session = database.get_session()
    try:
        assert session.query(ItineraryDay).count() == 0
        assert session.query(DayActivity).count() == 0
    finally:
        session.close()
