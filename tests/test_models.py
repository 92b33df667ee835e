"""Tests for parsing trip records from backend JSON."""

from datetime import datetime

from travelflow.itinerary.models import Hotel, Trip
from travelflow.itinerary.timeline import build_timeline
from travelflow.itinerary.today import collect_today_events, today_flight

from conftest import make_flight, make_hotel, make_trip


def test_bad_airport_field_does_not_drop_the_trip():
    bad = make_flight("bad", dep="08:00", arr="09:00")
    bad["departure"] = "FCO"
    bad["arrival"] = ["CDG"]
    trip = Trip.from_dict(make_trip(flights=[bad, make_flight("ok", dep="10:00", arr="12:00")]))

    assert [f.id for f in trip.flights] == ["bad", "ok"]
    assert trip.flights[0].departure.code == "FCO"
    assert trip.flights[0].arrival.code is None
    assert today_flight([trip], datetime(2024, 6, 2, 7, 0)).flight.id == "bad"


def test_hotel_address_shapes():
    listed = make_hotel("listed")
    listed["address"] = ["Via Roma 1"]
    text = make_hotel("text")
    text["address"] = "Via Roma 1, Florence"

    assert Hotel.from_dict(listed).address == {}
    assert Hotel.from_dict(text).address == {"fullAddress": "Via Roma 1, Florence"}


def test_hotel_with_list_address_still_shows_today():
    hotel = make_hotel(check_in="2024-06-01", check_out="2024-06-03")
    hotel["address"] = ["Via Roma 1"]
    trips = [Trip.from_dict(make_trip(hotels=[hotel]))]

    events = collect_today_events("t1", trips, datetime(2024, 6, 2, 9, 0))

    assert [(e.type, e.location) for e in events] == [("hotel", "")]


def test_wrongly_typed_collections_are_ignored():
    data = make_trip()
    data["title"] = ["Tuscany"]
    data["flights"] = "none"
    data["cities"] = 3
    data["hotels"] = [make_hotel(), "not a hotel"]

    trip = Trip.from_dict(data)

    assert trip.title == {}
    assert trip.flights == []
    assert trip.cities == []
    assert [h.id for h in trip.hotels] == ["h1"]
    assert len(build_timeline(trip)) == 3
