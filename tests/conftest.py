"""Shared fixtures: trip payloads in the backend's JSON shape and fake collaborators."""

import pytest

from travelflow.common.templates import HtmlSink
from travelflow.errors import FetchFailed
from travelflow.home.cache import CacheEntry, CacheGateway
from travelflow.session_store import SessionStorage


def make_flight(flight_id="f1", date="2024-06-02", dep="10:00", arr="12:00", next_day=False,
                from_city="Rome", to_city="Paris", number="AZ 318"):
    return {
        "id": flight_id,
        "date": date,
        "departureTime": dep,
        "arrivalTime": arr,
        "arrivalNextDay": next_day,
        "departure": {"city": from_city, "code": "FCO", "terminal": "1"},
        "arrival": {"city": to_city, "code": "CDG", "terminal": "2E"},
        "flightNumber": number,
        "bookingReference": "ABC123",
    }


def make_hotel(hotel_id="h1", check_in="2024-06-01", check_out="2024-06-03",
               check_in_time="15:00", check_out_time="11:00", name="Hotel Duomo"):
    return {
        "id": hotel_id,
        "name": name,
        "checkIn": {"date": check_in, "time": check_in_time},
        "checkOut": {"date": check_out, "time": check_out_time},
        "address": {"city": "Florence", "fullAddress": "Via dei Calzaiuoli 1, Florence"},
        "confirmationNumber": "HX-99",
    }


def make_activity(activity_id="a1", date="2024-06-02", start=None, end=None, name="Uffizi"):
    return {
        "id": activity_id,
        "name": name,
        "date": date,
        "startTime": start,
        "endTime": end,
    }


def make_trip(trip_id="t1", start="2024-06-01", end="2024-06-03", flights=None, hotels=None,
              activities=None, title="Tuscany"):
    return {
        "id": trip_id,
        "title": {"en": title, "it": title},
        "startDate": start,
        "endDate": end,
        "color": "#3b82f6",
        "flights": flights or [],
        "hotels": hotels or [],
        "activities": activities or [],
    }


class MemoryStorage:
    """Dict-backed stand-in for SessionStorage."""

    def __init__(self, items=None):
        self.items = dict(items or {})

    def get_item(self, key):
        return self.items.get(key)

    def set_item(self, key, value):
        self.items[key] = value
        return True

    def remove_item(self, key):
        self.items.pop(key, None)


class FakeClient:
    """Records calls and serves canned responses like TripsApiClient."""

    def __init__(self, entry=None, trip=None, fail=False):
        self.entry = entry
        self.trip = trip
        self.fail = fail
        self.calls = []

    async def fetch_trips_async(self, test_date=None):
        self.calls.append(("get_trips", test_date))
        if self.fail:
            raise FetchFailed("backend down")
        return self.entry

    def get_trip(self, trip_id):
        self.calls.append(("get_trip", trip_id))
        if self.fail or self.trip is None:
            raise FetchFailed("Trip not found", 404)
        return self.trip

    def _mutation(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail:
            raise FetchFailed(f"{name} failed")
        return {"success": True}

    def rename_trip(self, trip_id, title):
        return self._mutation("rename_trip", trip_id, title)

    def delete_trip(self, trip_id):
        return self._mutation("delete_trip", trip_id)

    def add_booking(self, trip_id, pdfs):
        return self._mutation("add_booking", trip_id)

    def edit_booking(self, trip_id, booking_type, item_id, updates):
        return self._mutation("edit_booking", trip_id, booking_type, item_id)

    def delete_booking(self, trip_id, booking_type, item_id):
        return self._mutation("delete_booking", trip_id, booking_type, item_id)

    def manage_activity(self, trip_id, action, activity=None, activity_id=None):
        return self._mutation("manage_activity", trip_id, action)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def gateway(storage):
    return CacheGateway(storage)


@pytest.fixture
def sink():
    return HtmlSink()


@pytest.fixture
def session_storage(tmp_path):
    return SessionStorage(session_id="test-session", db_path=tmp_path / "session.db")


@pytest.fixture
def sample_entry():
    trips = [make_trip(trip_id=f"t{i}", start=f"2024-0{i}-01", end=f"2024-0{i}-05") for i in range(1, 6)]
    return CacheEntry(trips=trips, today_trips=[])
