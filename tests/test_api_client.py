"""Tests for the trips API client, using a stub requests session."""

import pytest
import requests

from travelflow.api_client import FetchFailed, TripsApiClient

from conftest import make_trip


class StubResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def json(self):
        if self._text is not None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response or StubResponse(payload={"success": True})
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def make_client(session):
    return TripsApiClient(base_url="https://example.test/api/", token="secret", timeout=5, session=session)


def test_get_trips_builds_cache_entry():
    trip = make_trip()
    session = StubSession(StubResponse(payload={"success": True, "trips": [trip], "todayTrips": [trip]}))

    entry = make_client(session).get_trips(test_date="2024-06-02")

    method, url, kwargs = session.requests[0]
    assert (method, url) == ("GET", "https://example.test/api/get-trips")
    assert kwargs["params"] == {"testDate": "2024-06-02"}
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["timeout"] == 5
    assert entry.trips == [trip]
    assert entry.today_trips == [trip]


def test_get_trip_parses_trip_data():
    session = StubSession(StubResponse(payload={"success": True, "tripData": make_trip(title="Sicily")}))

    trip = make_client(session).get_trip("t1")

    assert trip.id == "t1"
    assert trip.display_title("en") == "Sicily"
    assert session.requests[0][2]["params"] == {"id": "t1"}


def test_missing_trip_data_is_not_found():
    session = StubSession(StubResponse(payload={"success": True}))

    with pytest.raises(FetchFailed) as excinfo:
        make_client(session).get_trip("t1")
    assert excinfo.value.status_code == 404


@pytest.mark.parametrize("response", [
    StubResponse(status_code=500, payload={"error": "boom"}),
    StubResponse(payload={"success": False, "error": "Not allowed"}),
    StubResponse(text="<html>"),
])
def test_bad_responses_raise_fetch_failed(response):
    with pytest.raises(FetchFailed):
        make_client(StubSession(response)).get_trips()


def test_network_errors_raise_fetch_failed():
    with pytest.raises(FetchFailed, match="timed out"):
        make_client(StubSession(error=requests.Timeout())).get_trips()
    with pytest.raises(FetchFailed):
        make_client(StubSession(error=requests.ConnectionError("refused"))).get_trips()


def test_mutation_request_bodies():
    session = StubSession()
    client = make_client(session)

    client.rename_trip("t1", "Summer")
    client.delete_trip("t1")
    client.edit_booking("t1", "hotel", "h1", {"name": "New"})
    client.manage_activity("t1", "delete", activity_id="a1")

    rename, delete, edit, activity = session.requests
    assert rename[2]["json"] == {"tripId": "t1", "title": "Summer"}
    assert (delete[0], delete[2]["params"]) == ("DELETE", {"id": "t1"})
    assert edit[2]["json"] == {"tripId": "t1", "type": "hotel", "itemId": "h1", "updates": {"name": "New"}}
    assert activity[2]["json"] == {"tripId": "t1", "action": "delete", "activityId": "a1"}
