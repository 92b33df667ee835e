"""Client for the trips backend (Netlify functions)."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import requests

from . import config
from .errors import FetchFailed
from .home.cache import CacheEntry
from .itinerary.models import Trip

__all__ = ["TripsApiClient", "FetchFailed"]


class TripsApiClient:
    """Authenticated access to the trips API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.token = token if token is not None else config.API_TOKEN
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, params: Optional[dict] = None, body: Any = None) -> dict:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            print(f"[API] {method} {path} timed out")
            raise FetchFailed(f"Request to {path} timed out") from e
        except requests.RequestException as e:
            print(f"[API] {method} {path} failed: {e}")
            raise FetchFailed(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            print(f"[API] {method} {path} returned HTTP {response.status_code}")
            raise FetchFailed(f"{path} returned HTTP {response.status_code}", response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise FetchFailed(f"{path} returned invalid JSON", response.status_code) from e

        if not isinstance(result, dict) or result.get("success") is False:
            error = result.get("error") if isinstance(result, dict) else None
            raise FetchFailed(error or f"{path} reported failure", response.status_code)
        return result

    # ============ Reads ============

    def get_trips(self, test_date: Optional[str] = None) -> CacheEntry:
        """Fetch all trips plus the trips active today."""
        params = {"testDate": test_date} if test_date else None
        result = self._request("GET", "get-trips", params=params)
        return CacheEntry(
            trips=result.get("trips") or [],
            today_trips=result.get("todayTrips") or [],
        )

    async def fetch_trips_async(self, test_date: Optional[str] = None) -> CacheEntry:
        return await asyncio.to_thread(self.get_trips, test_date)

    def get_trip(self, trip_id: str) -> Trip:
        result = self._request("GET", "get-trip", params={"id": trip_id})
        trip_data = result.get("tripData")
        if not trip_data:
            raise FetchFailed(f"Trip {trip_id} not found", 404)
        return Trip.from_dict(trip_data)

    # ============ Mutations ============

    def rename_trip(self, trip_id: str, title: str) -> dict:
        return self._request("POST", "rename-trip", body={"tripId": trip_id, "title": title})

    def delete_trip(self, trip_id: str) -> dict:
        return self._request("DELETE", "delete-trip", params={"id": trip_id})

    def add_booking(self, trip_id: str, pdfs: list[dict]) -> dict:
        """Attach booking confirmations (already base64-encoded PDFs) to a trip."""
        return self._request("POST", "add-booking", body={"tripId": trip_id, "pdfs": pdfs})

    def edit_booking(self, trip_id: str, booking_type: str, item_id: str, updates: dict) -> dict:
        return self._request(
            "POST",
            "edit-booking",
            body={"tripId": trip_id, "type": booking_type, "itemId": item_id, "updates": updates},
        )

    def delete_booking(self, trip_id: str, booking_type: str, item_id: str) -> dict:
        return self._request(
            "POST",
            "delete-booking",
            body={"tripId": trip_id, "type": booking_type, "itemId": item_id},
        )

    def manage_activity(
        self,
        trip_id: str,
        action: str,
        activity: Optional[dict] = None,
        activity_id: Optional[str] = None,
    ) -> dict:
        """Create, update or delete a custom activity (``action`` is create/update/delete)."""
        body: dict[str, Any] = {"tripId": trip_id, "action": action}
        if activity is not None:
            body["activity"] = activity
        if activity_id is not None:
            body["activityId"] = activity_id
        return self._request("POST", "manage-activity", body=body)
