"""Trip page: load one trip, switch tabs lazily, apply booking edits."""

from __future__ import annotations

from typing import Optional

from ..common.templates import RenderSink, error_state_html
from ..errors import FetchFailed
from ..home.cache import CacheGateway
from .models import Trip
from .tabs import ACTIVITIES_TAB, FLIGHTS_TAB, HOTELS_TAB, TabLazyRenderer
from .web_view import TripWebView

TRIP_CONTAINER = "trip-content"

# Booking type used by the backend -> tab showing it
BOOKING_TABS = {
    "flight": FLIGHTS_TAB,
    "hotel": HOTELS_TAB,
}


class TripPageController:
    """Owns the state of one open trip page."""

    def __init__(
        self,
        client,
        gateway: CacheGateway,
        sink: RenderSink,
        web_view: Optional[TripWebView] = None,
    ):
        self.client = client
        self.gateway = gateway
        self.sink = sink
        self.web_view = web_view or TripWebView()
        self.trip: Optional[Trip] = None
        self.tabs: Optional[TabLazyRenderer] = None

    def load(self, trip_id: str) -> Optional[Trip]:
        """Fetch the trip and render its active tab. Shows an error state on failure."""
        if not trip_id:
            self._show_error("No trip ID provided")
            return None
        try:
            trip = self.client.get_trip(trip_id)
        except FetchFailed as e:
            print(f"[TRIP] Could not load trip {trip_id}: {e}")
            self._show_error("Trip not found" if e.status_code == 404 else "Could not load trip data")
            return None

        self.show_trip(trip)
        return trip

    def show_trip(self, trip: Trip) -> None:
        self.trip = trip
        if self.tabs is None:
            self.tabs = TabLazyRenderer(trip, self.sink, self.web_view.renderers())
        else:
            self.tabs.replace_trip(trip)
        self.tabs.switch_to(self.tabs.active_tab)

    def switch_to(self, tab: str) -> bool:
        if self.tabs is None:
            raise RuntimeError("No trip loaded")
        return self.tabs.switch_to(tab)

    def _show_error(self, message: str) -> None:
        self.sink.replace(TRIP_CONTAINER, error_state_html(message))
        self.sink.apply_i18n(TRIP_CONTAINER)

    def _mutate(self, call, *changed_tabs: str) -> dict:
        """Run a backend mutation, then refresh the tabs it affects.

        The trips cache is dropped whether or not the call succeeds.
        """
        if self.trip is None:
            raise RuntimeError("No trip loaded")
        try:
            result = call()
        finally:
            self.gateway.invalidate()

        for tab in changed_tabs:
            self.tabs.mark_changed(tab)
        self._reload()
        return result

    def _reload(self) -> None:
        try:
            trip = self.client.get_trip(self.trip.id)
        except FetchFailed as e:
            print(f"[TRIP] Reload after edit failed, keeping current view: {e}")
            return
        self.trip = trip
        self.tabs.trip = trip
        self.tabs.ensure_rendered(self.tabs.active_tab)

    # ============ Mutations ============

    def add_booking(self, pdfs: list[dict]) -> dict:
        # New documents can hold flights, hotels or both
        return self._mutate(
            lambda: self.client.add_booking(self.trip.id, pdfs),
            FLIGHTS_TAB,
            HOTELS_TAB,
        )

    @staticmethod
    def _booking_tab(booking_type: str) -> str:
        if booking_type not in BOOKING_TABS:
            raise ValueError(f"Unknown booking type: {booking_type}")
        return BOOKING_TABS[booking_type]

    def edit_booking(self, booking_type: str, item_id: str, updates: dict) -> dict:
        return self._mutate(
            lambda: self.client.edit_booking(self.trip.id, booking_type, item_id, updates),
            self._booking_tab(booking_type),
        )

    def delete_booking(self, booking_type: str, item_id: str) -> dict:
        return self._mutate(
            lambda: self.client.delete_booking(self.trip.id, booking_type, item_id),
            self._booking_tab(booking_type),
        )

    def save_activity(self, activity: dict, activity_id: Optional[str] = None) -> dict:
        """Create a custom activity, or update it when ``activity_id`` is given."""
        action = "update" if activity_id else "create"
        return self._mutate(
            lambda: self.client.manage_activity(self.trip.id, action, activity=activity, activity_id=activity_id),
            ACTIVITIES_TAB,
        )

    def delete_activity(self, activity_id: str) -> dict:
        return self._mutate(
            lambda: self.client.manage_activity(self.trip.id, "delete", activity_id=activity_id),
            ACTIVITIES_TAB,
        )

    def rename_trip(self, title: str) -> dict:
        """Rename the trip. The backend stores one title, so every language shows it."""
        if self.trip is None:
            raise RuntimeError("No trip loaded")
        try:
            result = self.client.rename_trip(self.trip.id, title)
        finally:
            self.gateway.invalidate()
        languages = list(self.trip.title) or ["en"]
        self.trip.title = {lang: title for lang in languages}
        return result

    def delete_trip(self) -> dict:
        if self.trip is None:
            raise RuntimeError("No trip loaded")
        try:
            return self.client.delete_trip(self.trip.id)
        finally:
            self.gateway.invalidate()
