"""Itinerary - Trip data, day-by-day timeline and today's bookings."""

from .models import Trip, Flight, Hotel, Activity, TimelineEvent
from .timeline import build_timeline, TYPE_PRIORITY
from .today import today_flight, today_hotel, is_trip_past, classify_trips
from .tabs import TabLazyRenderer
from .web_view import TripWebView

__all__ = [
    "Trip",
    "Flight",
    "Hotel",
    "Activity",
    "TimelineEvent",
    "build_timeline",
    "TYPE_PRIORITY",
    "today_flight",
    "today_hotel",
    "is_trip_past",
    "classify_trips",
    "TabLazyRenderer",
    "TripWebView",
]
