"""Build a trip's day-by-day timeline from its flights, hotels and activities."""

from __future__ import annotations

from typing import Iterator, Optional

from .dates import date_range, is_valid_date, to_minutes
from .models import (
    ACTIVITY,
    FLIGHT,
    HOTEL_CHECKIN,
    HOTEL_CHECKOUT,
    HOTEL_STAY,
    Trip,
    TimelineEvent,
)

# Tie-break between events sharing a time (or both untimed): lower sorts first
TYPE_PRIORITY = {
    HOTEL_CHECKOUT: 0,
    FLIGHT: 1,
    HOTEL_CHECKIN: 2,
    HOTEL_STAY: 3,
    ACTIVITY: 4,
}


def _clean_time(value: Optional[str]) -> Optional[str]:
    """Return a normalized ``HH:MM`` or None when the time is absent or unusable."""
    if not value:
        return None
    try:
        minutes = to_minutes(value)
    except ValueError:
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def synthesize_events(trip: Trip) -> list[TimelineEvent]:
    """Expand the trip's bookings into timeline events, skipping malformed records."""
    events: list[TimelineEvent] = []

    for flight in trip.flights:
        if not is_valid_date(flight.date):
            print(f"[TIMELINE] Skipping flight {flight.id}: invalid date {flight.date!r}")
            continue
        events.append(TimelineEvent(flight.date, _clean_time(flight.departure_time), FLIGHT, flight))

    for hotel in trip.hotels:
        check_in = hotel.check_in_date
        check_out = hotel.check_out_date
        if not is_valid_date(check_in) or not is_valid_date(check_out) or check_out < check_in:
            print(f"[TIMELINE] Skipping hotel {hotel.id}: check-in {check_in!r}, check-out {check_out!r}")
            continue

        events.append(TimelineEvent(check_in, _clean_time(hotel.check_in.time), HOTEL_CHECKIN, hotel))
        # One stay event per night strictly between check-in and check-out
        for day in date_range(check_in, check_out):
            if day != check_in and day != check_out:
                events.append(TimelineEvent(day, None, HOTEL_STAY, hotel))
        events.append(TimelineEvent(check_out, _clean_time(hotel.check_out.time), HOTEL_CHECKOUT, hotel))

    for activity in trip.activities:
        if not is_valid_date(activity.date):
            print(f"[TIMELINE] Skipping activity {activity.id}: invalid date {activity.date!r}")
            continue
        events.append(TimelineEvent(activity.date, _clean_time(activity.start_time), ACTIVITY, activity))

    return events


def event_sort_key(event: TimelineEvent) -> tuple:
    """Untimed events first, then by time, then by type priority."""
    has_time = event.time is not None
    return (has_time, event.time or "", TYPE_PRIORITY.get(event.type, 99))


def build_timeline(trip: Trip) -> dict[str, list[TimelineEvent]]:
    """Group the trip's events by day.

    Every date from ``start_date`` to ``end_date`` is present, even without
    events. Events dated outside that range get their own buckets. Keys are
    in ascending date order.
    """
    grouped: dict[str, list[TimelineEvent]] = {}
    for event in synthesize_events(trip):
        grouped.setdefault(event.date, []).append(event)

    all_dates = set(grouped)
    if is_valid_date(trip.start_date) and is_valid_date(trip.end_date):
        all_dates.update(date_range(trip.start_date, trip.end_date))

    return {
        day: sorted(grouped.get(day, []), key=event_sort_key)
        for day in sorted(all_dates)
    }


def timeline_days(trip: Trip) -> Iterator[tuple[str, list[TimelineEvent]]]:
    """Iterate ``(date, events)`` pairs of the trip's timeline."""
    yield from build_timeline(trip).items()
