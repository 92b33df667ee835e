"""Work out which bookings matter right now, for the home page dashboard.

All functions take the current time explicitly, so they can be evaluated for
any moment. Malformed bookings are skipped, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from .dates import is_valid_date, minutes_of_day, next_day, to_minutes, today_string
from .models import Activity, Flight, Hotel, Trip

DEFAULT_CHECK_IN_TIME = "15:00"
DEFAULT_CHECK_OUT_TIME = "12:00"

STATUS_CHECK_IN = "check-in"
STATUS_CHECK_OUT = "check-out"
STATUS_STAY = "stay"


@dataclass
class FlightContext:
    """Today's flight together with its owning trip."""

    flight: Flight
    trip_id: str
    trip_title: dict
    trip_color: Optional[str] = None


@dataclass
class HotelContext:
    """Today's hotel together with its owning trip and today's status."""

    hotel: Hotel
    trip_id: str
    trip_title: dict
    trip_color: Optional[str] = None
    status: str = STATUS_STAY
    status_time: str = ""

    @property
    def show_confirmation(self) -> bool:
        return self.status != STATUS_STAY


@dataclass
class TodayEvent:
    """One line in the "in progress" trip card."""

    type: str  # flight, hotel, activity
    id: str
    time: str
    title: str
    description: str = ""
    location: str = ""


@dataclass
class TripSections:
    current: list[Trip] = field(default_factory=list)
    upcoming: list[Trip] = field(default_factory=list)
    past: list[Trip] = field(default_factory=list)


def _flight_is_today(flight: Flight, today: str) -> bool:
    if not is_valid_date(flight.date):
        return False
    if flight.date == today:
        return True
    return flight.arrival_next_day and next_day(flight.date) == today


def today_flight(today_trips: Iterable[Trip], now: datetime) -> Optional[FlightContext]:
    """Return the first still-active flight of today, by departure time."""
    today = today_string(now)
    current_minutes = minutes_of_day(now)

    candidates: list[tuple[int, FlightContext]] = []
    for trip in today_trips:
        for flight in trip.flights:
            if not _flight_is_today(flight, today):
                continue
            try:
                arrival_minutes = to_minutes(flight.arrival_time)
                departure_minutes = to_minutes(flight.departure_time)
            except ValueError:
                print(f"[TODAY] Skipping flight {flight.id}: bad times "
                      f"{flight.departure_time!r}/{flight.arrival_time!r}")
                continue

            if flight.arrival_next_day and flight.date == today:
                # Departs tonight, lands tomorrow: relevant all day
                active = True
            else:
                # Landed already once the arrival minute has passed
                active = current_minutes <= arrival_minutes
            if not active:
                continue

            context = FlightContext(
                flight=flight,
                trip_id=trip.id,
                trip_title=trip.title,
                trip_color=trip.color,
            )
            candidates.append((departure_minutes, context))

    if not candidates:
        return None
    candidates.sort(key=lambda pair: pair[0])
    return candidates[0][1]


def hotel_status(hotel: Hotel, today: str) -> tuple[str, str]:
    """Return ``(status, display_time)`` for a hotel active on ``today``.

    Check-out wins over check-in when both apply.
    """
    check_in = hotel.check_in_date
    check_out = hotel.check_out_date
    is_check_in = check_in == today
    is_check_out = check_out == today or next_day(check_out) == today

    if is_check_out:
        return STATUS_CHECK_OUT, (hotel.check_out.time or DEFAULT_CHECK_OUT_TIME)
    if is_check_in:
        return STATUS_CHECK_IN, (hotel.check_in.time or DEFAULT_CHECK_IN_TIME)
    return STATUS_STAY, ""


def _hotel_is_active(hotel: Hotel, today: str) -> bool:
    check_in = hotel.check_in_date
    check_out = hotel.check_out_date
    if not is_valid_date(check_in) or not is_valid_date(check_out):
        return False
    # Visible until the morning after check-out
    return check_in <= today <= next_day(check_out)


def today_hotel(today_trips: Iterable[Trip], now: datetime) -> Optional[HotelContext]:
    """Return the first hotel, in storage order, that is active today.

    Overlapping stays are not ranked: the first match wins.
    """
    today = today_string(now)
    for trip in today_trips:
        for hotel in trip.hotels:
            if not _hotel_is_active(hotel, today):
                continue
            status, status_time = hotel_status(hotel, today)
            return HotelContext(
                hotel=hotel,
                trip_id=trip.id,
                trip_title=trip.title,
                trip_color=trip.color,
                status=status,
                status_time=status_time,
            )
    return None


def is_trip_past(trip: Trip, now: datetime) -> bool:
    """A trip is past once its end date is before today."""
    if not is_valid_date(trip.end_date):
        return False
    return trip.end_date < today_string(now)


def is_trip_current(trip: Trip, now: datetime) -> bool:
    if not is_valid_date(trip.start_date) or not is_valid_date(trip.end_date):
        return False
    return trip.start_date <= today_string(now) <= trip.end_date


def is_trip_upcoming(trip: Trip, now: datetime) -> bool:
    return not is_trip_current(trip, now) and not is_trip_past(trip, now)


def is_flight_past(flight: Flight, now: datetime) -> bool:
    """True once the flight has landed."""
    if not is_valid_date(flight.date):
        return False
    today = today_string(now)
    arrival_date = flight.arrival_date
    if arrival_date < today:
        return True
    if arrival_date == today:
        try:
            return minutes_of_day(now) > to_minutes(flight.arrival_time)
        except ValueError:
            return False
    return False


def classify_trips(trips: Iterable[Trip], now: datetime) -> TripSections:
    """Split trips into current, upcoming (soonest first) and past (most recent first)."""
    sections = TripSections()
    for trip in trips:
        if is_trip_current(trip, now):
            sections.current.append(trip)
        elif is_trip_past(trip, now):
            sections.past.append(trip)
        else:
            sections.upcoming.append(trip)

    sections.upcoming.sort(key=lambda t: t.start_date or "")
    sections.past.sort(key=lambda t: t.start_date or "", reverse=True)
    return sections


def _activity_event(activity: Activity) -> TodayEvent:
    return TodayEvent(
        type="activity",
        id=activity.id,
        time=activity.start_time or "",
        title=activity.name,
        description=activity.description or "",
        location=activity.address or "",
    )


def collect_today_events(trip_id: str, today_trips: Iterable[Trip], now: datetime) -> list[TodayEvent]:
    """Today's flights, hotel status and activities for one trip.

    Untimed events come first, then events by time.
    """
    today = today_string(now)
    trip = next((t for t in today_trips if t.id == trip_id), None)
    if trip is None:
        return []

    events: list[TodayEvent] = []
    for flight in trip.flights:
        if not _flight_is_today(flight, today):
            continue
        events.append(TodayEvent(
            type="flight",
            id=flight.id,
            time=flight.departure_time or "",
            title=f"{flight.departure.city or ''} → {flight.arrival.city or ''}",
            description=flight.flight_number or "",
            location=flight.departure.code or "",
        ))

    for hotel in trip.hotels:
        if not _hotel_is_active(hotel, today):
            continue
        status, status_time = hotel_status(hotel, today)
        events.append(TodayEvent(
            type="hotel",
            id=hotel.id,
            time=status_time,
            title=hotel.name or "Hotel",
            description=status,
            location=hotel.address.get("city") or hotel.address.get("fullAddress") or "",
        ))

    for activity in trip.activities:
        if activity.date == today:
            events.append(_activity_event(activity))

    events.sort(key=lambda e: (bool(e.time), e.time))
    return events
