"""Data models for trips and their bookings.

Records mirror the JSON returned by the trips backend (camelCase keys).
``from_dict`` never raises on missing fields: incomplete bookings are kept
as-is and skipped later by the timeline and today-context logic.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .dates import next_day, days_between

# Event types produced by the timeline
FLIGHT = "flight"
HOTEL_CHECKIN = "hotel-checkin"
HOTEL_STAY = "hotel-stay"
HOTEL_CHECKOUT = "hotel-checkout"
ACTIVITY = "activity"

EVENT_TYPES = (FLIGHT, HOTEL_CHECKIN, HOTEL_STAY, HOTEL_CHECKOUT, ACTIVITY)


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


@dataclass
class Airport:
    """One end of a flight."""

    city: Optional[str] = None
    code: Optional[str] = None  # IATA code, e.g. "FCO"
    terminal: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Airport":
        if isinstance(data, str):
            # Bare airport code
            return cls(code=data or None)
        if not isinstance(data, dict):
            data = {}
        return cls(
            city=data.get("city"),
            code=data.get("code") or data.get("airport"),
            terminal=data.get("terminal"),
        )

    def to_dict(self) -> dict:
        return {"city": self.city, "code": self.code, "terminal": self.terminal}


@dataclass
class Flight:
    """A single flight segment."""

    id: str
    date: Optional[str] = None  # departure date
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    arrival_next_day: bool = False
    departure: Airport = field(default_factory=Airport)
    arrival: Airport = field(default_factory=Airport)
    flight_number: Optional[str] = None
    booking_reference: Optional[str] = None
    passengers: list[dict] = field(default_factory=list)

    @property
    def arrival_date(self) -> Optional[str]:
        """Calendar date the flight lands on."""
        if not self.date:
            return None
        if self.arrival_next_day:
            return next_day(self.date)
        return self.date

    @classmethod
    def from_dict(cls, data: dict) -> "Flight":
        return cls(
            id=str(data.get("id", "")),
            date=data.get("date"),
            departure_time=data.get("departureTime"),
            arrival_time=data.get("arrivalTime"),
            arrival_next_day=bool(data.get("arrivalNextDay", False)),
            departure=Airport.from_dict(data.get("departure")),
            arrival=Airport.from_dict(data.get("arrival")),
            flight_number=data.get("flightNumber"),
            booking_reference=data.get("bookingReference"),
            passengers=list(_as_list(data.get("passengers"))),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "departureTime": self.departure_time,
            "arrivalTime": self.arrival_time,
            "arrivalNextDay": self.arrival_next_day,
            "departure": self.departure.to_dict(),
            "arrival": self.arrival.to_dict(),
            "flightNumber": self.flight_number,
            "bookingReference": self.booking_reference,
            "passengers": self.passengers,
        }


@dataclass
class HotelDateTime:
    date: Optional[str] = None
    time: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["HotelDateTime"]:
        if not isinstance(data, dict):
            return None
        return cls(date=data.get("date"), time=data.get("time"))

    def to_dict(self) -> dict:
        return {"date": self.date, "time": self.time}


@dataclass
class Hotel:
    """A hotel stay, occupying the nights [check_in.date, check_out.date)."""

    id: str
    name: Optional[str] = None
    check_in: Optional[HotelDateTime] = None
    check_out: Optional[HotelDateTime] = None
    address: dict = field(default_factory=dict)  # city, fullAddress
    guests: Any = None
    confirmation_number: Optional[str] = None

    @property
    def check_in_date(self) -> Optional[str]:
        return self.check_in.date if self.check_in else None

    @property
    def check_out_date(self) -> Optional[str]:
        return self.check_out.date if self.check_out else None

    @property
    def nights(self) -> Optional[int]:
        if not self.check_in_date or not self.check_out_date:
            return None
        try:
            return days_between(self.check_in_date, self.check_out_date)
        except ValueError:
            return None

    @classmethod
    def from_dict(cls, data: dict) -> "Hotel":
        address = data.get("address")
        if isinstance(address, str):
            address = {"fullAddress": address}
        elif not isinstance(address, dict):
            address = {}
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name"),
            check_in=HotelDateTime.from_dict(data.get("checkIn")),
            check_out=HotelDateTime.from_dict(data.get("checkOut")),
            address=address,
            guests=data.get("guests"),
            confirmation_number=data.get("confirmationNumber"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "checkIn": self.check_in.to_dict() if self.check_in else None,
            "checkOut": self.check_out.to_dict() if self.check_out else None,
            "address": self.address,
            "guests": self.guests,
            "confirmationNumber": self.confirmation_number,
        }


@dataclass
class Activity:
    """A free-form activity added by the user."""

    id: str
    name: str = ""
    date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    category: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            date=data.get("date"),
            start_time=data.get("startTime") or None,
            end_time=data.get("endTime") or None,
            description=data.get("description"),
            address=data.get("address"),
            category=data.get("category"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "description": self.description,
            "address": self.address,
            "category": self.category,
        }


@dataclass
class Trip:
    """A trip with its flights, hotel stays and activities."""

    id: str
    title: dict[str, str] = field(default_factory=dict)  # language -> title
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    cover_photo: Optional[str] = None
    color: Optional[str] = None
    cities: list = field(default_factory=list)
    flights: list[Flight] = field(default_factory=list)
    hotels: list[Hotel] = field(default_factory=list)
    activities: list[Activity] = field(default_factory=list)

    @property
    def duration_days(self) -> Optional[int]:
        if self.start_date and self.end_date:
            try:
                return days_between(self.start_date, self.end_date) + 1
            except ValueError:
                return None
        return None

    def display_title(self, lang: str = "en") -> str:
        """Title in ``lang``, falling back to English, Italian, then anything."""
        for key in (lang, "en", "it"):
            if self.title.get(key):
                return self.title[key]
        for value in self.title.values():
            if value:
                return value
        return ""

    @classmethod
    def from_dict(cls, data: dict) -> "Trip":
        title = data.get("title") or {}
        if isinstance(title, str):
            title = {"en": title}
        elif not isinstance(title, dict):
            title = {}
        return cls(
            id=str(data.get("id", "")),
            title=dict(title),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            cover_photo=data.get("coverPhoto"),
            color=data.get("color"),
            cities=list(_as_list(data.get("cities"))),
            flights=[Flight.from_dict(f) for f in _as_list(data.get("flights")) if isinstance(f, dict)],
            hotels=[Hotel.from_dict(h) for h in _as_list(data.get("hotels")) if isinstance(h, dict)],
            activities=[Activity.from_dict(a) for a in _as_list(data.get("activities")) if isinstance(a, dict)],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "coverPhoto": self.cover_photo,
            "color": self.color,
            "cities": self.cities,
            "flights": [f.to_dict() for f in self.flights],
            "hotels": [h.to_dict() for h in self.hotels],
            "activities": [a.to_dict() for a in self.activities],
        }


@dataclass(frozen=True)
class TimelineEvent:
    """A derived, never-persisted entry in a trip's day-by-day timeline."""

    date: str
    time: Optional[str]
    type: str
    payload: Any  # Flight, Hotel or Activity
