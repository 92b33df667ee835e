"""Command-line interface for inspecting trip timelines and today's bookings."""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from .. import config
from .models import ACTIVITY, FLIGHT, HOTEL_CHECKIN, HOTEL_CHECKOUT, HOTEL_STAY, Trip
from .timeline import build_timeline
from .today import today_flight, today_hotel
from .web_view import TripWebView

EVENT_LABELS = {
    FLIGHT: "Flight",
    HOTEL_CHECKIN: "Check-in",
    HOTEL_STAY: "Stay",
    HOTEL_CHECKOUT: "Check-out",
    ACTIVITY: "Activity",
}


def load_json(path: Path):
    with open(path) as f:
        return json.load(f)


def load_trips(path: Path) -> list[Trip]:
    """Read a trip, a list of trips, or a ``{"trips": [...]}`` / ``{"todayTrips": [...]}`` file."""
    data = load_json(path)
    if isinstance(data, dict):
        if "todayTrips" in data:
            data = data["todayTrips"]
        elif "trips" in data:
            data = data["trips"]
        else:
            data = [data]
    return [Trip.from_dict(item) for item in data if isinstance(item, dict)]


def describe_event(event) -> str:
    payload = event.payload
    if event.type == FLIGHT:
        route = f"{payload.departure.code or payload.departure.city or '?'} → " \
                f"{payload.arrival.code or payload.arrival.city or '?'}"
        return f"{payload.flight_number or 'Flight'} {route}"
    if event.type in (HOTEL_CHECKIN, HOTEL_STAY, HOTEL_CHECKOUT):
        return payload.name or "Hotel"
    return payload.name


def format_timeline(trip: Trip, lang: str) -> str:
    lines = [trip.display_title(lang) or trip.id]
    if trip.start_date and trip.end_date:
        lines.append(f"{trip.start_date} - {trip.end_date}")
    lines.append("")
    for day, events in build_timeline(trip).items():
        lines.append(day)
        if not events:
            lines.append("  (nothing planned)")
        for event in events:
            time_str = event.time or "     "
            lines.append(f"  {time_str}  {EVENT_LABELS[event.type]:<9}  {describe_event(event)}")
    return "\n".join(lines)


def format_today(trips: list[Trip], now: datetime, lang: str) -> str:
    flight = today_flight(trips, now)
    hotel = today_hotel(trips, now)
    lines = [f"Today: {now.strftime('%Y-%m-%d %H:%M')}"]
    if flight is None and hotel is None:
        lines.append("Nothing scheduled today.")
    if flight is not None:
        f = flight.flight
        next_day = " +1" if f.arrival_next_day else ""
        lines.append(
            f"Flight {f.flight_number or '-'}: {f.departure.city or f.departure.code or '-'} "
            f"{f.departure_time} → {f.arrival.city or f.arrival.code or '-'} {f.arrival_time}{next_day}"
        )
    if hotel is not None:
        status_time = f" {hotel.status_time}" if hotel.status_time else ""
        lines.append(f"Hotel {hotel.hotel.name or '-'}: {hotel.status}{status_time}")
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Show a trip's day-by-day timeline or today's flight and hotel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Day-by-day itinerary of a trip exported from the backend
  python -m travelflow.itinerary.cli timeline trip.json

  # Also write the HTML trip page
  python -m travelflow.itinerary.cli timeline trip.json --html trip.html

  # Today's dashboard at a given moment
  python -m travelflow.itinerary.cli today trips.json --now 2024-06-02T23:00
        """,
    )
    parser.add_argument("--lang", default=config.DEFAULT_LANG, help="Language for trip titles")
    subparsers = parser.add_subparsers(dest="command", required=True)

    timeline_parser = subparsers.add_parser("timeline", help="Print a trip's timeline")
    timeline_parser.add_argument("trip_file", type=str, help="Path to a trip JSON file")
    timeline_parser.add_argument("--html", type=str, metavar="OUTPUT_PATH", help="Write the trip page HTML here")

    today_parser = subparsers.add_parser("today", help="Print today's flight and hotel")
    today_parser.add_argument("trips_file", type=str, help="Path to a trips JSON file")
    today_parser.add_argument("--now", type=str, help="Current time as YYYY-MM-DDTHH:MM (default: now)")

    args = parser.parse_args(argv)

    try:
        if args.command == "timeline":
            path = Path(args.trip_file)
            if not path.exists():
                print(f"Error: File not found: {path}", file=sys.stderr)
                sys.exit(1)
            trips = load_trips(path)
            if not trips:
                print(f"Error: No trip found in {path}", file=sys.stderr)
                sys.exit(1)
            for trip in trips:
                print(format_timeline(trip, args.lang))
                print()
            if args.html:
                TripWebView(lang=args.lang).generate(trips[0], args.html)
                print(f"Trip page saved to: {args.html}")
        else:
            path = Path(args.trips_file)
            if not path.exists():
                print(f"Error: File not found: {path}", file=sys.stderr)
                sys.exit(1)
            now = datetime.fromisoformat(args.now) if args.now else config.get_now()
            print(format_today(load_trips(path), now, args.lang))

    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
