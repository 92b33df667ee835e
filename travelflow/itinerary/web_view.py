"""Generate the trip page HTML: day-by-day timeline, flights and hotels tabs."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
import html as html_module

from .. import config
from .dates import parse_date
from .models import (
    ACTIVITY,
    FLIGHT,
    HOTEL_CHECKIN,
    HOTEL_CHECKOUT,
    HOTEL_STAY,
    TimelineEvent,
    Trip,
)
from .tabs import ACTIVITIES_TAB, FLIGHTS_TAB, HOTELS_TAB, TABS, tab_container
from .timeline import build_timeline
from .today import is_flight_past

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8">
<title>{title} - Travel Flow</title>
</head>
<body>
<h1 id="trip-title">{title}</h1>
<p id="trip-dates">{dates}</p>
{tabs_html}
</body>
</html>
"""


class TripWebView:
    """Build the HTML for each tab of a trip page."""

    def __init__(self, lang: str = config.DEFAULT_LANG, clock: Optional[Callable[[], datetime]] = None):
        self.lang = lang
        self.clock = clock or config.get_now

    def renderers(self) -> dict[str, Callable[[Trip], str]]:
        """Tab name -> renderer, as expected by ``TabLazyRenderer``."""
        return {
            ACTIVITIES_TAB: self.render_activities,
            FLIGHTS_TAB: self.render_flights,
            HOTELS_TAB: self.render_hotels,
        }

    def generate(self, trip: Trip, output_path: str | Path) -> Path:
        """Write a standalone HTML page with every tab rendered."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        renderers = self.renderers()
        tabs_html = "\n".join(
            f'<div id="{tab}-tab" class="tab-content{" active" if tab == ACTIVITIES_TAB else ""}">'
            f'<div id="{tab_container(tab)}">{renderers[tab](trip)}</div></div>'
            for tab in TABS
        )
        dates = ""
        if trip.start_date and trip.end_date:
            dates = f"{trip.start_date} - {trip.end_date}"

        output_path.write_text(PAGE_TEMPLATE.format(
            lang=self.lang,
            title=html_module.escape(trip.display_title(self.lang)),
            dates=html_module.escape(dates),
            tabs_html=tabs_html,
        ))
        return output_path

    # ============ Activities (timeline) ============

    def render_activities(self, trip: Trip) -> str:
        timeline = build_timeline(trip)
        if not timeline:
            return self._empty_state("trip.noActivities", "Nothing planned yet")

        lines = ['<div class="activities-list">']
        for day, events in timeline.items():
            lines.append(self._render_day(day, events))
        lines.append('</div>')
        return "\n".join(lines)

    def _render_day(self, day: str, events: list[TimelineEvent]) -> str:
        day_date = parse_date(day)
        lines = [
            f'<div class="activity-day" data-date="{day}">',
            '<div class="activity-day-header">',
            f'<span class="activity-day-number">{day_date.day}</span>',
            f'<span class="activity-day-month">{day_date.strftime("%b").upper()}</span>',
            f'<span class="activity-day-weekday">{day_date.strftime("%a").upper()}</span>',
            '</div>',
            '<div class="activity-day-items">',
        ]
        if not events:
            lines.append('<div class="activity-day-empty" data-i18n="trip.nothingPlanned">Nothing planned</div>')
        for event in events:
            lines.append(self._render_event(event))
        lines.append('</div>')
        lines.append('</div>')
        return "\n".join(lines)

    def _event_text(self, event: TimelineEvent) -> tuple[str, str, str]:
        """Return ``(text, icon, tab)`` for an event."""
        data = event.payload
        if event.type == FLIGHT:
            dep = data.departure.city or data.departure.code or ""
            dest = data.arrival.city or data.arrival.code or ""
            return f"Flight from {dep} → {dest}", "travel", FLIGHTS_TAB
        if event.type == HOTEL_CHECKIN:
            return f"Check-in {data.name or 'Hotel'}", "bed", HOTELS_TAB
        if event.type == HOTEL_STAY:
            return f"Stay {data.name or 'Hotel'}", "bed", HOTELS_TAB
        if event.type == HOTEL_CHECKOUT:
            return f"Check-out {data.name or 'Hotel'}", "bed", HOTELS_TAB
        return data.name or "", "event", ACTIVITIES_TAB

    def _render_event(self, event: TimelineEvent) -> str:
        text, icon, tab = self._event_text(event)
        time_html = ""
        if event.time:
            time_str = event.time
            if event.type == ACTIVITY and event.payload.end_time:
                time_str = f"{event.time} – {event.payload.end_time}"
            time_html = f'<span class="activity-item-time">{html_module.escape(time_str)}</span>'
        return (
            f'<div class="activity-item activity-item-{event.type}" '
            f'data-tab="{tab}" data-item-id="{html_module.escape(event.payload.id)}">'
            f'<span class="material-symbols-outlined">{icon}</span>'
            f'{time_html}'
            f'<span class="activity-item-text">{html_module.escape(text)}</span>'
            '</div>'
        )

    # ============ Flights ============

    def render_flights(self, trip: Trip) -> str:
        if not trip.flights:
            return self._empty_state("trip.noFlights", "No flights")

        now = self.clock()
        flights = sorted(trip.flights, key=lambda f: (f.date or "", f.departure_time or ""))
        lines = ['<div class="flights-list">']
        for flight in flights:
            past_class = " flight-past" if is_flight_past(flight, now) else ""
            next_day = " +1" if flight.arrival_next_day else ""
            lines.extend([
                f'<div class="flight-card{past_class}" data-id="{html_module.escape(flight.id)}">',
                f'<div class="flight-date">{html_module.escape(flight.date or "-")}</div>',
                f'<div class="flight-number">{html_module.escape(flight.flight_number or "-")}</div>',
                '<div class="flight-route">',
                f'<span class="flight-dep">{html_module.escape(flight.departure.code or "")} '
                f'{html_module.escape(flight.departure_time or "")}</span>',
                f'<span class="flight-arr">{html_module.escape(flight.arrival.code or "")} '
                f'{html_module.escape(flight.arrival_time or "")}{next_day}</span>',
                '</div>',
                f'<div class="flight-booking">{html_module.escape(flight.booking_reference or "-")}</div>',
                '</div>',
            ])
        lines.append('</div>')
        return "\n".join(lines)

    # ============ Hotels ============

    def render_hotels(self, trip: Trip) -> str:
        if not trip.hotels:
            return self._empty_state("trip.noHotels", "No hotels")

        hotels = sorted(trip.hotels, key=lambda h: h.check_in_date or "")
        lines = ['<div class="hotels-list">']
        for hotel in hotels:
            check_in = hotel.check_in.to_dict() if hotel.check_in else {}
            check_out = hotel.check_out.to_dict() if hotel.check_out else {}
            nights = hotel.nights
            lines.extend([
                f'<div class="hotel-card" data-id="{html_module.escape(hotel.id)}">',
                f'<div class="hotel-name">{html_module.escape(hotel.name or "Hotel")}</div>',
                f'<div class="hotel-check-in">{html_module.escape(check_in.get("date") or "-")} '
                f'{html_module.escape(check_in.get("time") or "")}</div>',
                f'<div class="hotel-check-out">{html_module.escape(check_out.get("date") or "-")} '
                f'{html_module.escape(check_out.get("time") or "")}</div>',
            ])
            if nights is not None:
                label = "night" if nights == 1 else "nights"
                lines.append(f'<div class="hotel-nights">{nights} {label}</div>')
            lines.append('</div>')
        lines.append('</div>')
        return "\n".join(lines)

    def _empty_state(self, i18n_key: str, text: str) -> str:
        return (
            '<div class="empty-state">'
            f'<h3 class="empty-state-title" data-i18n="{i18n_key}">{text}</h3>'
            '</div>'
        )
