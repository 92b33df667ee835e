"""HTML for the home page: today cards, trip cards and section headers."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

from ..common.templates import escape
from ..itinerary.models import Trip
from ..itinerary.today import (
    STATUS_CHECK_IN,
    STATUS_CHECK_OUT,
    FlightContext,
    HotelContext,
    TodayEvent,
)

STATUS_ICONS = {
    STATUS_CHECK_IN: "login",
    STATUS_CHECK_OUT: "logout",
}

STATUS_LABELS = {
    STATUS_CHECK_IN: "Check-in",
    STATUS_CHECK_OUT: "Check-out",
}

EVENT_ICONS = {
    "flight": "flight",
    "hotel": "bed",
    "activity": "local_activity",
}


def flight_tracking_url(flight_number: str) -> str:
    return f"https://www.flightradar24.com/data/flights/{quote((flight_number or '').replace(' ', '').lower())}"


def trip_url(trip_id: str) -> str:
    return f"trip.html?id={quote(str(trip_id))}"


def format_long_date(now: datetime) -> str:
    """e.g. 'Monday, June 3, 2024'."""
    return f"{now.strftime('%A, %B')} {now.day}, {now.year}"


def render_today_flight_card(context: FlightContext) -> str:
    flight = context.flight
    next_day = " +1" if flight.arrival_next_day else ""
    lines = [
        '<div class="today-flight-card">',
        '<div class="today-flight-header">',
        '<div class="today-flight-departure">',
        '<span class="material-icons-outlined today-flight-icon">flight_takeoff</span>',
        f'<span class="today-flight-time">{escape(flight.departure_time)}</span>',
        '</div>',
        f'<a href="{flight_tracking_url(flight.flight_number)}" target="_blank" rel="noopener" '
        f'class="today-flight-number">{escape(flight.flight_number)}</a>',
        '</div>',
        '<div class="today-flight-main">',
        f'<span class="today-flight-city">{escape(flight.departure.city or "-")}</span>',
        f'<span class="today-flight-airport">{escape(flight.departure.code or "")}</span>',
        '<span class="today-flight-label" data-i18n="flight.terminal">Terminal</span>',
        f'<span class="today-flight-value">{escape(flight.departure.terminal or "-")}</span>',
        '</div>',
        '<div class="today-flight-secondary">',
        '<span class="material-icons-outlined today-flight-landing-icon">flight_land</span>',
        f'<span class="today-flight-dest">{escape(flight.arrival.city or "-")}</span>',
        f'<span class="today-flight-arr-time">{escape(flight.arrival_time)}{next_day}</span>',
        '</div>',
        f'<a href="{trip_url(context.trip_id)}" class="today-flight-details-link">',
        '<span data-i18n="home.flightDetails">Details</span>',
        '</a>',
        '</div>',
    ]
    return "\n".join(lines)


def render_today_hotel_card(context: HotelContext) -> str:
    hotel = context.hotel
    icon = STATUS_ICONS.get(context.status, "bed")
    label = STATUS_LABELS.get(context.status, "Stay")
    city = hotel.address.get("city") or ""
    full_address = hotel.address.get("fullAddress") or ""
    maps_url = (
        f"https://www.google.com/maps/search/?api=1&query={quote(full_address)}"
        if full_address else "#"
    )

    lines = [
        '<div class="today-hotel-card">',
        '<div class="today-hotel-header">',
        '<div class="today-hotel-status">',
        f'<span class="material-icons-outlined today-hotel-icon">{icon}</span>',
        f'<span class="today-hotel-time">{escape(context.status_time or label)}</span>',
        '</div>',
    ]
    if context.show_confirmation:
        lines.append(f'<span class="today-hotel-confirmation">{escape(hotel.confirmation_number or "-")}</span>')
    lines.extend([
        '</div>',
        '<div class="today-hotel-main">',
        f'<div class="today-hotel-name">{escape(hotel.name or "-")}</div>',
        f'<div class="today-hotel-city">{escape(city)}</div>',
        '</div>',
        f'<a href="{maps_url}" target="_blank" rel="noopener" class="today-hotel-maps-link">',
        f'<span class="today-hotel-address">{escape(full_address or city)}</span>',
        '</a>',
        f'<a href="{trip_url(context.trip_id)}" class="today-hotel-details-link">',
        '<span data-i18n="home.flightDetails">Details</span>',
        '</a>',
        '</div>',
    ])
    return "\n".join(lines)


def render_today_section(flight: FlightContext | None, hotel: HotelContext | None, now: datetime) -> str:
    """Today's cards, or an empty string when nothing is happening today."""
    if flight is None and hotel is None:
        return ""
    cards = []
    if flight is not None:
        cards.append(render_today_flight_card(flight))
    if hotel is not None:
        cards.append(render_today_hotel_card(hotel))
    return (
        f'<div class="today-date">{escape(format_long_date(now))}</div>\n'
        f'<div class="today-cards">{"".join(cards)}</div>'
    )


def render_section_header(title: str, subtitle: str, section: str) -> str:
    return (
        f'<div class="home-section-header" data-section="{section}">'
        f'<h2 class="home-section-title">{escape(title)}</h2>'
        f'<span class="home-section-subtitle">{escape(subtitle)}</span>'
        '</div>'
    )


def render_trip_card(trip: Trip, lang: str, is_past: bool, index: int) -> str:
    classes = "trip-card trip-card-past" if is_past else "trip-card"
    dates = ""
    if trip.start_date and trip.end_date:
        dates = f"{trip.start_date} – {trip.end_date}"
    cover = (
        f'<div class="trip-card-image" data-bg="{escape(trip.cover_photo)}"></div>'
        if trip.cover_photo else '<div class="trip-card-image trip-card-image-placeholder"></div>'
    )
    return (
        f'<a href="{trip_url(trip.id)}" class="{classes}" data-trip-id="{escape(trip.id)}" data-index="{index}">'
        f'{cover}'
        f'<div class="trip-card-content">'
        f'<h3 class="trip-card-title">{escape(trip.display_title(lang))}</h3>'
        f'<p class="trip-card-dates">{escape(dates)}</p>'
        f'</div></a>'
    )


def render_today_events(events: list[TodayEvent]) -> str:
    if not events:
        return ""
    lines = ['<div class="current-trip-events">']
    for event in events:
        icon = EVENT_ICONS.get(event.type, EVENT_ICONS["activity"])
        lines.append(
            f'<div class="current-trip-event" data-type="{event.type}" data-id="{escape(event.id)}">'
            f'<span class="material-icons-outlined">{icon}</span>'
            f'<span class="current-trip-event-time">{escape(event.time)}</span>'
            f'<span class="current-trip-event-title">{escape(event.title)}</span>'
            f'<span class="current-trip-event-desc">{escape(event.description)}</span>'
            '</div>'
        )
    lines.append('</div>')
    return "\n".join(lines)


def render_current_trip_card(trip: Trip, events: list[TodayEvent], lang: str) -> str:
    return (
        '<section class="home-section current-trip-section">'
        '<div class="current-trip-card">'
        '<span class="current-trip-badge" data-i18n="home.inProgress">In progress</span>'
        f'<h2 class="current-trip-title">{escape(trip.display_title(lang))}</h2>'
        f'{render_today_events(events)}'
        f'<a href="{trip_url(trip.id)}" class="current-trip-link" data-i18n="home.openTrip">Open trip</a>'
        '</div>'
        '</section>'
    )


def render_load_more_button(remaining: int) -> str:
    return (
        '<button class="btn btn-secondary" id="load-more-past-trips">'
        f'<span data-i18n="home.loadMoreTrips">Show more trips</span> ({remaining})'
        '</button>'
    )
