"""Home page: trip list with today's dashboard, rendered in two phases."""

from __future__ import annotations

from datetime import datetime
from functools import partial
from typing import Callable, Optional

from .. import config
from ..common.templates import FIRST_TRIP_HTML, NO_TRIPS_HTML, RenderSink
from ..itinerary.models import Trip
from ..itinerary.today import classify_trips, collect_today_events, today_flight, today_hotel
from .cache import CacheEntry, CacheGateway, SwrOutcome
from .render_guard import FrameScheduler, RenderGenerationGuard
from . import web_view

TODAY_CONTAINER = "today-section"
TRIPS_CONTAINER = "trips-container"
UPCOMING_GRID = "upcoming-trips-grid"
PAST_GRID = "past-trips-grid"
LOAD_MORE_CONTAINER = "past-trips-load-more"

PHASE1_UPCOMING_COUNT = 3
PAST_TRIPS_PAGE_SIZE = 6


class HomePageController:
    """Owns the render state of one home page instance."""

    def __init__(
        self,
        gateway: CacheGateway,
        client,
        sink: RenderSink,
        scheduler=None,
        clock: Optional[Callable[[], datetime]] = None,
        lang: str = config.DEFAULT_LANG,
        test_date: Optional[str] = None,
    ):
        self.gateway = gateway
        self.client = client
        self.sink = sink
        self.scheduler = scheduler or FrameScheduler()
        self.clock = clock or partial(config.get_now, test_date)
        self.lang = lang
        self.test_date = test_date
        self.guard = RenderGenerationGuard()
        self._past_trips: list[Trip] = []
        self._past_shown = 0
        self._card_index = 0

    async def load(self) -> SwrOutcome:
        """Show cached trips at once, then refresh from the backend."""
        outcome = await self.gateway.render_with_stale_while_revalidate(
            self._fetch_fresh, self.render_entry
        )
        if outcome == SwrOutcome.FAILED:
            self.sink.replace(TRIPS_CONTAINER, NO_TRIPS_HTML)
            self.sink.apply_i18n(TRIPS_CONTAINER)
        print(f"[HOME] Load finished: {outcome.value}")
        return outcome

    async def _fetch_fresh(self) -> CacheEntry:
        return await self.client.fetch_trips_async(self.test_date)

    def render_entry(self, entry: CacheEntry) -> int:
        return self.render_trips(entry.parsed_trips(), entry.parsed_today_trips())

    def render_today_section(self, today_trips: list[Trip], now: datetime) -> None:
        html = web_view.render_today_section(
            today_flight(today_trips, now),
            today_hotel(today_trips, now),
            now,
        )
        self.sink.replace(TODAY_CONTAINER, html)
        if html:
            self.sink.apply_i18n(TODAY_CONTAINER)

    def render_trips(self, trips: list[Trip], today_trips: list[Trip]) -> int:
        """Render current and first upcoming trips now, the rest on the next frame.

        Returns the epoch of this render.
        """
        epoch = self.guard.begin_render()
        now = self.clock()
        self.render_today_section(today_trips, now)

        if not trips:
            self.sink.replace(TRIPS_CONTAINER, FIRST_TRIP_HTML)
            self.sink.apply_i18n(TRIPS_CONTAINER)
            return epoch

        sections = classify_trips(trips, now)
        self._card_index = 0
        self._past_trips = sections.past
        self._past_shown = 0

        parts = []
        if sections.current:
            current = sections.current[0]
            events = collect_today_events(current.id, today_trips, now)
            parts.append(web_view.render_current_trip_card(current, events, self.lang))

        phase1_upcoming = sections.upcoming[:PHASE1_UPCOMING_COUNT]
        phase2_upcoming = sections.upcoming[PHASE1_UPCOMING_COUNT:]
        if sections.upcoming:
            count = len(sections.upcoming)
            subtitle = "1 trip planned" if count == 1 else f"{count} trips planned"
            parts.append('<section class="home-section">')
            parts.append(web_view.render_section_header("Upcoming Trips", subtitle, "upcoming"))
            parts.append(f'<div class="trips-grid" id="{UPCOMING_GRID}"></div>')
            parts.append('</section>')

        self.sink.replace(TRIPS_CONTAINER, "\n".join(parts))
        if sections.upcoming:
            self.sink.replace(UPCOMING_GRID, "\n".join(self._render_cards(phase1_upcoming, is_past=False)))
        self.sink.apply_i18n(TRIPS_CONTAINER)

        if phase2_upcoming or sections.past:
            self.guard.defer(
                self.scheduler,
                epoch,
                partial(self._render_phase2, phase2_upcoming, sections.past),
            )
        return epoch

    def _render_cards(self, trips: list[Trip], is_past: bool) -> list[str]:
        cards = []
        for trip in trips:
            cards.append(web_view.render_trip_card(trip, self.lang, is_past, self._card_index))
            self._card_index += 1
        return cards

    def _render_phase2(self, upcoming: list[Trip], past: list[Trip], epoch: int) -> None:
        print(f"[HOME] Rendering deferred cards for render {epoch}")
        if upcoming:
            # Into the grid opened by phase 1, inside the upcoming section
            self.sink.append(UPCOMING_GRID, "\n".join(self._render_cards(upcoming, is_past=False)))

        if past:
            first_page = past[:PAST_TRIPS_PAGE_SIZE]
            self._past_shown = len(first_page)
            section = "\n".join([
                '<section class="home-section past-trips-section">',
                web_view.render_section_header("Past Trips", "Your memories", "past"),
                f'<div class="trips-grid" id="{PAST_GRID}"></div>',
                f'<div class="past-trips-load-more" id="{LOAD_MORE_CONTAINER}"></div>',
                '</section>',
            ])
            self.sink.append(TRIPS_CONTAINER, section)
            self.sink.replace(PAST_GRID, "\n".join(self._render_cards(first_page, is_past=True)))
            self._update_load_more()

        self.sink.apply_i18n(TRIPS_CONTAINER)

    def _update_load_more(self) -> None:
        remaining = self.remaining_past_trips
        self.sink.replace(LOAD_MORE_CONTAINER, web_view.render_load_more_button(remaining) if remaining > 0 else "")

    @property
    def remaining_past_trips(self) -> int:
        return len(self._past_trips) - self._past_shown

    def load_more_past_trips(self) -> int:
        """Append the next page of past trips. Returns how many cards were added."""
        if not self._past_shown:
            # Past section not on the page yet
            return 0
        batch = self._past_trips[self._past_shown:self._past_shown + PAST_TRIPS_PAGE_SIZE]
        if not batch:
            return 0
        self._past_shown += len(batch)
        self.sink.append(PAST_GRID, "\n".join(self._render_cards(batch, is_past=True)))
        self._update_load_more()
        self.sink.apply_i18n(PAST_GRID)
        return len(batch)

    # ============ Mutations ============

    def rename_trip(self, trip_id: str, title: str) -> dict:
        try:
            return self.client.rename_trip(trip_id, title)
        finally:
            self.gateway.invalidate()

    def delete_trip(self, trip_id: str) -> dict:
        try:
            return self.client.delete_trip(trip_id)
        finally:
            self.gateway.invalidate()
