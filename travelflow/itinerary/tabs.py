"""Render each trip tab at most once until its data changes."""

from __future__ import annotations

from typing import Callable

from ..common.templates import RenderSink
from .models import Trip

ACTIVITIES_TAB = "activities"
FLIGHTS_TAB = "flights"
HOTELS_TAB = "hotels"

TABS = (ACTIVITIES_TAB, FLIGHTS_TAB, HOTELS_TAB)

# The activities timeline is built from flights and hotels too
DERIVED_FROM = {
    FLIGHTS_TAB: (FLIGHTS_TAB, ACTIVITIES_TAB),
    HOTELS_TAB: (HOTELS_TAB, ACTIVITIES_TAB),
    ACTIVITIES_TAB: (ACTIVITIES_TAB,),
}


def tab_container(tab: str) -> str:
    return f"{tab}-container"


class TabLazyRenderer:
    """Memoizes tab renders for one trip.

    ``renderers`` maps each tab name to a function turning the trip into HTML.
    """

    def __init__(self, trip: Trip, sink: RenderSink, renderers: dict[str, Callable[[Trip], str]]):
        missing = [tab for tab in TABS if tab not in renderers]
        if missing:
            raise ValueError(f"Missing renderers for tabs: {', '.join(missing)}")
        self.trip = trip
        self.sink = sink
        self.renderers = renderers
        self.active_tab = ACTIVITIES_TAB
        self._rendered = {tab: False for tab in TABS}

    @staticmethod
    def _check_tab(tab: str) -> None:
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")

    def is_rendered(self, tab: str) -> bool:
        self._check_tab(tab)
        return self._rendered[tab]

    def ensure_rendered(self, tab: str) -> bool:
        """Render ``tab`` unless it is already up to date. Returns True if it rendered."""
        self._check_tab(tab)
        if self._rendered[tab]:
            return False
        container = tab_container(tab)
        self.sink.replace(container, self.renderers[tab](self.trip))
        self.sink.apply_i18n(container)
        self._rendered[tab] = True
        print(f"[TABS] Rendered {tab} for trip {self.trip.id}")
        return True

    def switch_to(self, tab: str) -> bool:
        self._check_tab(tab)
        self.active_tab = tab
        return self.ensure_rendered(tab)

    def mark_changed(self, tab: str) -> None:
        """Drop the cached render of ``tab`` and of every tab derived from it."""
        self._check_tab(tab)
        for name in DERIVED_FROM[tab]:
            self._rendered[name] = False

    def replace_trip(self, trip: Trip) -> None:
        """Swap in freshly loaded trip data; every tab re-renders on next visit."""
        self.trip = trip
        for tab in TABS:
            self._rendered[tab] = False
