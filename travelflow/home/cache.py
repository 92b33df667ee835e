"""Session cache of the trip list, rendered stale-while-revalidate."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from ..errors import FetchFailed
from ..itinerary.models import Trip
from .render_guard import RenderGenerationGuard

CACHE_KEY = "trips_cache"


@dataclass
class CacheEntry:
    """The trip list plus the trips active today, as returned by the backend."""

    trips: list[dict] = field(default_factory=list)
    today_trips: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"trips": self.trips, "todayTrips": self.today_trips}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> "CacheEntry":
        if not isinstance(data, dict):
            raise TypeError(f"Cache entry must be an object, got {type(data).__name__}")
        trips = data.get("trips") or []
        today_trips = data.get("todayTrips") or []
        if not isinstance(trips, list) or not isinstance(today_trips, list):
            raise TypeError("Cache entry trips must be lists")
        return cls(trips=trips, today_trips=today_trips)

    @classmethod
    def from_json(cls, blob: str) -> "CacheEntry":
        return cls.from_dict(json.loads(blob))

    def parsed_trips(self) -> list[Trip]:
        return [Trip.from_dict(t) for t in self.trips if isinstance(t, dict)]

    def parsed_today_trips(self) -> list[Trip]:
        return [Trip.from_dict(t) for t in self.today_trips if isinstance(t, dict)]


def entry_fingerprint(entry: CacheEntry) -> str:
    """Content hash of an entry, independent of key order."""
    canonical = json.dumps(entry.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class SwrOutcome(Enum):
    """How a stale-while-revalidate pass ended."""

    FRESH = "fresh"              # fresh data rendered (no cache, or cache differed)
    UNCHANGED = "unchanged"      # fresh data equal to the cached render, no re-render
    STALE_KEPT = "stale_kept"    # fetch failed, cached render left in place
    FAILED = "failed"            # fetch failed and nothing was rendered
    SUPERSEDED = "superseded"    # a newer pass started while this one was fetching


class CacheGateway:
    """Owns the session-scoped trips cache and decides when to re-render."""

    def __init__(self, storage, key: str = CACHE_KEY, guard: Optional[RenderGenerationGuard] = None):
        self.storage = storage
        self.key = key
        self.guard = guard or RenderGenerationGuard()

    def load(self) -> Optional[CacheEntry]:
        """Return the cached entry, or None if absent or corrupt (corrupt entries are dropped)."""
        blob = self.storage.get_item(self.key)
        if not blob:
            return None
        try:
            return CacheEntry.from_json(blob)
        except (ValueError, TypeError) as e:
            print(f"[CACHE] Discarding corrupt cache entry: {e}")
            self.invalidate()
            return None

    def store(self, entry: CacheEntry) -> None:
        self.storage.set_item(self.key, entry.to_json())

    def invalidate(self) -> None:
        """Forget the cached trips so the next load always fetches."""
        self.storage.remove_item(self.key)

    async def render_with_stale_while_revalidate(
        self,
        fetch_fresh: Callable[[], Awaitable[CacheEntry]],
        render: Callable[[CacheEntry], None],
    ) -> SwrOutcome:
        """Render cached trips immediately, then re-render only if the fresh fetch differs."""
        epoch = self.guard.begin_render()
        cached = self.load()
        if cached is not None:
            print(f"[CACHE] Rendering {len(cached.trips)} cached trips")
            render(cached)

        try:
            fresh = await fetch_fresh()
        except FetchFailed as e:
            if not self.guard.is_current(epoch):
                print(f"[CACHE] Ignoring failed fetch of superseded load {epoch}: {e}")
                return SwrOutcome.SUPERSEDED
            if cached is not None:
                print(f"[CACHE] Fetch failed, keeping cached view: {e}")
                return SwrOutcome.STALE_KEPT
            print(f"[CACHE] Fetch failed with no cached data: {e}")
            return SwrOutcome.FAILED

        if not self.guard.is_current(epoch):
            print(f"[CACHE] Discarding fetch result of superseded load {epoch}")
            return SwrOutcome.SUPERSEDED

        self.store(fresh)
        if cached is not None and entry_fingerprint(cached) == entry_fingerprint(fresh):
            print("[CACHE] Fresh trips match cache, skipping re-render")
            return SwrOutcome.UNCHANGED

        render(fresh)
        return SwrOutcome.FRESH
