"""Tests for the session cache and the stale-while-revalidate flow."""

import asyncio
import json

from travelflow.errors import FetchFailed
from travelflow.home.cache import CACHE_KEY, CacheEntry, SwrOutcome, entry_fingerprint

from conftest import make_trip


def fetch_returning(entry):
    async def fetch():
        return entry
    return fetch


async def fetch_failing():
    raise FetchFailed("offline")


def run_swr(gateway, fetch):
    rendered = []
    outcome = asyncio.run(gateway.render_with_stale_while_revalidate(fetch, rendered.append))
    return outcome, rendered


def test_identical_fresh_data_renders_once(gateway, sample_entry):
    gateway.store(sample_entry)
    fresh = CacheEntry.from_json(sample_entry.to_json())

    outcome, rendered = run_swr(gateway, fetch_returning(fresh))

    assert outcome == SwrOutcome.UNCHANGED
    assert len(rendered) == 1
    assert len(rendered[0].trips) == 5


def test_changed_fresh_data_renders_twice_and_is_stored(gateway, storage, sample_entry):
    gateway.store(sample_entry)
    fresh = CacheEntry(trips=sample_entry.trips[:2], today_trips=[])

    outcome, rendered = run_swr(gateway, fetch_returning(fresh))

    assert outcome == SwrOutcome.FRESH
    assert [len(e.trips) for e in rendered] == [5, 2]
    assert json.loads(storage.items[CACHE_KEY])["trips"] == fresh.trips


def test_no_cache_renders_fresh_only(gateway, sample_entry):
    outcome, rendered = run_swr(gateway, fetch_returning(sample_entry))

    assert outcome == SwrOutcome.FRESH
    assert rendered == [sample_entry]
    assert gateway.load() == sample_entry


def test_fetch_failure_keeps_stale_render(gateway, sample_entry):
    gateway.store(sample_entry)

    outcome, rendered = run_swr(gateway, fetch_failing)

    assert outcome == SwrOutcome.STALE_KEPT
    assert rendered == [sample_entry]


def test_fetch_failure_without_cache_reports_failure(gateway):
    outcome, rendered = run_swr(gateway, fetch_failing)

    assert outcome == SwrOutcome.FAILED
    assert rendered == []


def test_corrupt_cache_is_discarded(gateway, storage, sample_entry):
    storage.items[CACHE_KEY] = "{not json"

    assert gateway.load() is None
    assert CACHE_KEY not in storage.items

    storage.items[CACHE_KEY] = "[1, 2, 3]"
    outcome, rendered = run_swr(gateway, fetch_returning(sample_entry))
    assert outcome == SwrOutcome.FRESH
    assert rendered == [sample_entry]


def test_key_order_does_not_affect_equality(gateway, storage):
    trip = make_trip()
    reordered = dict(reversed(list(trip.items())))
    storage.items[CACHE_KEY] = json.dumps({"todayTrips": [], "trips": [trip]})

    outcome, rendered = run_swr(gateway, fetch_returning(CacheEntry(trips=[reordered])))

    assert outcome == SwrOutcome.UNCHANGED
    assert len(rendered) == 1


def test_fingerprint_changes_with_content():
    a = CacheEntry(trips=[make_trip(title="Tuscany")])
    b = CacheEntry(trips=[make_trip(title="Sicily")])
    assert entry_fingerprint(a) != entry_fingerprint(b)


def test_invalidate_forces_fresh_render(gateway, sample_entry):
    gateway.store(sample_entry)
    gateway.invalidate()

    outcome, rendered = run_swr(gateway, fetch_returning(sample_entry))

    assert outcome == SwrOutcome.FRESH
    assert rendered == [sample_entry]


def test_superseded_load_discards_its_fetch(gateway, sample_entry):
    rendered = []

    async def scenario():
        release = asyncio.Event()

        async def slow_fetch():
            await release.wait()
            return CacheEntry(trips=sample_entry.trips[:1])

        first = asyncio.create_task(gateway.render_with_stale_while_revalidate(slow_fetch, rendered.append))
        await asyncio.sleep(0)
        second = await gateway.render_with_stale_while_revalidate(fetch_returning(sample_entry), rendered.append)
        release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert second == SwrOutcome.FRESH
    assert first == SwrOutcome.SUPERSEDED
    assert rendered == [sample_entry]
    assert gateway.load() == sample_entry


def test_session_storage_backs_the_cache(session_storage, sample_entry):
    from travelflow.home.cache import CacheGateway

    gateway = CacheGateway(session_storage)
    gateway.store(sample_entry)

    assert gateway.load() == sample_entry
    gateway.invalidate()
    assert gateway.load() is None


def test_superseded_load_ignores_its_failed_fetch(gateway, sample_entry):
    rendered = []

    async def scenario():
        release = asyncio.Event()

        async def slow_failing_fetch():
            await release.wait()
            raise FetchFailed("timed out")

        first = asyncio.create_task(gateway.render_with_stale_while_revalidate(slow_failing_fetch, rendered.append))
        await asyncio.sleep(0)
        second = await gateway.render_with_stale_while_revalidate(fetch_returning(sample_entry), rendered.append)
        release.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert second == SwrOutcome.FRESH
    assert first == SwrOutcome.SUPERSEDED
    assert rendered == [sample_entry]
    assert gateway.load() == sample_entry
