"""Tests for the SQLite-backed session storage."""

import time

from travelflow.session_store import SessionStorage, purge_expired


def test_items_are_scoped_to_the_session(tmp_path):
    db_path = tmp_path / "session.db"
    alice = SessionStorage(session_id="alice", db_path=db_path)
    bob = SessionStorage(session_id="bob", db_path=db_path)

    alice.set_item("trips_cache", '{"trips": []}')

    assert alice.get_item("trips_cache") == '{"trips": []}'
    assert bob.get_item("trips_cache") is None


def test_set_item_overwrites(session_storage):
    session_storage.set_item("k", "one")
    session_storage.set_item("k", "two")
    assert session_storage.get_item("k") == "two"


def test_remove_and_clear(session_storage):
    session_storage.set_item("a", "1")
    session_storage.set_item("b", "2")

    session_storage.remove_item("a")
    assert session_storage.get_item("a") is None
    assert session_storage.get_item("b") == "2"

    session_storage.clear()
    assert session_storage.get_item("b") is None


def test_expired_entries_read_as_missing(tmp_path, monkeypatch):
    storage = SessionStorage(session_id="s", db_path=tmp_path / "session.db", ttl=60)
    storage.set_item("k", "v")

    later = time.time() + 120
    monkeypatch.setattr(time, "time", lambda: later)

    assert storage.get_item("k") is None


def test_purge_expired_removes_only_old_entries(tmp_path):
    db_path = tmp_path / "session.db"
    SessionStorage(session_id="old", db_path=db_path, ttl=-1).set_item("k", "v")
    fresh = SessionStorage(session_id="new", db_path=db_path, ttl=3600)
    fresh.set_item("k", "v")

    assert purge_expired(db_path) == 1
    assert fresh.get_item("k") == "v"
