"""
Tests for the in-memory vault token store: TTL expiry, eviction, errors.
"""

from __future__ import annotations

import pytest

from backend_credscore.collectors import InMemoryTokenStore
from backend_credscore.core.exceptions import TokenNotFound


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_put_get_delete():
    store = InMemoryTokenStore()
    store.put("user-1", "tok-1")
    assert store.get("user-1") == "tok-1"
    assert len(store) == 1
    assert store.delete("user-1") is True
    assert store.delete("user-1") is False
    assert len(store) == 0


def test_missing_token_raises_token_not_found():
    store = InMemoryTokenStore()
    with pytest.raises(TokenNotFound) as exc_info:
        store.get("nobody")
    assert exc_info.value.user_id == "nobody"
    assert str(exc_info.value) == "No auth token found for user nobody"
    # KeyError-compatible for dict-style callers
    with pytest.raises(KeyError):
        store.get("nobody")


def test_entries_expire_after_ttl():
    clock = FakeClock()
    store = InMemoryTokenStore(ttl_sec=60, clock=clock)
    store.put("user-1", "tok-1")
    clock.advance(59)
    assert store.get("user-1") == "tok-1"
    clock.advance(1)
    with pytest.raises(TokenNotFound):
        store.get("user-1")
    assert len(store) == 0


def test_per_entry_ttl_override():
    clock = FakeClock()
    store = InMemoryTokenStore(ttl_sec=60, clock=clock)
    store.put("short", "a", ttl_sec=5)
    store.put("long", "b")
    clock.advance(10)
    assert len(store) == 1
    assert store.get("long") == "b"


def test_put_replaces_and_refreshes():
    clock = FakeClock()
    store = InMemoryTokenStore(ttl_sec=60, clock=clock)
    store.put("user-1", "old")
    clock.advance(50)
    store.put("user-1", "new")
    clock.advance(50)
    assert store.get("user-1") == "new"


def test_eviction_when_full_drops_closest_to_expiry():
    clock = FakeClock()
    store = InMemoryTokenStore(ttl_sec=100, max_entries=2, clock=clock)
    store.put("a", "1")
    clock.advance(1)
    store.put("b", "2")
    clock.advance(1)
    store.put("c", "3")
    assert len(store) == 2
    with pytest.raises(TokenNotFound):
        store.get("a")
    assert store.get("b") == "2"
    assert store.get("c") == "3"


def test_expired_entries_purged_before_eviction():
    clock = FakeClock()
    store = InMemoryTokenStore(ttl_sec=100, max_entries=2, clock=clock)
    store.put("a", "1", ttl_sec=1)
    store.put("b", "2")
    clock.advance(5)
    store.put("c", "3")
    assert store.get("b") == "2"
    assert store.get("c") == "3"


def test_invalid_arguments():
    with pytest.raises(ValueError):
        InMemoryTokenStore(ttl_sec=0)
    with pytest.raises(ValueError):
        InMemoryTokenStore(max_entries=0)
    store = InMemoryTokenStore()
    with pytest.raises(ValueError):
        store.put("", "tok")
    with pytest.raises(ValueError):
        store.put("user", "")
