"""Tests for token persistence."""

from diet_web.adapters.token_store import InMemoryTokenStore


def test_in_memory_store_round_trip() -> None:
    store = InMemoryTokenStore()
    assert store.get() is None

    store.set("t1")
    assert store.get() == "t1"

    store.clear()
    assert store.get() is None
