from __future__ import annotations

import pytest

from trivia_app.core.store.memory_store import InMemoryStore


def test_get_returns_none_for_missing_key(store):
    assert store.get("missing") is None
    assert not store.exists("missing")


def test_set_with_expiry_expires_after_ttl(store, clock):
    store.set_with_expiry("k", "v", ttl_seconds=10)
    clock.advance(9)
    assert store.get("k") == "v"
    clock.advance(1)
    assert store.get("k") is None
    assert not store.exists("k")


def test_set_if_absent_only_first_call_wins(store):
    assert store.set_if_absent("guard", "true", ttl_seconds=60)
    assert not store.set_if_absent("guard", "other", ttl_seconds=60)
    assert store.get("guard") == "true"


def test_set_if_absent_succeeds_again_after_expiry(store, clock):
    assert store.set_if_absent("guard", "1", ttl_seconds=5)
    clock.advance(5)
    assert store.set_if_absent("guard", "2", ttl_seconds=5)
    assert store.get("guard") == "2"


def test_sets_collect_members_and_refresh_ttl(store, clock):
    store.add_to_set("s", "one", ttl_seconds=10)
    clock.advance(8)
    store.add_to_set("s", "two", ttl_seconds=10)
    clock.advance(8)
    assert store.members("s") == {"one", "two"}
    assert store.exists("s")
    clock.advance(2)
    assert store.members("s") == set()


def test_members_returns_a_copy(store):
    store.add_to_set("s", "one", ttl_seconds=10)
    snapshot = store.members("s")
    snapshot.add("intruder")
    assert store.members("s") == {"one"}


def test_add_to_set_rejects_plain_value_key(store):
    store.set_with_expiry("k", "v", ttl_seconds=10)
    with pytest.raises(TypeError):
        store.add_to_set("k", "member", ttl_seconds=10)


def test_delete_and_clear(store):
    store.set_with_expiry("a", "1", ttl_seconds=10)
    store.add_to_set("b", "x", ttl_seconds=10)
    store.delete("a")
    assert not store.exists("a")
    store.clear()
    assert not store.exists("b")


def test_ping_and_backend_name(store):
    assert store.ping()
    assert store.backend_name == "memory"


def test_remove_from_set_ignores_missing_members(store):
    store.add_to_set("s", "one", ttl_seconds=10)
    store.add_to_set("s", "two", ttl_seconds=10)
    store.remove_from_set("s", "one", "never-added")
    assert store.members("s") == {"two"}
    store.remove_from_set("unknown", "x")
    assert not store.exists("unknown")


def test_removing_last_member_drops_the_set(store):
    store.add_to_set("s", "only", ttl_seconds=10)
    store.remove_from_set("s", "only")
    assert not store.exists("s")
    assert store.key_count() == 0


def test_writes_sweep_expired_keys_nobody_reads(store, clock):
    for index in range(5):
        store.set_with_expiry(f"old-{index}", "v", ttl_seconds=10)
    assert store.key_count() == 5
    clock.advance(61)
    store.set_with_expiry("fresh", "v", ttl_seconds=10)
    assert store.key_count() == 1
    assert store.get("fresh") == "v"


def test_sweep_runs_at_most_once_per_interval(clock):
    store = InMemoryStore(clock=clock.monotonic, sweep_interval_seconds=100)
    store.set_with_expiry("short", "v", ttl_seconds=1)
    clock.advance(50)
    store.set_with_expiry("other", "v", ttl_seconds=500)
    # Not yet due, so the expired key is still held.
    assert store.key_count() == 2
    clock.advance(50)
    store.set_with_expiry("other", "v", ttl_seconds=500)
    assert store.key_count() == 1
