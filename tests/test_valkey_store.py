# ==============================================================================
# Tests for ValkeyStore
# ==============================================================================
"""
Unit tests for the Valkey/Redis StoreAdapter.

Tests cover:
- JSON round-trip through get/set
- add (SET NX) and delete outcomes
- CAS: stored, not found, conflict with a concurrent writer, TTL preserved
- Transport and decode failures surface as StoreError
- Passthrough to redis-py commands

All tests use fakeredis via the `valkey_store` fixture from conftest.py,
so no real Valkey/Redis server is needed.
"""

from unittest.mock import patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from cachecas.base import StoreError, StoreOutcome

# ==============================================================================
# Basic operations
# ==============================================================================


class TestBasicOperations:
    """Tests for get/set/add/delete."""

    def test_get_missing_returns_none(self, valkey_store):
        assert valkey_store.get("missing") is None

    def test_set_stores_json(self, valkey_store, fake_redis):
        """Values are stored as JSON strings."""
        outcome = valkey_store.set("numbers", [1, 2, 3])
        assert outcome is StoreOutcome.STORED
        assert fake_redis.get("numbers") == "[1, 2, 3]"
        assert valkey_store.get("numbers") == [1, 2, 3]

    def test_set_with_ttl(self, valkey_store, fake_redis):
        valkey_store.set("session", {"id": 1}, ttl_seconds=60)
        ttl = fake_redis.ttl("session")
        assert 0 < ttl <= 60

    def test_add_only_when_absent(self, valkey_store):
        assert valkey_store.add("k", "first") is StoreOutcome.STORED
        assert valkey_store.add("k", "second") is StoreOutcome.NOT_STORED
        assert valkey_store.get("k") == "first"

    def test_delete_outcomes(self, valkey_store):
        valkey_store.set("k", 1)
        assert valkey_store.delete("k") is StoreOutcome.DELETED
        assert valkey_store.delete("k") is StoreOutcome.NOT_FOUND

    def test_unserializable_value_raises(self, valkey_store):
        with pytest.raises(StoreError) as exc_info:
            valkey_store.set("k", object())
        assert exc_info.value.operation == "encode"


# ==============================================================================
# Compare-and-swap
# ==============================================================================


class TestCas:
    """Tests for ValkeyStore.cas()."""

    def test_cas_applies_mutator(self, valkey_store):
        valkey_store.set("counter", 1)
        outcome = valkey_store.cas("counter", lambda current: current + 1)
        assert outcome is StoreOutcome.STORED
        assert valkey_store.get("counter") == 2

    def test_cas_missing_key_is_not_found(self, valkey_store):
        """The mutator is not called when the key does not exist."""
        calls = []
        outcome = valkey_store.cas("missing", lambda current: calls.append(current))
        assert outcome is StoreOutcome.NOT_FOUND
        assert calls == []
        assert valkey_store.get("missing") is None

    def test_concurrent_write_is_conflict(self, valkey_store, other_redis):
        """A write from another client between read and write aborts the CAS."""
        valkey_store.set("k", "original")

        def mutator(current):
            other_redis.set("k", '"theirs"')
            return "mine"

        outcome = valkey_store.cas("k", mutator)
        assert outcome is StoreOutcome.CONFLICT
        assert valkey_store.get("k") == "theirs"

    def test_cas_preserves_ttl(self, valkey_store, fake_redis):
        valkey_store.set("k", [1], ttl_seconds=120)
        valkey_store.cas("k", lambda current: current + [2])
        assert valkey_store.get("k") == [1, 2]
        assert fake_redis.ttl("k") > 0

    def test_mutator_exception_propagates(self, valkey_store):
        valkey_store.set("k", 1)

        def broken(current):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            valkey_store.cas("k", broken)
        assert valkey_store.get("k") == 1


# ==============================================================================
# Failures and passthrough
# ==============================================================================


class TestFailures:
    """Transport and protocol errors become StoreError."""

    def test_transport_error_on_get(self, valkey_store, fake_redis):
        with patch.object(fake_redis, "get", side_effect=RedisConnectionError("down")):
            with pytest.raises(StoreError) as exc_info:
                valkey_store.get("k")
        assert exc_info.value.operation == "get"
        assert exc_info.value.key == "k"

    def test_transport_error_on_delete(self, valkey_store, fake_redis):
        with patch.object(fake_redis, "delete", side_effect=RedisConnectionError("down")):
            with pytest.raises(StoreError):
                valkey_store.delete("k")

    def test_malformed_value_raises(self, valkey_store, fake_redis):
        """A non-JSON value written by someone else is a protocol error."""
        fake_redis.set("k", "not json")
        with pytest.raises(StoreError) as exc_info:
            valkey_store.get("k")
        assert exc_info.value.operation == "decode"

    def test_ping(self, valkey_store):
        assert valkey_store.ping() is True

    def test_ping_unreachable(self, valkey_store, fake_redis):
        with patch.object(fake_redis, "ping", side_effect=RedisConnectionError("down")):
            assert valkey_store.ping() is False


class TestForward:
    """Tests for ValkeyStore.forward()."""

    def test_forwards_to_redis_command(self, valkey_store):
        valkey_store.set("k", 1, ttl_seconds=30)
        assert 0 < valkey_store.forward("ttl", "k") <= 30

    def test_forward_unknown_command(self, valkey_store):
        with pytest.raises(AttributeError):
            valkey_store.forward("no_such_command")

    def test_forward_refuses_private_attributes(self, valkey_store):
        with pytest.raises(AttributeError):
            valkey_store.forward("_client")

    def test_forward_refuses_commands_outside_allow_list(self, valkey_store, fake_redis):
        valkey_store.set("k", 1)
        for operation in ("flushall", "flushdb", "close", "delete"):
            with pytest.raises(AttributeError):
                valkey_store.forward(operation)
        assert fake_redis.get("k") == "1"

    def test_forward_counter_commands(self, valkey_store):
        assert valkey_store.forward("incrby", "hits", 5) == 5
        assert valkey_store.forward("decr", "hits") == 4
