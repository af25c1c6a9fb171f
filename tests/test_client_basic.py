# ==============================================================================
# Tests for CacheClient Basic Operations
# ==============================================================================
"""
Unit tests for get/set/add/delete, passthrough and notifications.

Tests cover:
- Pass-through semantics and boolean results
- Outcome mismatches reported as failures
- Default TTL handling
- Transport errors never escape any public method
- Passthrough logs store errors and generic errors differently
"""

import logging
import threading

from cachecas.base import StoreOutcome
from cachecas.core import operations


class TestGetSetDelete:
    def test_set_then_get(self, client):
        assert client.set("k", {"a": 1}) is True
        assert client.get("k") == {"a": 1}

    def test_get_missing(self, client):
        assert client.get("missing") is None

    def test_delete(self, client):
        client.set("k", 1)
        assert client.delete("k") is True
        assert client.get("k") is None

    def test_delete_missing_is_failure(self, client):
        assert client.delete("missing") is False

    def test_add(self, client):
        assert client.add("k", 1) is True
        assert client.add("k", 2) is False
        assert client.get("k") == 1

    def test_set_logs_success(self, client, recorded):
        client.set("k", 1)
        assert recorded[-1].formatted == "[Cache] k has been successfully set."
        assert recorded[-1].operation == "set"
        assert recorded[-1].key == "k"

    def test_get_success_is_silent(self, client, recorded):
        client.set("k", 1)
        recorded.clear()
        client.get("k")
        assert recorded == []

    def test_set_unexpected_outcome_is_failure(self, memory_store, client_factory, recorded):
        memory_store.set = lambda key, value, ttl_seconds=None: StoreOutcome.NOT_STORED
        client = client_factory(memory_store)

        assert client.set("k", 1) is False
        assert recorded[-1].level == logging.WARNING
        assert "expected to return 'stored', got 'not_stored'" in recorded[-1].message


class TestDefaultTtl:
    def test_default_ttl_applied(self, memory_store, event_bus):
        from cachecas.core import CacheClient
        from cachecas.utils.retry import ConflictRetryPolicy

        client = CacheClient(
            store=memory_store,
            events=event_bus,
            retry_policy=ConflictRetryPolicy(),
            default_ttl_seconds=0,
        )
        client.set("k", 1)
        # A zero TTL expires immediately in the in-memory store
        assert client.get("k") is None

    def test_explicit_ttl_wins(self, memory_store, event_bus):
        from cachecas.core import CacheClient
        from cachecas.utils.retry import ConflictRetryPolicy

        client = CacheClient(
            store=memory_store,
            events=event_bus,
            retry_policy=ConflictRetryPolicy(),
            default_ttl_seconds=0,
        )
        client.set("k", 1, ttl_seconds=60)
        assert client.get("k") == 1


class TestNoExceptionEscapes:
    """A store failing every call turns every operation into False/None."""

    def test_get(self, failing_client, recorded):
        assert failing_client.get("k") is None
        assert recorded[-1].level == logging.ERROR
        assert "connection refused" in recorded[-1].message

    def test_set(self, failing_client):
        assert failing_client.set("k", 1) is False

    def test_add(self, failing_client):
        assert failing_client.add("k", 1) is False

    def test_delete(self, failing_client):
        assert failing_client.delete("k") is False

    def test_cas(self, failing_client, recorded):
        assert failing_client.cas("k", 1) is False
        assert recorded[-1].operation == "cas"
        assert recorded[-1].error is not None

    def test_cas_with_callback(self, failing_client):
        assert failing_client.cas("k", 1, on_conflict=lambda current: current) is False

    def test_update(self, failing_client):
        assert failing_client.update("k", lambda current: current) is False

    def test_apply_mutation(self, failing_client):
        assert failing_client.apply_mutation("k", operations.remove_last) is None

    def test_list_wrappers(self, failing_client):
        assert failing_client.pop("k") is None
        assert failing_client.shift("k") is None
        assert failing_client.push("k", 1) is None
        assert failing_client.unshift("k", 1) is None

    def test_forward(self, failing_client):
        assert failing_client.forward("keys") is None

    def test_ping(self, failing_client):
        assert failing_client.ping() is False

    def test_uncopyable_value_on_set(self, client, recorded):
        assert client.set("k", threading.Lock()) is False
        assert client.add("k", threading.Lock()) is False
        assert recorded[-1].level == logging.ERROR
        assert client.get("k") is None

    def test_uncopyable_value_on_cas(self, client):
        client.set("k", 1)
        assert client.cas("k", threading.Lock()) is False
        assert client.cas("missing", threading.Lock()) is False
        assert client.get("k") == 1

    def test_uncopyable_value_on_update(self, client):
        assert client.update("k", lambda current: threading.Lock()) is False

    def test_uncopyable_value_on_push(self, client, recorded):
        assert client.push("q", threading.Lock()) is None
        assert recorded[-1].operation == "apply_mutation"
        client.set("q", [1])
        assert client.push("q", threading.Lock()) is None
        assert client.get("q") == [1]


class TestForward:
    def test_forward_returns_store_result(self, client):
        client.set("a", 1)
        assert client.forward("exists", "a") is True

    def test_store_error_is_logged_as_store_error(self, failing_client, recorded):
        assert failing_client.forward("keys") is None
        assert "store error calling a method 'keys'" in recorded[-1].message

    def test_generic_error_is_logged_and_swallowed(self, client, recorded):
        assert client.forward("no_such_operation") is None
        assert "Exception caught while calling a method 'no_such_operation'" in (
            recorded[-1].message
        )
        assert recorded[-1].level == logging.ERROR


class TestObserverIsolation:
    def test_failing_observer_does_not_change_result(self, client, event_bus):
        def broken(event):
            raise RuntimeError("observer down")

        event_bus.subscribe(broken)
        assert client.set("k", 1) is True
        assert client.cas("k", 2) is True
        assert client.get("k") == 2
