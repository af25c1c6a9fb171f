# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- fakeredis-backed ValkeyStore instances (clean state per test)
- InMemoryStore, plus variants that force CAS conflicts or fail every call
- A CacheClient wired to an in-memory store and a recording EventBus
"""

from typing import Any

import fakeredis
import pytest

from cachecas.base import StoreAdapter, StoreError, StoreOutcome
from cachecas.core import CacheClient, EventBus
from cachecas.infrastructure.store import InMemoryStore, ValkeyStore
from cachecas.utils.retry import ConflictRetryPolicy

# ==============================================================================
# Store Doubles
# ==============================================================================


class ScriptedStore(InMemoryStore):
    """InMemoryStore whose cas() can be told to report CONFLICT.

    While forced_conflicts is positive, cas() returns CONFLICT without
    writing. If interfere is set, it is called with the store right before
    each forced conflict, standing in for a concurrent writer.
    """

    def __init__(self):
        super().__init__()
        self.forced_conflicts = 0
        self.interfere = None
        self.cas_calls = 0

    def cas(self, key, mutator):
        self.cas_calls += 1
        if self.forced_conflicts > 0:
            self.forced_conflicts -= 1
            if self.interfere is not None:
                self.interfere(self)
            return StoreOutcome.CONFLICT
        return super().cas(key, mutator)


class FailingStore(StoreAdapter):
    """Store whose every call fails with a transport error."""

    def _fail(self, operation: str, key: str | None = None):
        raise StoreError("connection refused", operation, key)

    def get(self, key: str) -> Any | None:
        self._fail("get", key)

    def set(self, key, value, ttl_seconds=None):
        self._fail("set", key)

    def add(self, key, value, ttl_seconds=None):
        self._fail("add", key)

    def delete(self, key):
        self._fail("delete", key)

    def cas(self, key, mutator):
        self._fail("cas", key)

    def forward(self, operation, *args, **kwargs):
        self._fail(operation)

    def ping(self) -> bool:
        self._fail("ping")


# ==============================================================================
# Valkey Fixtures
# ==============================================================================


@pytest.fixture()
def fake_server():
    """A fresh fakeredis server shared by every client in one test."""
    return fakeredis.FakeServer()


@pytest.fixture()
def fake_redis(fake_server):
    """A clean fakeredis instance for each test.

    Uses decode_responses=True to match the real ValkeyStore behavior.
    """
    client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def other_redis(fake_server):
    """A second connection to the same fake server, acting as another writer."""
    client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    client.close()


@pytest.fixture()
def valkey_store(fake_redis):
    """A ValkeyStore talking to fakeredis instead of a real server."""
    return ValkeyStore(url="redis://fake:6379", client=fake_redis)


# ==============================================================================
# In-Memory and Client Fixtures
# ==============================================================================


@pytest.fixture()
def memory_store():
    return InMemoryStore()


@pytest.fixture()
def scripted_store():
    return ScriptedStore()


@pytest.fixture()
def failing_store():
    return FailingStore()


@pytest.fixture()
def event_bus():
    return EventBus()


@pytest.fixture()
def recorded(event_bus):
    """List collecting every event published on event_bus."""
    received = []
    event_bus.subscribe(received.append)
    return received


def make_client(store, event_bus, policy=None):
    return CacheClient(
        store=store,
        events=event_bus,
        retry_policy=policy or ConflictRetryPolicy(),
        source="Cache",
    )


@pytest.fixture()
def client_factory(event_bus):
    """Build a CacheClient over any store, optionally with a custom policy."""

    def _factory(store, policy=None):
        return make_client(store, event_bus, policy)

    return _factory


@pytest.fixture()
def client(memory_store, event_bus):
    """CacheClient over an InMemoryStore with an unbounded retry policy."""
    return make_client(memory_store, event_bus)


@pytest.fixture()
def scripted_client(scripted_store, event_bus):
    return make_client(scripted_store, event_bus)


@pytest.fixture()
def failing_client(failing_store, event_bus):
    return make_client(failing_store, event_bus)


@pytest.fixture()
def valkey_client(valkey_store, event_bus):
    return make_client(valkey_store, event_bus)
