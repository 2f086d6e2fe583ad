# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from restcourier.errors import InvalidOriginError, TransportUnavailableError
from restcourier.http.cache import TransportCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class Handle:
    def __init__(self, base_url):
        self.base_url = base_url
        self.closed = False

    def call(self, *args, **kwargs):  # noqa: ARG002
        return self.base_url

    def close(self):
        self.closed = True


class CountingFactory:
    def __init__(self, delay=0.0):
        self.built = []
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, base_url, codec):  # noqa: ARG002
        if self.delay:
            time.sleep(self.delay)
        with self._lock:
            self.built.append(base_url)
        return Handle(base_url)


def test_same_origin_returns_same_handle():
    factory = CountingFactory()
    cache = TransportCache(factory)
    first = cache.get("http://example")
    second = cache.get("http://example")
    assert first is second
    assert factory.built == ["http://example"]


def test_origin_is_normalized_before_lookup():
    factory = CountingFactory()
    cache = TransportCache(factory)
    handle = cache.get("example.com")
    assert handle.base_url == "http://example.com"
    assert cache.get("http://example.com") is handle
    assert "example.com" in cache
    assert len(factory.built) == 1


@pytest.mark.parametrize("origin", ["", "   ", None])
def test_blank_origin_is_rejected_without_mutation(origin):
    factory = CountingFactory()
    cache = TransportCache(factory)
    cache.get("http://keep")
    with pytest.raises(InvalidOriginError):
        cache.get(origin)
    assert cache.keys() == ["http://keep"]
    assert factory.built == ["http://keep"]


def test_capacity_bound_evicts_least_recently_used():
    cache = TransportCache(CountingFactory())
    for i in range(10):
        cache.get(f"http://host{i}")
    assert len(cache) == 10

    cache.get("http://host0")  # host1 becomes the eldest
    cache.get("http://host10")
    assert len(cache) == 10
    assert "http://host1" not in cache
    assert "http://host0" in cache
    assert "http://host10" in cache


def test_entries_expire_after_idle_ttl():
    clock = FakeClock()
    factory = CountingFactory()
    cache = TransportCache(factory, clock=clock)
    first = cache.get("http://example")

    clock.advance(3599)
    assert cache.get("http://example") is first

    # the hit above refreshed the idle timer
    clock.advance(3599)
    assert cache.get("http://example") is first

    clock.advance(3600)
    assert len(cache) == 0
    second = cache.get("http://example")
    assert second is not first
    assert len(factory.built) == 2


def test_evicted_handle_keeps_working():
    cache = TransportCache(CountingFactory(), max_size=1)
    handle = cache.get("http://a")
    cache.get("http://b")
    assert "http://a" not in cache
    assert handle.closed is False
    assert handle.call() == "http://a"


def test_concurrent_misses_build_once_per_origin():
    factory = CountingFactory(delay=0.05)
    cache = TransportCache(factory)
    start = threading.Barrier(8)

    def fetch(origin):
        start.wait()
        return cache.get(origin)

    origins = ["http://same"] * 6 + ["http://other1", "http://other2"]
    with ThreadPoolExecutor(max_workers=8) as pool:
        handles = list(pool.map(fetch, origins))

    assert factory.built.count("http://same") == 1
    assert len({id(h) for h in handles[:6]}) == 1
    assert sorted(factory.built) == ["http://other1", "http://other2", "http://same"]


def test_factory_failure_is_not_cached():
    calls = []

    def failing(base_url, codec):  # noqa: ARG001
        calls.append(base_url)
        raise RuntimeError("cannot build")

    cache = TransportCache(failing)
    with pytest.raises(TransportUnavailableError):
        cache.get("http://broken")
    with pytest.raises(TransportUnavailableError):
        cache.get("http://broken")
    assert len(cache) == 0
    assert calls == ["http://broken", "http://broken"]


def test_build_after_failed_build_stays_single_flight():
    first_build = threading.Event()
    proceed = threading.Event()
    lock = threading.Lock()
    attempts = []
    built = []

    def flaky(base_url, codec):  # noqa: ARG001
        with lock:
            attempts.append(base_url)
            first = len(attempts) == 1
        if first:
            first_build.set()
            proceed.wait(5)
            raise RuntimeError("first build fails")
        time.sleep(0.05)
        handle = Handle(base_url)
        with lock:
            built.append(handle)
        return handle

    cache = TransportCache(flaky)

    def fetch():
        try:
            return cache.get("http://flaky")
        except TransportUnavailableError:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        early = [pool.submit(fetch) for _ in range(4)]
        assert first_build.wait(5)
        deadline = time.monotonic() + 5
        while cache._key_locks["http://flaky"].waiters < 4 and time.monotonic() < deadline:
            time.sleep(0.01)
        proceed.set()
        late = [pool.submit(fetch) for _ in range(4)]
        results = [f.result(timeout=5) for f in early + late]

    handles = [r for r in results if r is not None]
    assert results.count(None) == 1
    assert len(built) == 1
    assert all(h is built[0] for h in handles)
    assert cache._key_locks == {}


def test_invalidate_and_clear():
    cache = TransportCache(CountingFactory())
    a = cache.get("http://a")
    b = cache.get("http://b")
    assert cache.invalidate("a") is True
    assert cache.invalidate("a") is False
    assert a.closed is False

    cache.clear()
    assert len(cache) == 0
    assert b.closed is True


def test_max_size_must_be_positive():
    with pytest.raises(ValueError):
        TransportCache(CountingFactory(), max_size=0)
