# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Bounded, access-expiring cache of per-origin transport clients.

Entries are keyed by the protocol-qualified base URL. A hit refreshes both the
entry's idle timer and its LRU position. Construction on a miss is
single-flight per key: concurrent misses for one origin build one client,
while misses for different origins build in parallel.

Eviction only removes an entry from the index. A client already handed out
keeps working; evicted clients are closed only by ``clear()``.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Iterator
from contextlib import suppress
from dataclasses import dataclass, field

from ..errors import InvalidOriginError, TransportUnavailableError
from .client import TransportClient, TransportFactory, transport_factory
from .codec import JsonCodec, default_codec
from .url import is_blank, normalize_origin

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 10
DEFAULT_TTL = 3600.0


@dataclass
class _Entry:
    client: TransportClient
    last_access: float


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0


class TransportCache:
    def __init__(
        self,
        factory: TransportFactory | None = None,
        codec: JsonCodec | None = None,
        *,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._factory = factory or transport_factory()
        self._codec = codec or default_codec()
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        self._key_locks: dict[str, _KeyLock] = {}

    def get(self, base_url: str | None) -> TransportClient:
        """Return the cached client for ``base_url``, building it on first use."""
        if is_blank(base_url):
            raise InvalidOriginError("Base url must not be empty")
        key = normalize_origin(base_url)

        client = self._lookup(key)
        if client is not None:
            return client

        # A key lock lives while any thread holds or waits on it.
        with self._lock:
            key_lock = self._key_locks.setdefault(key, _KeyLock())
            key_lock.waiters += 1
        try:
            with key_lock.lock:
                client = self._lookup(key)
                if client is not None:
                    return client
                client = self._build(key)
                self._insert(key, client)
                return client
        finally:
            with self._lock:
                key_lock.waiters -= 1
                if key_lock.waiters == 0:
                    del self._key_locks[key]

    def invalidate(self, base_url: str | None) -> bool:
        """Drop an origin from the index without closing its client."""
        if is_blank(base_url):
            return False
        with self._lock:
            return self._entries.pop(normalize_origin(base_url), None) is not None

    def clear(self) -> None:
        """Drop every entry and close the clients."""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
        for entry in entries:
            with suppress(Exception):
                entry.client.close()

    def keys(self) -> list[str]:
        with self._lock:
            self._purge_expired()
            return list(self._entries.keys())

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def __contains__(self, base_url: object) -> bool:
        if not isinstance(base_url, str) or is_blank(base_url):
            return False
        return normalize_origin(base_url) in self.keys()

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def _build(self, key: str) -> TransportClient:
        logger.debug("Creating transport client for %s", key)
        try:
            client = self._factory(key, self._codec)
        except Exception as exc:
            logger.error("Unable to initialize the transport client for %s: %s", key, exc)
            raise TransportUnavailableError(f"Unable to initialize the transport client for {key}") from exc
        if client is None:
            raise TransportUnavailableError(f"Unable to initialize the transport client for {key}")
        return client

    def _lookup(self, key: str) -> TransportClient | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            now = self._clock()
            if self._expired(entry, now):
                logger.debug("Transport client for %s expired", key)
                del self._entries[key]
                return None
            entry.last_access = now
            self._entries.move_to_end(key)
            return entry.client

    def _insert(self, key: str, client: TransportClient) -> None:
        with self._lock:
            self._purge_expired()
            self._entries[key] = _Entry(client=client, last_access=self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicting transport client for %s", evicted)

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, entry in self._entries.items() if self._expired(entry, now)]:
            del self._entries[key]

    def _expired(self, entry: _Entry, now: float) -> bool:
        return self.ttl > 0 and now - entry.last_access >= self.ttl


__all__ = ["DEFAULT_MAX_SIZE", "DEFAULT_TTL", "TransportCache"]
