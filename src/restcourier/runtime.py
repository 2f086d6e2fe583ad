# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level restcourier facade wiring the engine to the four calling conventions."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future
from contextlib import suppress
from typing import Any

from .config import CourierSettings, load_settings
from .dispatch import CallbackDispatcher, EventDispatcher, SingleStream, StreamDispatcher, SyncDispatcher
from .dispatch.base import ErrorCallback, SuccessCallback
from .events import EventCoordinator, get_coordinator
from .http.cache import TransportCache
from .http.client import TransportFactory, transport_factory
from .http.codec import JsonCodec, default_codec
from .http.executor import CallExecutor
from .http.models import RequestSpec, ResponseEnvelope
from .http.retry import RetryCoordinator, Sleeper
from .models.event import EventEnvelope
from .workers import create_executor


class RestCourier:
    """
    Convenience wrapper that shares one transport cache, worker pool and retry
    policy across the sync, callback, stream and event calling conventions.
    """

    def __init__(
        self,
        settings: CourierSettings | None = None,
        *,
        factory: TransportFactory | None = None,
        cache: TransportCache | None = None,
        coordinator: EventCoordinator | None = None,
        pool: Executor | None = None,
        codec: JsonCodec | None = None,
        sleep: Sleeper | None = None,
    ):
        self.settings = settings or load_settings()
        self.codec = codec or default_codec()
        self.cache = cache or TransportCache(
            factory or transport_factory(self.settings),
            self.codec,
            max_size=self.settings.cache_max_size,
            ttl=self.settings.cache_ttl,
        )
        self._owns_pool = pool is None
        self.pool = pool or create_executor(self.settings)
        self.coordinator = coordinator or get_coordinator()
        self.executor = CallExecutor(self.cache, self.codec, self.pool)
        self.retry = RetryCoordinator(self.executor, self.settings, sleep=sleep)

        self.sync = SyncDispatcher(self.retry)
        self.callbacks = CallbackDispatcher(self.retry, self.pool)
        self.streams = StreamDispatcher(self.retry, self.pool)
        self.events = EventDispatcher(self.retry, self.pool, self.coordinator)

    def call_sync(self, spec: RequestSpec | None, attempts: int | None = None) -> ResponseEnvelope:
        return self.sync.call(spec, attempts)

    def call_async(
        self,
        spec: RequestSpec | None,
        on_success: SuccessCallback | None,
        on_error: ErrorCallback | None = None,
        attempts: int | None = None,
    ) -> Future[None]:
        return self.callbacks.call(spec, on_success, on_error, attempts)

    def call_stream(self, spec: RequestSpec | None, attempts: int | None = None) -> SingleStream[ResponseEnvelope]:
        return self.streams.call(spec, attempts)

    def call_reactive(
        self,
        spec: RequestSpec | None,
        on_next: Callable[[ResponseEnvelope], Any] | None,
        on_error: ErrorCallback | None = None,
        attempts: int | None = None,
    ) -> Future[None]:
        return self.streams.call_and_subscribe(spec, on_next, on_error, attempts)

    def call_event(
        self,
        spec: RequestSpec | None,
        event_identifier: str | None,
        attempts: int | None = None,
    ) -> Future[EventEnvelope] | None:
        return self.events.call(spec, event_identifier, attempts)

    def close(self) -> None:
        if self._owns_pool:
            with suppress(Exception):
                self.pool.shutdown(wait=True)
        self.cache.clear()

    def __enter__(self) -> RestCourier:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


_default: RestCourier | None = None
_default_lock = threading.Lock()


def get_courier() -> RestCourier:
    """Return the process-wide RestCourier built from environment settings."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = RestCourier()
    return _default


__all__ = ["RestCourier", "get_courier"]
