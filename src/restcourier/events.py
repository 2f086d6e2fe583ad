# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Publish/subscribe plumbing for event-style calls.

Subscribers register explicitly, either as objects exposing
``on_event(envelope)`` or as plain callables. Delivery runs on the bus's
executor, never on the publishing thread. The default executor has a single
worker, so events reach subscribers in the order they were posted.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .models.event import EventEnvelope

logger = logging.getLogger(__name__)


@runtime_checkable
class EventSubscriber(Protocol):
    def on_event(self, envelope: EventEnvelope) -> None: ...


Handler = EventSubscriber | Callable[[EventEnvelope], None]


@dataclass(frozen=True)
class _Registration:
    subscriber: Any
    callback: Callable[[Any], None]
    event_type: type


def _resolve_callback(subscriber: Any) -> Callable[[Any], None]:
    on_event = getattr(subscriber, "on_event", None)
    if callable(on_event):
        return on_event
    if callable(subscriber):
        return subscriber
    raise TypeError(f"{subscriber!r} is neither callable nor exposes on_event()")


class EventBus:
    """Thread-safe subscriber registry with executor-backed delivery."""

    def __init__(self, executor: Executor | None = None):
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="restcourier-bus")
        self._registrations: list[_Registration] = []
        self._lock = threading.Lock()

    def register(self, subscriber: Any, event_type: type = EventEnvelope) -> bool:
        """Add a subscriber; returns False when it was already registered."""
        callback = _resolve_callback(subscriber)
        with self._lock:
            if any(reg.subscriber == subscriber for reg in self._registrations):
                return False
            self._registrations.append(_Registration(subscriber, callback, event_type))
            return True

    def unregister(self, subscriber: Any) -> bool:
        """Remove a subscriber; returns False when it was not registered."""
        with self._lock:
            before = len(self._registrations)
            self._registrations = [reg for reg in self._registrations if reg.subscriber != subscriber]
            return len(self._registrations) != before

    def post(self, event: Any) -> Future[int]:
        """Queue ``event`` for every matching subscriber; the future yields the delivery count."""
        with self._lock:
            snapshot = [reg for reg in self._registrations if isinstance(event, reg.event_type)]
        return self._executor.submit(self._deliver, event, snapshot)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._registrations)

    def close(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    @staticmethod
    def _deliver(event: Any, registrations: list[_Registration]) -> int:
        delivered = 0
        for reg in registrations:
            try:
                reg.callback(event)
                delivered += 1
            except Exception:  # noqa: BLE001
                logger.exception("Subscriber %r failed handling %r", reg.subscriber, event)
        return delivered


class EventCoordinator:
    """Owns the event bus and offers null-tolerant subscribe/unsubscribe/publish."""

    def __init__(self, bus_factory: Callable[[], EventBus] = EventBus):
        self._bus_factory = bus_factory
        self._bus: EventBus | None = None
        self._lock = threading.Lock()

    @property
    def bus(self) -> EventBus:
        if self._bus is None:
            with self._lock:
                if self._bus is None:
                    logger.debug("Event bus lazy initialization")
                    self._bus = self._bus_factory()
        return self._bus

    def subscribe(self, handler: Handler | None) -> bool:
        if handler is None:
            logger.error("Cannot subscribe a None handler")
            return False
        logger.debug("Registering %r to event bus subscribers", handler)
        return self.bus.register(handler)

    def subscribe_all(self, handlers: Iterable[Handler | None] | None) -> int:
        if handlers is None:
            logger.error("Cannot subscribe a None handler list")
            return 0
        return sum(1 for handler in handlers if self.subscribe(handler))

    def unsubscribe(self, handler: Handler | None) -> bool:
        if handler is None:
            logger.error("Cannot unsubscribe a None handler")
            return False
        logger.debug("Unregistering %r from event bus subscribers", handler)
        removed = self.bus.unregister(handler)
        if not removed:
            logger.debug("%r was not subscribed", handler)
        return removed

    def unsubscribe_all(self, handlers: Iterable[Handler | None] | None) -> int:
        if handlers is None:
            logger.error("Cannot unsubscribe a None handler list")
            return 0
        return sum(1 for handler in handlers if self.unsubscribe(handler))

    def publish(self, envelope: EventEnvelope | None) -> Future[int] | None:
        if envelope is None:
            logger.error("Cannot publish a None event")
            return None
        logger.debug("Posting event %r on event bus", envelope.identifier)
        return self.bus.post(envelope)

    @staticmethod
    def matches(envelope: EventEnvelope | None, expected_identifier: str | None) -> bool:
        """True when the event was requested under ``expected_identifier`` (case-insensitive)."""
        if envelope is None or envelope.identifier is None or expected_identifier is None:
            return False
        return envelope.identifier.casefold() == expected_identifier.casefold()


_coordinator: EventCoordinator | None = None
_coordinator_lock = threading.Lock()


def get_coordinator() -> EventCoordinator:
    """Return the process-wide coordinator, creating it on first access."""
    global _coordinator
    if _coordinator is None:
        with _coordinator_lock:
            if _coordinator is None:
                logger.debug("Coordinator lazy initialization")
                _coordinator = EventCoordinator()
    return _coordinator


__all__ = ["EventBus", "EventCoordinator", "EventSubscriber", "Handler", "get_coordinator"]
