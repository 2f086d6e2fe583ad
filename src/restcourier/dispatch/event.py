# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fire-and-forget calling convention that reports on the event bus."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future

from ..events import EventCoordinator
from ..http.models import RequestSpec
from ..http.retry import RetryCoordinator
from ..http.url import is_blank
from ..models.event import EventEnvelope

logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    Runs the retry loop on the worker pool and publishes an EventEnvelope.

    Precondition failures are logged and dropped: no call, no event.
    """

    def __init__(self, retry: RetryCoordinator, pool: Executor, coordinator: EventCoordinator):
        self.retry = retry
        self.pool = pool
        self.coordinator = coordinator

    def call(
        self,
        spec: RequestSpec | None,
        event_identifier: str | None,
        attempts: int | None = None,
    ) -> Future[EventEnvelope] | None:
        if spec is None:
            logger.error("RequestSpec must not be None")
            return None
        if is_blank(event_identifier):
            logger.error("Event identifier must not be empty")
            return None
        logger.debug("Event call %r with %s", event_identifier, spec)
        return self.pool.submit(self._run, spec, event_identifier, attempts)

    def _run(self, spec: RequestSpec, event_identifier: str, attempts: int | None) -> EventEnvelope:
        try:
            envelope = self.retry.run(spec, attempts)
            event = EventEnvelope.of_response(event_identifier, envelope)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error preparing event response for event %s: %s", event_identifier, exc)
            event = EventEnvelope.of_error(event_identifier, str(exc))
        self.coordinator.publish(event)
        return event
