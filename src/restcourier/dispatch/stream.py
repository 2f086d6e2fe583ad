# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-item stream calling convention."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from concurrent.futures import Executor, Future
from functools import partial
from typing import Any, Generic, TypeVar

from ..errors import InvalidRequestError
from ..http.models import RequestSpec, ResponseEnvelope
from ..http.retry import RetryCoordinator
from .base import ErrorCallback, require_spec, safe_invoke

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


def log_and_swallow(exc: BaseException) -> None:
    logger.error("Unhandled error in stream: %s", exc)


class SingleStream(Generic[T]):
    """
    Lazy stream that emits at most one item and then completes, or signals an error.

    Nothing runs until ``subscribe()`` or iteration. Every subscription runs
    the source again.
    """

    def __init__(self, source: Callable[[], T], pool: Executor):
        self._source = source
        self._pool = pool

    def subscribe(
        self,
        on_next: Callable[[T], Any] | None,
        on_error: ErrorCallback | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> Future[None]:
        if on_next is None:
            logger.error("Stream item handler must not be None")
            raise InvalidRequestError("Stream item handler must not be None")
        return self._pool.submit(self._emit, on_next, on_error or log_and_swallow, on_complete)

    def map(self, fn: Callable[[T], U]) -> SingleStream[U]:
        source = self._source
        return SingleStream(lambda: fn(source()), self._pool)

    def to_future(self) -> Future[T]:
        return self._pool.submit(self._source)

    def __iter__(self) -> Iterator[T]:
        # Blocking iteration on the consumer's thread; errors propagate.
        yield self._source()

    def _emit(
        self,
        on_next: Callable[[T], Any],
        on_error: ErrorCallback,
        on_complete: Callable[[], Any] | None,
    ) -> None:
        try:
            item = self._source()
        except Exception as exc:  # noqa: BLE001
            safe_invoke(on_error, exc, logger=logger, what="Stream error")
            return
        safe_invoke(on_next, item, logger=logger, what="Stream item")
        if on_complete is not None:
            safe_invoke(on_complete, logger=logger, what="Stream completion")


class StreamDispatcher:
    def __init__(self, retry: RetryCoordinator, pool: Executor):
        self.retry = retry
        self.pool = pool

    def call(self, spec: RequestSpec | None, attempts: int | None = None) -> SingleStream[ResponseEnvelope]:
        spec = require_spec(spec, logger)
        logger.debug("Stream call with %s", spec)
        return SingleStream(partial(self.retry.run, spec, attempts), self.pool)

    def call_and_subscribe(
        self,
        spec: RequestSpec | None,
        on_next: Callable[[ResponseEnvelope], Any] | None,
        on_error: ErrorCallback | None = None,
        attempts: int | None = None,
    ) -> Future[None]:
        return self.call(spec, attempts).subscribe(on_next, on_error)
