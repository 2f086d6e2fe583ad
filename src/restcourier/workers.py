# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Executors that run asynchronous calls.

The default gives every submitted call its own thread, so a call sleeping
between retries never holds up an unrelated one. A bounded
``ThreadPoolExecutor`` is available when ``max_workers`` is set.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any

from .config import CourierSettings

logger = logging.getLogger(__name__)


class ThreadPerCallExecutor(Executor):
    """Starts one thread per ``submit``; ``shutdown(wait=True)`` joins the live ones."""

    def __init__(self, thread_name_prefix: str = "restcourier"):
        self._prefix = thread_name_prefix
        self._counter = itertools.count(1)
        self._threads: set[threading.Thread] = set()
        self._lock = threading.Lock()
        self._shutdown = False

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        with self._lock:
            if self._shutdown:
                raise RuntimeError("cannot schedule new calls after shutdown")
            thread = threading.Thread(
                target=self._work,
                args=(future, fn, args, kwargs),
                name=f"{self._prefix}-{next(self._counter)}",
                daemon=True,
            )
            self._threads.add(thread)
        thread.start()
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:  # noqa: ARG002
        with self._lock:
            self._shutdown = True
            threads = list(self._threads)
        if wait:
            current = threading.current_thread()
            for thread in threads:
                if thread is not current:
                    thread.join()

    def active_count(self) -> int:
        with self._lock:
            return len(self._threads)

    def _work(self, future: Future, fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        try:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = fn(*args, **kwargs)
            except BaseException as exc:  # noqa: BLE001
                future.set_exception(exc)
            else:
                future.set_result(result)
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())


def create_executor(settings: CourierSettings) -> Executor:
    """Thread per call by default; a fixed pool when ``settings.max_workers`` is positive."""
    if settings.max_workers > 0:
        logger.debug("Using a bounded worker pool of %d threads", settings.max_workers)
        return ThreadPoolExecutor(max_workers=settings.max_workers, thread_name_prefix="restcourier")
    return ThreadPerCallExecutor()


__all__ = ["ThreadPerCallExecutor", "create_executor"]
