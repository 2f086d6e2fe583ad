# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Asynchronous calling convention with success/error callbacks."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future

from ..errors import InvalidRequestError
from ..http.models import RequestSpec
from ..http.retry import RetryCoordinator
from .base import ErrorCallback, SuccessCallback, require_spec, safe_invoke

logger = logging.getLogger(__name__)


class CallbackDispatcher:
    """
    Runs the retry loop on the worker pool and reports through callbacks.

    Exactly one of ``on_success`` / ``on_error`` fires per call. Without an
    ``on_error`` the failure is logged.
    """

    def __init__(self, retry: RetryCoordinator, pool: Executor):
        self.retry = retry
        self.pool = pool

    def call(
        self,
        spec: RequestSpec | None,
        on_success: SuccessCallback | None,
        on_error: ErrorCallback | None = None,
        attempts: int | None = None,
    ) -> Future[None]:
        spec = require_spec(spec, logger)
        if on_success is None:
            logger.error("Success callback must not be None")
            raise InvalidRequestError("Success callback must not be None")
        logger.debug("Asynchronous call with %s", spec)
        return self.pool.submit(self._run, spec, on_success, on_error, attempts)

    def _run(
        self,
        spec: RequestSpec,
        on_success: SuccessCallback,
        on_error: ErrorCallback | None,
        attempts: int | None,
    ) -> None:
        try:
            envelope = self.retry.run(spec, attempts)
        except Exception as exc:  # noqa: BLE001
            if on_error is None:
                logger.error("Error executing asynchronous call to %s: %s", spec.url, exc)
            else:
                safe_invoke(on_error, exc, logger=logger, what="Error")
            return
        safe_invoke(on_success, envelope, logger=logger, what="Success")
