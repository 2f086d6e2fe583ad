# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry helper shared by every calling convention."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import CourierSettings, load_settings
from ..errors import CallFailedError, ErrorCategory, InvalidRequestError
from .executor import CallExecutor
from .models import RequestSpec, ResponseEnvelope, RetryConfig

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], None]


def build_default_retry_config(attempts: int | None = None) -> RetryConfig:
    """Create a RetryConfig from environment-backed CourierSettings."""
    return RetryConfig.from_settings(load_settings(), attempts)


def send_with_retries(
    executor: CallExecutor,
    spec: RequestSpec | None,
    *,
    retry_config: RetryConfig | None = None,
    sleep: Sleeper | None = None,
) -> ResponseEnvelope:
    """
    Execute ``spec`` until a 2xx envelope arrives or the attempt budget is spent.

    Non-2xx envelopes are retried like network failures, but once the budget is
    spent the last envelope is returned as-is. Exhausted network failures raise
    CallFailedError instead.
    """
    if spec is None:
        raise InvalidRequestError("RequestSpec must not be None")
    cfg = retry_config or build_default_retry_config()
    sleep = sleep or time.sleep

    last_error: CallFailedError | None = None
    for attempt in range(1, cfg.max_attempts + 1):
        final = attempt >= cfg.max_attempts
        try:
            envelope = executor.execute(spec)
        except CallFailedError as exc:
            last_error = exc
            logger.debug("Attempt %d/%d for %s failed: %s", attempt, cfg.max_attempts, spec.url, exc)
        else:
            if envelope.successful or final:
                if not envelope.successful:
                    logger.warning(
                        "Giving up on %s after %d attempt(s); last status %s",
                        spec.url,
                        attempt,
                        envelope.status,
                    )
                return envelope
            logger.debug("Attempt %d/%d for %s returned %s", attempt, cfg.max_attempts, spec.url, envelope.status)

        if final:
            break
        sleep(cfg.delay)

    logger.warning("Giving up on %s after %d attempt(s): %s", spec.url, cfg.max_attempts, last_error)
    raise CallFailedError(
        f"Call to {spec.url} failed after {cfg.max_attempts} attempt(s): {last_error}",
        attempts=cfg.max_attempts,
        category=last_error.category if last_error else ErrorCategory.UNKNOWN_ERROR,
        url=spec.url,
    ) from last_error


class RetryCoordinator:
    """Binds a CallExecutor to a retry delay so adapters only pass the attempt budget."""

    def __init__(
        self,
        executor: CallExecutor,
        settings: CourierSettings | None = None,
        *,
        sleep: Sleeper | None = None,
    ):
        self.executor = executor
        self.settings = settings or load_settings()
        self._sleep = sleep

    def run(self, spec: RequestSpec | None, attempts: int | None = None) -> ResponseEnvelope:
        return send_with_retries(
            self.executor,
            spec,
            retry_config=RetryConfig.from_settings(self.settings, attempts),
            sleep=self._sleep,
        )


__all__ = ["RetryCoordinator", "Sleeper", "build_default_retry_config", "send_with_retries"]
