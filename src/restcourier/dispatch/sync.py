# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Blocking calling convention."""

from __future__ import annotations

import logging

from ..http.models import RequestSpec, ResponseEnvelope
from ..http.retry import RetryCoordinator
from .base import require_spec

logger = logging.getLogger(__name__)


class SyncDispatcher:
    """Runs the retry loop on the caller's thread, including inter-attempt delays."""

    def __init__(self, retry: RetryCoordinator):
        self.retry = retry

    def call(self, spec: RequestSpec | None, attempts: int | None = None) -> ResponseEnvelope:
        spec = require_spec(spec, logger)
        logger.debug("Synchronous call with %s", spec)
        return self.retry.run(spec, attempts)
