# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Helpers shared by the dispatch adapters."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..errors import InvalidRequestError
from ..http.models import RequestSpec, ResponseEnvelope

SuccessCallback = Callable[[ResponseEnvelope], Any]
ErrorCallback = Callable[[BaseException], Any]


def require_spec(spec: RequestSpec | None, logger: logging.Logger) -> RequestSpec:
    if spec is None:
        logger.error("RequestSpec must not be None")
        raise InvalidRequestError("RequestSpec must not be None")
    return spec


def safe_invoke(callback: Callable[..., Any], *args: Any, logger: logging.Logger, what: str) -> None:
    """Run a caller-supplied callback on a worker thread, logging anything it raises."""
    try:
        callback(*args)
    except Exception:  # noqa: BLE001
        logger.exception("%s callback raised", what)


__all__ = ["ErrorCallback", "SuccessCallback", "require_spec", "safe_invoke"]
