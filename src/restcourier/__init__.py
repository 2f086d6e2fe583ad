# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
restcourier package entrypoint.

One retrying HTTP execution engine exposed through four calling conventions:
blocking calls, callbacks, single-item streams, and events published on a
shared bus. Transport clients are cached per origin, and requests and
responses are modeled as immutable dataclasses.
"""

from .config import CourierSettings, load_settings
from .dispatch import SingleStream
from .errors import (
    CallFailedError,
    CourierError,
    ErrorCategory,
    InvalidOriginError,
    InvalidRequestError,
    TransportUnavailableError,
)
from .events import EventBus, EventCoordinator, EventSubscriber, get_coordinator
from .http import (
    CallExecutor,
    HttpMethod,
    HttpxTransport,
    RequestSpec,
    ResponseEnvelope,
    RetryConfig,
    RetryCoordinator,
    TransportCache,
)
from .log import setup_logging
from .models import EventEnvelope
from .runtime import RestCourier, get_courier
from .version import __version__
from .workers import ThreadPerCallExecutor

__all__ = [
    "CallExecutor",
    "CallFailedError",
    "CourierError",
    "CourierSettings",
    "ErrorCategory",
    "EventBus",
    "EventCoordinator",
    "EventEnvelope",
    "EventSubscriber",
    "HttpMethod",
    "HttpxTransport",
    "InvalidOriginError",
    "InvalidRequestError",
    "RequestSpec",
    "ResponseEnvelope",
    "RestCourier",
    "RetryConfig",
    "RetryCoordinator",
    "SingleStream",
    "ThreadPerCallExecutor",
    "TransportCache",
    "TransportUnavailableError",
    "get_coordinator",
    "get_courier",
    "load_settings",
    "setup_logging",
    "__version__",
]
