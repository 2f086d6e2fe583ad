# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for restcourier."""

from ..http.models import Headers, HttpMethod, RequestSpec, ResponseEnvelope, RetryConfig
from .event import EventEnvelope

__all__ = [
    "EventEnvelope",
    "Headers",
    "HttpMethod",
    "RequestSpec",
    "ResponseEnvelope",
    "RetryConfig",
]
