# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP execution exports."""

from .cache import TransportCache
from .client import TransportClient, TransportFactory, create_default_transport, transport_factory
from .codec import JsonCodec, default_codec
from .executor import CallExecutor
from .httpx_client import HttpxTransport
from .models import Headers, HttpMethod, RequestSpec, RequestSpecBuilder, ResponseEnvelope, RetryConfig
from .retry import RetryCoordinator, build_default_retry_config, send_with_retries
from .url import merge_query, normalize_origin, parse_query_string

__all__ = [
    "CallExecutor",
    "Headers",
    "HttpMethod",
    "HttpxTransport",
    "JsonCodec",
    "RequestSpec",
    "RequestSpecBuilder",
    "ResponseEnvelope",
    "RetryConfig",
    "RetryCoordinator",
    "TransportCache",
    "TransportClient",
    "TransportFactory",
    "build_default_retry_config",
    "create_default_transport",
    "default_codec",
    "merge_query",
    "normalize_origin",
    "parse_query_string",
    "send_with_retries",
    "transport_factory",
]
