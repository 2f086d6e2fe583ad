# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class CourierError(Exception):
    """Base class for every error raised by restcourier."""


class InvalidRequestError(CourierError):
    """The request description (or a required argument) is missing or malformed."""


class InvalidOriginError(CourierError):
    """The base URL handed to the transport cache is empty or blank."""


class TransportUnavailableError(CourierError):
    """No transport client could be obtained for an origin."""


class CallFailedError(CourierError):
    """A call failed at the network level; fatal once the attempt budget is spent."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int = 1,
        category: ErrorCategory = ErrorCategory.UNKNOWN_ERROR,
        url: str | None = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.category = category
        self.url = url

    @property
    def reason(self) -> str:
        return error_category_to_reason(self.category)


def _cause_chain(exc: BaseException):
    """Yield the exceptions chained below ``exc``, nearest first."""
    seen = {id(exc)}
    cause = exc.__cause__ or exc.__context__
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        yield cause
        cause = cause.__cause__ or cause.__context__


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    for cause in _cause_chain(exc):
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return ErrorCategory.SSL_ERROR
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout during call",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.UNKNOWN_ERROR: "Network error during call",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Call failed due to network error")


__all__ = [
    "CallFailedError",
    "CourierError",
    "ErrorCategory",
    "InvalidOriginError",
    "InvalidRequestError",
    "TransportUnavailableError",
    "categorize_exception",
    "error_category_to_reason",
]
