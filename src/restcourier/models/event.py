# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Event bus message model."""

from __future__ import annotations

from dataclasses import dataclass

from ..http.models import ResponseEnvelope


@dataclass(frozen=True)
class EventEnvelope:
    """Result of an event-style call, correlated to its requester by ``identifier``."""

    identifier: str
    success: bool
    response: ResponseEnvelope | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error_message is None):
            raise ValueError("EventEnvelope needs exactly one of response or error_message")
        if self.success != (self.response is not None):
            raise ValueError("EventEnvelope.success must match the payload kind")

    @classmethod
    def of_response(cls, identifier: str, response: ResponseEnvelope) -> EventEnvelope:
        return cls(identifier=identifier, success=True, response=response)

    @classmethod
    def of_error(cls, identifier: str, error_message: str) -> EventEnvelope:
        return cls(identifier=identifier, success=False, error_message=error_message or "Unknown error")
