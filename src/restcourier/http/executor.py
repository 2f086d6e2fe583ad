# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single-attempt HTTP execution: RequestSpec in, ResponseEnvelope out."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future

import httpx

from ..errors import CallFailedError, InvalidOriginError, InvalidRequestError, TransportUnavailableError, categorize_exception
from .cache import TransportCache
from .codec import JsonCodec, default_codec
from .models import RequestSpec, ResponseEnvelope

logger = logging.getLogger(__name__)

NETWORK_ERRORS: tuple[type[BaseException], ...] = (httpx.RequestError, OSError)


class CallExecutor:
    """
    Performs exactly one HTTP attempt per call.

    Any received response, whatever its status, becomes a ResponseEnvelope.
    Network-level failures raise CallFailedError so the retry loop can decide
    whether to try again.
    """

    def __init__(self, cache: TransportCache, codec: JsonCodec | None = None, pool: Executor | None = None):
        self.cache = cache
        self.codec = codec or default_codec()
        self.pool = pool

    def execute(self, spec: RequestSpec | None) -> ResponseEnvelope:
        if spec is None:
            raise InvalidRequestError("RequestSpec must not be None")

        try:
            transport = self.cache.get(spec.base_url)
        except InvalidOriginError as exc:
            raise TransportUnavailableError(f"No transport available for base url {spec.base_url!r}") from exc

        logger.debug("%s %s", spec.method.value, spec.url)
        try:
            response = transport.call(
                spec.method,
                spec.path,
                headers=dict(spec.headers),
                params=spec.resolved_query(),
                body=spec.resolved_body(),
            )
        except NETWORK_ERRORS as exc:
            category = categorize_exception(exc)
            logger.debug("Network failure calling %s: %s (%s)", spec.url, exc, category.value)
            raise CallFailedError(
                f"{type(exc).__name__}: {exc}",
                category=category,
                url=spec.url,
            ) from exc

        envelope = ResponseEnvelope.from_httpx(response, self.codec)
        logger.debug("Response obtained from %s with status %s", envelope.called_url, envelope.status)
        return envelope

    def execute_async(self, spec: RequestSpec | None) -> Future[ResponseEnvelope]:
        """Submit one attempt to the worker pool and return its pending handle."""
        if spec is None:
            raise InvalidRequestError("RequestSpec must not be None")
        if self.pool is None:
            raise RuntimeError("No worker pool configured; pass pool= to CallExecutor")
        return self.pool.submit(self.execute, spec)


__all__ = ["CallExecutor", "NETWORK_ERRORS"]
